"""
Exceptions raised by date extraction.

InvalidConfiguration is fatal to the call and surfaces before any scanning.
CandidateResolutionFailure is per-candidate and never leaves the extractor.
"""

from typing import Any


class InvalidConfiguration(ValueError):
    """An option holds a value outside its allowed set"""

    def __init__(self, field: str, value: Any, expected=None):
        self.field = field
        self.value = value
        self.expected = list(expected) if expected is not None else []

        message = f"Invalid `{field}`: {value!r}"
        if self.expected:
            message += f" (expected one of: {', '.join(repr(e) for e in self.expected)})"
        super().__init__(message)


class CandidateResolutionFailure(ValueError):
    """A matched substring could not be turned into a date"""

    def __init__(self, candidate: str, reason: str = "unparseable"):
        self.candidate = candidate
        self.reason = reason
        super().__init__(f"Could not resolve {candidate!r}: {reason}")
