"""
Date grammar for candidate scanning.

Builds one case-insensitive alternation out of the supported date surface
forms. It has to be a single pattern so that a left-to-right scan returns the
matches in document order.

Alternatives are ordered most specific first; extension fragments go last.
"""

import logging
import re
import threading
from typing import Iterable, List, Optional, Tuple

from date_extract.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

# Name of the group holding the whole candidate
CANDIDATE_GROUP = "candidate"

# ==========================================
# Sub-patterns
# ==========================================
RELATIVE_DAY = r"(?:today|tomorrow|yesterday)"

LONG_WEEKDAY = r"(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)"
SHORT_WEEKDAY = r"(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun)"
WEEKDAY = rf"(?:{LONG_WEEKDAY}|{SHORT_WEEKDAY})"

RELATIVE_WEEKDAY = rf"(?:(?:next|previous|last)\s*{WEEKDAY})"

LONG_MONTH = (
    r"(?:January|February|March|April|May|June|July|August"
    r"|September|October|November|December)"
)
SHORT_MONTH = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)"
MONTH = rf"(?:{LONG_MONTH}|{SHORT_MONTH})"

# 1 - 31; two digit forms first so "13" is not cut to "1"
CARDINAL_MONTHDAY = r"(?:3[01]|[12][0-9]|[1-9])"
MONTHDAY = rf"(?:{CARDINAL_MONTHDAY}(?:st|nd|rd|th)?)"

DAY_MONTH = rf"(?:{MONTHDAY}\s*{MONTH})"
MONTH_DAY = rf"(?:{MONTH}\s*{MONTHDAY})"
DAY_MONTH_YEAR = rf"(?:(?:{DAY_MONTH}|{MONTH_DAY})\s*,?\s*\d{{4}})"

YYYYMMDD = r"(?:\d{4}[-/]\d{2}[-/]\d{2})"
DDMMYY = r"(?:\d{2}[-/]\d{2}[-/]\d{2})"

# (name, fragment) in precedence order
BUILTIN_ALTERNATIVES: List[Tuple[str, str]] = [
    ("relative_day", RELATIVE_DAY),          # today
    ("relative_weekday", RELATIVE_WEEKDAY),  # last Friday
    ("weekday", WEEKDAY),                    # Monday
    ("day_month_year", DAY_MONTH_YEAR),      # November 13th, 1986
    ("day_month", DAY_MONTH),                # 13th November
    ("month_day", MONTH_DAY),                # Nov 13
    ("yyyymmdd", YYYYMMDD),                  # 1986/11/13
    ("ddmmyy", DDMMYY),                      # 11-13-86
]


class DateGrammar:
    """
    Lazily compiled date grammar.

    The compiled pattern is built on first use and then reused for every
    scan. It carries no per-call state, so one grammar can be shared between
    threads once built.
    """

    def __init__(self, extra_patterns: Optional[Iterable[str]] = None):
        """
        Initialize grammar.

        Args:
            extra_patterns: Additional regex fragments, matched with lower
                precedence than every built-in form

        Raises:
            InvalidConfiguration: if a fragment is empty or does not compile
        """
        self.extra_patterns: Tuple[str, ...] = tuple(extra_patterns or ())
        for fragment in self.extra_patterns:
            self._check_fragment(fragment)

        self._pattern: Optional[re.Pattern] = None
        self._lock = threading.Lock()

    @staticmethod
    def _check_fragment(fragment: str) -> None:
        if not isinstance(fragment, str) or not fragment.strip():
            raise InvalidConfiguration("extra_patterns", fragment)
        try:
            re.compile(rf"(?P<{CANDIDATE_GROUP}>{fragment})", re.IGNORECASE)
        except re.error as e:
            raise InvalidConfiguration("extra_patterns", fragment) from e

    def alternatives(self) -> List[str]:
        """All alternatives in precedence order, extensions last"""
        return [fragment for _, fragment in BUILTIN_ALTERNATIVES] + list(self.extra_patterns)

    def source(self) -> str:
        """Regex source of the combined grammar"""
        body = "|".join(self.alternatives())
        return rf"\b(?P<{CANDIDATE_GROUP}>{body})\b"

    def build(self) -> re.Pattern:
        """
        Return the compiled grammar, compiling it on first call.

        Returns:
            Compiled case-insensitive pattern
        """
        if self._pattern is not None:
            return self._pattern

        with self._lock:
            if self._pattern is None:
                self._pattern = re.compile(self.source(), re.IGNORECASE)
                logger.debug(
                    f"Compiled date grammar with {len(BUILTIN_ALTERNATIVES)} built-in "
                    f"and {len(self.extra_patterns)} extension alternatives"
                )
        return self._pattern

    @property
    def pattern(self) -> re.Pattern:
        return self.build()

    @property
    def is_built(self) -> bool:
        return self._pattern is not None


# Process-wide grammars keyed by extension fragments
_grammar_cache = {}
_grammar_cache_lock = threading.Lock()


def get_grammar(extra_patterns: Optional[Iterable[str]] = None) -> DateGrammar:
    """Get shared DateGrammar instance for a set of extension fragments"""
    key = tuple(extra_patterns or ())
    with _grammar_cache_lock:
        grammar = _grammar_cache.get(key)
        if grammar is None:
            grammar = DateGrammar(key)
            _grammar_cache[key] = grammar
    return grammar
