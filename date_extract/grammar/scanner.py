"""
Candidate scanning.

Applies the compiled date grammar to a block of text once and collects the
matches in the order they appear.
"""

import logging
import re
from dataclasses import dataclass
from typing import List

from date_extract.grammar.pattern_builder import CANDIDATE_GROUP

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A substring that looks like a date, with its position in the text"""
    text: str
    start: int
    end: int


def scan(text: str, pattern: re.Pattern) -> List[Candidate]:
    """
    Find every date-like substring in text.

    Matches never overlap and come back sorted by start offset. Empty or
    non-string input simply yields no candidates.

    Args:
        text: Arbitrary text
        pattern: Compiled grammar from DateGrammar.build()

    Returns:
        List of Candidate in document order
    """
    if not text or not isinstance(text, str):
        return []

    candidates = [
        Candidate(
            text=match.group(CANDIDATE_GROUP),
            start=match.start(CANDIDATE_GROUP),
            end=match.end(CANDIDATE_GROUP),
        )
        for match in pattern.finditer(text)
    ]

    logger.debug(f"Scanned {len(text)} chars: {len(candidates)} candidates")
    return candidates
