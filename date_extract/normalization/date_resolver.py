"""
Date resolution module for turning matched candidates into datetimes.

Wraps dateparser (with a ciso8601 fast path for ISO dates) behind a small
adapter that applies the time zone and ambiguity preference of one call.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import ciso8601
import dateparser
from dateparser.conf import SettingValidationError

from date_extract.config import Config
from date_extract.errors import CandidateResolutionFailure, InvalidConfiguration
from date_extract.grammar.scanner import Candidate
from date_extract.validation.options_validator import PrefersMode

logger = logging.getLogger(__name__)

# dateparser PREFER_DATES_FROM values
PREFERENCE_SETTINGS: Dict[PrefersMode, str] = {
    PrefersMode.NEAREST: "current_period",
    PrefersMode.FUTURE: "future",
    PrefersMode.PAST: "past",
}

# "next Friday" is a future Friday, "last Friday" a past one
QUALIFIER_PREFERENCE: Dict[str, PrefersMode] = {
    "next": PrefersMode.FUTURE,
    "last": PrefersMode.PAST,
    "previous": PrefersMode.PAST,
}

QUALIFIER_RE = re.compile(r"^(?P<qualifier>next|previous|last)\s*(?P<rest>\S.*)$", re.IGNORECASE)
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ResolvedDate:
    """A candidate resolved to an absolute datetime"""
    candidate: str  # matched substring, verbatim
    start: int  # offset in the scanned text, keeps document order
    value: datetime  # naive when floating, zone-aware otherwise


class DateResolver:
    """Resolves candidate substrings with dateparser"""

    def __init__(
        self,
        time_zone: str = Config.FLOATING_TIME_ZONE,
        prefers: PrefersMode = PrefersMode.NEAREST,
        relative_base: Optional[datetime] = None,
        languages: Optional[Iterable[str]] = None
    ):
        """
        Initialize resolver for one extraction call.

        Args:
            time_zone: IANA zone name, or "floating" for naive datetimes
            prefers: Bias used for ambiguous phrases
            relative_base: "Now" for relative phrases (defaults to the clock)
            languages: dateparser languages (defaults to Config)

        Raises:
            InvalidConfiguration: if the time zone is unknown
        """
        self.time_zone = time_zone
        self.prefers = prefers
        self.tzinfo = self._load_zone(time_zone)
        self.relative_base = self._localize_base(relative_base)
        self.languages = list(languages or Config.RESOLVER_LANGUAGES)

    @staticmethod
    def _load_zone(time_zone: str) -> Optional[ZoneInfo]:
        if Config.is_floating(time_zone):
            return None
        try:
            return ZoneInfo(time_zone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise InvalidConfiguration("time_zone", time_zone) from e

    def _localize_base(self, relative_base: Optional[datetime]) -> Optional[datetime]:
        # dateparser expects a naive wall-clock base
        if relative_base is None or relative_base.tzinfo is None:
            return relative_base
        if self.tzinfo is not None:
            relative_base = relative_base.astimezone(self.tzinfo)
        return relative_base.replace(tzinfo=None)

    def settings(self, prefers: PrefersMode) -> Dict:
        """
        Build dateparser settings for a preference.

        Args:
            prefers: Ambiguity preference

        Returns:
            Dict of dateparser settings
        """
        settings = {
            "PREFER_DATES_FROM": PREFERENCE_SETTINGS[prefers],
            "DATE_ORDER": Config.NUMERIC_DATE_ORDER,
            "RETURN_AS_TIMEZONE_AWARE": self.tzinfo is not None,
        }
        if self.tzinfo is not None:
            settings["TIMEZONE"] = self.time_zone
            settings["TO_TIMEZONE"] = self.time_zone
        if self.relative_base is not None:
            settings["RELATIVE_BASE"] = self.relative_base
        return settings

    def resolve(self, candidate: Candidate) -> ResolvedDate:
        """
        Resolve a candidate to an absolute datetime.

        Args:
            candidate: Candidate from the scanner

        Returns:
            ResolvedDate carrying the candidate text and offset

        Raises:
            CandidateResolutionFailure: if the candidate cannot be interpreted
        """
        text = candidate.text.strip()
        prefers = self.prefers

        qualified = QUALIFIER_RE.match(text)
        if qualified:
            prefers = QUALIFIER_PREFERENCE[qualified.group("qualifier").lower()]
            text = qualified.group("rest")

        value = None
        if ISO_DATE_RE.match(text):
            value = self._parse_iso(text)
        if value is None:
            value = self._parse_natural(text, prefers)
        if value is None:
            raise CandidateResolutionFailure(candidate.text)

        return ResolvedDate(candidate=candidate.text, start=candidate.start, value=self._attach_zone(value))

    def _parse_iso(self, text: str) -> Optional[datetime]:
        # Fast path for ISO dates
        try:
            return ciso8601.parse_datetime(text)
        except ValueError:
            return None

    def _parse_natural(self, text: str, prefers: PrefersMode) -> Optional[datetime]:
        try:
            return dateparser.parse(text, languages=self.languages, settings=self.settings(prefers))
        except SettingValidationError:
            if prefers is PrefersMode.NEAREST:
                raise
            # bias is a hint only; fall back to the resolver default
            logger.warning(f"Resolver rejected prefers={prefers.value}; using nearest for {text!r}")
            return dateparser.parse(
                text, languages=self.languages, settings=self.settings(PrefersMode.NEAREST)
            )
        except (ValueError, OverflowError) as e:
            raise CandidateResolutionFailure(text, str(e)) from e

    def _attach_zone(self, value: datetime) -> datetime:
        # every value of one call must be comparable with the others
        if self.tzinfo is None:
            return value.replace(tzinfo=None)
        if value.tzinfo is None:
            return value.replace(tzinfo=self.tzinfo)
        return value.astimezone(self.tzinfo)
