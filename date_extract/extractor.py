"""
Date extraction from arbitrary text.

Finds substrings that look like dates, resolves them, and returns one or more
results depending on the `returns` option:

1. Resolve options (call overrides > extractor defaults > library defaults)
2. Scan the text once with the shared date grammar
3. Resolve each candidate in order, dropping the ones that do not parse
4. Apply the selection policy, then the output format

It produces few false positives, so it will not catch nearly
everything that looks like a date.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from date_extract.errors import CandidateResolutionFailure
from date_extract.grammar.pattern_builder import get_grammar
from date_extract.grammar.scanner import Candidate, scan
from date_extract.normalization.date_resolver import DateResolver, ResolvedDate
from date_extract.output.formatters import format_selection
from date_extract.selection.policy import SelectionPolicy
from date_extract.validation.options_validator import (
    ExtractOptions,
    build_downgrade_table,
    downgrade,
    library_defaults,
    resolve_options,
)

logger = logging.getLogger(__name__)


class DateExtractor:
    """
    Extracts dates from text.

    An extractor can be reused for any number of calls; the only state kept
    between calls is the compiled grammar.

    Example:
        >>> extractor = DateExtractor(returns="all")
        >>> extractor.extract("Meeting on 1986-11-13, follow-up Nov 20 1986")
        [datetime.datetime(1986, 11, 13, 0, 0), datetime.datetime(1986, 11, 20, 0, 0)]
    """

    def __init__(
        self,
        returns: Optional[str] = None,
        prefers: Optional[str] = None,
        time_zone: Optional[str] = None,
        output: Optional[str] = None,
        relative_base: Optional[datetime] = None,
        extra_patterns: Optional[Iterable[str]] = None,
        scalar_downgrade: Optional[Mapping[Any, Any]] = None,
        handlers: Optional[Mapping[Any, Any]] = None
    ):
        """
        Initialize extractor.

        Args:
            returns: first, last, earliest, latest, all or all_cron
            prefers: nearest, future or past
            time_zone: IANA zone name or "floating" (input and output zone)
            output: datetime, verbatim, epoch or iso
            relative_base: "Now" used for relative phrases (defaults to the clock)
            extra_patterns: Regex fragments matched after every built-in form
            scalar_downgrade: Overrides for the list -> single mode mapping
            handlers: Replacement selection handlers keyed by returns mode

        Raises:
            InvalidConfiguration: if any option holds an unsupported value
        """
        self.options: ExtractOptions = resolve_options(
            library_defaults(),
            returns=returns,
            prefers=prefers,
            time_zone=time_zone,
            output=output,
            relative_base=relative_base,
        )
        self.grammar = get_grammar(extra_patterns)
        self.scalar_downgrade = build_downgrade_table(scalar_downgrade)
        self.policy = SelectionPolicy(handlers)

        # fail on an unknown zone now rather than on first use
        self._build_resolver(self.options)

    def extract(self, text: str, **overrides):
        """
        Extract dates according to the returns mode.

        Args:
            text: Arbitrary text
            **overrides: Per-call options (returns, prefers, time_zone, output, relative_base)

        Returns:
            A single value or None for first/last/earliest/latest,
            a list for all/all_cron
        """
        options = resolve_options(self.options, **overrides)
        dates = self._extract(text, options)
        return format_selection(self.policy.select(dates, options.returns), options.output)

    def extract_one(self, text: str, **overrides):
        """
        Extract exactly one date, or None.

        List modes are downgraded first (all -> first, earliest -> all_cron),
        and a list result contributes its first element.
        """
        options = resolve_options(self.options, **overrides)
        mode = downgrade(options.returns, self.scalar_downgrade)
        if mode is not options.returns:
            logger.debug(f"Downgraded returns={options.returns.value} to {mode.value} for single result")

        dates = self._extract(text, options)
        return format_selection(self.policy.select_one(dates, mode), options.output)

    def extract_all(self, text: str, **overrides) -> List:
        """
        Extract dates as a list, whatever the returns mode.

        Single modes give a list of zero or one element.
        """
        options = resolve_options(self.options, **overrides)
        dates = self._extract(text, options)

        selection = self.policy.select(dates, options.returns)
        if not isinstance(selection, list):
            selection = [] if selection is None else [selection]
        return format_selection(selection, options.output)

    def find_candidates(self, text: str) -> List[Candidate]:
        """Date-like substrings of text in document order, unresolved"""
        return scan(text, self.grammar.build())

    def _build_resolver(self, options: ExtractOptions) -> DateResolver:
        return DateResolver(
            time_zone=options.time_zone,
            prefers=options.prefers,
            relative_base=options.relative_base,
        )

    def _extract(self, text: str, options: ExtractOptions) -> List[ResolvedDate]:
        """
        Scan and resolve, keeping document order.

        Candidates that cannot be resolved are dropped.
        """
        resolver = self._build_resolver(options)
        candidates = self.find_candidates(text)

        resolved = []
        for candidate in candidates:
            try:
                resolved.append(resolver.resolve(candidate))
            except CandidateResolutionFailure as e:
                logger.debug(f"Dropping candidate at {candidate.start}: {e}")

        logger.info(f"Resolved {len(resolved)}/{len(candidates)} date candidates")
        return resolved


# Global instance (singleton)
_default_extractor_instance = None


def get_default_extractor() -> DateExtractor:
    """Get global DateExtractor instance built from library defaults"""
    global _default_extractor_instance
    if _default_extractor_instance is None:
        _default_extractor_instance = DateExtractor()
    return _default_extractor_instance


def extract(text: str, **overrides):
    """Extract dates without creating an extractor (see DateExtractor.extract)"""
    return get_default_extractor().extract(text, **overrides)


def extract_one(text: str, **overrides):
    """Extract a single date without creating an extractor"""
    return get_default_extractor().extract_one(text, **overrides)


def extract_all(text: str, **overrides) -> List:
    """Extract a list of dates without creating an extractor"""
    return get_default_extractor().extract_all(text, **overrides)
