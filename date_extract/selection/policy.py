"""
Selection policy for resolved dates.

Turns the document-order list of resolved dates into the shape requested by
the `returns` option. Each mode is a plain function in a handler table, so a
caller can swap one out without subclassing.
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional, Union

from date_extract.normalization.date_resolver import ResolvedDate
from date_extract.validation.options_validator import ReturnsMode, coerce_option

logger = logging.getLogger(__name__)

Selection = Union[Optional[ResolvedDate], List[ResolvedDate]]
Handler = Callable[[List[ResolvedDate]], Selection]


def _chronological_key(resolved: ResolvedDate):
    return resolved.value


def select_first(dates: List[ResolvedDate]) -> Optional[ResolvedDate]:
    return dates[0] if dates else None


def select_last(dates: List[ResolvedDate]) -> Optional[ResolvedDate]:
    return dates[-1] if dates else None


def select_earliest(dates: List[ResolvedDate]) -> Optional[ResolvedDate]:
    # min() keeps the first of equal values, which is the first in the text
    return min(dates, key=_chronological_key) if dates else None


def select_latest(dates: List[ResolvedDate]) -> Optional[ResolvedDate]:
    # max() also keeps the first of equal values
    return max(dates, key=_chronological_key) if dates else None


def select_all(dates: List[ResolvedDate]) -> List[ResolvedDate]:
    return list(dates)


def select_all_cron(dates: List[ResolvedDate]) -> List[ResolvedDate]:
    # sorted() is stable: equal values keep document order
    return sorted(dates, key=_chronological_key)


DEFAULT_HANDLERS: Dict[ReturnsMode, Handler] = {
    ReturnsMode.FIRST: select_first,
    ReturnsMode.LAST: select_last,
    ReturnsMode.EARLIEST: select_earliest,
    ReturnsMode.LATEST: select_latest,
    ReturnsMode.ALL: select_all,
    ReturnsMode.ALL_CRON: select_all_cron,
}


class SelectionPolicy:
    """Applies a returns mode to an ordered list of resolved dates"""

    def __init__(self, handlers: Optional[Mapping[Union[ReturnsMode, str], Handler]] = None):
        """
        Initialize policy.

        Args:
            handlers: Replacement handlers keyed by returns mode; modes not
                given keep their default handler
        """
        self.handlers: Dict[ReturnsMode, Handler] = dict(DEFAULT_HANDLERS)
        for mode, handler in (handlers or {}).items():
            if not callable(handler):
                raise TypeError(f"Handler for {mode!r} is not callable")
            self.handlers[coerce_option("returns", mode)] = handler

    def select(self, dates: List[ResolvedDate], mode: ReturnsMode) -> Selection:
        """
        Select from resolved dates.

        Args:
            dates: Resolved dates in document order
            mode: Returns mode

        Returns:
            One ResolvedDate or None for single modes, a list for list modes
        """
        result = self.handlers[mode](list(dates))
        logger.debug(f"Selected with mode={mode.value} from {len(dates)} dates")
        return result

    def select_one(self, dates: List[ResolvedDate], mode: ReturnsMode) -> Optional[ResolvedDate]:
        """
        Select exactly one date (or None).

        A handler that still yields a list contributes its first element.
        """
        result = self.select(dates, mode)
        if isinstance(result, list):
            return result[0] if result else None
        return result
