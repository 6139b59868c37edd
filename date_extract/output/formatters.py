"""
Output presentation for selected dates.

Applied uniformly after selection: a datetime, the matched text, epoch
seconds, or an ISO-8601 string.
"""

from datetime import timezone
from typing import Any, Callable, Dict

from date_extract.normalization.date_resolver import ResolvedDate
from date_extract.validation.options_validator import OutputFormat


def to_epoch(resolved: ResolvedDate) -> int:
    """Seconds since the epoch; floating values are read as UTC"""
    value = resolved.value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


FORMATTERS: Dict[OutputFormat, Callable[[ResolvedDate], Any]] = {
    OutputFormat.DATETIME: lambda resolved: resolved.value,
    OutputFormat.VERBATIM: lambda resolved: resolved.candidate,
    OutputFormat.EPOCH: to_epoch,
    OutputFormat.ISO: lambda resolved: resolved.value.isoformat(),
}


def format_selection(selection, output: OutputFormat):
    """
    Convert a selection result into the requested presentation.

    Args:
        selection: ResolvedDate, None, or a list of ResolvedDate
        output: Output format

    Returns:
        Same shape as selection with each date converted
    """
    formatter = FORMATTERS[output]
    if selection is None:
        return None
    if isinstance(selection, list):
        return [formatter(resolved) for resolved in selection]
    return formatter(selection)
