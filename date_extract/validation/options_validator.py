"""
Option validation and merging for date extraction.

Resolves the options for a single extraction call:
- Per-call overrides win over extractor defaults, which win over library defaults
- `returns`, `prefers` and `output` must be members of their enumerations
- Multi-result modes are downgraded before selection when one result is wanted

Invalid values fail here, before any text is scanned.
"""

import logging
from dataclasses import dataclass, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type

from date_extract.config import Config
from date_extract.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


class ReturnsMode(str, Enum):
    """Which of the resolved dates an extraction returns"""
    FIRST = "first"
    LAST = "last"
    EARLIEST = "earliest"
    LATEST = "latest"
    ALL = "all"
    ALL_CRON = "all_cron"

    @property
    def is_list(self) -> bool:
        return self in (ReturnsMode.ALL, ReturnsMode.ALL_CRON)


class PrefersMode(str, Enum):
    """How ambiguous phrases such as a bare weekday are pinned to a date"""
    NEAREST = "nearest"
    FUTURE = "future"
    PAST = "past"


class OutputFormat(str, Enum):
    """Presentation applied to whatever the selection step returns"""
    DATETIME = "datetime"
    VERBATIM = "verbatim"
    EPOCH = "epoch"
    ISO = "iso"


ENUM_OPTIONS: Dict[str, Type[Enum]] = {
    "returns": ReturnsMode,
    "prefers": PrefersMode,
    "output": OutputFormat,
}


@dataclass(frozen=True)
class ExtractOptions:
    """Fully validated options for one extraction call"""
    returns: ReturnsMode = ReturnsMode.FIRST
    prefers: PrefersMode = PrefersMode.NEAREST
    time_zone: str = Config.FLOATING_TIME_ZONE
    output: OutputFormat = OutputFormat.DATETIME
    relative_base: Optional[datetime] = None  # "now" used for relative phrases

    @property
    def is_floating(self) -> bool:
        return Config.is_floating(self.time_zone)


OPTION_NAMES = frozenset(f.name for f in fields(ExtractOptions))

# list -> scalar mapping used when the caller wants exactly one result
DEFAULT_SCALAR_DOWNGRADE: Dict[ReturnsMode, ReturnsMode] = {
    ReturnsMode.ALL: ReturnsMode.FIRST,
    ReturnsMode.EARLIEST: ReturnsMode.ALL_CRON,
}


def coerce_option(field: str, value: Any) -> Enum:
    """
    Convert a raw option value into its enumeration member.

    Args:
        field: Option name ('returns', 'prefers' or 'output')
        value: Enum member or its string value (case-insensitive)

    Returns:
        The matching enum member

    Raises:
        InvalidConfiguration: if the value is not a member

    Example:
        >>> coerce_option("returns", "ALL_CRON")
        <ReturnsMode.ALL_CRON: 'all_cron'>
    """
    enum_cls = ENUM_OPTIONS[field]
    allowed = [member.value for member in enum_cls]

    if isinstance(value, enum_cls):
        return value

    if not isinstance(value, str):
        raise InvalidConfiguration(field, value, allowed)

    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        raise InvalidConfiguration(field, value, allowed) from None


def _coerce_relative_base(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    raise InvalidConfiguration("relative_base", value)


def _coerce_time_zone(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidConfiguration("time_zone", value)
    cleaned = value.strip()
    if Config.is_floating(cleaned):
        return Config.FLOATING_TIME_ZONE
    return cleaned


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def library_defaults() -> ExtractOptions:
    """Build the library-wide defaults from Config (environment aware)"""
    return ExtractOptions(
        returns=coerce_option("returns", Config.DEFAULT_RETURNS),
        prefers=coerce_option("prefers", Config.DEFAULT_PREFERS),
        time_zone=_coerce_time_zone(Config.DEFAULT_TIME_ZONE),
        output=coerce_option("output", Config.DEFAULT_OUTPUT),
    )


def resolve_options(defaults: ExtractOptions, **overrides) -> ExtractOptions:
    """
    Merge per-call overrides over a set of defaults, field by field.

    A value of None or an empty string means "not supplied" and the default
    applies.

    Args:
        defaults: Already validated lower-precedence options
        **overrides: Any of returns, prefers, time_zone, output, relative_base

    Returns:
        New ExtractOptions instance (defaults is never modified)

    Raises:
        TypeError: for unknown option names
        InvalidConfiguration: for values outside an option's allowed set
    """
    unknown = set(overrides) - OPTION_NAMES
    if unknown:
        raise TypeError(f"Unknown extraction option(s): {', '.join(sorted(unknown))}")

    changes = {}
    for name, value in overrides.items():
        if name != "relative_base" and _is_missing(value):
            continue
        if name in ENUM_OPTIONS:
            changes[name] = coerce_option(name, value)
        elif name == "time_zone":
            changes[name] = _coerce_time_zone(value)
        elif value is not None:
            changes[name] = _coerce_relative_base(value)

    if not changes:
        return defaults

    options = replace(defaults, **changes)
    logger.debug(f"Resolved extraction options: {options}")
    return options


def build_downgrade_table(
    overrides: Optional[Mapping[Any, Any]] = None
) -> Dict[ReturnsMode, ReturnsMode]:
    """
    Build a scalar downgrade table, layering overrides on the default mapping.

    Keys and values may be ReturnsMode members or their string values.
    """
    table = dict(DEFAULT_SCALAR_DOWNGRADE)
    for source, target in (overrides or {}).items():
        table[coerce_option("returns", source)] = coerce_option("returns", target)
    return table


def downgrade(
    mode: ReturnsMode,
    table: Optional[Mapping[ReturnsMode, ReturnsMode]] = None
) -> ReturnsMode:
    """
    Map a returns mode to the mode used when a single result is requested.

    Modes missing from the table are returned unchanged.
    """
    table = DEFAULT_SCALAR_DOWNGRADE if table is None else table
    return table.get(mode, mode)
