"""Date range and timezone resolution."""

from .resolver import (
    PRESETS,
    DateRangeResolver,
    IDateRangeResolver,
    format_ddmmyyyy,
    format_obs_date,
    host_default_zone,
    parse_date,
    parse_ebird_datetime,
)

__all__ = [
    "PRESETS",
    "DateRangeResolver",
    "IDateRangeResolver",
    "format_ddmmyyyy",
    "format_obs_date",
    "host_default_zone",
    "parse_date",
    "parse_ebird_datetime",
]
