"""Date presets, custom ranges and timezone resolution for searches."""

import os
import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Iterable, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import MAX_LOOKBACK_DAYS
from ..errors import RangeLimitError
from ..logging_config import get_logger
from ..models import DateFilter, Observation
from .timezones import REGION_TIMEZONES

logger = get_logger(__name__)

# name -> (days before today the window starts, upstream lookback, label title)
PRESETS: dict[str, tuple[int, int, str]] = {
    "today": (0, 1, "Today"),
    "yesterday": (1, 2, "Yesterday"),
    "last_3_days": (2, 3, "Last 3 Days"),
    "last_week": (6, 7, "Last Week"),
    "last_14_days": (13, 14, "Last 14 Days"),
    "last_month": (29, 30, "Last Month"),
}
DEFAULT_PRESET = "last_14_days"

_DMY_SLASH = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_YMD_DASH = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_DMY_DASH = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_RANGE_SEPARATOR = re.compile(r"\s+to\s+", re.IGNORECASE)

END_OF_DAY = time(23, 59, 59, 999000)


class IDateRangeResolver(Protocol):
    """Turns relative or custom date requests into absolute windows."""

    def resolve_timezone(self, region_code: str | None) -> str:
        """Return the IANA zone name used for a region."""
        ...

    def get_preset(self, name: str, region_code: str | None = None) -> DateFilter:
        """Resolve a named preset in the region's local time."""
        ...

    def parse_custom_range(
        self, text: str, region_code: str | None = None
    ) -> DateFilter | None:
        """Parse a user-typed date or range; None when unparseable."""
        ...


def host_default_zone() -> str:
    """Zone used when a region cannot be resolved: $TZ if valid, else UTC."""
    candidate = os.getenv("TZ", "").lstrip(":")
    if candidate:
        try:
            ZoneInfo(candidate)
            return candidate
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Ignoring invalid TZ environment value %r", candidate)
    return "UTC"


def parse_date(token: str) -> date | None:
    """Parse DD/MM/YYYY, YYYY-MM-DD or DD-MM-YYYY. Impossible dates yield None."""
    if not token:
        return None
    token = token.strip()

    match = _DMY_SLASH.match(token) or _DMY_DASH.match(token)
    if match:
        day, month, year = (int(part) for part in match.groups())
    else:
        match = _YMD_DASH.match(token)
        if not match:
            return None
        year, month, day = (int(part) for part in match.groups())

    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_ebird_datetime(value: str | None) -> datetime | None:
    """Parse eBird's naive local "YYYY-MM-DD HH:MM" (time optional)."""
    if not value:
        return None
    for fmt in ("%Y-%m-%d %H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    return None


def format_ddmmyyyy(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_obs_date(value: str | None) -> str:
    """eBird "YYYY-MM-DD HH:MM" -> "DD/MM/YYYY HH:MM"."""
    if not value:
        return "Unknown"
    date_part, _, time_part = value.partition(" ")
    try:
        year, month, day = date_part.split("-")
    except ValueError:
        return value
    formatted = f"{day}/{month}/{year}"
    return f"{formatted} {time_part}" if time_part else formatted


class DateRangeResolver:
    """Resolves presets and custom ranges in the searched region's local time."""

    def __init__(
        self,
        now: Callable[[], datetime] | None = None,
        default_zone: str | None = None,
    ):
        self._now = now or (lambda: datetime.now(timezone.utc))
        self._default_zone = default_zone or host_default_zone()

    def resolve_timezone(self, region_code: str | None) -> str:
        """Full code first, then the country prefix, then the host zone."""
        if region_code:
            upper = region_code.strip().upper()
            if upper in REGION_TIMEZONES:
                return REGION_TIMEZONES[upper]
            prefix = upper.split("-")[0]
            if prefix in REGION_TIMEZONES:
                return REGION_TIMEZONES[prefix]
        return self._default_zone

    def zone_for(self, region_code: str | None) -> tzinfo:
        name = self.resolve_timezone(region_code)
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Timezone %s unavailable, using UTC", name)
            return timezone.utc

    def local_now(self, region_code: str | None = None) -> datetime:
        return self._now().astimezone(self.zone_for(region_code))

    def timezone_abbreviation(self, region_code: str | None = None) -> str:
        return self.local_now(region_code).tzname() or "Local"

    def get_preset(self, name: str, region_code: str | None = None) -> DateFilter:
        """Resolve a named preset. Unknown names behave as last_14_days."""
        if name not in PRESETS:
            logger.debug("Unknown date preset %r, using %s", name, DEFAULT_PRESET)
            name = DEFAULT_PRESET
        start_offset, lookback, title = PRESETS[name]

        now = self.local_now(region_code)
        tz_abbr = now.tzname() or "Local"
        today = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
        start = today - timedelta(days=start_offset)

        if name == "yesterday":
            end = datetime.combine(start.date(), END_OF_DAY, tzinfo=now.tzinfo)
            label = f"{title} ({format_ddmmyyyy(start.date())} {tz_abbr})"
        else:
            end = now
            label = f"{title} (until {now:%H:%M} {tz_abbr})"

        return DateFilter(start=start, end=end, lookback_days=lookback, label=label)

    def parse_custom_range(
        self, text: str, region_code: str | None = None
    ) -> DateFilter | None:
        """Parse one date or ``A to B``.

        Returns None when any token fails to parse. Raises RangeLimitError
        when the window starts more than 30 days before today.
        """
        text = (text or "").strip()
        if not text:
            return None

        tokens = _RANGE_SEPARATOR.split(text)
        if len(tokens) > 2:
            return None

        dates = [parse_date(token) for token in tokens]
        if any(d is None for d in dates):
            return None

        start_day = dates[0]
        end_day = dates[-1]
        if start_day > end_day:
            start_day, end_day = end_day, start_day

        now = self.local_now(region_code)
        today = now.date()
        earliest = today - timedelta(days=MAX_LOOKBACK_DAYS)
        if start_day < earliest:
            raise RangeLimitError(earliest=earliest, latest=today)

        tz_abbr = now.tzname() or "Local"
        if len(tokens) == 1:
            label = format_ddmmyyyy(start_day)
        elif start_day == end_day:
            label = f"{format_ddmmyyyy(start_day)} ({tz_abbr})"
        else:
            label = (
                f"{format_ddmmyyyy(start_day)} to {format_ddmmyyyy(end_day)} ({tz_abbr})"
            )

        days_back = max(1, (today - start_day).days + 1)
        return DateFilter(
            start=datetime.combine(start_day, time.min, tzinfo=now.tzinfo),
            end=datetime.combine(end_day, END_OF_DAY, tzinfo=now.tzinfo),
            lookback_days=min(days_back, MAX_LOOKBACK_DAYS),
            label=label,
        )

    def filter_observations(
        self, observations: Iterable[Observation], date_filter: DateFilter
    ) -> list[Observation]:
        """Keep observations whose local observation time is inside the window."""
        zone = date_filter.start.tzinfo
        kept = []
        for obs in observations:
            observed = parse_ebird_datetime(obs.obs_dt)
            if observed is None:
                continue
            observed = observed.replace(tzinfo=zone)
            if date_filter.start <= observed <= date_filter.end:
                kept.append(obs)
        return kept
