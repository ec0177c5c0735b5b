"""Search result data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .ebird import Observation


class QueryType(str, Enum):
    """Kind of search; each kind owns an independent result cache slot."""

    SIGHTINGS = "sightings"
    NOTABLE = "notable"
    SPECIES = "species"
    NEARBY = "nearby"


@dataclass(frozen=True)
class DateFilter:
    """Absolute time window resolved from a preset or a custom range."""

    start: datetime
    end: datetime
    lookback_days: int
    label: str

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"DateFilter start {self.start} is after end {self.end}")


@dataclass
class CachedResultSet:
    """Observations retained for paging, summaries and sharing."""

    items: list[Observation]
    display_name: str
    region_code: str | None
    query_type: QueryType
    date_label: str = ""
    date_filter: DateFilter | None = None
    is_hotspot: bool = False
    fetched_at: datetime | None = None


@dataclass
class Page:
    """One slice of a cached result set."""

    items: list[Observation]
    start_index: int  # zero-based, inclusive
    end_index: int  # zero-based, exclusive
    total_pages: int
    page_index: int = 0
    total_items: int = 0

    @property
    def is_first(self) -> bool:
        return self.page_index == 0

    @property
    def is_last(self) -> bool:
        return self.page_index >= self.total_pages - 1
