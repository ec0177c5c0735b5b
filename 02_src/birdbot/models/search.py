"""Search log data models."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class SearchRecord:
    """One completed search, as written to the search log."""

    timestamp: datetime
    chat_id: int
    username: str
    command: str
    query: str
    region_code: str | None
    total_count: int
    species: list[str] = field(default_factory=list)  # unique common names, sorted
    id: int | None = None

    @property
    def unique_species(self) -> int:
        return len(self.species)
