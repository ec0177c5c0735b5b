"""Writes completed searches from the outbox into the search log."""

from datetime import datetime, timezone
from typing import Iterable

from ..event_bus import IEventBus
from ..logging_config import get_logger
from ..models import BusMessage, Observation, SearchRecord, Topic
from ..storage import ISearchLogStorage

logger = get_logger(__name__)


def search_completed_payload(
    chat_id: int,
    username: str,
    command: str,
    query: str,
    region_code: str | None,
    observations: Iterable[Observation],
) -> dict:
    """Build the SEARCH_COMPLETED payload from a finished search."""
    observations = list(observations)
    species = sorted({obs.common_name for obs in observations if obs.common_name})
    return {
        "chat_id": chat_id,
        "username": username,
        "command": command,
        "query": query,
        "region_code": region_code,
        "total_count": len(observations),
        "species": species,
    }


class SearchLogSink:
    """Subscribes to SEARCH_COMPLETED and appends one row per search."""

    def __init__(self, event_bus: IEventBus, storage: ISearchLogStorage):
        self._event_bus = event_bus
        self._storage = storage

    async def start(self) -> None:
        self._event_bus.subscribe(Topic.SEARCH_COMPLETED, self._on_search_completed)
        logger.info("SearchLogSink subscribed")

    async def _on_search_completed(self, message: BusMessage) -> None:
        payload = message.payload
        record = SearchRecord(
            timestamp=message.timestamp or datetime.now(timezone.utc),
            chat_id=payload["chat_id"],
            username=payload.get("username") or "unknown",
            command=payload["command"],
            query=payload.get("query") or "",
            region_code=payload.get("region_code"),
            total_count=payload.get("total_count", 0),
            species=list(payload.get("species", [])),
        )
        await self._storage.save_search(record)
        logger.info(
            "Search logged",
            extra={
                "context": {
                    "command": record.command,
                    "region_code": record.region_code,
                    "total": record.total_count,
                    "species": record.unique_species,
                }
            },
        )
