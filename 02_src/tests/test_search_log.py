"""Tests for SearchLogSink."""

import pytest

from birdbot.event_bus import new_message
from birdbot.models import Topic
from birdbot.search_log import SearchLogSink, search_completed_payload
from conftest import make_observation


class TestSearchCompletedPayload:
    """Tests for payload construction."""

    def test_counts_and_unique_species(self):
        """Test that species are unique and sorted."""
        observations = [
            make_observation(2),
            make_observation(1),
            make_observation(2),
        ]
        payload = search_completed_payload(
            chat_id=5,
            username="birder",
            command="sightings",
            query="Singapore",
            region_code="SG",
            observations=observations,
        )
        assert payload["total_count"] == 3
        assert payload["species"] == ["Bird 1", "Bird 2"]


class TestSearchLogSink:
    """Tests for writing outbox messages to storage."""

    @pytest.mark.asyncio
    async def test_completed_search_is_stored(self, event_bus, storage):
        """Test the path from outbox to search log row."""
        sink = SearchLogSink(event_bus, storage)
        await sink.start()

        payload = search_completed_payload(
            chat_id=5,
            username="birder",
            command="notable",
            query="Singapore",
            region_code="SG",
            observations=[make_observation(1), make_observation(3)],
        )
        event_bus.publish_nowait(new_message(Topic.SEARCH_COMPLETED, payload, source="test"))
        await event_bus.drain()

        rows = await storage.get_searches(chat_id=5)
        assert len(rows) == 1
        assert rows[0].command == "notable"
        assert rows[0].total_count == 2
        assert rows[0].species == ["Bird 1", "Bird 3"]

    @pytest.mark.asyncio
    async def test_missing_username_defaults(self, event_bus, storage):
        """Test that rows always carry a username."""
        sink = SearchLogSink(event_bus, storage)
        await sink.start()

        payload = {"chat_id": 9, "username": "", "command": "nearby", "query": "Nearby (5 km)"}
        await event_bus.publish(new_message(Topic.SEARCH_COMPLETED, payload, source="test"))

        row = (await storage.get_searches())[0]
        assert row.username == "unknown"
        assert row.region_code is None
        assert row.total_count == 0
