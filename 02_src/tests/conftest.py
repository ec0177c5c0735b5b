"""Pytest configuration and fixtures."""

import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# 12:00 in Singapore, 04:00 UTC
FIXED_NOW = datetime(2026, 2, 15, 4, 0, tzinfo=timezone.utc)


@dataclass
class SentMessage:
    chat_id: int
    text: str
    keyboard: list | None
    message_id: int

    @property
    def payloads(self) -> list[str]:
        return [button.payload for row in self.keyboard or [] for button in row]


class RecordingTransport:
    """In-memory transport that records every outbound call."""

    def __init__(self):
        self.sent: list[SentMessage] = []
        self.edited: list[SentMessage] = []
        self.deleted: list[tuple[int, int]] = []
        self.answered: list[str] = []
        self.location_requests: list[tuple[int, str]] = []
        self.fail_edits = False
        self._next_id = 100

    async def send_message(self, chat_id, text, keyboard=None, markdown=True):
        self._next_id += 1
        self.sent.append(SentMessage(chat_id, text, keyboard, self._next_id))
        return self._next_id

    async def edit_message(self, chat_id, message_id, text, keyboard=None):
        from birdbot.errors import RenderError

        if self.fail_edits:
            raise RenderError("message to edit not found")
        self.edited.append(SentMessage(chat_id, text, keyboard, message_id))

    async def delete_message(self, chat_id, message_id):
        if message_id:
            self.deleted.append((chat_id, message_id))

    async def answer_callback(self, callback_id):
        if callback_id:
            self.answered.append(callback_id)

    async def send_location_request(self, chat_id, text, button_text):
        self.location_requests.append((chat_id, text))
        self._next_id += 1
        return self._next_id

    @property
    def texts(self) -> list[str]:
        return [message.text for message in self.sent]

    @property
    def last(self) -> SentMessage:
        return self.sent[-1]

    def clear(self) -> None:
        self.sent.clear()
        self.edited.clear()
        self.deleted.clear()


def make_observation(index: int = 1, obs_dt: str = "2026-02-14 08:30", **overrides):
    from birdbot.models import Observation

    data = {
        "speciesCode": f"sp{index}",
        "comName": f"Bird {index}",
        "sciName": f"Avis numerus{index}",
        "locId": "L100",
        "locName": "Botanic Gardens",
        "obsDt": obs_dt,
        "howMany": 1,
        "lat": 1.31,
        "lng": 103.81,
        "countryCode": "SG",
    }
    data.update(overrides)
    return Observation.model_validate(data)


@pytest.fixture
def make_obs():
    """Factory for Observation records."""
    return make_observation


@pytest.fixture
def transport():
    """Create recording transport."""
    return RecordingTransport()


@pytest.fixture
def source():
    """Create mock observation source."""
    src = Mock()
    src.get_recent_observations = AsyncMock(return_value=[])
    src.get_notable_observations = AsyncMock(return_value=[])
    src.get_hotspot_observations = AsyncMock(return_value=[])
    src.get_species_observations = AsyncMock(return_value=[])
    src.get_nearby_observations = AsyncMock(return_value=[])
    src.get_hotspots = AsyncMock(return_value=[])
    src.get_nearby_hotspots = AsyncMock(return_value=[])
    src.get_popular_hotspots = AsyncMock(return_value=[])
    src.search_hotspots_by_name = AsyncMock(return_value=[])
    src.search_species_by_name = AsyncMock(return_value=[])
    return src


@pytest.fixture
def resolver():
    """Create date resolver pinned to FIXED_NOW."""
    from birdbot.dates import DateRangeResolver

    return DateRangeResolver(now=lambda: FIXED_NOW, default_zone="UTC")


@pytest.fixture
def session():
    """Create empty session context."""
    from birdbot.session import SessionContext

    return SessionContext()


@pytest.fixture
def event_bus():
    """Create EventBus (dispatcher not started)."""
    from birdbot.event_bus import EventBus

    return EventBus()


@pytest.fixture
def orchestrator(transport, source, resolver, session, event_bus):
    """Create DialogOrchestrator wired to fakes."""
    from birdbot.dialogue.orchestrator import DialogOrchestrator

    return DialogOrchestrator(
        transport=transport,
        source=source,
        resolver=resolver,
        session=session,
        event_bus=event_bus,
    )


@pytest_asyncio.fixture
async def storage():
    """Create in-memory search log storage for testing."""
    from birdbot.storage import SearchLogStorage

    st = SearchLogStorage(":memory:")
    await st.init()
    yield st
    await st.close()
