"""Tests for Application and the HTTP API."""

from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio

from birdbot.api import create_fastapi_app
from birdbot.app import Application
from birdbot.errors import UpstreamFetchError
from birdbot.models import DateSelection, SearchRecord
from conftest import RecordingTransport, make_observation


def start_update(text="/start", update_id=1, chat_id=42):
    return {
        "update_id": update_id,
        "message": {
            "message_id": update_id,
            "chat": {"id": chat_id},
            "from": {"id": chat_id, "first_name": "Ana"},
            "text": text,
        },
    }


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "TELEGRAM_BOT_TOKEN",
        "TELEGRAM_WEBHOOK_URL",
        "TELEGRAM_WEBHOOK_SECRET",
        "SEARCH_LOG_DB",
        "SESSION_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest_asyncio.fixture
async def application(clean_env, tmp_path, source):
    """Started application with fake transport and source."""
    clean_env.setenv("TELEGRAM_WEBHOOK_SECRET", "s3cret")
    app = Application(
        db_path=":memory:",
        session_path=str(tmp_path / "sessions.json"),
        source=source,
        transport=RecordingTransport(),
    )
    await app.start()
    yield app
    await app.stop()


@pytest_asyncio.fixture
async def client(application):
    """HTTP client bound to the FastAPI app (lifespan not run)."""
    fastapi_app = create_fastapi_app(application)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=fastapi_app), base_url="http://test"
    ) as http:
        yield http


class TestApplicationLifecycle:
    """Tests for start, stop and reset."""

    @pytest.mark.asyncio
    async def test_start_initializes_components(self, application):
        """Test that start wires every component."""
        assert application.storage is not None
        assert application.event_bus is not None
        assert application.session is not None
        assert application.orchestrator is not None
        assert application.orchestrator.session is application.session

    @pytest.mark.asyncio
    async def test_without_token_messaging_is_disabled(self, clean_env, tmp_path, source):
        """Test that the HTTP API still starts without Telegram."""
        app = Application(
            db_path=":memory:", session_path=str(tmp_path / "s.json"), source=source
        )
        await app.start()
        try:
            assert app.orchestrator is None
            with pytest.raises(RuntimeError):
                await app.handle_update(start_update())
        finally:
            await app.stop()

    @pytest.mark.asyncio
    async def test_not_started_raises(self, clean_env):
        """Test that components are unavailable before start."""
        app = Application(db_path=":memory:")
        with pytest.raises(RuntimeError):
            app.storage

    @pytest.mark.asyncio
    async def test_stop_writes_session_snapshot(self, clean_env, tmp_path, source):
        """Test that conversation steps survive a restart."""
        path = tmp_path / "sessions.json"
        first = Application(
            db_path=":memory:", session_path=str(path), source=source, transport=RecordingTransport()
        )
        await first.start()
        await first.handle_update(start_update("/sightings Singapore"))
        await first.stop()
        assert path.exists()

        second = Application(
            db_path=":memory:", session_path=str(path), source=source, transport=RecordingTransport()
        )
        await second.start()
        try:
            state = second.session.states.get(42)
            assert isinstance(state, DateSelection)
            assert state.region_code == "SG"
        finally:
            await second.stop()

    @pytest.mark.asyncio
    async def test_reset(self, application):
        """Test that reset clears the log and the sessions."""
        await application.storage.save_search(
            SearchRecord(
                timestamp=datetime.now(timezone.utc),
                chat_id=1,
                username="a",
                command="sightings",
                query="SG",
                region_code="SG",
                total_count=1,
            )
        )
        await application.handle_update(start_update("/sightings"))
        await application.reset()
        assert await application.storage.get_searches() == []
        assert len(application.session.states) == 0


class TestHandleUpdate:
    """Tests for feeding raw updates."""

    @pytest.mark.asyncio
    async def test_command_update(self, application):
        """Test that a /start update reaches the dialog."""
        assert await application.handle_update(start_update()) is True
        transport = application.orchestrator._transport
        assert "Welcome to the Bird Sighting Bot, Ana!" in transport.last.text

    @pytest.mark.asyncio
    async def test_malformed_update(self, application):
        """Test that invalid payloads are rejected without raising."""
        assert await application.handle_update({"message": {}}) is False

    @pytest.mark.asyncio
    async def test_unsupported_update(self, application):
        """Test that updates without a usable event are skipped."""
        assert await application.handle_update({"update_id": 5}) is False


class TestApi:
    """Tests for HTTP routes."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        """Test the health endpoint."""
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "service": "bird-sighting-bot",
            "messaging": True,
        }

    @pytest.mark.asyncio
    async def test_webhook_rejects_bad_secret(self, client):
        """Test that updates without the secret header are refused."""
        response = await client.post("/telegram/webhook", json=start_update())
        assert response.status_code == 403

        response = await client.post(
            "/telegram/webhook",
            json=start_update(),
            headers={"X-Telegram-Bot-Api-Secret-Token": "wrong"},
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_webhook_accepts_update(self, client, application):
        """Test a valid webhook delivery."""
        response = await client.post(
            "/telegram/webhook",
            json=start_update(),
            headers={"X-Telegram-Bot-Api-Secret-Token": "s3cret"},
        )
        assert response.status_code == 200
        assert response.json() == {"ok": True, "handled": True}
        assert application.orchestrator._transport.sent

    @pytest.mark.asyncio
    async def test_observations(self, client, source):
        """Test the observation passthrough."""
        source.get_recent_observations.return_value = [make_observation(1)]
        response = await client.get("/api/observations/SG", params={"back": 7})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 1
        assert body["data"][0]["comName"] == "Bird 1"
        source.get_recent_observations.assert_awaited_once_with("SG", 7, 100)

    @pytest.mark.asyncio
    async def test_observations_upstream_error(self, client, source):
        """Test that upstream failures map to 502."""
        source.get_notable_observations.side_effect = UpstreamFetchError("eBird down")
        response = await client.get("/api/observations/SG/notable")
        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_observations_validation(self, client):
        """Test that out-of-range lookback is rejected."""
        response = await client.get("/api/observations/SG", params={"back": 31})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_nearby_hotspots_route(self, client, source):
        """Test that /hotspots/nearby is not taken as a region."""
        response = await client.get("/api/hotspots/nearby", params={"lat": 1.35, "lng": 103.85})
        assert response.status_code == 200
        source.get_nearby_hotspots.assert_awaited_once_with(1.35, 103.85, 25)
        source.get_hotspots.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_searches(self, client, application):
        """Test the search log listing and its filters."""
        for chat_id, command in ((42, "sightings"), (42, "notable"), (7, "sightings")):
            await application.storage.save_search(
                SearchRecord(
                    timestamp=datetime.now(timezone.utc),
                    chat_id=chat_id,
                    username="ana",
                    command=command,
                    query="Singapore",
                    region_code="SG",
                    total_count=2,
                    species=["Bird 1", "Bird 2"],
                )
            )

        response = await client.get("/api/searches", params={"chat_id": 42})
        assert response.status_code == 200
        rows = response.json()
        assert len(rows) == 2
        assert rows[0]["unique_species"] == 2

        response = await client.get("/api/searches", params={"command": "sightings", "limit": 1})
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_outbox_reaches_search_log(self, application):
        """Test that SEARCH_COMPLETED messages are written by the sink."""
        from birdbot.event_bus import new_message
        from birdbot.models import Topic
        from birdbot.search_log import search_completed_payload

        payload = search_completed_payload(
            chat_id=42,
            username="ana",
            command="nearby",
            query="Nearby (5 km)",
            region_code="SG",
            observations=[make_observation(1)],
        )
        application.event_bus.publish_nowait(
            new_message(Topic.SEARCH_COMPLETED, payload, source="test")
        )
        await application.event_bus.drain()

        rows = await application.storage.get_searches(command="nearby")
        assert rows[0].query == "Nearby (5 km)"
