"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from pydantic import ValidationError

from .config import resolve_db_path, resolve_session_path
from .dates import DateRangeResolver
from .dialogue.orchestrator import DialogOrchestrator
from .ebird import EBirdClient, IObservationSource
from .errors import TransportError
from .event_bus import EventBus
from .logging_config import get_logger
from .search_log import SearchLogSink
from .session import SessionContext, SessionSnapshotter
from .storage import ISearchLogStorage, SearchLogStorage
from .transport import ITransport, TelegramPoller, TelegramTransport, Update, update_to_event

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Clear stored data and session state."""
        ...

    async def handle_update(self, raw_update: dict) -> bool:
        """Feed one raw Telegram update to the dialog."""
        ...


class Application:
    """Main application bootstrap.

    ``source`` and ``transport`` may be injected; otherwise they are built
    from the environment. Without a Telegram token the bot runs with the
    HTTP API only.
    """

    def __init__(
        self,
        db_path: str | None = None,
        session_path: str | None = None,
        source: IObservationSource | None = None,
        transport: ITransport | None = None,
        use_polling: bool | None = None,
    ):
        env_db_path = os.getenv("SEARCH_LOG_DB") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        env_session_path = os.getenv("SESSION_FILE") if session_path is None else session_path
        self._session_path = resolve_session_path(env_session_path)
        self._webhook_url = os.getenv("TELEGRAM_WEBHOOK_URL")
        self._webhook_secret = os.getenv("TELEGRAM_WEBHOOK_SECRET")
        self._use_polling = not self._webhook_url if use_polling is None else use_polling

        # Components (will be initialized in start())
        self._storage: ISearchLogStorage | None = None
        self._event_bus: EventBus | None = None
        self._search_log: SearchLogSink | None = None
        self._session: SessionContext | None = None
        self._snapshotter: SessionSnapshotter | None = None
        self._source: IObservationSource | None = source
        self._owns_source = source is None
        self._transport: ITransport | None = transport
        self._owns_transport = transport is None
        self._orchestrator: DialogOrchestrator | None = None
        self._poller: TelegramPoller | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (no dependencies)
        self._storage = SearchLogStorage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. EventBus
        self._event_bus = EventBus()
        await self._event_bus.start()

        # 3. Search log sink (depends on EventBus + Storage)
        self._search_log = SearchLogSink(self._event_bus, self._storage)
        await self._search_log.start()

        # 4. Session state and its snapshot
        self._session = SessionContext()
        self._snapshotter = SessionSnapshotter(
            self._session.states, self._session.prompts, self._session_path
        )
        await self._snapshotter.start()

        # 5. eBird client (no internal dependencies)
        if self._source is None:
            self._source = EBirdClient()
        logger.info("Observation source initialized")

        # 6. Telegram transport
        if self._transport is None and os.getenv("TELEGRAM_BOT_TOKEN"):
            self._transport = TelegramTransport()
        if self._transport is None:
            logger.warning("TELEGRAM_BOT_TOKEN not set, messaging disabled")
            logger.info("All components initialized successfully")
            return

        # 7. Orchestrator (depends on transport, source, session, EventBus)
        self._orchestrator = DialogOrchestrator(
            transport=self._transport,
            source=self._source,
            resolver=DateRangeResolver(),
            session=self._session,
            event_bus=self._event_bus,
        )
        logger.info("DialogOrchestrator initialized")

        # 8. Update delivery: webhook or long polling
        if isinstance(self._transport, TelegramTransport):
            await self._connect_telegram(self._transport)
        logger.info("All components initialized successfully")

    async def _connect_telegram(self, transport: TelegramTransport) -> None:
        try:
            await transport.set_commands()
            if self._use_polling:
                self._poller = TelegramPoller(transport, self._orchestrator.dispatch)
                await self._poller.start()
            else:
                url = f"{self._webhook_url.rstrip('/')}/telegram/webhook"
                await transport.set_webhook(url, self._webhook_secret)
        except TransportError as e:
            logger.error(f"Telegram setup failed: {e}")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._poller:
            await self._poller.stop()
            self._poller = None
        if self._snapshotter:
            await self._snapshotter.stop()
        if self._event_bus:
            await self._event_bus.stop()
        if self._owns_transport and isinstance(self._transport, TelegramTransport):
            await self._transport.close()
        if self._owns_source and isinstance(self._source, EBirdClient):
            await self._source.close()
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Clear the search log and all per-chat state."""
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")
        if self._session:
            self._session.states.clear()
            self._session.prompts.clear()
            self._session.results.clear()
            self._session.rate_limiter.reset()
            logger.info("Sessions cleared")

    async def handle_update(self, raw_update: dict) -> bool:
        """Dispatch one raw Telegram update. Returns False when it was not handled."""
        if self._orchestrator is None:
            raise RuntimeError("Messaging not configured")
        try:
            update = Update.model_validate(raw_update)
        except ValidationError as e:
            logger.warning(f"Rejected malformed update: {e}")
            return False
        event = update_to_event(update)
        if event is None:
            return False
        await self._orchestrator.dispatch(event)
        return True

    @property
    def webhook_secret(self) -> str | None:
        return self._webhook_secret

    @property
    def storage(self) -> ISearchLogStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def source(self) -> IObservationSource:
        """Get observation source."""
        if not self._source:
            raise RuntimeError("Application not started")
        return self._source

    @property
    def session(self) -> SessionContext:
        if not self._session:
            raise RuntimeError("Application not started")
        return self._session

    @property
    def orchestrator(self) -> DialogOrchestrator | None:
        return self._orchestrator

    @property
    def event_bus(self) -> EventBus:
        if not self._event_bus:
            raise RuntimeError("Application not started")
        return self._event_bus
