"""Long-polling update loop for when no webhook is configured."""

import asyncio
from typing import Awaitable, Callable

from pydantic import ValidationError

from ..errors import TransportError
from ..logging_config import get_logger
from ..models import InboundEvent
from .telegram import TelegramTransport
from .updates import Update, update_to_event

logger = get_logger(__name__)

EventHandler = Callable[[InboundEvent], Awaitable[None]]


class TelegramPoller:
    """Pulls updates with getUpdates and hands them to ``handler`` one by one."""

    def __init__(
        self,
        transport: TelegramTransport,
        handler: EventHandler,
        poll_timeout: int = 30,
        retry_delay: float = 5.0,
    ):
        self._transport = transport
        self._handler = handler
        self._poll_timeout = poll_timeout
        self._retry_delay = retry_delay
        self._offset: int | None = None
        self._task: asyncio.Task | None = None
        self._running = False

    async def start(self) -> None:
        # getUpdates is refused while a webhook is registered
        await self._transport.delete_webhook()
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info("Telegram polling started")

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Telegram polling stopped")

    async def poll_once(self) -> int:
        """Fetch one batch of updates and dispatch them. Returns the batch size."""
        raw_updates = await self._transport.get_updates(
            offset=self._offset, timeout=self._poll_timeout
        )
        for raw in raw_updates:
            self._offset = raw.get("update_id", 0) + 1
            try:
                update = Update.model_validate(raw)
            except ValidationError as e:
                logger.warning("Skipping malformed update: %s", e)
                continue
            event = update_to_event(update)
            if event is not None:
                await self._handler(event)
        return len(raw_updates)

    async def _poll_loop(self) -> None:
        try:
            while self._running:
                try:
                    await self.poll_once()
                except TransportError as e:
                    logger.error("Polling error: %s", e)
                    await asyncio.sleep(self._retry_delay)
        except asyncio.CancelledError:
            pass
