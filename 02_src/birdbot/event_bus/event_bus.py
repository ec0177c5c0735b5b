"""EventBus with a fire-and-forget outbox for side-effect subscribers."""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from ..models import BusMessage, Topic

logger = get_logger(__name__)


TopicHandler = Callable[[BusMessage], Awaitable[None]]


class IEventBus(Protocol):
    """In-memory pub/sub for exchanging BusMessages."""

    def subscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Subscribe a handler to a topic."""
        ...

    async def publish(self, message: BusMessage) -> None:
        """Deliver a message to all subscribers and wait for them."""
        ...

    def publish_nowait(self, message: BusMessage) -> bool:
        """Queue a message for background delivery. Never blocks or raises."""
        ...


def new_message(topic: Topic, payload: dict, source: str) -> BusMessage:
    return BusMessage(
        id=str(uuid.uuid4()),
        topic=topic,
        payload=payload,
        source=source,
        timestamp=datetime.now(timezone.utc),
    )


class EventBus:
    """In-memory pub/sub event bus.

    ``publish`` awaits subscribers directly. ``publish_nowait`` puts the
    message in a bounded outbox drained by a background dispatcher, so a
    slow or failing subscriber never holds up the publisher.
    """

    def __init__(self, max_pending: int = 1000):
        self._subscribers: dict[Topic, list[TopicHandler]] = {
            topic: [] for topic in Topic
        }
        self._outbox: asyncio.Queue[BusMessage] = asyncio.Queue(maxsize=max_pending)
        self._dispatcher: asyncio.Task | None = None

    def subscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Subscribe a handler to a topic."""
        self._subscribers[topic].append(handler)

    async def publish(self, message: BusMessage) -> None:
        """Call every subscriber of the message topic concurrently."""
        if not message.id:
            message.id = str(uuid.uuid4())

        handlers = self._subscribers.get(message.topic, [])
        if not handlers:
            return

        results = await asyncio.gather(
            *[handler(message) for handler in handlers],
            return_exceptions=True,
        )

        for i, result in enumerate(results):
            if isinstance(result, Exception):
                logger.error(
                    "Error in %s handler %s: %s", message.topic.value, i, result
                )

    def publish_nowait(self, message: BusMessage) -> bool:
        """Queue a message for background delivery. Returns False if dropped."""
        try:
            self._outbox.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Outbox full, dropping %s message", message.topic.value)
            return False
        return True

    @property
    def pending(self) -> int:
        return self._outbox.qsize()

    async def start(self) -> None:
        """Start draining the outbox."""
        if self._dispatcher is None:
            self._dispatcher = asyncio.create_task(self._dispatch_loop())
            logger.info("EventBus dispatcher started")

    async def stop(self) -> None:
        """Deliver whatever is still queued, then stop the dispatcher."""
        if self._dispatcher:
            self._dispatcher.cancel()
            try:
                await self._dispatcher
            except asyncio.CancelledError:
                pass
            self._dispatcher = None
        await self.drain()
        logger.info("EventBus dispatcher stopped")

    async def drain(self) -> None:
        """Deliver every queued message now."""
        while not self._outbox.empty():
            message = self._outbox.get_nowait()
            await self.publish(message)
            self._outbox.task_done()

    async def _dispatch_loop(self) -> None:
        try:
            while True:
                message = await self._outbox.get()
                try:
                    await self.publish(message)
                finally:
                    self._outbox.task_done()
        except asyncio.CancelledError:
            pass
