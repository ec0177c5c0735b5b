"""Outbox message models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Topic(str, Enum):
    """EventBus topics."""

    SEARCH_COMPLETED = "search_completed"


@dataclass
class BusMessage:
    """A message exchanged through the EventBus outbox."""

    id: str
    topic: Topic
    payload: dict  # varies by topic
    source: str  # component that published
    timestamp: datetime
