"""EventBus module."""

from .event_bus import EventBus, IEventBus, TopicHandler, new_message

__all__ = ["EventBus", "IEventBus", "TopicHandler", "new_message"]
