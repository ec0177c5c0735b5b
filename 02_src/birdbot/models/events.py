"""Inbound transport events."""

from dataclasses import dataclass


@dataclass
class InboundEvent:
    """Anything a user can send to the bot."""

    chat_id: int
    user_name: str = ""


@dataclass
class CommandEvent(InboundEvent):
    """``/command args`` text."""

    command: str = ""
    args: str = ""


@dataclass
class TextEvent(InboundEvent):
    """Plain free-text message."""

    text: str = ""


@dataclass
class LocationEvent(InboundEvent):
    """Shared GPS location."""

    latitude: float = 0.0
    longitude: float = 0.0


@dataclass
class ButtonEvent(InboundEvent):
    """Inline button press."""

    payload: str = ""
    message_id: int | None = None
    callback_id: str | None = None
