"""Telegram messaging transport."""

from .base import ITransport
from .poller import TelegramPoller
from .telegram import TelegramTransport, inline_markup
from .updates import Update, parse_command, update_to_event

__all__ = [
    "ITransport",
    "TelegramTransport",
    "TelegramPoller",
    "Update",
    "inline_markup",
    "parse_command",
    "update_to_event",
]
