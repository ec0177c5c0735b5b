"""Messaging transport interface."""

from typing import Protocol

from ..models import Keyboard


class ITransport(Protocol):
    """Outbound side of the messaging platform."""

    async def send_message(
        self,
        chat_id: int,
        text: str,
        keyboard: Keyboard | None = None,
        markdown: bool = True,
    ) -> int | None:
        """Send a message; returns its id, or None when it could not be sent."""
        ...

    async def edit_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        keyboard: Keyboard | None = None,
    ) -> None:
        """Replace an existing message. Raises RenderError on failure."""
        ...

    async def delete_message(self, chat_id: int, message_id: int | None) -> None:
        """Delete a message, ignoring failures."""
        ...

    async def answer_callback(self, callback_id: str | None) -> None:
        """Acknowledge a button press."""
        ...

    async def send_location_request(
        self, chat_id: int, text: str, button_text: str
    ) -> int | None:
        """Send a one-time reply keyboard asking for the user's location."""
        ...
