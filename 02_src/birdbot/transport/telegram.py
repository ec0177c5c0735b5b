"""Telegram Bot API transport over httpx."""

import os
import re

import httpx

from ..config import TELEGRAM_API_URL
from ..errors import RenderError, TransportError
from ..logging_config import get_logger
from ..models import Keyboard

logger = get_logger(__name__)

_MARKDOWN_CHARS = re.compile(r"[*_`]")

BOT_COMMANDS = [
    {"command": "start", "description": "Start the bot and see welcome message"},
    {"command": "help", "description": "Show all available commands"},
    {"command": "sightings", "description": "Search by LOCATION - see all birds in an area"},
    {"command": "species", "description": "Search by SPECIES - find where a bird was seen"},
    {"command": "notable", "description": "Get notable/rare bird sightings"},
    {"command": "nearby", "description": "Get sightings near your location"},
    {"command": "hotspots", "description": "Find birding hotspots"},
    {"command": "regions", "description": "Learn about region codes"},
]


def inline_markup(keyboard: Keyboard | None) -> dict | None:
    if not keyboard:
        return None
    return {
        "inline_keyboard": [
            [{"text": button.text, "callback_data": button.payload} for button in row]
            for row in keyboard
        ]
    }


class TelegramTransport:
    """Sends, edits and deletes Telegram messages."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str = TELEGRAM_API_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 40.0,
    ):
        self._token = token or os.getenv("TELEGRAM_BOT_TOKEN")
        if not self._token:
            raise ValueError("TELEGRAM_BOT_TOKEN not set")
        self._client = http_client or httpx.AsyncClient(
            base_url=f"{api_url}/bot{self._token}", timeout=timeout
        )
        self._owns_client = http_client is None

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def call(self, method: str, payload: dict | None = None):
        """Invoke a Bot API method and return its ``result``."""
        try:
            response = await self._client.post(f"/{method}", json=payload or {})
            data = response.json()
        except httpx.HTTPError as e:
            raise TransportError(f"{method} failed: {e}") from e
        except ValueError as e:
            raise TransportError(f"{method} returned invalid JSON") from e

        if not data.get("ok"):
            raise TransportError(f"{method} failed: {data.get('description', 'unknown error')}")
        return data.get("result")

    async def send_message(
        self,
        chat_id: int,
        text: str,
        keyboard: Keyboard | None = None,
        markdown: bool = True,
    ) -> int | None:
        payload = {
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": True,
        }
        markup = inline_markup(keyboard)
        if markup:
            payload["reply_markup"] = markup
        if markdown:
            payload["parse_mode"] = "Markdown"

        try:
            result = await self.call("sendMessage", payload)
            return result.get("message_id") if result else None
        except TransportError as e:
            logger.error("Error sending message to %s: %s", chat_id, e)
            if not markdown or "parse" not in str(e).lower():
                return None

        # Entities failed to parse: resend as plain text
        payload.pop("parse_mode", None)
        payload["text"] = _MARKDOWN_CHARS.sub("", text)
        try:
            result = await self.call("sendMessage", payload)
            return result.get("message_id") if result else None
        except TransportError as e:
            logger.error("Plain-text resend to %s failed: %s", chat_id, e)
            return None

    async def edit_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        keyboard: Keyboard | None = None,
    ) -> None:
        payload = {
            "chat_id": chat_id,
            "message_id": message_id,
            "text": text,
            "parse_mode": "Markdown",
            "disable_web_page_preview": True,
        }
        markup = inline_markup(keyboard)
        if markup:
            payload["reply_markup"] = markup
        try:
            await self.call("editMessageText", payload)
        except TransportError as e:
            raise RenderError(str(e)) from e

    async def delete_message(self, chat_id: int, message_id: int | None) -> None:
        if not message_id:
            return
        try:
            await self.call("deleteMessage", {"chat_id": chat_id, "message_id": message_id})
        except TransportError as e:
            logger.debug("Could not delete message %s: %s", message_id, e)

    async def answer_callback(self, callback_id: str | None) -> None:
        if not callback_id:
            return
        try:
            await self.call("answerCallbackQuery", {"callback_query_id": callback_id})
        except TransportError as e:
            logger.warning("Could not answer callback %s: %s", callback_id, e)

    async def send_location_request(
        self, chat_id: int, text: str, button_text: str
    ) -> int | None:
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": "Markdown",
            "reply_markup": {
                "keyboard": [[{"text": button_text, "request_location": True}]],
                "resize_keyboard": True,
                "one_time_keyboard": True,
            },
        }
        try:
            result = await self.call("sendMessage", payload)
            return result.get("message_id") if result else None
        except TransportError as e:
            logger.error("Error sending location request to %s: %s", chat_id, e)
            return None

    async def set_commands(self) -> None:
        await self.call("setMyCommands", {"commands": BOT_COMMANDS})

    async def set_webhook(self, url: str, secret_token: str | None = None) -> None:
        payload = {"url": url, "allowed_updates": ["message", "callback_query"]}
        if secret_token:
            payload["secret_token"] = secret_token
        await self.call("setWebhook", payload)
        logger.info("Telegram webhook registered")

    async def delete_webhook(self) -> None:
        await self.call("deleteWebhook", {})

    async def get_updates(self, offset: int | None = None, timeout: int = 30) -> list[dict]:
        payload = {"timeout": timeout, "allowed_updates": ["message", "callback_query"]}
        if offset is not None:
            payload["offset"] = offset
        return await self.call("getUpdates", payload) or []
