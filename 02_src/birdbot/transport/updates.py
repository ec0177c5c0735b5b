"""Telegram update payloads and their conversion to inbound events."""

from pydantic import BaseModel, ConfigDict, Field

from ..models import ButtonEvent, CommandEvent, InboundEvent, LocationEvent, TextEvent


class _TelegramModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TelegramUser(_TelegramModel):
    id: int
    first_name: str = ""
    username: str | None = None

    @property
    def display_name(self) -> str:
        return self.username or self.first_name


class Chat(_TelegramModel):
    id: int


class Location(_TelegramModel):
    latitude: float
    longitude: float


class Message(_TelegramModel):
    message_id: int
    chat: Chat
    from_user: TelegramUser | None = Field(default=None, alias="from")
    text: str | None = None
    location: Location | None = None


class CallbackQuery(_TelegramModel):
    id: str
    from_user: TelegramUser | None = Field(default=None, alias="from")
    message: Message | None = None
    data: str | None = None


class Update(_TelegramModel):
    update_id: int
    message: Message | None = None
    callback_query: CallbackQuery | None = None


def parse_command(text: str) -> tuple[str, str] | None:
    """``/name@bot args`` -> ("name", "args"); None for non-command text."""
    if not text or not text.startswith("/"):
        return None
    head, _, args = text[1:].partition(" ")
    name = head.split("@", 1)[0].lower()
    if not name:
        return None
    return name, args.strip()


def update_to_event(update: Update) -> InboundEvent | None:
    """Map a Telegram update to the event the dialog understands."""
    if update.callback_query is not None:
        query = update.callback_query
        if query.message is None:
            return None
        return ButtonEvent(
            chat_id=query.message.chat.id,
            user_name=query.from_user.display_name if query.from_user else "",
            payload=query.data or "",
            message_id=query.message.message_id,
            callback_id=query.id,
        )

    message = update.message
    if message is None:
        return None
    user_name = message.from_user.display_name if message.from_user else ""

    if message.location is not None:
        return LocationEvent(
            chat_id=message.chat.id,
            user_name=user_name,
            latitude=message.location.latitude,
            longitude=message.location.longitude,
        )

    if not message.text:
        return None

    command = parse_command(message.text)
    if command:
        name, args = command
        return CommandEvent(
            chat_id=message.chat.id, user_name=user_name, command=name, args=args
        )
    return TextEvent(chat_id=message.chat.id, user_name=user_name, text=message.text)
