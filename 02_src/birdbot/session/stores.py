"""Per-chat conversation state and prompt recovery maps."""

from typing import Generic, Iterator, TypeVar

from ..models import ConversationState, PromptRecord

T = TypeVar("T")


class _ChatMap(Generic[T]):
    """Process-local map keyed by chat id."""

    def __init__(self):
        self._entries: dict[int, T] = {}

    def get(self, chat_id: int) -> T | None:
        return self._entries.get(chat_id)

    def set(self, chat_id: int, value: T) -> None:
        self._entries[chat_id] = value

    def delete(self, chat_id: int) -> None:
        self._entries.pop(chat_id, None)

    def snapshot(self) -> dict[int, T]:
        return dict(self._entries)

    def load(self, entries: dict[int, T]) -> None:
        """Replace the whole map, used when restoring a snapshot."""
        self._entries = dict(entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, chat_id: int) -> bool:
        return chat_id in self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)


class ConversationStateStore(_ChatMap[ConversationState]):
    """At most one conversation step per chat."""


class PromptRecoveryStore(_ChatMap[PromptRecord]):
    """Last re-issuable prompt per chat."""
