"""Conversation session state and its snapshot persistence."""

from .context import SessionContext
from .snapshot import SessionSnapshotter
from .stores import ConversationStateStore, PromptRecoveryStore

__all__ = [
    "SessionContext",
    "SessionSnapshotter",
    "ConversationStateStore",
    "PromptRecoveryStore",
]
