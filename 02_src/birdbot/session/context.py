"""Per-process session context passed to the dialog orchestrator."""

from dataclasses import dataclass, field

from ..ratelimit import RateLimiter
from ..results import ResultCache
from .stores import ConversationStateStore, PromptRecoveryStore


@dataclass
class SessionContext:
    """All per-chat state the dialog reads and writes."""

    states: ConversationStateStore = field(default_factory=ConversationStateStore)
    prompts: PromptRecoveryStore = field(default_factory=PromptRecoveryStore)
    results: ResultCache = field(default_factory=ResultCache)
    rate_limiter: RateLimiter = field(default_factory=RateLimiter)
    user_names: dict[int, str] = field(default_factory=dict)

    def remember_user(self, chat_id: int, user_name: str | None) -> None:
        if user_name:
            self.user_names[chat_id] = user_name

    def user_name(self, chat_id: int) -> str:
        return self.user_names.get(chat_id, "unknown")
