"""Fixed-window per-chat request throttle."""

import time
from dataclasses import dataclass
from typing import Callable

from ..config import RATE_MAX_REQUESTS, RATE_WINDOW_SECONDS


@dataclass
class RateWindow:
    """Request count for one chat inside the current window."""

    count: int
    window_reset_at: float


class RateLimiter:
    """Allows ``max_requests`` per chat per window; windows reset only on expiry."""

    def __init__(
        self,
        window_seconds: float = RATE_WINDOW_SECONDS,
        max_requests: int = RATE_MAX_REQUESTS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._window_seconds = window_seconds
        self._max_requests = max_requests
        self._clock = clock
        self._windows: dict[int, RateWindow] = {}

    def is_limited(self, chat_id: int) -> bool:
        """Record one request for ``chat_id`` and report whether it exceeds the budget."""
        now = self._clock()
        window = self._windows.get(chat_id)

        if window is None or now > window.window_reset_at:
            self._windows[chat_id] = RateWindow(
                count=1, window_reset_at=now + self._window_seconds
            )
            return False

        window.count += 1
        return window.count > self._max_requests

    def window(self, chat_id: int) -> RateWindow | None:
        return self._windows.get(chat_id)

    def reset(self) -> None:
        self._windows.clear()
