"""Error taxonomy shared by the dialog, the fetch layer and persistence."""

from datetime import date


class BirdBotError(Exception):
    """Base class for all bot-level failures."""


class UserInputError(BirdBotError):
    """Raised when user-supplied text cannot be interpreted (bad date, missing location)."""


class RangeLimitError(UserInputError):
    """Raised when a custom date range starts before the upstream 30-day window."""

    def __init__(self, earliest: date, latest: date):
        self.earliest = earliest
        self.latest = latest
        super().__init__(
            "eBird API only provides data for the last 30 days. "
            f"Available range: {earliest:%d/%m/%Y} to {latest:%d/%m/%Y}"
        )


class InvalidPageError(UserInputError):
    """Raised when a page index falls outside the cached result set."""

    def __init__(self, page: int, total_pages: int):
        self.page = page
        self.total_pages = total_pages
        super().__init__(
            f"Invalid page number. Please enter a number between 1 and {total_pages}."
        )


class UpstreamFetchError(BirdBotError):
    """Raised when the observation source fails (HTTP error, timeout, bad payload)."""


class TransportError(BirdBotError):
    """Raised when the messaging transport rejects a call."""


class RenderError(TransportError):
    """Raised when an existing message cannot be edited in place."""


class PersistenceError(BirdBotError):
    """Raised when the session snapshot cannot be read or written."""


class RateLimitExceeded(BirdBotError):
    """Raised when a chat exceeds its request budget for the current window."""

    def __init__(self, chat_id: int):
        self.chat_id = chat_id
        super().__init__(f"Rate limit exceeded for chat {chat_id}")
