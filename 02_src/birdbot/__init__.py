"""Bird sighting Telegram bot backed by the eBird API."""

__version__ = "0.1.0"
