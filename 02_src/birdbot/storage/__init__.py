"""Storage module."""

from .storage import ISearchLogStorage, SearchLogStorage

__all__ = ["ISearchLogStorage", "SearchLogStorage"]
