"""Search log sink."""

from .sink import SearchLogSink, search_completed_payload

__all__ = ["SearchLogSink", "search_completed_payload"]
