"""Per-chat cache of the latest result set for each query type."""

from ..models import CachedResultSet, QueryType


class ResultCache:
    """Holds up to one result set per (query type, chat).

    Entries are replaced by the next search of the same kind and are never
    persisted.
    """

    def __init__(self):
        self._entries: dict[tuple[QueryType, int], CachedResultSet] = {}

    def put(self, query_type: QueryType, chat_id: int, result_set: CachedResultSet) -> None:
        self._entries[(QueryType(query_type), chat_id)] = result_set

    def get(self, query_type: QueryType, chat_id: int) -> CachedResultSet | None:
        return self._entries.get((QueryType(query_type), chat_id))

    def delete(self, query_type: QueryType, chat_id: int) -> None:
        self._entries.pop((QueryType(query_type), chat_id), None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
