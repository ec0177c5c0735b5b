"""SQLite storage for the search log."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..models import SearchRecord


class ISearchLogStorage(Protocol):
    """Persistent search log (SQLite)."""

    async def init(self) -> None:
        """Open the database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    async def save_search(self, record: SearchRecord) -> int:
        """Append a search row; returns its id."""
        ...

    async def get_searches(
        self,
        chat_id: int | None = None,
        command: str | None = None,
        limit: int = 100,
    ) -> list[SearchRecord]:
        """Get search rows (newest first) with optional filters."""
        ...

    async def clear(self) -> None:
        """Delete all rows."""
        ...


class SearchLogStorage:
    """aiosqlite-backed search log."""

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Open the database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def save_search(self, record: SearchRecord) -> int:
        """Append a search row; returns its id."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            INSERT INTO search_log
            (timestamp, chat_id, username, command, query, region_code,
             total_count, unique_species, species_list)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.timestamp.isoformat(),
                record.chat_id,
                record.username,
                record.command,
                record.query,
                record.region_code,
                record.total_count,
                record.unique_species,
                json.dumps(record.species, ensure_ascii=False),
            ),
        )
        await self._conn.commit()
        record.id = cursor.lastrowid
        return cursor.lastrowid

    async def get_searches(
        self,
        chat_id: int | None = None,
        command: str | None = None,
        limit: int = 100,
    ) -> list[SearchRecord]:
        """Get search rows (newest first) with optional filters."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        conditions = []
        params: list = []

        if chat_id is not None:
            conditions.append("chat_id = ?")
            params.append(chat_id)
        if command:
            conditions.append("command = ?")
            params.append(command)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        query = f"""
            SELECT id, timestamp, chat_id, username, command, query,
                   region_code, total_count, species_list
            FROM search_log
            {where_clause}
            ORDER BY timestamp DESC, id DESC
            LIMIT ?
        """
        params.append(limit)

        cursor = await self._conn.execute(query, params)
        rows = await cursor.fetchall()

        return [
            SearchRecord(
                id=row[0],
                timestamp=_parse_timestamp(row[1]),
                chat_id=row[2],
                username=row[3],
                command=row[4],
                query=row[5],
                region_code=row[6],
                total_count=row[7],
                species=json.loads(row[8]),
            )
            for row in rows
        ]

    async def clear(self) -> None:
        """Delete all rows."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute("DELETE FROM search_log")
        await self._conn.commit()


def _parse_timestamp(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)
