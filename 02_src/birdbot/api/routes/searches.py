"""Search log routes."""

from datetime import datetime

from pydantic import BaseModel
from fastapi import APIRouter, Query

from ...app import IApplication


class SearchResponse(BaseModel):
    """Response model for one logged search."""

    id: int | None
    timestamp: datetime
    chat_id: int
    username: str
    command: str
    query: str
    region_code: str | None
    total_count: int
    unique_species: int
    species: list[str]


def create_searches_router(app: IApplication) -> APIRouter:
    """Create search log router."""
    router = APIRouter(prefix="/api", tags=["searches"])

    @router.get("/searches", response_model=list[SearchResponse])
    async def get_searches(
        chat_id: int | None = Query(None, description="Filter by chat"),
        command: str | None = Query(None, description="Filter by search command"),
        limit: int = Query(100, ge=1, le=1000),
    ) -> list[dict]:
        """Recent searches, newest first."""
        records = await app.storage.get_searches(chat_id=chat_id, command=command, limit=limit)
        return [
            {
                "id": record.id,
                "timestamp": record.timestamp,
                "chat_id": record.chat_id,
                "username": record.username,
                "command": record.command,
                "query": record.query,
                "region_code": record.region_code,
                "total_count": record.total_count,
                "unique_species": record.unique_species,
                "species": record.species,
            }
            for record in records
        ]

    return router
