"""eBird passthrough routes."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query

from ...app import IApplication
from ...errors import UpstreamFetchError


def _envelope(records) -> dict[str, Any]:
    return {
        "success": True,
        "count": len(records),
        "data": [record.model_dump(by_alias=True, exclude_none=True) for record in records],
    }


def create_observations_router(app: IApplication) -> APIRouter:
    """Create observations router."""
    router = APIRouter(prefix="/api", tags=["observations"])

    @router.get("/observations/{region_code}")
    async def recent_observations(
        region_code: str,
        back: int = Query(14, ge=1, le=30),
        max_results: int = Query(100, ge=1, le=10000),
    ) -> dict:
        """Recent observations in a region."""
        try:
            records = await app.source.get_recent_observations(region_code, back, max_results)
        except UpstreamFetchError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return _envelope(records)

    @router.get("/observations/{region_code}/notable")
    async def notable_observations(
        region_code: str,
        back: int = Query(14, ge=1, le=30),
        max_results: int = Query(100, ge=1, le=10000),
    ) -> dict:
        """Recent notable observations in a region."""
        try:
            records = await app.source.get_notable_observations(region_code, back, max_results)
        except UpstreamFetchError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return _envelope(records)

    @router.get("/observations/{region_code}/species/{species_code}")
    async def species_observations(
        region_code: str,
        species_code: str,
        back: int = Query(14, ge=1, le=30),
    ) -> dict:
        """Recent observations of one species in a region."""
        try:
            records = await app.source.get_species_observations(region_code, species_code, back)
        except UpstreamFetchError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return _envelope(records)

    @router.get("/nearby")
    async def nearby_observations(
        lat: float = Query(..., ge=-90, le=90),
        lng: float = Query(..., ge=-180, le=180),
        dist: int = Query(25, ge=1, le=50),
        back: int = Query(14, ge=1, le=30),
        max_results: int = Query(100, ge=1, le=10000),
    ) -> dict:
        """Recent observations near a point."""
        try:
            records = await app.source.get_nearby_observations(lat, lng, dist, back, max_results)
        except UpstreamFetchError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return _envelope(records)

    # Declared before /hotspots/{region_code} so "nearby" is not taken as a region
    @router.get("/hotspots/nearby")
    async def nearby_hotspots(
        lat: float = Query(..., ge=-90, le=90),
        lng: float = Query(..., ge=-180, le=180),
        dist: int = Query(25, ge=1, le=50),
    ) -> dict:
        """Hotspots near a point."""
        try:
            records = await app.source.get_nearby_hotspots(lat, lng, dist)
        except UpstreamFetchError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return _envelope(records)

    @router.get("/hotspots/{region_code}")
    async def region_hotspots(region_code: str) -> dict:
        """All hotspots in a region."""
        try:
            records = await app.source.get_hotspots(region_code)
        except UpstreamFetchError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return _envelope(records)

    return router
