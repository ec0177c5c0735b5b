"""Async eBird API 2.0 client."""

import os
import re
from typing import Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from ..config import EBIRD_BASE_URL, UPSTREAM_MAX_RESULTS
from ..errors import UpstreamFetchError
from ..logging_config import get_logger
from ..models import Hotspot, Observation, SpeciesMatch

logger = get_logger(__name__)

_OBSERVATIONS = TypeAdapter(list[Observation])
_HOTSPOTS = TypeAdapter(list[Hotspot])
_SPECIES = TypeAdapter(list[SpeciesMatch])

# Words too common in hotspot names to be useful when matching
_FILLER_WORDS = {"the", "a", "an", "at", "in", "park", "garden", "gardens"}
_APOSTROPHES = re.compile(r"['’]")


class IObservationSource(Protocol):
    """Everything the dialog needs from the sightings backend."""

    async def get_recent_observations(
        self, region_code: str, back: int = 14, max_results: int = UPSTREAM_MAX_RESULTS
    ) -> list[Observation]:
        """Recent observations in a region."""
        ...

    async def get_notable_observations(
        self, region_code: str, back: int = 14, max_results: int = UPSTREAM_MAX_RESULTS
    ) -> list[Observation]:
        """Recent notable (rare/unusual) observations in a region."""
        ...

    async def get_hotspot_observations(
        self, loc_id: str, back: int = 14, max_results: int = UPSTREAM_MAX_RESULTS
    ) -> list[Observation]:
        """Recent observations at one hotspot."""
        ...

    async def get_species_observations(
        self, region_code: str, species_code: str, back: int = 14
    ) -> list[Observation]:
        """Recent observations of one species in a region or hotspot."""
        ...

    async def get_nearby_observations(
        self,
        lat: float,
        lng: float,
        dist: int = 25,
        back: int = 14,
        max_results: int = UPSTREAM_MAX_RESULTS,
    ) -> list[Observation]:
        """Recent observations within ``dist`` km of a point."""
        ...

    async def get_hotspots(self, region_code: str) -> list[Hotspot]:
        """All hotspots in a region."""
        ...

    async def get_nearby_hotspots(
        self, lat: float, lng: float, dist: int = 25
    ) -> list[Hotspot]:
        """Hotspots within ``dist`` km of a point."""
        ...

    async def get_popular_hotspots(self, region_code: str, limit: int = 10) -> list[Hotspot]:
        """Hotspots in a region, most species first."""
        ...

    async def search_hotspots_by_name(
        self, region_code: str, query: str, max_results: int = 10
    ) -> list[Hotspot]:
        """Hotspots in a region whose name matches ``query``."""
        ...

    async def search_species_by_name(self, query: str) -> list[SpeciesMatch]:
        """Taxonomy entries whose common or scientific name contains ``query``."""
        ...


class EBirdClient:
    """eBird API client over httpx.

    Every transport, HTTP and payload failure surfaces as UpstreamFetchError.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key or os.getenv("EBIRD_API_KEY")
        if not self._api_key:
            raise ValueError("EBIRD_API_KEY not set")
        self._base_url = base_url or os.getenv("EBIRD_BASE_URL", EBIRD_BASE_URL)
        self._client = http_client or httpx.AsyncClient(
            base_url=self._base_url,
            headers={"X-eBirdApiToken": self._api_key},
            timeout=timeout,
        )
        self._owns_client = http_client is None
        self._taxonomy: list[SpeciesMatch] | None = None

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, path: str, params: dict | None = None):
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "eBird request failed",
                extra={
                    "context": {
                        "path": path,
                        "status": e.response.status_code,
                        "body": e.response.text[:500],
                    }
                },
            )
            raise UpstreamFetchError(
                f"eBird {path} returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("eBird request error on %s: %s", path, e)
            raise UpstreamFetchError(f"eBird {path} unreachable: {e}") from e
        except ValueError as e:
            raise UpstreamFetchError(f"eBird {path} returned invalid JSON") from e

    @staticmethod
    def _validate(adapter: TypeAdapter, data, path: str):
        try:
            return adapter.validate_python(data or [])
        except ValidationError as e:
            raise UpstreamFetchError(f"eBird {path} returned unexpected data") from e

    async def _observations(self, path: str, params: dict) -> list[Observation]:
        return self._validate(_OBSERVATIONS, await self._get(path, params), path)

    async def get_recent_observations(
        self, region_code: str, back: int = 14, max_results: int = UPSTREAM_MAX_RESULTS
    ) -> list[Observation]:
        region_code = region_code.strip().upper()
        logger.info("Fetching observations for region %s", region_code)
        return await self._observations(
            f"/data/obs/{region_code}/recent",
            {"back": back, "maxResults": max_results},
        )

    async def get_notable_observations(
        self, region_code: str, back: int = 14, max_results: int = UPSTREAM_MAX_RESULTS
    ) -> list[Observation]:
        return await self._observations(
            f"/data/obs/{region_code}/recent/notable",
            {"back": back, "maxResults": max_results, "detail": "full"},
        )

    async def get_hotspot_observations(
        self, loc_id: str, back: int = 14, max_results: int = UPSTREAM_MAX_RESULTS
    ) -> list[Observation]:
        logger.info("Fetching observations for hotspot %s", loc_id)
        return await self._observations(
            f"/data/obs/{loc_id}/recent",
            {"back": back, "maxResults": max_results},
        )

    async def get_species_observations(
        self, region_code: str, species_code: str, back: int = 14
    ) -> list[Observation]:
        return await self._observations(
            f"/data/obs/{region_code}/recent/{species_code}", {"back": back}
        )

    async def get_nearby_observations(
        self,
        lat: float,
        lng: float,
        dist: int = 25,
        back: int = 14,
        max_results: int = UPSTREAM_MAX_RESULTS,
    ) -> list[Observation]:
        return await self._observations(
            "/data/obs/geo/recent",
            {"lat": lat, "lng": lng, "dist": dist, "back": back, "maxResults": max_results},
        )

    async def get_hotspots(self, region_code: str) -> list[Hotspot]:
        path = f"/ref/hotspot/{region_code}"
        # Without fmt=json this endpoint answers in CSV
        return self._validate(_HOTSPOTS, await self._get(path, {"fmt": "json"}), path)

    async def get_nearby_hotspots(
        self, lat: float, lng: float, dist: int = 25
    ) -> list[Hotspot]:
        path = "/ref/hotspot/geo"
        data = await self._get(path, {"lat": lat, "lng": lng, "dist": dist, "fmt": "json"})
        return self._validate(_HOTSPOTS, data, path)

    async def get_popular_hotspots(self, region_code: str, limit: int = 10) -> list[Hotspot]:
        hotspots = await self.get_hotspots(region_code)
        hotspots.sort(key=lambda h: h.num_species_all_time or 0, reverse=True)
        return hotspots[:limit]

    async def search_hotspots_by_name(
        self, region_code: str, query: str, max_results: int = 10
    ) -> list[Hotspot]:
        hotspots = await self.get_hotspots(region_code)
        return rank_hotspots(hotspots, query)[:max_results]

    async def _load_taxonomy(self) -> list[SpeciesMatch]:
        if self._taxonomy is None:
            path = "/ref/taxonomy/ebird"
            data = await self._get(path, {"fmt": "json", "cat": "species"})
            self._taxonomy = self._validate(_SPECIES, data, path)
            logger.info("Taxonomy loaded: %d species", len(self._taxonomy))
        return self._taxonomy

    async def search_species_by_name(self, query: str) -> list[SpeciesMatch]:
        taxonomy = await self._load_taxonomy()
        return rank_species(taxonomy, query)[:10]


def rank_hotspots(hotspots: list[Hotspot], query: str) -> list[Hotspot]:
    """Filter hotspots matching ``query`` and order best match first.

    A hotspot matches when its name contains the whole query, or at least
    half of the query's significant words. Ranking: exact name, prefix,
    contains, then species count.
    """
    query_lower = query.lower().strip()
    words = [
        word
        for word in _APOSTROPHES.sub("", query_lower).split()
        if word not in _FILLER_WORDS
    ]
    needed = -(-len(words) // 2)  # ceil

    def matches(hotspot: Hotspot) -> bool:
        name = _APOSTROPHES.sub("", hotspot.loc_name.lower())
        if query_lower in name:
            return True
        if words:
            return sum(1 for word in words if word in name) >= needed
        return False

    def score(hotspot: Hotspot):
        name = hotspot.loc_name.lower()
        return (
            name != query_lower,
            not name.startswith(query_lower),
            query_lower not in name,
            -(hotspot.num_species_all_time or 0),
        )

    return sorted((h for h in hotspots if matches(h)), key=score)


def rank_species(taxonomy: list[SpeciesMatch], query: str) -> list[SpeciesMatch]:
    """Species whose names contain ``query``; names starting with it come first."""
    query_lower = query.lower().strip()
    if not query_lower:
        return []
    found = [
        species
        for species in taxonomy
        if query_lower in species.common_name.lower()
        or query_lower in species.scientific_name.lower()
    ]
    found.sort(
        key=lambda s: (not s.common_name.lower().startswith(query_lower), s.common_name.lower())
    )
    return found
