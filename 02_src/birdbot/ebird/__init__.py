"""eBird API client and region lookup."""

from .client import EBirdClient, IObservationSource, rank_hotspots, rank_species
from .regions import POPULAR_LOCATIONS, to_region_code

__all__ = [
    "EBirdClient",
    "IObservationSource",
    "rank_hotspots",
    "rank_species",
    "POPULAR_LOCATIONS",
    "to_region_code",
]
