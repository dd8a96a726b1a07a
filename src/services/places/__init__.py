"""Nearby safe-place search: providers, distance and aggregation."""

from __future__ import annotations

from src.services.places.aggregator import (
    DEFAULT_RADIUS_M,
    FALLBACK_RADIUS_M,
    MAX_RESULTS,
    SEARCH_KEYWORDS,
    PlaceSearchAggregator,
    rank_places,
)
from src.services.places.distance import EARTH_RADIUS_M, haversine_meters
from src.services.places.errors import PlaceQueryError, ProviderUnavailable
from src.services.places.google_places import GooglePlacesProvider
from src.services.places.provider import PlacesProvider
from src.services.places.static_provider import DirectoryEntry, StaticPlacesProvider

__all__ = [
    "DEFAULT_RADIUS_M",
    "DirectoryEntry",
    "EARTH_RADIUS_M",
    "FALLBACK_RADIUS_M",
    "GooglePlacesProvider",
    "MAX_RESULTS",
    "PlaceQueryError",
    "PlaceSearchAggregator",
    "PlacesProvider",
    "ProviderUnavailable",
    "SEARCH_KEYWORDS",
    "StaticPlacesProvider",
    "haversine_meters",
    "rank_places",
]
