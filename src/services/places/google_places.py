"""Google Places Nearby Search client.

API documentation:
https://developers.google.com/maps/documentation/places/web-service/search-nearby

Only the fields needed to rank safe places are read from the response:
``place_id``, ``name``, ``vicinity``, ``geometry.location``, ``rating``
and ``opening_hours.open_now``.
"""

from __future__ import annotations

from typing import Any, Final

import httpx
import structlog

from src.models.geo import ADDRESS_UNAVAILABLE, Coordinate, PlaceCandidate
from src.services.places.errors import PlaceQueryError, ProviderUnavailable

logger = structlog.get_logger(__name__)

# Nearby Search rejects radii above 50 km.
_MAX_RADIUS_M: Final[int] = 50_000


class GooglePlacesProvider:
    """Client for the Google Places Nearby Search JSON API.

    Parameters
    ----------
    api_key:
        Google Maps Platform key with the Places API enabled.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional httpx transport, used to inject a mock in tests.
    """

    BASE_URL = "https://maps.googleapis.com"
    _SEARCH_PATH = "/maps/api/place/nearbysearch/json"

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ProviderUnavailable("Google Maps API key is not configured")
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # PlacesProvider interface
    # ------------------------------------------------------------------

    async def search(
        self,
        center: Coordinate,
        radius_meters: int,
        keyword: str,
    ) -> list[PlaceCandidate]:
        params = {
            "location": f"{center.latitude},{center.longitude}",
            "radius": str(min(radius_meters, _MAX_RADIUS_M)),
            "keyword": keyword,
            "key": self._api_key,
        }

        try:
            response = await self._client.get(self._SEARCH_PATH, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise PlaceQueryError(f"Nearby search for {keyword!r} failed: {exc}") from exc

        status = data.get("status", "UNKNOWN_ERROR")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            raise PlaceQueryError(
                f"Nearby search for {keyword!r} returned {status}: "
                f"{data.get('error_message', '')}".rstrip(": ")
            )

        places: list[PlaceCandidate] = []
        for raw in data.get("results", []):
            candidate = _parse_result(raw)
            if candidate is not None:
                places.append(candidate)

        logger.debug(
            "places.google_search",
            keyword=keyword,
            radius_m=radius_meters,
            results_count=len(places),
        )
        return places


def _parse_result(raw: dict[str, Any]) -> PlaceCandidate | None:
    """Convert one Nearby Search result, skipping entries without a position."""
    location = raw.get("geometry", {}).get("location", {})
    lat = location.get("lat")
    lng = location.get("lng")
    place_id = raw.get("place_id")
    if lat is None or lng is None or not place_id:
        return None

    return PlaceCandidate(
        id=place_id,
        name=raw.get("name") or "Unknown",
        address=raw.get("vicinity") or ADDRESS_UNAVAILABLE,
        coordinate=Coordinate(latitude=lat, longitude=lng),
        rating=raw.get("rating"),
        open_now=raw.get("opening_hours", {}).get("open_now"),
    )
