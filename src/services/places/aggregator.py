"""Nearby safe-place aggregation.

Fans a location out into one provider query per (category, keyword)
pair, joins on all of them, then merges the answers into a single
deduplicated list ranked by great-circle distance.

Architecture:
    * Queries for one radius attempt run as independent asyncio tasks and
      each returns its own result list; nothing is shared until the join.
    * ``asyncio.wait`` is the join barrier.  It never cancels the tasks it
      waits on, so an abandoned or timed-out attempt lets in-flight
      provider calls finish and simply drops their results.
    * A failed keyword query contributes nothing.  Only an attempt in
      which every query failed escalates to ``ProviderUnavailable``.
    * An empty first attempt is retried once at a fixed 50 km radius.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from typing import Final

import structlog

from src.models.enums import PlaceCategory
from src.models.geo import Coordinate, NearbySearchResult, PlaceCandidate, SafePlace
from src.services.places.distance import haversine_meters
from src.services.places.errors import ProviderUnavailable
from src.services.places.provider import PlacesProvider

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Search constants
# ---------------------------------------------------------------------------

SEARCH_KEYWORDS: Final[dict[PlaceCategory, tuple[str, ...]]] = {
    PlaceCategory.POLICE: ("police station", "police"),
    PlaceCategory.HOSPITAL: ("hospital", "emergency", "medical center"),
    PlaceCategory.GOVERNMENT: ("government office", "collectorate", "fire station"),
}

DEFAULT_RADIUS_M: Final[int] = 20_000
FALLBACK_RADIUS_M: Final[int] = 50_000
MAX_RESULTS: Final[int] = 8
DEFAULT_ATTEMPT_TIMEOUT_S: Final[float] = 10.0


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


def rank_places(
    center: Coordinate,
    batches: Iterable[tuple[PlaceCategory, Sequence[PlaceCandidate]]],
) -> list[SafePlace]:
    """Merge query batches into a deduplicated list sorted by distance.

    Batches are consumed in order and the first occurrence of a provider
    id wins, including its category.  The sort is stable, so places at
    equal distance keep their merge order.
    """
    seen: set[str] = set()
    merged: list[SafePlace] = []

    for category, candidates in batches:
        for candidate in candidates:
            if candidate.id in seen:
                continue
            seen.add(candidate.id)
            merged.append(
                SafePlace(
                    id=candidate.id,
                    name=candidate.name,
                    category=category,
                    address=candidate.address,
                    coordinate=candidate.coordinate,
                    distance_meters=haversine_meters(center, candidate.coordinate),
                    rating=candidate.rating,
                    open_now=candidate.open_now,
                )
            )

    merged.sort(key=lambda place: place.distance_meters)
    return merged


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------


class PlaceSearchAggregator:
    """Finds the nearest police stations, hospitals and government offices.

    The aggregator holds no per-search state; it can be shared across
    requests.

    Usage::

        aggregator = PlaceSearchAggregator(GooglePlacesProvider(api_key))
        result = await aggregator.find_nearby(
            Coordinate(latitude=28.6139, longitude=77.2090)
        )
        result.places      # <= 8 SafePlace, nearest first
        result.radius_km   # 20 or 50

    Parameters
    ----------
    provider:
        The places source.  ``None`` means no provider is configured and
        every search raises :class:`ProviderUnavailable`.
    attempt_timeout:
        Upper bound in seconds on one radius attempt (all of its queries).
    """

    __slots__ = ("_attempt_timeout", "_provider")

    def __init__(
        self,
        provider: PlacesProvider | None,
        *,
        attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT_S,
    ) -> None:
        self._provider = provider
        self._attempt_timeout = attempt_timeout

    @property
    def is_configured(self) -> bool:
        return self._provider is not None

    async def find_nearby(
        self,
        center: Coordinate,
        initial_radius_meters: int = DEFAULT_RADIUS_M,
    ) -> NearbySearchResult:
        """Return up to eight safe places nearest to ``center``.

        Raises
        ------
        ProviderUnavailable
            No provider is configured, every query of an attempt failed,
            or the fallback attempt timed out.
        """
        provider = self._provider
        if provider is None:
            raise ProviderUnavailable("No places provider is configured")

        radius = initial_radius_meters
        places = await self._search_radius(
            provider, center, radius, is_fallback=False
        )

        if not places:
            logger.info(
                "aggregator.fallback_radius",
                initial_radius_m=radius,
                fallback_radius_m=FALLBACK_RADIUS_M,
            )
            radius = FALLBACK_RADIUS_M
            places = await self._search_radius(
                provider, center, radius, is_fallback=True
            )

        nearest = places[:MAX_RESULTS]
        logger.info(
            "aggregator.find_nearby",
            latitude=center.latitude,
            longitude=center.longitude,
            radius_m=radius,
            unique_places=len(places),
            returned=len(nearest),
        )
        return NearbySearchResult(places=nearest, radius_meters=radius)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _search_radius(
        self,
        provider: PlacesProvider,
        center: Coordinate,
        radius_meters: int,
        *,
        is_fallback: bool,
    ) -> list[SafePlace]:
        """Run one radius attempt: fan out, join, merge."""
        queries = [
            (category, keyword)
            for category, keywords in SEARCH_KEYWORDS.items()
            for keyword in keywords
        ]
        tasks = [
            asyncio.create_task(_run_query(provider, center, radius_meters, keyword))
            for _, keyword in queries
        ]

        _, pending = await asyncio.wait(tasks, timeout=self._attempt_timeout)

        if pending:
            logger.warning(
                "aggregator.attempt_timed_out",
                radius_m=radius_meters,
                pending_queries=len(pending),
                timeout_s=self._attempt_timeout,
            )
            if is_fallback:
                raise ProviderUnavailable(
                    f"Places search timed out after {self._attempt_timeout:g}s"
                )
            return []

        outcomes = [task.result() for task in tasks]
        if all(outcome is None for outcome in outcomes):
            raise ProviderUnavailable("Every places query failed")

        return rank_places(
            center,
            (
                (category, outcome)
                for (category, _), outcome in zip(queries, outcomes, strict=True)
                if outcome is not None
            ),
        )


async def _run_query(
    provider: PlacesProvider,
    center: Coordinate,
    radius_meters: int,
    keyword: str,
) -> list[PlaceCandidate] | None:
    """Run a single keyword query; ``None`` marks a failed query."""
    try:
        return await provider.search(center, radius_meters, keyword)
    except Exception:
        logger.warning(
            "aggregator.query_failed",
            keyword=keyword,
            radius_m=radius_meters,
            exc_info=True,
        )
        return None
