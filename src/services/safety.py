"""Combines nearby-place search and zone classification for one location.

Failures never escape as exceptions: an unknown location or an
unavailable provider degrade to an ``unknown`` zone with an error flag
the client can turn into a retry button.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from pydantic import BaseModel, Field

from src.models.geo import Coordinate, SafePlace, ZoneStatus
from src.services.location import LocationUnavailable, resolve_location
from src.services.places.aggregator import PlaceSearchAggregator
from src.services.places.errors import ProviderUnavailable
from src.services.zone import classify_zone

logger = structlog.get_logger(__name__)


class SafetyAssessment(BaseModel):
    """Everything the dashboard needs to render the safety panel."""

    location: Coordinate | None = None
    places: list[SafePlace] = Field(default_factory=list)
    radius_km: int | None = None
    zone_status: ZoneStatus = Field(default_factory=ZoneStatus)
    error: str | None = None
    retryable: bool = False


class SafetyAssessmentService:
    """Facade over :class:`PlaceSearchAggregator` and :func:`classify_zone`."""

    __slots__ = ("_aggregator", "_initial_radius_m")

    def __init__(
        self,
        aggregator: PlaceSearchAggregator,
        *,
        initial_radius_m: int = 20_000,
    ) -> None:
        self._aggregator = aggregator
        self._initial_radius_m = initial_radius_m

    @property
    def provider_configured(self) -> bool:
        return self._aggregator.is_configured

    async def assess(
        self,
        latitude: float | None,
        longitude: float | None,
    ) -> SafetyAssessment:
        try:
            location = resolve_location(latitude, longitude)
        except LocationUnavailable as exc:
            logger.info("safety.location_unavailable", reason=str(exc))
            return SafetyAssessment(error=str(exc))

        try:
            result = await self._aggregator.find_nearby(location, self._initial_radius_m)
        except ProviderUnavailable as exc:
            logger.warning("safety.provider_unavailable", reason=str(exc))
            return SafetyAssessment(
                location=location,
                error="Unable to fetch nearby places. Please try again.",
                retryable=True,
            )

        return SafetyAssessment(
            location=location,
            places=result.places,
            radius_km=result.radius_km,
            zone_status=classify_zone(location, result.places),
        )

    @staticmethod
    def classify(
        latitude: float | None,
        longitude: float | None,
        places: Sequence[SafePlace],
    ) -> ZoneStatus:
        """Classify a caller-held place list against a reported position."""
        try:
            location = resolve_location(latitude, longitude)
        except LocationUnavailable:
            return ZoneStatus()
        return classify_zone(location, places)
