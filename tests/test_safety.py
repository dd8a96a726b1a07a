"""Tests for the safety assessment facade and location resolution."""

from __future__ import annotations

import pytest

from src.models.enums import PlaceCategory, Zone
from src.models.geo import Coordinate, PlaceCandidate, SafePlace
from src.services.location import LocationUnavailable, maps_link, resolve_location
from src.services.places.aggregator import PlaceSearchAggregator
from src.services.safety import SafetyAssessmentService


class OnePlaceProvider:
    """Returns a single police station 500 m east of the query for "police"."""

    async def search(self, center, radius_meters, keyword):
        if keyword != "police":
            return []
        return [
            PlaceCandidate(
                id="P500",
                name="Koramangala Police Station",
                address="80 Feet Road",
                coordinate=Coordinate(latitude=center.latitude, longitude=center.longitude + 0.0046),
            )
        ]


class BrokenProvider:
    async def search(self, center, radius_meters, keyword):
        raise ConnectionError("places API unreachable")


class TestResolveLocation:
    def test_valid(self) -> None:
        assert resolve_location(12.97, 77.59) == Coordinate(latitude=12.97, longitude=77.59)

    @pytest.mark.parametrize(("lat", "lon"), [(None, 77.0), (12.0, None), (None, None)])
    def test_missing(self, lat, lon) -> None:
        with pytest.raises(LocationUnavailable):
            resolve_location(lat, lon)

    def test_out_of_range(self) -> None:
        with pytest.raises(LocationUnavailable):
            resolve_location(91.0, 0.0)

    def test_maps_link(self) -> None:
        assert maps_link(12.5, 77.25) == "https://maps.google.com/maps?q=12.5,77.25"
        assert maps_link(None, 77.25) is None


class TestSafetyAssessmentService:
    @pytest.mark.asyncio
    async def test_assess_returns_places_and_zone(self) -> None:
        service = SafetyAssessmentService(PlaceSearchAggregator(OnePlaceProvider()))
        assessment = await service.assess(12.9352, 77.6245)

        assert assessment.error is None
        assert assessment.radius_km == 20
        assert [p.id for p in assessment.places] == ["P500"]
        assert assessment.zone_status.zone == Zone.GREEN
        assert assessment.zone_status.nearest_place is not None
        assert assessment.zone_status.nearest_place.category == PlaceCategory.POLICE

    @pytest.mark.asyncio
    async def test_missing_location_degrades_to_unknown(self) -> None:
        service = SafetyAssessmentService(PlaceSearchAggregator(OnePlaceProvider()))
        assessment = await service.assess(None, None)

        assert assessment.zone_status.zone == Zone.UNKNOWN
        assert assessment.places == []
        assert assessment.error is not None
        assert assessment.retryable is False

    @pytest.mark.asyncio
    async def test_provider_failure_sets_retry_flag(self) -> None:
        service = SafetyAssessmentService(PlaceSearchAggregator(BrokenProvider()))
        assessment = await service.assess(12.9352, 77.6245)

        assert assessment.retryable is True
        assert assessment.places == []
        assert assessment.zone_status.zone == Zone.UNKNOWN
        assert assessment.location == Coordinate(latitude=12.9352, longitude=77.6245)

    @pytest.mark.asyncio
    async def test_unconfigured_provider(self) -> None:
        service = SafetyAssessmentService(PlaceSearchAggregator(None))
        assert service.provider_configured is False
        assessment = await service.assess(12.9352, 77.6245)
        assert assessment.retryable is True

    def test_classify_without_location(self) -> None:
        place = SafePlace(
            id="X",
            name="X",
            category=PlaceCategory.HOSPITAL,
            coordinate=Coordinate(latitude=0, longitude=0),
            distance_meters=10.0,
        )
        assert SafetyAssessmentService.classify(None, None, [place]).zone == Zone.UNKNOWN
        assert SafetyAssessmentService.classify(0.0, 0.0, [place]).zone == Zone.GREEN
