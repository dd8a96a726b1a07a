"""Tests for the haversine great-circle distance."""

from __future__ import annotations

import math

import pytest

from src.models.geo import Coordinate
from src.services.places.distance import EARTH_RADIUS_M, haversine_meters

DELHI = Coordinate(latitude=28.6139, longitude=77.2090)
BENGALURU = Coordinate(latitude=12.9716, longitude=77.5946)
MUMBAI = Coordinate(latitude=19.0760, longitude=72.8777)


class TestHaversine:
    @pytest.mark.parametrize("point", [DELHI, BENGALURU, Coordinate(latitude=-90, longitude=180)])
    def test_same_point_is_zero(self, point: Coordinate) -> None:
        assert haversine_meters(point, point) == 0.0, "distance from a point to itself should be 0"

    def test_symmetric(self) -> None:
        forward = haversine_meters(DELHI, MUMBAI)
        backward = haversine_meters(MUMBAI, DELHI)
        assert forward == pytest.approx(backward, rel=1e-12), "distance should be symmetric"

    def test_meridian_offset_matches_arc_length(self) -> None:
        offset_deg = math.degrees(3200 / EARTH_RADIUS_M)
        north = Coordinate(latitude=BENGALURU.latitude + offset_deg, longitude=BENGALURU.longitude)
        assert haversine_meters(BENGALURU, north) == pytest.approx(3200, abs=0.01)

    def test_one_degree_of_longitude_at_equator(self) -> None:
        a = Coordinate(latitude=0, longitude=0)
        b = Coordinate(latitude=0, longitude=1)
        expected = EARTH_RADIUS_M * math.radians(1)
        assert haversine_meters(a, b) == pytest.approx(expected, rel=1e-12)

    def test_known_city_distance(self) -> None:
        # Delhi to Mumbai is roughly 1150 km as the crow flies.
        assert 1_140_000 < haversine_meters(DELHI, MUMBAI) < 1_160_000

    def test_antipodes(self) -> None:
        a = Coordinate(latitude=0, longitude=0)
        b = Coordinate(latitude=0, longitude=180)
        assert haversine_meters(a, b) == pytest.approx(math.pi * EARTH_RADIUS_M, rel=1e-9)

    def test_antipodes_with_rounding_error(self) -> None:
        # The haversine term rounds to just above 1 for this pair.
        a = Coordinate(latitude=-43.5577, longitude=-28.4859)
        b = Coordinate(latitude=43.5577, longitude=151.5141)
        distance = haversine_meters(a, b)
        assert distance == pytest.approx(math.pi * EARTH_RADIUS_M, rel=1e-9), (
            "antipodal points should be half the circumference apart"
        )
