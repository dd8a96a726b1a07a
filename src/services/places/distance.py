"""Great-circle distance on a spherical Earth."""

from __future__ import annotations

import math
from typing import Final

from src.models.geo import Coordinate

EARTH_RADIUS_M: Final[float] = 6_371_000.0


def haversine_meters(origin: Coordinate, destination: Coordinate) -> float:
    """Calculate the great-circle distance between two points on Earth.

    Uses the Haversine formula. Returns distance in metres.
    """
    phi1 = math.radians(origin.latitude)
    phi2 = math.radians(destination.latitude)
    dphi = math.radians(destination.latitude - origin.latitude)
    dlambda = math.radians(destination.longitude - origin.longitude)

    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    # Rounding can push ``a`` just past 1 for antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c
