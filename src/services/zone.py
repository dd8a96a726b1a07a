"""Safety zone classification.

Buckets the distance to the nearest known police station, hospital or
government office into a coarse three-level zone:

    * ``green``  -- nearest safe place within 1 km
    * ``orange`` -- within 5 km
    * ``red``    -- further than 5 km

Boundaries are inclusive on the safer side: exactly 1.0 km is green and
exactly 5.0 km is orange.  The classifier is a pure function of its
inputs and is re-run whenever the location or the place list changes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from src.models.enums import Zone
from src.models.geo import Coordinate, SafePlace, ZoneStatus
from src.services.places.distance import haversine_meters

GREEN_MAX_KM: Final[float] = 1.0
ORANGE_MAX_KM: Final[float] = 5.0

_MESSAGES: Final[dict[Zone, str]] = {
    Zone.UNKNOWN: "Safety zone unknown",
    Zone.GREEN: "You are in a safe zone",
    Zone.ORANGE: "{distance:.1f}km to safety",
    Zone.RED: "{distance:.1f}km from nearest safe place",
}


def zone_for_distance(distance_km: float) -> Zone:
    if distance_km <= GREEN_MAX_KM:
        return Zone.GREEN
    if distance_km <= ORANGE_MAX_KM:
        return Zone.ORANGE
    return Zone.RED


def zone_message(zone: Zone, distance_km: float) -> str:
    return _MESSAGES[zone].format(distance=distance_km)


def classify_zone(
    user_location: Coordinate | None,
    places: Sequence[SafePlace],
) -> ZoneStatus:
    """Classify the user's exposure from the nearest place in ``places``.

    Places carrying ``distance_meters`` are trusted as-is; a place without
    one is measured from ``user_location``.  Among places at the same
    minimum distance the first one wins.
    """
    if user_location is None or not places:
        return ZoneStatus()

    nearest_place: SafePlace | None = None
    nearest_m = float("inf")

    for place in places:
        distance_m = place.distance_meters
        if distance_m is None:
            distance_m = haversine_meters(user_location, place.coordinate)
            place = place.model_copy(update={"distance_meters": distance_m})
        if distance_m < nearest_m:
            nearest_m = distance_m
            nearest_place = place

    distance_km = nearest_m / 1000
    zone = zone_for_distance(distance_km)

    return ZoneStatus(
        zone=zone,
        nearest_distance_km=distance_km,
        nearest_place=nearest_place,
        message=zone_message(zone, distance_km),
    )
