"""Resolution of client-reported positions into coordinates.

The device's geolocation happens in the browser; the API only receives
the resulting latitude/longitude pair, which may be missing when the
user denied the permission or the fix failed.
"""

from __future__ import annotations

from pydantic import ValidationError

from src.models.geo import Coordinate


class LocationUnavailable(Exception):
    """No usable position was reported by the geolocation source."""


def resolve_location(latitude: float | None, longitude: float | None) -> Coordinate:
    """Build a :class:`Coordinate` from a reported position.

    Raises
    ------
    LocationUnavailable
        Either value is missing or outside the valid range.
    """
    if latitude is None or longitude is None:
        raise LocationUnavailable("Location permission denied or position not reported")
    try:
        return Coordinate(latitude=latitude, longitude=longitude)
    except ValidationError as exc:
        raise LocationUnavailable(f"Invalid position ({latitude}, {longitude})") from exc


def maps_link(latitude: float | None, longitude: float | None) -> str | None:
    """Google Maps link for a reported position, ``None`` when incomplete."""
    if latitude is None or longitude is None:
        return None
    return f"https://maps.google.com/maps?q={latitude},{longitude}"
