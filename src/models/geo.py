"""Geospatial value types shared by the places aggregator and zone classifier."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, Field, computed_field

from src.models.enums import PlaceCategory, Zone

ADDRESS_UNAVAILABLE: Final[str] = "Address not available"


class Coordinate(BaseModel):
    """An immutable latitude/longitude pair in decimal degrees."""

    model_config = {"frozen": True}

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class PlaceCandidate(BaseModel):
    """A single result as returned by a places provider, before ranking."""

    id: str = Field(..., min_length=1)
    name: str
    address: str = ADDRESS_UNAVAILABLE
    coordinate: Coordinate
    rating: float | None = None
    open_now: bool | None = None


class SafePlace(BaseModel):
    """A police station, hospital or government office near a query center.

    ``distance_meters`` is relative to the center of the search that
    produced the place and is recomputed on every search.
    """

    id: str = Field(..., min_length=1)
    name: str
    category: PlaceCategory
    address: str = ADDRESS_UNAVAILABLE
    coordinate: Coordinate
    distance_meters: float | None = Field(default=None, ge=0.0)
    rating: float | None = None
    open_now: bool | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def distance_km(self) -> float | None:
        if self.distance_meters is None:
            return None
        return round(self.distance_meters / 1000, 3)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def distance_label(self) -> str | None:
        if self.distance_meters is None:
            return None
        if self.distance_meters < 1000:
            return f"{round(self.distance_meters)}m away"
        return f"{self.distance_meters / 1000:.1f}km away"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def directions_url(self) -> str:
        return (
            "https://www.google.com/maps/dir/?api=1"
            f"&destination={self.coordinate.latitude},{self.coordinate.longitude}"
            f"&destination_place_id={self.id}"
        )


class ZoneStatus(BaseModel):
    """Safety zone verdict derived from the nearest known safe place."""

    zone: Zone = Zone.UNKNOWN
    nearest_distance_km: float = 0.0
    nearest_place: SafePlace | None = None
    message: str = "Safety zone unknown"


class NearbySearchResult(BaseModel):
    """Ranked places plus the search radius that produced them."""

    places: list[SafePlace] = Field(default_factory=list)
    radius_meters: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def radius_km(self) -> int:
        return self.radius_meters // 1000
