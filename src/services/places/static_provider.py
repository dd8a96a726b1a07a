"""In-memory places directory.

Serves deployments without a maps API key and gives tests a
deterministic provider.  Entries are matched against a keyword when the
keyword appears in the place name or in its ``keywords`` tags, and
against a radius by haversine distance from the query center.

Fixture file format (JSON list)::

    [
      {"id": "P1", "name": "Connaught Place Police Station",
       "address": "Block C, Connaught Place", "latitude": 28.6315,
       "longitude": 77.2167, "keywords": ["police", "police station"]}
    ]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
import structlog
from pydantic import BaseModel, Field

from src.models.geo import ADDRESS_UNAVAILABLE, Coordinate, PlaceCandidate
from src.services.places.distance import haversine_meters

logger = structlog.get_logger(__name__)


class DirectoryEntry(BaseModel):
    id: str
    name: str
    address: str = ADDRESS_UNAVAILABLE
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    keywords: list[str] = Field(default_factory=list)
    rating: float | None = None
    open_now: bool | None = None

    def matches(self, keyword: str) -> bool:
        needle = keyword.lower().strip()
        if needle in self.name.lower():
            return True
        return any(needle == tag.lower().strip() for tag in self.keywords)

    def to_candidate(self) -> PlaceCandidate:
        return PlaceCandidate(
            id=self.id,
            name=self.name,
            address=self.address,
            coordinate=Coordinate(latitude=self.latitude, longitude=self.longitude),
            rating=self.rating,
            open_now=self.open_now,
        )


class StaticPlacesProvider:
    """PlacesProvider over a fixed list of directory entries."""

    __slots__ = ("_entries",)

    def __init__(self, entries: list[DirectoryEntry]) -> None:
        self._entries = list(entries)

    @classmethod
    def from_file(cls, path: str | Path) -> StaticPlacesProvider:
        raw: list[dict[str, Any]] = orjson.loads(Path(path).read_bytes())
        entries = [DirectoryEntry.model_validate(item) for item in raw]
        logger.info("places.static_directory_loaded", path=str(path), entries=len(entries))
        return cls(entries)

    @property
    def size(self) -> int:
        return len(self._entries)

    async def search(
        self,
        center: Coordinate,
        radius_meters: int,
        keyword: str,
    ) -> list[PlaceCandidate]:
        results: list[PlaceCandidate] = []
        for entry in self._entries:
            if not entry.matches(keyword):
                continue
            candidate = entry.to_candidate()
            if haversine_meters(center, candidate.coordinate) <= radius_meters:
                results.append(candidate)
        return results
