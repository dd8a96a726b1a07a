"""Places provider interface.

Any source of nearby places (a maps API, a static directory, a test
fixture) can back the aggregator as long as it implements ``search``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from src.models.geo import Coordinate, PlaceCandidate


@runtime_checkable
class PlacesProvider(Protocol):
    """Async keyword search around a point."""

    async def search(
        self,
        center: Coordinate,
        radius_meters: int,
        keyword: str,
    ) -> list[PlaceCandidate]: ...
