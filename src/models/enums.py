from __future__ import annotations

from enum import StrEnum


class PlaceCategory(StrEnum):
    __slots__ = ()

    POLICE = "police"
    HOSPITAL = "hospital"
    GOVERNMENT = "government"


class Zone(StrEnum):
    __slots__ = ()

    UNKNOWN = "unknown"
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"


class IncidentStatus(StrEnum):
    __slots__ = ()

    ACTIVE = "active"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class EmailStatus(StrEnum):
    __slots__ = ()

    SENT = "sent"
    FAILED = "failed"
