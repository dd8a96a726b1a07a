from src.models.contacts import ContactCreate, ContactUpdate, EmergencyContact, UserProfile
from src.models.enums import EmailStatus, IncidentStatus, PlaceCategory, Zone
from src.models.geo import (
    ADDRESS_UNAVAILABLE,
    Coordinate,
    NearbySearchResult,
    PlaceCandidate,
    SafePlace,
    ZoneStatus,
)
from src.models.messages import (
    BroadcastRequest,
    DispatchResult,
    EmailResult,
    IndividualMessageRequest,
    NotificationRecord,
    SOSIncident,
    SOSRequest,
)

__all__ = [
    "ADDRESS_UNAVAILABLE",
    "BroadcastRequest",
    "ContactCreate",
    "ContactUpdate",
    "Coordinate",
    "DispatchResult",
    "EmailResult",
    "EmailStatus",
    "EmergencyContact",
    "IncidentStatus",
    "IndividualMessageRequest",
    "NearbySearchResult",
    "NotificationRecord",
    "PlaceCandidate",
    "PlaceCategory",
    "SOSIncident",
    "SOSRequest",
    "SafePlace",
    "UserProfile",
    "Zone",
    "ZoneStatus",
]
