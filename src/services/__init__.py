"""WomenSafe service layer: nearby safe places, safety zones, contacts and alerts."""

from __future__ import annotations

from src.services.contacts import ContactBook, ContactNotFound
from src.services.email import EmailDeliveryError, ResendEmailClient
from src.services.location import LocationUnavailable, maps_link, resolve_location
from src.services.notifications import ContactNotifier, IncidentNotFound, NoEmergencyContacts
from src.services.safety import SafetyAssessment, SafetyAssessmentService
from src.services.zone import classify_zone, zone_for_distance

__all__ = [
    "ContactBook",
    "ContactNotFound",
    "ContactNotifier",
    "EmailDeliveryError",
    "IncidentNotFound",
    "LocationUnavailable",
    "NoEmergencyContacts",
    "ResendEmailClient",
    "SafetyAssessment",
    "SafetyAssessmentService",
    "classify_zone",
    "maps_link",
    "resolve_location",
    "zone_for_distance",
]
