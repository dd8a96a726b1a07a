"""In-memory emergency contact book.

Every operation is scoped to the owning ``user_id``: a contact id that
belongs to another user behaves exactly like a missing one.  Storage is
process-local; a deployment that needs durability swaps this class for
a database-backed one with the same methods.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog

from src.models.contacts import (
    ContactCreate,
    ContactUpdate,
    EmergencyContact,
    UserProfile,
)

logger = structlog.get_logger(__name__)


class ContactNotFound(LookupError):
    """The contact does not exist or is not owned by the requesting user."""


class ContactBook:
    """Stores emergency contacts and display profiles per user."""

    __slots__ = ("_contacts", "_profiles")

    def __init__(self) -> None:
        self._contacts: dict[str, dict[str, EmergencyContact]] = {}
        self._profiles: dict[str, UserProfile] = {}

    # ------------------------------------------------------------------
    # Contacts
    # ------------------------------------------------------------------

    def list_contacts(self, user_id: str) -> list[EmergencyContact]:
        """Contacts for ``user_id``, primary contacts first, then oldest first."""
        contacts = list(self._contacts.get(user_id, {}).values())
        contacts.sort(key=lambda c: (not c.is_primary, c.created_at))
        return contacts

    def get_contact(self, user_id: str, contact_id: str) -> EmergencyContact:
        contact = self._contacts.get(user_id, {}).get(contact_id)
        if contact is None:
            raise ContactNotFound(contact_id)
        return contact

    def add_contact(self, user_id: str, data: ContactCreate) -> EmergencyContact:
        contact = EmergencyContact(user_id=user_id, **data.model_dump())
        self._contacts.setdefault(user_id, {})[contact.id] = contact
        logger.info(
            "contacts.added",
            user_id=user_id,
            contact_id=contact.id,
            has_email=contact.email is not None,
        )
        return contact

    def update_contact(
        self,
        user_id: str,
        contact_id: str,
        changes: ContactUpdate,
    ) -> EmergencyContact:
        current = self.get_contact(user_id, contact_id)
        updated = current.model_copy(
            update={
                **changes.model_dump(exclude_unset=True),
                "updated_at": datetime.now(UTC),
            }
        )
        self._contacts[user_id][contact_id] = updated
        logger.info("contacts.updated", user_id=user_id, contact_id=contact_id)
        return updated

    def remove_contact(self, user_id: str, contact_id: str) -> None:
        self.get_contact(user_id, contact_id)
        del self._contacts[user_id][contact_id]
        logger.info("contacts.removed", user_id=user_id, contact_id=contact_id)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def get_profile(self, user_id: str) -> UserProfile | None:
        return self._profiles.get(user_id)

    def save_profile(self, profile: UserProfile) -> UserProfile:
        stored = profile.model_copy(update={"updated_at": datetime.now(UTC)})
        self._profiles[profile.user_id] = stored
        return stored

    def display_name(self, user_id: str) -> str:
        profile = self._profiles.get(user_id)
        return profile.display_name if profile is not None else "User"
