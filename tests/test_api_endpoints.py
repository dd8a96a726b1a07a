"""Tests for the HTTP API.

The app's lifespan runs inside ``TestClient``; the places source and the
email client are then replaced on ``app.state`` with the bundled Delhi
directory and an in-memory email fake.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.services.notifications import ContactNotifier
from src.services.places import PlaceSearchAggregator, StaticPlacesProvider
from src.services.safety import SafetyAssessmentService

FIXTURE = Path(__file__).parent / "fixtures" / "safe_places.json"


class RecordingEmailClient:
    def __init__(self) -> None:
        self.recipients: list[str] = []

    async def send(self, *, sender: str, to: str, subject: str, text: str, html: str) -> str:
        self.recipients.append(to)
        return f"msg-{len(self.recipients)}"


@pytest.fixture
def email() -> RecordingEmailClient:
    return RecordingEmailClient()


@pytest.fixture
def client(email: RecordingEmailClient):
    from src.main import app

    with TestClient(app) as test_client:
        safety = SafetyAssessmentService(
            PlaceSearchAggregator(StaticPlacesProvider.from_file(FIXTURE))
        )
        app.state.safety = safety
        app.state.notifier = ContactNotifier(app.state.contacts, email, safety=safety)
        yield test_client


def _add_contact(client: TestClient, user_id: str = "u1", **fields) -> dict:
    payload = {"name": "Mother", "phone": "+919800000000", "email": "mother@example.com"}
    payload.update(fields)
    response = client.post(f"/api/v1/users/{user_id}/contacts", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# Health and info
# ---------------------------------------------------------------------------


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_readiness_reports_missing_email(client):
    response = client.get("/api/v1/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["checks"]["places_provider"] == "ok"
    assert data["checks"]["email"] == "not_configured"
    assert data["status"] == "degraded"


def test_api_info(client):
    response = client.get("/api")
    assert response.status_code == 200
    assert response.json()["endpoints"]["sos"] == "/api/v1/emergency/sos"


def test_metrics_exposed(client):
    client.get("/api/v1/emergency/numbers")
    response = client.get("/metrics")
    assert response.status_code == 200


# ---------------------------------------------------------------------------
# Nearby safe places
# ---------------------------------------------------------------------------


def test_safe_places_for_delhi(client):
    response = client.get(
        "/api/v1/nearby/safe-places", params={"latitude": 28.6139, "longitude": 77.2090}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["error"] is None
    assert data["radius_km"] == 20
    ids = [p["id"] for p in data["places"]]
    assert ids[0] == "DL-HOSP-001", "hospital is the nearest directory entry"
    assert "GGN-FS-001" not in ids, "Gurugram is outside the 20 km radius"
    distances = [p["distance_meters"] for p in data["places"]]
    assert distances == sorted(distances)
    assert data["zone_status"]["zone"] == "orange"
    assert data["zone_status"]["nearest_place"]["id"] == "DL-HOSP-001"


def test_safe_places_without_location(client):
    response = client.get("/api/v1/nearby/safe-places")
    assert response.status_code == 200
    data = response.json()
    assert data["places"] == []
    assert data["zone_status"]["zone"] == "unknown"
    assert data["error"]
    assert data["retryable"] is False


def test_zone_reclassification(client):
    places = client.get(
        "/api/v1/nearby/safe-places", params={"latitude": 28.6139, "longitude": 77.2090}
    ).json()["places"]

    # Standing at the police station itself.
    response = client.post(
        "/api/v1/nearby/zone",
        json={
            "latitude": 28.6315,
            "longitude": 77.2167,
            "places": [{k: v for k, v in p.items() if k != "distance_meters"} for p in places],
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["zone"] == "green"
    assert data["nearest_place"]["id"] == "DL-PS-001"
    assert data["message"] == "You are in a safe zone"


def test_zone_with_antipodal_place(client):
    response = client.post(
        "/api/v1/nearby/zone",
        json={
            "latitude": -43.5577,
            "longitude": -28.4859,
            "places": [
                {
                    "id": "antipode",
                    "name": "Far Side Police",
                    "category": "police",
                    "coordinate": {"latitude": 43.5577, "longitude": 151.5141},
                }
            ],
        },
    )
    assert response.status_code == 200
    assert response.json()["zone"] == "red"


def test_zone_without_places_is_unknown(client):
    response = client.post(
        "/api/v1/nearby/zone", json={"latitude": 28.6, "longitude": 77.2, "places": []}
    )
    assert response.status_code == 200
    assert response.json()["zone"] == "unknown"


# ---------------------------------------------------------------------------
# Contacts and profile
# ---------------------------------------------------------------------------


def test_contact_crud(client):
    contact = _add_contact(client)
    listed = client.get("/api/v1/users/u1/contacts").json()
    assert [c["id"] for c in listed] == [contact["id"]]

    response = client.patch(
        f"/api/v1/users/u1/contacts/{contact['id']}", json={"relationship": "mother"}
    )
    assert response.status_code == 200
    assert response.json()["relationship"] == "mother"
    assert response.json()["email"] == "mother@example.com"

    response = client.delete(f"/api/v1/users/u1/contacts/{contact['id']}")
    assert response.status_code == 204
    assert client.get("/api/v1/users/u1/contacts").json() == []


def test_contact_of_other_user_not_found(client):
    contact = _add_contact(client, user_id="u1")
    response = client.delete(f"/api/v1/users/u2/contacts/{contact['id']}")
    assert response.status_code == 404


def test_invalid_contact_email_rejected(client):
    response = client.post(
        "/api/v1/users/u1/contacts",
        json={"name": "Mother", "phone": "+919800000000", "email": "nope"},
    )
    assert response.status_code == 422


def test_profile_round_trip(client):
    assert client.get("/api/v1/users/u1/profile").status_code == 404
    response = client.put(
        "/api/v1/users/u1/profile", json={"first_name": "Priya", "last_name": "Sharma"}
    )
    assert response.status_code == 200
    assert client.get("/api/v1/users/u1/profile").json()["first_name"] == "Priya"


# ---------------------------------------------------------------------------
# Emergency SOS
# ---------------------------------------------------------------------------


def test_emergency_numbers(client):
    response = client.get("/api/v1/emergency/numbers")
    assert response.status_code == 200
    numbers = {n["name"]: n["number"] for n in response.json()["emergency_numbers"]}
    assert numbers == {"Police": "100", "Ambulance": "108", "Women Helpline": "1091"}


def test_sos_without_contacts(client):
    response = client.post("/api/v1/emergency/sos", json={"user_id": "u1"})
    assert response.status_code == 404


def test_sos_notifies_contacts(client, email):
    _add_contact(client)
    _add_contact(client, name="Friend", email=None)

    response = client.post(
        "/api/v1/emergency/sos",
        json={"user_id": "u1", "latitude": 28.6139, "longitude": 77.2090},
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["contacts_notified"] == 2
    assert data["emails_sent"] == 1
    assert email.recipients == ["mother@example.com"]
    assert data["incident_id"]


def test_sos_incident_lifecycle(client):
    _add_contact(client)
    incident_id = client.post("/api/v1/emergency/sos", json={"user_id": "u1"}).json()[
        "incident_id"
    ]

    incidents = client.get("/api/v1/emergency/incidents/u1").json()
    assert incidents[0]["status"] == "active"

    response = client.patch(
        f"/api/v1/emergency/incidents/u1/{incident_id}", json={"status": "resolved"}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "resolved"

    missing = client.patch(
        "/api/v1/emergency/incidents/u1/does-not-exist", json={"status": "resolved"}
    )
    assert missing.status_code == 404


def test_sos_without_notifier_returns_numbers(client):
    client.app.state.notifier = None
    response = client.post("/api/v1/emergency/sos", json={"user_id": "u1"})
    assert response.status_code == 503
    assert "emergency_numbers" in response.json()["detail"]


# ---------------------------------------------------------------------------
# Messaging
# ---------------------------------------------------------------------------


def test_broadcast(client, email):
    _add_contact(client)
    _add_contact(client, name="Sister", email="sister@example.com")
    response = client.post(
        "/api/v1/messages/broadcast",
        json={"user_id": "u1", "subject": "Update", "message": "Reached home"},
    )
    assert response.status_code == 200
    assert response.json()["emails_sent"] == 2
    assert sorted(email.recipients) == ["mother@example.com", "sister@example.com"]


def test_broadcast_without_contacts(client):
    response = client.post(
        "/api/v1/messages/broadcast",
        json={"user_id": "u1", "subject": "Update", "message": "Reached home"},
    )
    assert response.status_code == 404


def test_individual_message(client, email):
    contact = _add_contact(client, name="Sister", email="sister@example.com")
    response = client.post(
        "/api/v1/messages/individual",
        json={
            "user_id": "u1",
            "contact_id": contact["id"],
            "subject": "Hi",
            "message": "Call me",
        },
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Message sent to Sister"
    assert email.recipients == ["sister@example.com"]


def test_individual_message_unknown_contact(client):
    response = client.post(
        "/api/v1/messages/individual",
        json={"user_id": "u1", "contact_id": "nope", "subject": "Hi", "message": "Hi"},
    )
    assert response.status_code == 404
