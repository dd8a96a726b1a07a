"""Main API router combining all v1 route modules.

Aggregates all routers under the ``/api/v1`` prefix so the
FastAPI application only needs to include a single router.

Includes:
    * Health: liveness and readiness probes
    * Nearby: safe-place search and safety zone classification
    * Contacts: emergency contact and profile management
    * Emergency: SOS alerts and incident tracking
    * Messages: broadcast and individual messages to contacts
"""

from __future__ import annotations

from fastapi import APIRouter

from src.api.v1 import contacts, emergency, health, messages, nearby

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health.router)
api_router.include_router(nearby.router)
api_router.include_router(contacts.router)
api_router.include_router(emergency.router)
api_router.include_router(messages.router)
