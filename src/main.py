"""WomenSafe FastAPI application entry point.

Creates the FastAPI app, configures middleware, includes routers, and
manages the lifecycle of the backend services (places provider, safety
assessment, contact book, email client, notifier).
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from config.settings import settings
from src.api.router import api_router
from src.services.contacts import ContactBook
from src.services.email import ResendEmailClient
from src.services.notifications import ContactNotifier
from src.services.places import (
    GooglePlacesProvider,
    PlaceSearchAggregator,
    PlacesProvider,
    StaticPlacesProvider,
)
from src.services.safety import SafetyAssessmentService

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Structured logging configuration
# ---------------------------------------------------------------------------


def _configure_logging() -> None:
    """Set up structlog with JSON or console rendering based on settings."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            settings.log_level,
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _build_places_provider() -> PlacesProvider | None:
    """Pick the places source: a static directory file wins over Google."""
    if settings.places_fixture_file:
        try:
            return StaticPlacesProvider.from_file(settings.places_fixture_file)
        except Exception:
            logger.warning(
                "app.places_directory_load_failed",
                path=settings.places_fixture_file,
                exc_info=True,
            )
    if settings.google_maps_api_key:
        return GooglePlacesProvider(
            settings.google_maps_api_key,
            timeout=settings.places_query_timeout_seconds,
        )
    logger.warning("app.places_provider_not_configured")
    return None


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup and shutdown of all WomenSafe services.

    On startup:
      1. Build the places provider and the safety assessment service
      2. Create the in-memory contact book
      3. Create the Resend email client (when an API key is set)
      4. Create the notifier
      5. Store everything on ``app.state``

    On shutdown:
      - Close the HTTP clients gracefully.
    """
    _configure_logging()
    logger.info("app.startup", env=settings.env)

    app.state.start_time = time.time()

    # -- 1. Places and safety -------------------------------------------------
    provider = _build_places_provider()
    aggregator = PlaceSearchAggregator(
        provider,
        attempt_timeout=settings.places_query_timeout_seconds,
    )
    safety = SafetyAssessmentService(
        aggregator,
        initial_radius_m=settings.places_search_radius_m,
    )
    app.state.safety = safety
    logger.info(
        "app.safety_initialised",
        provider=type(provider).__name__ if provider is not None else None,
    )

    # -- 2. Contacts ------------------------------------------------------------
    contacts = ContactBook()
    app.state.contacts = contacts

    # -- 3. Email ---------------------------------------------------------------
    email: ResendEmailClient | None = None
    if settings.resend_api_key:
        email = ResendEmailClient(
            settings.resend_api_key,
            timeout=settings.email_timeout_seconds,
        )
        logger.info("app.email_initialised")
    else:
        logger.warning("app.email_not_configured")
    app.state.email = email

    # -- 4. Notifier ------------------------------------------------------------
    app.state.notifier = ContactNotifier(
        contacts,
        email,
        safety=safety,
        emergency_sender=settings.emergency_sender,
        message_sender=settings.message_sender,
        nearest_place_timeout=settings.sos_nearest_place_timeout_seconds,
    )

    logger.info("app.startup_complete")

    yield

    # -- Shutdown -----------------------------------------------------------
    logger.info("app.shutdown_start")

    if isinstance(provider, GooglePlacesProvider):
        await provider.close()
    if email is not None:
        await email.close()

    logger.info("app.shutdown_complete")


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="WomenSafe API",
    description=(
        "Personal-safety backend: emergency contacts, SOS alerts, "
        "contact messaging, and nearby police/hospital/government "
        "locations with a safety zone indicator."
    ),
    version="0.1.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# -- CORS middleware --------------------------------------------------------
# allow_credentials=True must not be combined with allow_origins=["*"].
if settings.is_production:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:8080", "http://127.0.0.1:8000"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
        allow_headers=["Content-Type", "Accept", "Authorization"],
    )

# -- Prometheus metrics -----------------------------------------------------
Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/metrics", "/api/v1/health"],
).instrument(app).expose(
    app,
    endpoint="/metrics",
    include_in_schema=not settings.is_production,
)

# -- Include routers -------------------------------------------------------
app.include_router(api_router)


@app.get("/api", response_class=ORJSONResponse)
async def api_info() -> dict:
    """API information endpoint."""
    return {
        "name": f"{settings.app_name} API",
        "version": app.version,
        "docs": "/docs",
        "health": "/api/v1/health",
        "endpoints": {
            "safe_places": "/api/v1/nearby/safe-places",
            "zone": "/api/v1/nearby/zone",
            "contacts": "/api/v1/users/{user_id}/contacts",
            "profile": "/api/v1/users/{user_id}/profile",
            "sos": "/api/v1/emergency/sos",
            "incidents": "/api/v1/emergency/incidents/{user_id}",
            "broadcast": "/api/v1/messages/broadcast",
            "individual": "/api/v1/messages/individual",
        },
    }
