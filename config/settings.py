"""Application settings loaded from environment variables.

Uses pydantic-settings for validation and type coercion. App-specific
settings use the ``WOMENSAFE_`` prefix; third-party credentials use their
canonical environment variable names via ``validation_alias``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Central configuration for the WomenSafe API.

    Environment variables are loaded from a ``.env`` file when present.
    App-specific keys are prefixed with ``WOMENSAFE_``; provider keys
    use their standard names (configured via ``validation_alias``).
    """

    model_config = SettingsConfigDict(
        env_prefix="WOMENSAFE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ── App ────────────────────────────────────────────────────────────
    env: Literal["development", "production"] = "development"
    app_name: str = "WomenSafe India"

    # ── Places provider ────────────────────────────────────────────────
    google_maps_api_key: str = Field(default="", validation_alias="GOOGLE_MAPS_API_KEY")
    places_fixture_file: str = ""
    places_search_radius_m: int = Field(default=20_000, gt=0)
    places_query_timeout_seconds: float = Field(default=10.0, gt=0)

    # ── Email (Resend) ─────────────────────────────────────────────────
    resend_api_key: str = Field(default="", validation_alias="RESEND_API_KEY")
    emergency_sender: str = "WomenSafe India Emergency <emergency@womensafe.in>"
    message_sender: str = "WomenSafe India <noreply@womensafe.in>"
    email_timeout_seconds: float = 10.0
    sos_nearest_place_timeout_seconds: float = Field(default=2.0, gt=0)

    # ── API ────────────────────────────────────────────────────────────
    cors_origins: str = ""

    # ── Logging ────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: str = Field(default="json", validation_alias="LOG_FORMAT")

    # ── Derived Properties ─────────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        return self.env == Environment.PRODUCTION

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Module-level singleton; import ``settings`` everywhere.
settings = Settings()
