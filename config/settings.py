"""Engine settings loaded from environment variables.

Uses pydantic-settings for validation and type coercion. Every key uses
the ``GOVERNANCE_`` prefix except the logging keys, which read their
canonical names via ``validation_alias`` so they can be shared with the
host application.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Central configuration for the consent and data-governance engine.

    Environment variables are loaded from a ``.env`` file when present.
    """

    model_config = SettingsConfigDict(
        env_prefix="GOVERNANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ── App ────────────────────────────────────────────────────────────
    env: Literal["development", "production"] = "development"

    # ── Logging ────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(default="json", validation_alias="LOG_FORMAT")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value!r}")
        return level

    # ── Consent defaults ───────────────────────────────────────────────
    consent_schema_version: str = "1.0"
    default_legal_basis: str = "Consent"
    default_purposes: list[str] = Field(default_factory=lambda: ["service_provision"])
    default_consent_retention_days: int = Field(default=365, gt=0)
    default_withdrawal_method: str = "email"
    privacy_contact_email: str = "privacy@example.com"

    # ── Catalog ────────────────────────────────────────────────────────
    seed_default_activities: bool = True

    # ── Reporting ──────────────────────────────────────────────────────
    breach_lookback_days: int = Field(default=30, gt=0)

    # ── Portability export ─────────────────────────────────────────────
    export_format_version: str = "1.0"

    # ── Derived Properties ─────────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        return self.env == Environment.PRODUCTION


# Module-level default instance; the engine also accepts an explicit one.
settings = Settings()
