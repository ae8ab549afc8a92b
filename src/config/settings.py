"""Application settings using Pydantic Settings.

Centralized configuration for the CTA engine. Every value can be
overridden from the environment (see the env_prefix of each class).
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        extra="ignore",
    )

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class CtaSettings(BaseSettings):
    """CTA selection settings."""

    model_config = SettingsConfigDict(
        env_prefix="CTA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Search results domain. Pages on this domain get the SERP dialog.
    serp_domain: str = Field(
        default="duckduckgo.com",
        description="Domain of the search engine results page"
    )

    # Tracker networks big enough to get their own onboarding dialog
    main_tracker_networks: List[str] = Field(
        default=["Facebook", "Google"],
        description="Entity display names treated as major tracker networks"
    )

    # Install-age gate for surveys
    survey_min_days_installed: int = Field(
        default=1,
        ge=0,
        description="Minimum whole days since install before a survey is offered"
    )

    @field_validator("serp_domain")
    @classmethod
    def normalize_serp_domain(cls, v: str) -> str:
        """Lowercase and drop a leading www. from the SERP domain."""
        domain = v.strip().lower()
        if domain.startswith("www."):
            domain = domain[4:]
        if not domain:
            raise ValueError("serp_domain must not be empty")
        return domain


@lru_cache
def get_cta_settings() -> CtaSettings:
    """
    Get cached CTA settings instance.

    Returns:
        CtaSettings: Cached settings loaded from environment.
    """
    return CtaSettings()
