"""Configuration module for the CTA engine."""

from .database import DatabaseSettings, get_database_settings
from .settings import CtaSettings, LoggingSettings, get_cta_settings

__all__ = [
    "DatabaseSettings",
    "get_database_settings",
    "CtaSettings",
    "LoggingSettings",
    "get_cta_settings",
]
