"""
Services Module - cross-cutting infrastructure for the CTA engine.

- Logging configuration and context-aware loggers
"""

from .logging_config import (
    ContextLogger,
    JsonFormatter,
    ReadableFormatter,
    configure_from_settings,
    configure_logging,
    get_logger,
    log_performance,
    tab_id_var,
)

__all__ = [
    "ContextLogger",
    "JsonFormatter",
    "ReadableFormatter",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "log_performance",
    "tab_id_var",
]
