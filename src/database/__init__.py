"""
Database Layer for the CTA engine.

This module provides:
- SQLAlchemy ORM models for the CTA stores
- Async database engine and session management
- Async repositories implementing the domain store interfaces
- In-memory store implementations for tests and local runs
"""

from .models import (
    Base,
    DismissedCtaRecord,
    SurveyRecord,
    UserStageRecord,
    AppSettingRecord,
)

from .async_engine import (
    create_engine,
    get_async_engine,
    get_async_session,
    get_async_session_factory,
    get_session_factory,
    check_database_connection,
    init_database,
    close_database,
)

from .repositories import (
    AppSettingsRepository,
    DismissedCtaRepository,
    SurveyRepository,
    UserStageRepository,
)

from .in_memory import (
    InMemoryDismissedCtaRepository,
    InMemorySettingsStore,
    InMemorySurveyRepository,
    InMemoryUserStageStore,
    StaticWidgetCapabilities,
)

__all__ = [
    # Models
    "Base",
    "DismissedCtaRecord",
    "SurveyRecord",
    "UserStageRecord",
    "AppSettingRecord",
    # Engine
    "create_engine",
    "get_async_engine",
    "get_async_session",
    "get_async_session_factory",
    "get_session_factory",
    "check_database_connection",
    "init_database",
    "close_database",
    # Repositories
    "AppSettingsRepository",
    "DismissedCtaRepository",
    "SurveyRepository",
    "UserStageRepository",
    # In-memory
    "InMemoryDismissedCtaRepository",
    "InMemorySettingsStore",
    "InMemorySurveyRepository",
    "InMemoryUserStageStore",
    "StaticWidgetCapabilities",
]
