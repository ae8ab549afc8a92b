"""Async engine and sessions for the CTA stores.

One process-wide engine is created lazily from DatabaseSettings. Callers
get a unit of work from get_async_session(): the repositories built on
that session flush as they go and the whole unit commits on exit.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from config.database import DatabaseSettings, get_database_settings

logger = logging.getLogger(__name__)

_async_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _pool_options(settings: DatabaseSettings) -> Dict[str, Any]:
    if settings.is_memory:
        # Every session must see the same single connection or the tables vanish
        return {"poolclass": StaticPool}
    if settings.is_sqlite:
        return {"poolclass": NullPool}
    return {
        "pool_size": settings.pool_size,
        "max_overflow": settings.max_overflow,
        "pool_pre_ping": True,
    }


def create_engine(settings: Optional[DatabaseSettings] = None) -> AsyncEngine:
    """
    Build an engine for the CTA stores.

    Args:
        settings: Database settings (defaults to environment)

    Returns:
        AsyncEngine
    """
    settings = settings or get_database_settings()
    if settings.is_sqlite and not settings.is_memory:
        settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    target = str(settings.sqlite_path) if settings.is_sqlite else f"{settings.host}/{settings.name}"

    logger.info(
        "Creating CTA store engine",
        extra={'extra_data': {'driver': settings.driver, 'target': target}}
    )

    engine = create_async_engine(
        settings.async_url,
        echo=settings.echo_sql,
        connect_args=settings.get_connect_args(),
        **_pool_options(settings),
    )
    _setup_engine_events(engine, settings)
    return engine


def _setup_engine_events(engine: AsyncEngine, settings: DatabaseSettings) -> None:
    if not settings.is_sqlite:
        return

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()
        logger.debug("SQLite connection opened")


def get_session_factory(
    engine: Optional[AsyncEngine] = None,
    settings: Optional[DatabaseSettings] = None
) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to `engine` (or the global engine)."""
    return async_sessionmaker(
        bind=engine or get_async_engine(settings),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_async_engine(settings: Optional[DatabaseSettings] = None) -> AsyncEngine:
    """Process-wide engine, created on first use."""
    global _async_engine
    if _async_engine is None:
        _async_engine = create_engine(settings)
    return _async_engine


def get_async_session_factory(
    settings: Optional[DatabaseSettings] = None
) -> async_sessionmaker[AsyncSession]:
    """Process-wide session factory, created on first use."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = get_session_factory(get_async_engine(settings))
    return _async_session_factory


@asynccontextmanager
async def get_async_session(
    settings: Optional[DatabaseSettings] = None
) -> AsyncGenerator[AsyncSession, None]:
    """
    Unit of work over the CTA stores.

    Usage:
        async with get_async_session() as session:
            view_model = create_cta_view_model(session, widget_capabilities)
            await view_model.on_user_dismissed_cta(cta)

    Commits when the block exits normally and rolls back when it raises.
    """
    session = get_async_session_factory(settings)()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def check_database_connection(
    settings: Optional[DatabaseSettings] = None
) -> bool:
    """True when a trivial query succeeds."""
    try:
        async with get_async_engine(settings).connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"CTA store unreachable: {e}")
        return False
    return True


async def init_database(settings: Optional[DatabaseSettings] = None) -> None:
    """Create the CTA tables that are missing."""
    from database.models import Base

    async with get_async_engine(settings).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("CTA store tables ready")


async def close_database() -> None:
    """Dispose of the global engine. Safe to call more than once."""
    global _async_engine, _async_session_factory

    if _async_engine is None:
        return
    await _async_engine.dispose()
    _async_engine = None
    _async_session_factory = None
    logger.info("CTA store engine closed")
