"""Pytest configuration and fixtures for the CTA engine test suite."""

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Set test environment BEFORE any other imports
os.environ.setdefault("DB_DRIVER", "sqlite+aiosqlite")
os.environ.setdefault("DB_SQLITE_PATH", ":memory:")

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from analytics.pixel import Pixel
from config.settings import CtaSettings
from cta.dispatchers import ImmediateDispatcher
from cta.view_model import CtaViewModel
from database.in_memory import (
    InMemoryDismissedCtaRepository,
    InMemorySettingsStore,
    InMemorySurveyRepository,
    InMemoryUserStageStore,
    StaticWidgetCapabilities,
)

MILLIS_PER_DAY = 24 * 60 * 60 * 1000
NOW_MS = 1_700_000_000_000


def _reset_db_modules():
    """Reset database module globals to ensure clean state."""
    import database.async_engine as module
    module._async_engine = None
    module._async_session_factory = None


@pytest.fixture(autouse=True)
def reset_database_globals():
    """Reset database module globals before and after each test."""
    _reset_db_modules()
    yield
    _reset_db_modules()


@pytest.fixture
def mock_async_session():
    """Provide a mock async session for testing."""
    from unittest.mock import AsyncMock
    return AsyncMock()


@pytest.fixture
def cta_settings():
    """Default CTA settings, independent of the environment."""
    return CtaSettings(
        serp_domain="duckduckgo.com",
        main_tracker_networks=["Facebook", "Google"],
        survey_min_days_installed=1,
    )


@pytest.fixture
def mock_pixel():
    return MagicMock(spec=Pixel)


@pytest.fixture
def dispatcher():
    return ImmediateDispatcher()


@pytest.fixture
def ledger():
    return InMemoryDismissedCtaRepository()


@pytest.fixture
def survey_repository():
    return InMemorySurveyRepository()


@pytest.fixture
def stage_store():
    return InMemoryUserStageStore()


@pytest.fixture
def settings_store():
    """Hide tips off, privacy on, installed one day before NOW_MS."""
    return InMemorySettingsStore(install_timestamp=NOW_MS - MILLIS_PER_DAY)


@pytest.fixture
def widget_capabilities():
    return StaticWidgetCapabilities()


@pytest.fixture
def view_model_factory(
    mock_pixel,
    survey_repository,
    ledger,
    settings_store,
    stage_store,
    cta_settings,
):
    """Build a CtaViewModel over the in-memory stores, with optional widget capabilities."""
    def _build(widget_capabilities=None):
        return CtaViewModel(
            app_install_store=settings_store,
            pixel=mock_pixel,
            survey_repository=survey_repository,
            widget_capabilities=widget_capabilities or StaticWidgetCapabilities(),
            dismissed_cta_repository=ledger,
            settings_store=settings_store,
            onboarding_store=settings_store,
            privacy_settings_store=settings_store,
            user_stage_store=stage_store,
            settings=cta_settings,
            clock=lambda: NOW_MS,
        )
    return _build


@pytest.fixture
def view_model(view_model_factory):
    return view_model_factory()
