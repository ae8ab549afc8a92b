"""
Root pytest configuration.

This conftest is loaded before test collection to ensure
src is in the Python path for all imports.
"""

import sys
from pathlib import Path

# Add src to path IMMEDIATELY when this file is loaded
src_path = Path(__file__).parent / "src"
src_str = str(src_path.absolute())

if src_str in sys.path:
    sys.path.remove(src_str)
sys.path.insert(0, src_str)


import pytest


@pytest.fixture(autouse=True)
def _reset_cached_settings():
    """Drop lru_cached settings between tests so env overrides apply."""
    yield
    from config.database import get_database_settings
    from config.settings import get_cta_settings
    get_cta_settings.cache_clear()
    get_database_settings.cache_clear()


def pytest_configure(config):
    """Additional path setup during pytest configuration."""
    if src_str not in sys.path:
        sys.path.insert(0, src_str)
