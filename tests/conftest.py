"""Shared pytest fixtures."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from animap.logging.context import clear_log_context
from tests.helpers import FixtureCatalog

FIXTURES_DIR = Path(__file__).parent / "fixtures"

FIXED_NOW = datetime(2025, 1, 5, 12, 0, 0, tzinfo=timezone.utc)

ANIMAP_ENV_VARS = ("ANIMAP_LOG_LEVEL", "ANILIST_API_URL", "ANIMAP_CACHE_DIR", "ANIMAP_CACHE_ENABLED")


@pytest.fixture(autouse=True)
def reset_log_context():
    """Keep log context from leaking between tests."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Unset configuration overrides that a developer .env may have exported."""
    for name in ANIMAP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed UTC instant."""
    return lambda: FIXED_NOW


@pytest.fixture
def fixture_catalog():
    """FixtureCatalog loaded from tests/fixtures/catalog.yaml."""
    return FixtureCatalog.from_yaml(FIXTURES_DIR / "catalog.yaml")
