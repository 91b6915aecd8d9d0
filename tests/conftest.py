"""
Pytest configuration and fixtures for backend tests.

API tests run against a throwaway SQLite database per test, selected through
DATABASE_URL so the same engine/session code paths are exercised.
"""
import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.utils.database import reset_engine


TEST_MAX_CREDITS = 3


@pytest.fixture
def max_credits():
    return TEST_MAX_CREDITS


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Test client bound to a fresh database with a seeded credit counter."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("MAX_CREDITS", str(TEST_MAX_CREDITS))
    get_settings.cache_clear()
    reset_engine()

    from app.main import app

    # entering the context runs the lifespan: create tables + seed counter.
    # Unhandled errors are rendered by the app as JSON 500s, so they are not re-raised here.
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    get_settings.cache_clear()
    reset_engine()
