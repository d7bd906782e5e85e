"""
Pytest fixtures for guest link tests.

Provides a fixed clock, per-test SQLite databases, a guest link store and a
FastAPI test client wired to both.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

# Set test environment before imports
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.mkdtemp(), 'guestlinks-test.db')}",
)

import guestlinks.models  # noqa: E402,F401
from guestlinks.core.database import Base, make_engine, make_sessionmaker  # noqa: E402
from guestlinks.main import app  # noqa: E402
from guestlinks.policy.guest_link import GuestLinkConfig, GuestLinkUsage  # noqa: E402
from guestlinks.routes.guest_links import get_now, get_store  # noqa: E402
from guestlinks.store.guest_links import GuestLinkStore  # noqa: E402

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
CREATED = NOW - timedelta(days=1)

LINK_ID = "abcdefgh23456789"
OTHER_LINK_ID = "zyxwvuts98765432"


# ============================================================================
# Clock & Policy Fixtures
# ============================================================================

@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_config():
    """Build a guest link config with sensible defaults for the fixed clock."""
    def _make(**overrides) -> GuestLinkConfig:
        values = {"id": LINK_ID, "created": CREATED}
        values.update(overrides)
        return GuestLinkConfig(**values)
    return _make


@pytest.fixture
def fresh_usage() -> GuestLinkUsage:
    return GuestLinkUsage()


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def db_url(tmp_path) -> str:
    """
    Create an empty guest link database for a single test.

    Tables are created through a synchronous engine so that sync and async
    tests can share the fixture.
    """
    path = tmp_path / "guestlinks.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(bind=sync_engine)
    sync_engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def store(db_url) -> GuestLinkStore:
    return GuestLinkStore(make_sessionmaker(make_engine(db_url)))


# ============================================================================
# FastAPI Test Client Fixtures
# ============================================================================

@pytest.fixture
def clock():
    """Mutable clock the API reads through the ``get_now`` dependency."""
    class _Clock:
        value = NOW

        def advance(self, delta: timedelta) -> None:
            self.value = self.value + delta

    return _Clock()


@pytest.fixture
def test_client(store, clock) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_now] = lambda: clock.value
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
