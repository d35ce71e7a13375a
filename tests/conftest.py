"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncIterator, Iterator

import pytest

from src.core import db_client
from src.core.cache_client import profile_cache
from src.core.config import settings


@pytest.fixture(autouse=True)
def utc_calendar(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the local calendar to UTC so date boundaries are deterministic."""
    monkeypatch.setattr(settings, "timezone", "UTC")


@pytest.fixture(autouse=True)
def clear_profile_cache() -> Iterator[None]:
    """Start every test with an empty profile cache."""
    profile_cache.clear()
    yield
    profile_cache.clear()


@pytest.fixture
def sqlite_path(tmp_path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Point the SQLite client at a fresh database file."""
    path = str(tmp_path / "homekeeper-test.db")
    monkeypatch.setattr(settings, "sqlite_db_path", path)
    return path


@pytest.fixture
async def sqlite_db(sqlite_path: str) -> AsyncIterator[str]:
    """Initialize the schema in a fresh database file and close it afterwards."""
    await db_client.init_db()
    yield sqlite_path
    await db_client.close_connection()
