"""Pytest configuration and fixtures for integration tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from src.core.config import settings
from src.main import app


@pytest.fixture
def client(sqlite_path: str, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """Run the app (lifespan included) against a fresh SQLite file, scheduler off."""
    monkeypatch.setattr(settings, "enable_scheduler", False)
    with TestClient(app) as test_client:
        yield test_client
