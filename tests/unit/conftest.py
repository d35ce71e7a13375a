"""Pytest configuration and fixtures for unit tests."""

from datetime import UTC, datetime
from typing import Any

import pytest

from src.domain.task import TaskStatus
from tests.unit.mocks import InMemoryDBClient


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches src.core.db_client functions to use InMemoryDBClient.

    list_all_records is left unpatched: it pages through the patched
    list_records, so paging is exercised too.
    """
    monkeypatch.setattr("src.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("src.core.db_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("src.core.db_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("src.core.db_client.delete_record", in_memory_db.delete_record)
    monkeypatch.setattr("src.core.db_client.list_records", in_memory_db.list_records)
    monkeypatch.setattr("src.core.db_client.get_first_record", in_memory_db.get_first_record)

    return in_memory_db


@pytest.fixture
def make_task(in_memory_db):
    """Factory that stores a task record directly, bypassing validation."""

    async def _make_task(
        *,
        home_id: str = "1",
        title: str = "Water the plants",
        status: TaskStatus = TaskStatus.PENDING,
        due_date: datetime | None = None,
        recurrence_days: int | None = None,
        **extra: Any,
    ) -> dict[str, Any]:
        data = {
            "title": title,
            "home_id": home_id,
            "status": status,
            "due_date": due_date,
            "recurrence_days": recurrence_days,
            "created_by": "u1",
            "created_at": datetime(2024, 1, 1, tzinfo=UTC),
            **extra,
        }
        return await in_memory_db.create_record(collection="tasks", data=data)

    return _make_task
