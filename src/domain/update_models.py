"""Update models for database operations.

Only fields explicitly set on an update model are written. An explicit
None (or a blank string) clears the stored value.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator

from src.domain.create_models import clean_title


def _blank_to_none(v: str | None) -> str | None:
    if v is None or not v.strip():
        return None
    return v


class TaskUpdate(BaseModel):
    """Partial update payload for task details."""

    title: str | None = None
    description: str | None = None
    room_id: str | None = None
    group_id: str | None = None
    assigned_to: str | None = None
    due_date: datetime | None = None
    recurrence_days: int | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        """Title may be changed but never cleared."""
        if v is None:
            raise ValueError("Title must not be cleared")
        return clean_title(v)

    @field_validator("description", "room_id", "group_id", "assigned_to")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank optional strings as a request to clear."""
        return _blank_to_none(v)

    def changes(self) -> dict[str, Any]:
        """Return only the explicitly set fields."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class HabitUpdate(BaseModel):
    """Partial update payload for habit details."""

    title: str | None = None
    description: str | None = None
    room_id: str | None = None
    group_id: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        """Title may be changed but never cleared."""
        if v is None:
            raise ValueError("Title must not be cleared")
        return clean_title(v)

    @field_validator("description", "room_id", "group_id")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank optional strings as a request to clear."""
        return _blank_to_none(v)

    def changes(self) -> dict[str, Any]:
        """Return only the explicitly set fields."""
        return {name: getattr(self, name) for name in self.model_fields_set}
