"""Pydantic models for creating records in database."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from src.domain.task import TaskStatus


MAX_TITLE_LENGTH = 200


def clean_title(v: str) -> str:
    """Strip a title and enforce the length bounds."""
    v = v.strip()
    if not v:
        raise ValueError("Title must not be empty")
    if len(v) > MAX_TITLE_LENGTH:
        raise ValueError(f"Title too long (max {MAX_TITLE_LENGTH} characters)")
    return v


class TaskCreate(BaseModel):
    """Pydantic model for creating a task record."""

    title: str = Field(..., description="Task title")
    home_id: str = Field(..., description="Owning home ID")
    created_by: str = Field(..., description="Creator user ID")
    description: str | None = Field(default=None, description="Detailed task description")
    room_id: str | None = None
    group_id: str | None = None
    assigned_to: str | None = None
    due_date: datetime | None = None
    recurrence_days: int | None = Field(default=None, description="Days between occurrences")
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is non-empty and bounded."""
        return clean_title(v)

    @field_validator("description", "room_id", "group_id", "assigned_to")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank optional strings as absent."""
        if v is None or not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_recurrence(self) -> "TaskCreate":
        """A recurring task needs a positive interval and a due date."""
        if self.recurrence_days is None:
            return self
        if self.recurrence_days <= 0:
            msg = f"Invalid recurrence: recurrence_days must be a positive integer, got {self.recurrence_days}"
            raise ValueError(msg)
        if self.due_date is None:
            msg = "Invalid recurrence: a recurring task requires a due date"
            raise ValueError(msg)
        return self

    def to_record(self) -> dict:
        """Return the fields to persist, omitting absent optional values."""
        return self.model_dump(exclude_none=True)


class HabitCreate(BaseModel):
    """Pydantic model for creating a habit record."""

    title: str
    home_id: str
    created_by: str
    description: str | None = None
    room_id: str | None = None
    group_id: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is non-empty and bounded."""
        return clean_title(v)

    @field_validator("description", "room_id", "group_id")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank optional strings as absent."""
        if v is None or not v.strip():
            return None
        return v
