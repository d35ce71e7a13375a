"""Task domain models and enums."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class TaskStatus(StrEnum):
    """Task lifecycle status."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Task(BaseModel):
    """Task data transfer object."""

    id: str = Field(..., description="Unique task ID from database")
    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Detailed task description")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current lifecycle status")
    due_date: datetime | None = Field(default=None, description="Next due date")
    recurrence_days: int | None = Field(default=None, gt=0, description="Days between occurrences")
    home_id: str = Field(..., description="Owning home ID")
    room_id: str | None = Field(default=None, description="Room the task belongs to")
    group_id: str | None = Field(default=None, description="Group the task belongs to")
    assigned_to: str | None = Field(default=None, description="Assigned user ID")
    created_by: str = Field(..., description="Creator user ID")
    created_at: datetime = Field(..., description="Creation timestamp")
    completed_at: datetime | None = Field(default=None, description="Last completion timestamp")

    @property
    def is_recurring(self) -> bool:
        """Whether the task cycles between pending and completed."""
        return self.recurrence_days is not None and self.due_date is not None
