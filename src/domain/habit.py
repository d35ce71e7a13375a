"""Habit domain models."""

from datetime import datetime

from pydantic import BaseModel, Field


class Habit(BaseModel):
    """Habit data transfer object (repeatable, never completed for good)."""

    id: str
    title: str
    description: str | None = None
    home_id: str
    room_id: str | None = None
    group_id: str | None = None
    created_by: str
    created_at: datetime


class HabitCompletion(BaseModel):
    """Single completion of a habit."""

    id: str
    habit_id: str
    completed_by: str = Field(..., description="User ID who completed the habit")
    completed_at: datetime
    home_id: str
