"""Home, membership, room and group domain models."""

from datetime import datetime

from pydantic import BaseModel, Field


class Home(BaseModel):
    """Home data transfer object."""

    id: str = Field(..., description="Unique home ID from database")
    name: str = Field(..., description="Home display name")
    created_by: str = Field(..., description="Owner user ID")
    created_at: datetime = Field(..., description="Creation timestamp")
    members: list[str] = Field(default_factory=list, description="Member user IDs")


class HomeMember(BaseModel):
    """Membership of a user in a home."""

    id: str
    home_id: str
    user_id: str
    joined_at: datetime


class Room(BaseModel):
    """Room data transfer object."""

    id: str
    name: str
    home_id: str
    color: str = Field(..., description="Tailwind color token (e.g. 'teal-200')")
    created_at: datetime


class Group(BaseModel):
    """Named grouping of tasks and habits within a home."""

    id: str
    name: str
    home_id: str
    created_by: str
    created_at: datetime
