"""User and invitation domain models and enums."""

import re
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


# Constants for validation
MAX_NAME_LENGTH = 50
EMAIL_PATTERN = re.compile(r"^[^@\s\"']+@[^@\s\"']+\.[^@\s\"']+$")


def normalize_email(value: str) -> str:
    """Lower-case and trim an email address, rejecting malformed ones."""
    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        msg = f"Invalid email address: {value}"
        raise ValueError(msg)
    return email


class InvitationStatus(StrEnum):
    """Home invitation status."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class User(BaseModel):
    """User profile data transfer object."""

    id: str = Field(..., description="Unique user ID from database")
    email: str = Field(..., description="Email address (lower-cased)")
    name: str | None = Field(default=None, description="Display name of the user")
    photo_url: str | None = Field(default=None, description="Avatar URL")
    created_at: datetime
    last_login_at: datetime

    @field_validator("name")
    @classmethod
    def validate_name_length(cls, v: str | None) -> str | None:
        """Validate name fits the display limit."""
        if v is None:
            return v
        v = v.strip()
        if len(v) > MAX_NAME_LENGTH:
            raise ValueError(f"Name too long (max {MAX_NAME_LENGTH} characters)")
        return v or None


class HomeInvitation(BaseModel):
    """Invitation for an email address to join a home."""

    id: str
    home_id: str
    invited_email: str
    invited_by: str
    status: InvitationStatus = InvitationStatus.PENDING
    created_at: datetime
