from src.services import (
    group_service,
    habit_service,
    home_service,
    invitation_service,
    room_service,
    user_service,
)


__all__ = [
    "group_service",
    "habit_service",
    "home_service",
    "invitation_service",
    "room_service",
    "user_service",
]
