"""Domain models and DTOs."""

from src.domain.create_models import HabitCreate, TaskCreate
from src.domain.habit import Habit, HabitCompletion
from src.domain.home import Group, Home, HomeMember, Room
from src.domain.task import Task, TaskStatus
from src.domain.update_models import HabitUpdate, TaskUpdate
from src.domain.user import HomeInvitation, InvitationStatus, User


__all__ = [
    "Group",
    "Habit",
    "HabitCompletion",
    "HabitCreate",
    "HabitUpdate",
    "Home",
    "HomeInvitation",
    "HomeMember",
    "InvitationStatus",
    "Room",
    "Task",
    "TaskCreate",
    "TaskStatus",
    "TaskUpdate",
    "User",
]
