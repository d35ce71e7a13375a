"""Habit service for repeatable habits and their completion history."""

import logging
from datetime import UTC, datetime
from typing import Any

from src.core import db_client
from src.core.logging import span
from src.domain.create_models import HabitCreate
from src.domain.update_models import HabitUpdate
from src.services import home_service


logger = logging.getLogger(__name__)


async def create_habit(
    *,
    home_id: str,
    title: str,
    created_by: str,
    description: str | None = None,
    room_id: str | None = None,
    group_id: str | None = None,
) -> dict[str, Any]:
    """Create a habit in a home.

    Args:
        home_id: Owning home ID
        title: Habit title (e.g., "Drink water")
        created_by: Creator user ID
        description: Detailed description
        room_id: Room the habit belongs to
        group_id: Group the habit belongs to

    Returns:
        Created habit record

    Raises:
        ValueError: If the title is empty or too long
    """
    with span("habit_service.create_habit"):
        payload = HabitCreate(
            home_id=home_id,
            title=title,
            created_by=created_by,
            description=description,
            room_id=room_id,
            group_id=group_id,
        )
        data = payload.model_dump(exclude_none=True)
        data["created_at"] = datetime.now(UTC)

        record = await db_client.create_record(collection="habits", data=data)
        logger.info("Created habit: %s (home: %s)", payload.title, home_id)
        return record


async def get_habits_by_home(*, home_id: str) -> list[dict[str, Any]]:
    """Get a home's habits, newest first."""
    return await db_client.list_all_records(
        collection="habits",
        filter_query=f'home_id = "{db_client.sanitize_param(home_id)}"',
        sort="-created_at",
    )


async def get_habits_by_user(*, user_id: str) -> list[dict[str, Any]]:
    """Get habits across every home the user belongs to, newest first."""
    home_ids = await home_service.get_home_ids_for_user(user_id=user_id)
    if not home_ids:
        return []

    return await db_client.list_records_matching_any(
        collection="habits",
        field="home_id",
        values=home_ids,
        sort="-created_at",
    )


async def complete_habit(*, habit_id: str, completed_by: str) -> dict[str, Any]:
    """Record one completion of a habit.

    Raises:
        db_client.RecordNotFoundError: If habit not found
    """
    with span("habit_service.complete_habit"):
        habit = await db_client.get_record(collection="habits", record_id=habit_id)
        record = await db_client.create_record(
            collection="habit_completions",
            data={
                "habit_id": habit_id,
                "completed_by": completed_by,
                "completed_at": datetime.now(UTC),
                "home_id": habit["home_id"],
            },
        )
        logger.info("User %s completed habit %s", completed_by, habit_id)
        return record


async def get_habit_completions(*, habit_id: str) -> list[dict[str, Any]]:
    """Get a habit's completions, newest first."""
    return await db_client.list_all_records(
        collection="habit_completions",
        filter_query=f'habit_id = "{db_client.sanitize_param(habit_id)}"',
        sort="-completed_at",
    )


async def get_last_habit_completion(*, habit_id: str) -> dict[str, Any] | None:
    """Get a habit's most recent completion, or None if never completed."""
    completions = await db_client.list_records(
        collection="habit_completions",
        per_page=1,
        filter_query=f'habit_id = "{db_client.sanitize_param(habit_id)}"',
        sort="-completed_at",
    )
    return completions[0] if completions else None


async def update_habit(*, habit_id: str, updates: HabitUpdate) -> dict[str, Any]:
    """Apply a partial update to a habit.

    Raises:
        db_client.RecordNotFoundError: If habit not found
    """
    changes = updates.changes()
    if not changes:
        return await db_client.get_record(collection="habits", record_id=habit_id)
    return await db_client.update_record(collection="habits", record_id=habit_id, data=changes)


async def delete_habit(*, habit_id: str) -> None:
    """Delete a habit and its completion history.

    Raises:
        db_client.RecordNotFoundError: If habit not found
    """
    with span("habit_service.delete_habit"):
        completions = await get_habit_completions(habit_id=habit_id)
        for completion in completions:
            await db_client.delete_record(collection="habit_completions", record_id=completion["id"])

        await db_client.delete_record(collection="habits", record_id=habit_id)
        logger.info("Deleted habit %s and %d completions", habit_id, len(completions))
