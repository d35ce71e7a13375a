"""Task service for CRUD operations and the completion path."""

import logging
from datetime import UTC, datetime
from typing import Any

from src.core import db_client
from src.core.logging import span
from src.domain.create_models import TaskCreate
from src.domain.task import TaskStatus
from src.domain.update_models import TaskUpdate
from src.modules.tasks import state_machine
from src.services import home_service


logger = logging.getLogger(__name__)


async def create_task(
    *,
    home_id: str,
    title: str,
    created_by: str,
    description: str | None = None,
    room_id: str | None = None,
    group_id: str | None = None,
    assigned_to: str | None = None,
    due_date: datetime | None = None,
    recurrence_days: int | None = None,
) -> dict[str, Any]:
    """Create a new task in a home.

    Args:
        home_id: Owning home ID
        title: Task title (e.g., "Water the plants")
        created_by: Creator user ID
        description: Detailed description
        room_id: Room the task belongs to (None for the whole home)
        group_id: Group the task belongs to
        assigned_to: User ID to assign the task to
        due_date: First due date
        recurrence_days: Days between occurrences (requires due_date)

    Returns:
        Created task record

    Raises:
        ValueError: If the title is empty or the recurrence is invalid
        db_client.DatabaseError: If database operation fails
    """
    with span("task_service.create_task"):
        payload = TaskCreate(
            home_id=home_id,
            title=title,
            created_by=created_by,
            description=description,
            room_id=room_id,
            group_id=group_id,
            assigned_to=assigned_to,
            due_date=due_date,
            recurrence_days=recurrence_days,
        )

        task_data = payload.to_record()
        task_data["created_at"] = datetime.now(UTC)

        record = await db_client.create_record(collection="tasks", data=task_data)
        logger.info(
            "Created task: %s (home: %s, every %s days)",
            payload.title,
            home_id,
            payload.recurrence_days or "-",
        )
        return record


async def get_tasks_by_home(*, home_id: str, status: TaskStatus | None = None) -> list[dict[str, Any]]:
    """Get tasks for a home, newest first.

    Args:
        home_id: Home ID
        status: Optional status filter

    Returns:
        List of task records
    """
    with span("task_service.get_tasks_by_home"):
        filters = [f'home_id = "{db_client.sanitize_param(home_id)}"']
        if status:
            filters.append(f'status = "{status}"')

        return await db_client.list_all_records(
            collection="tasks",
            filter_query=" && ".join(filters),
            sort="-created_at",
        )


async def get_tasks_by_user(*, user_id: str) -> list[dict[str, Any]]:
    """Get tasks across every home the user belongs to, newest first.

    Args:
        user_id: Member user ID

    Returns:
        List of task records (empty if the user has no homes)
    """
    with span("task_service.get_tasks_by_user"):
        home_ids = await home_service.get_home_ids_for_user(user_id=user_id)
        if not home_ids:
            return []

        return await db_client.list_records_matching_any(
            collection="tasks",
            field="home_id",
            values=home_ids,
            sort="-created_at",
        )


async def query_tasks_by_home_ids_and_status(
    *,
    home_ids: list[str],
    status: TaskStatus,
) -> list[dict[str, Any]]:
    """Get every task in the given homes with the given status.

    Returns an empty list when no home IDs are given.
    """
    if not home_ids:
        return []

    return await db_client.list_records_matching_any(
        collection="tasks",
        field="home_id",
        values=home_ids,
        filter_query=f'status = "{status}"',
    )


async def get_task_by_id(*, task_id: str) -> dict[str, Any]:
    """Get task by ID.

    Raises:
        db_client.RecordNotFoundError: If task not found
    """
    return await db_client.get_record(collection="tasks", record_id=task_id)


async def update_task(*, task_id: str, updates: TaskUpdate) -> dict[str, Any]:
    """Apply a partial update to a task's details.

    Clearing the due date also clears the recurrence, since a task may only
    recur while it has a due date.

    Args:
        task_id: Task ID
        updates: Fields to change; explicit None clears a field

    Returns:
        Updated task record

    Raises:
        ValueError: If the recurrence is invalid or set without a due date
        db_client.RecordNotFoundError: If task not found
    """
    with span("task_service.update_task"):
        changes = updates.changes()
        if not changes:
            return await get_task_by_id(task_id=task_id)

        if "due_date" in changes and changes["due_date"] is None:
            changes["recurrence_days"] = None

        if changes.get("recurrence_days") is not None:
            state_machine.validate_recurrence_days(changes["recurrence_days"])
            due_date = changes.get("due_date")
            if due_date is None:
                current = await get_task_by_id(task_id=task_id)
                due_date = current.get("due_date")
            if due_date is None:
                msg = f"Invalid recurrence: task {task_id} has no due date"
                raise ValueError(msg)

        record = await db_client.update_record(collection="tasks", record_id=task_id, data=changes)
        logger.info("Updated task %s fields: %s", task_id, ", ".join(sorted(changes)))
        return record


async def update_task_status(*, task_id: str, status: TaskStatus) -> dict[str, Any]:
    """Change a task's status; completing a recurring task advances its due date.

    Raises:
        db_client.RecordNotFoundError: If task not found
    """
    return await state_machine.transition_status(task_id=task_id, status=status)


async def update_task_due_date(*, task_id: str, due_date: datetime) -> dict[str, Any]:
    """Persist a new due date for a task.

    Raises:
        db_client.RecordNotFoundError: If task not found
    """
    with span("task_service.update_task_due_date"):
        return await db_client.update_record(
            collection="tasks",
            record_id=task_id,
            data={"due_date": due_date},
        )


async def delete_task(*, task_id: str) -> None:
    """Delete a task.

    Raises:
        db_client.RecordNotFoundError: If task not found
    """
    with span("task_service.delete_task"):
        await db_client.delete_record(collection="tasks", record_id=task_id)
        logger.info("Deleted task %s", task_id)
