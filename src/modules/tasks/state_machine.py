"""Recurrence arithmetic and status transitions for the task lifecycle."""

import logging
from datetime import UTC, date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from src.core import db_client
from src.core.config import constants, settings
from src.core.logging import span
from src.domain.task import Task, TaskStatus


logger = logging.getLogger(__name__)


def validate_recurrence_days(recurrence_days: object) -> int:
    """Return the interval if it is a positive whole number of days.

    Raises:
        ValueError: If the interval is zero, negative, or not an integer
    """
    if isinstance(recurrence_days, bool) or not isinstance(recurrence_days, int):
        msg = f"Invalid recurrence: recurrence_days must be a positive integer, got {recurrence_days!r}"
        raise ValueError(msg)
    if recurrence_days <= 0:
        msg = f"Invalid recurrence: recurrence_days must be a positive integer, got {recurrence_days}"
        raise ValueError(msg)
    return recurrence_days


def advance_due_date(due_date: datetime, recurrence_days: int, tz: ZoneInfo | None = None) -> datetime:
    """Return the next due date: exactly recurrence_days * 86,400,000 ms later.

    Fixed-interval arithmetic on the absolute instant; there is no
    calendar-month logic, so day-of-month drift is expected. Aware inputs
    keep their tzinfo but are shifted in UTC, so DST changes never alter
    the elapsed time. Naive inputs are read as local time, like local_date
    reads them, and come back naive.
    """
    days = validate_recurrence_days(recurrence_days)
    interval = timedelta(milliseconds=days * constants.MILLISECONDS_PER_DAY)

    if due_date.tzinfo is None:
        local_tz = tz or settings.tz
        shifted = due_date.replace(tzinfo=local_tz).astimezone(UTC) + interval
        return shifted.astimezone(local_tz).replace(tzinfo=None)
    return (due_date.astimezone(UTC) + interval).astimezone(due_date.tzinfo)


def local_date(moment: datetime, tz: ZoneInfo | None = None) -> date:
    """Truncate a timestamp to its calendar date in the local timezone.

    Naive timestamps are taken to already be local.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz or settings.tz).date()


def local_today(tz: ZoneInfo | None = None) -> date:
    """Return today's date in the local timezone."""
    return datetime.now(tz or settings.tz).date()


def is_due_for_reactivation(task: Task, today: date, tz: ZoneInfo | None = None) -> bool:
    """Check whether a completed recurring task's next occurrence has arrived.

    The boundary is inclusive: a task due today is reactivated today.
    """
    if task.status != TaskStatus.COMPLETED:
        return False
    if task.recurrence_days is None or task.due_date is None:
        return False
    return local_date(task.due_date, tz) <= today


async def transition_status(*, task_id: str, status: TaskStatus) -> dict[str, Any]:
    """Move a task to a new status.

    Entering COMPLETED stamps completed_at and, for recurring tasks,
    advances due_date by one interval from the previous due date (not from
    now), so an overdue task does not catch up. Re-applying the current
    status changes nothing.

    Every status can move to every other status; there is no terminal state.

    Raises:
        db_client.RecordNotFoundError: If the task does not exist
    """
    with span("task_state_machine.transition_status"):
        record = await db_client.get_record(collection="tasks", record_id=task_id)
        task = Task.model_validate(record)

        if task.status == status:
            logger.debug("Task %s already %s, nothing to do", task_id, status)
            return record

        update_data: dict[str, Any] = {"status": status}

        if status == TaskStatus.COMPLETED:
            update_data["completed_at"] = datetime.now(UTC)
            if task.is_recurring:
                update_data["due_date"] = advance_due_date(task.due_date, task.recurrence_days)

        updated_record = await db_client.update_record(
            collection="tasks",
            record_id=task_id,
            data=update_data,
        )

        logger.info(
            "Transitioned task %s from %s to %s",
            task_id,
            task.status,
            status,
            extra={"task_id": task_id, "next_due_date": str(update_data.get("due_date", ""))},
        )
        return updated_record


async def reactivate(*, task_id: str) -> dict[str, Any]:
    """Flip a task back to PENDING without touching its due date."""
    return await db_client.update_record(
        collection="tasks",
        record_id=task_id,
        data={"status": TaskStatus.PENDING},
    )
