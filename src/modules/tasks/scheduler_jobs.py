"""Scheduled jobs for tasks module.

This module provides the daily reactivation sweep: completed recurring
tasks whose next due date has arrived are flipped back to pending.
"""

import asyncio
import logging
from datetime import date

from pydantic import BaseModel, Field

from src.core.logging import log_with_context, span
from src.domain.task import Task, TaskStatus
from src.modules.tasks import service, state_machine
from src.services import home_service


logger = logging.getLogger(__name__)


class SweepResult(BaseModel):
    """Outcome of one reactivation sweep."""

    today: date
    scanned: int = 0
    reactivated: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict, description="Task ID to error text")

    @property
    def has_failures(self) -> bool:
        """Whether any task update failed."""
        return bool(self.failed)


async def perform_daily_schedule_check(*, home_ids: list[str], today: date | None = None) -> SweepResult:
    """Reactivate completed recurring tasks that are due on or before today.

    Only tasks in the given homes are considered. Each task update is
    independent: a failed write is recorded in the result and logged, and
    the remaining updates still complete. Due dates are never changed here.

    Args:
        home_ids: Homes to sweep (empty means nothing to do)
        today: Local calendar date to compare against (defaults to today
            in the configured timezone)

    Returns:
        SweepResult with scanned count, reactivated IDs and failures

    Raises:
        db_client.DatabaseError: If the initial task query fails
    """
    today = today or state_machine.local_today()
    result = SweepResult(today=today)

    if not home_ids:
        logger.debug("No homes to sweep")
        return result

    with span("task_scheduler.perform_daily_schedule_check"):
        records = await service.query_tasks_by_home_ids_and_status(
            home_ids=home_ids,
            status=TaskStatus.COMPLETED,
        )
        result.scanned = len(records)

        due_ids = [
            record["id"]
            for record in records
            if state_machine.is_due_for_reactivation(Task.model_validate(record), today)
        ]
        if not due_ids:
            log_with_context(logger, "info", "Schedule check found nothing to reactivate", scanned=result.scanned)
            return result

        outcomes = await asyncio.gather(
            *(state_machine.reactivate(task_id=task_id) for task_id in due_ids),
            return_exceptions=True,
        )

        for task_id, outcome in zip(due_ids, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                result.failed[task_id] = str(outcome) or type(outcome).__name__
                logger.warning(
                    "Failed to reactivate task %s: %s",
                    task_id,
                    outcome,
                    extra={"task_id": task_id, "error_type": type(outcome).__name__},
                )
            else:
                result.reactivated.append(task_id)

        logger.info(
            "Schedule check reactivated %d of %d due tasks",
            len(result.reactivated),
            len(due_ids),
            extra={"today": today.isoformat(), "failed": len(result.failed)},
        )
        return result


async def run_daily_schedule_check() -> None:
    """Sweep every home.

    Registered with the scheduler; raises if the sweep query fails so the
    job tracker records the failure.
    """
    home_ids = await home_service.list_home_ids()
    result = await perform_daily_schedule_check(home_ids=home_ids)
    if result.has_failures:
        logger.warning(
            "Daily schedule check finished with %d failed updates",
            len(result.failed),
            extra={"failed_ids": list(result.failed)},
        )
