"""JSON API router for tasks and the schedule check."""

import logging
from datetime import date, datetime
from typing import Any, NoReturn

from fastapi import APIRouter, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from src.core import db_client
from src.core.config import constants
from src.core.errors import ErrorCategory, classify_error_with_response
from src.domain.task import TaskStatus
from src.modules.tasks import service as task_service
from src.modules.tasks.scheduler_jobs import SweepResult, perform_daily_schedule_check
from src.services import home_service


logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"])

_STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.PERMISSION_DENIED: constants.HTTP_FORBIDDEN,
    ErrorCategory.RECORD_NOT_FOUND: constants.HTTP_NOT_FOUND,
    ErrorCategory.STORE_UNAVAILABLE: constants.HTTP_SERVICE_UNAVAILABLE,
    ErrorCategory.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class TaskCreateRequest(BaseModel):
    """Request body for creating a task."""

    title: str
    created_by: str
    description: str | None = None
    room_id: str | None = None
    group_id: str | None = None
    assigned_to: str | None = None
    due_date: datetime | None = None
    recurrence_days: int | None = None


class TaskStatusRequest(BaseModel):
    """Request body for changing a task's status."""

    status: TaskStatus


class ScheduleCheckRequest(BaseModel):
    """Request body for running the reactivation sweep."""

    home_ids: list[str] = Field(default_factory=list)
    today: date | None = None


def _raise_http_error(exc: Exception, *, operation: str) -> NoReturn:
    """Translate a service exception into an HTTP error response."""
    error_response = classify_error_with_response(exc)
    status_code = _STATUS_BY_CATEGORY.get(error_response.category, constants.HTTP_BAD_REQUEST)

    log = logger.error if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.info
    log(
        "api_request_failed",
        extra={"operation": operation, "code": error_response.code, "error": str(exc)},
    )
    raise HTTPException(status_code=status_code, detail=error_response.model_dump(mode="json")) from exc


@router.post("/homes/{home_id}/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(home_id: str, request: TaskCreateRequest) -> dict[str, Any]:
    """Create a task in a home."""
    try:
        if await home_service.get_home_by_id(home_id=home_id) is None:
            raise db_client.RecordNotFoundError(f"Home {home_id} not found")
        return await task_service.create_task(home_id=home_id, **request.model_dump())
    except Exception as e:
        _raise_http_error(e, operation="create_task")


@router.get("/homes/{home_id}/tasks")
async def list_tasks(
    home_id: str,
    status_filter: TaskStatus | None = Query(default=None, alias="status"),
) -> list[dict[str, Any]]:
    """List a home's tasks, newest first, optionally filtered by status."""
    try:
        return await task_service.get_tasks_by_home(home_id=home_id, status=status_filter)
    except Exception as e:
        _raise_http_error(e, operation="list_tasks")


@router.patch("/tasks/{task_id}/status")
async def update_task_status(task_id: str, request: TaskStatusRequest) -> dict[str, Any]:
    """Change a task's status; completing a recurring task advances its due date."""
    try:
        return await task_service.update_task_status(task_id=task_id, status=request.status)
    except Exception as e:
        _raise_http_error(e, operation="update_task_status")


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str) -> Response:
    """Delete a task."""
    try:
        await task_service.delete_task(task_id=task_id)
    except Exception as e:
        _raise_http_error(e, operation="delete_task")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/schedule-check")
async def schedule_check(request: ScheduleCheckRequest) -> SweepResult:
    """Run the reactivation sweep for the given homes.

    Partial failures are reported in the body with a 200 status.
    """
    try:
        return await perform_daily_schedule_check(home_ids=request.home_ids, today=request.today)
    except Exception as e:
        _raise_http_error(e, operation="schedule_check")
