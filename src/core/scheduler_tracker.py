"""Job execution tracking and monitoring for scheduled jobs."""

import logging
from collections import deque
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from src.core.errors import is_transient_store_error


logger = logging.getLogger(__name__)


class JobTracker:
    """Track job execution history and health status."""

    def __init__(self, failure_history_size: int = 100) -> None:
        """Initialize job tracker."""
        self._storage: dict[str, dict[str, Any]] = {}
        self._failures: deque[tuple[str, str, str]] = deque(maxlen=failure_history_size)

    def _job(self, job_name: str) -> dict[str, Any]:
        return self._storage.setdefault(job_name, {})

    async def record_job_start(self, job_name: str) -> None:
        """Record job execution start.

        Args:
            job_name: Name of the scheduled job
        """
        self._job(job_name)["current_run"] = datetime.now(UTC).isoformat()

    async def record_job_success(self, job_name: str) -> None:
        """Record successful job execution.

        Args:
            job_name: Name of the scheduled job
        """
        job = self._job(job_name)
        job["last_success"] = datetime.now(UTC).isoformat()
        job["consecutive_failures"] = 0
        job["success_count"] = job.get("success_count", 0) + 1
        job.pop("current_run", None)

    async def record_job_failure(self, job_name: str, error: str) -> int:
        """Record failed job execution.

        Args:
            job_name: Name of the scheduled job
            error: Error message

        Returns:
            Number of consecutive failures including this one
        """
        now = datetime.now(UTC).isoformat()
        job = self._job(job_name)
        job["last_failure"] = now
        job["last_error"] = error[:500]  # Truncate long errors
        job["consecutive_failures"] = job.get("consecutive_failures", 0) + 1
        job["failure_count"] = job.get("failure_count", 0) + 1
        job.pop("current_run", None)

        self._failures.append((job_name, error[:500], now))
        return job["consecutive_failures"]

    async def get_job_status(self, job_name: str) -> dict[str, Any]:
        """Get job execution status.

        Args:
            job_name: Name of the scheduled job

        Returns:
            Dict with job status information
        """
        job_data = self._storage.get(job_name, {})
        return {
            "job_name": job_name,
            "last_success": job_data.get("last_success"),
            "last_failure": job_data.get("last_failure"),
            "last_error": job_data.get("last_error"),
            "consecutive_failures": job_data.get("consecutive_failures", 0),
            "success_count": job_data.get("success_count", 0),
            "failure_count": job_data.get("failure_count", 0),
            "currently_running": "current_run" in job_data,
            "current_run_started": job_data.get("current_run"),
        }

    def get_recent_failures(self) -> list[dict[str, str]]:
        """Get the most recent job failures, oldest first."""
        return [
            {"job_name": job_name, "error": error, "timestamp": timestamp}
            for job_name, error, timestamp in self._failures
        ]


# Global job tracker instance
job_tracker = JobTracker()


async def run_tracked_job(
    job_func: Callable[[], Awaitable[Any]],
    job_name: str,
    tracker: JobTracker | None = None,
) -> bool:
    """Execute a job once and record the outcome.

    Failures are logged and recorded but never re-raised or retried here;
    the next scheduled trigger is the retry.

    Args:
        job_func: Async function to execute
        job_name: Name of the job for tracking
        tracker: Tracker to record into (defaults to the global tracker)

    Returns:
        True if the job completed, False if it failed
    """
    tracker = tracker or job_tracker
    await tracker.record_job_start(job_name)

    try:
        logger.info("Executing %s", job_name)
        await job_func()
    except Exception as e:
        consecutive_failures = await tracker.record_job_failure(job_name, str(e))
        logger.error(
            "%s failed",
            job_name,
            extra={
                "error": str(e),
                "transient": is_transient_store_error(e),
                "consecutive_failures": consecutive_failures,
            },
        )
        return False

    await tracker.record_job_success(job_name)
    logger.info("%s completed successfully", job_name)
    return True
