"""Scheduler for automated jobs (daily task reactivation)."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from src.core.config import constants, settings
from src.core.scheduler_tracker import run_tracked_job
from src.modules.tasks.scheduler_jobs import run_daily_schedule_check


logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler()


async def daily_schedule_check_job() -> None:
    """Run the daily sweep once, recording the outcome in the job tracker."""
    await run_tracked_job(run_daily_schedule_check, constants.SCHEDULE_CHECK_JOB_ID)


def register_jobs(target: AsyncIOScheduler) -> None:
    """Register all jobs on a scheduler."""
    target.add_job(
        daily_schedule_check_job,
        trigger=CronTrigger(
            hour=settings.schedule_check_hour,
            minute=settings.schedule_check_minute,
            timezone=settings.tz,
        ),
        id=constants.SCHEDULE_CHECK_JOB_ID,
        name="Reactivate Due Recurring Tasks",
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    logger.info(
        "Scheduled daily schedule check: daily at %02d:%02d %s",
        settings.schedule_check_hour,
        settings.schedule_check_minute,
        settings.timezone,
    )


def start_scheduler() -> None:
    """Start the scheduler and register all jobs.

    This should be called during FastAPI app startup.
    """
    logger.info("Starting scheduler")
    register_jobs(scheduler)
    scheduler.start()
    logger.info("Scheduler started")


def stop_scheduler() -> None:
    """Stop the scheduler.

    This should be called during FastAPI app shutdown.
    """
    if not scheduler.running:
        return
    logger.info("Stopping scheduler")
    scheduler.shutdown(wait=True)
    logger.info("Scheduler stopped")
