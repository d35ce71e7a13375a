"""homekeeper - shared household tasks with recurring schedules."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.core.cache_client import profile_cache
from src.core.config import constants, settings
from src.core.db_client import close_connection, init_db
from src.core.logging import configure_logfire, instrument_fastapi
from src.core.scheduler import scheduler, start_scheduler, stop_scheduler
from src.core.scheduler_tracker import job_tracker
from src.interface.api_router import router as api_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    # Configure logging first so startup logs are captured
    configure_logfire()

    await init_db()
    logger.info("Database initialized", extra={"db_path": settings.sqlite_db_path})

    if settings.enable_scheduler:
        start_scheduler()
    else:
        logger.info("Scheduler disabled by configuration")
    yield
    # Shutdown
    stop_scheduler()
    await close_connection()


app = FastAPI(
    title="homekeeper",
    description="Shared household tasks with recurring schedules",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(api_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(
        content={"status": "healthy", "profile_cache": profile_cache.get_health_status()},
        status_code=constants.HTTP_OK,
    )


@app.get("/health/scheduler")
async def scheduler_health_check() -> JSONResponse:
    """Scheduler health check endpoint with job status."""
    job_status = await job_tracker.get_job_status(constants.SCHEDULE_CHECK_JOB_ID)
    recent_failures = job_tracker.get_recent_failures()

    overall_status = "degraded" if job_status["consecutive_failures"] > 0 else "healthy"

    return JSONResponse(
        content={
            "status": overall_status,
            "scheduler_running": scheduler.running,
            "jobs": {constants.SCHEDULE_CHECK_JOB_ID: job_status},
            "recent_failures": recent_failures,
        },
        status_code=constants.HTTP_OK if overall_status == "healthy" else constants.HTTP_SERVICE_UNAVAILABLE,
    )
