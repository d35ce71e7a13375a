"""Tasks module: recurring task lifecycle and the daily reactivation sweep."""

from src.modules.tasks import scheduler_jobs, service, state_machine


__all__ = [
    "scheduler_jobs",
    "service",
    "state_machine",
]
