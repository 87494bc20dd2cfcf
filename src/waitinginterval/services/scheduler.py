"""Timer host backed by APScheduler.

This module exposes a process-wide BackgroundScheduler and a timer facility
that turns each single-shot delay into a one-off "date" job. Jobs run on the
scheduler's worker threads, so registries using this host rely on their
internal lock.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

log = logging.getLogger(__name__)

_scheduler: BackgroundScheduler | None = None


def get_scheduler() -> BackgroundScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = BackgroundScheduler(timezone="UTC")
        _scheduler.start()
    return _scheduler


def shutdown_scheduler() -> None:
    global _scheduler
    if _scheduler and _scheduler.running:
        _scheduler.shutdown(wait=False)
    _scheduler = None


class SchedulerTimerFacility:
    """Schedule single-shot actions as one-off APScheduler jobs.

    Parameters
    ----------
    scheduler: BackgroundScheduler | None
        Scheduler to add jobs to. Defaults to the shared one from get_scheduler().
    """

    def __init__(self, scheduler: Optional[BackgroundScheduler] = None) -> None:
        self.scheduler = scheduler if scheduler is not None else get_scheduler()

    def schedule_after(self, delay: float, action: Callable[[], None]) -> Job:
        run_date = datetime.now(timezone.utc) + timedelta(seconds=max(0.0, delay))
        # A late tick still has to run, otherwise the interval silently dies
        return self.scheduler.add_job(action, "date", run_date=run_date, misfire_grace_time=None)

    def cancel(self, ref: Job) -> None:
        try:
            ref.remove()
        except JobLookupError:
            # Already ran (date jobs are dropped after firing) or already removed
            log.debug("Job %s already gone; nothing to cancel", ref.id)
