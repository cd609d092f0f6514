"""APScheduler setup and job registration."""

from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from kharcha.config import settings
from kharcha.jobs.snapshot_poll import snapshot_poll
from kharcha.services.change_feed import ChangeFeed

scheduler = AsyncIOScheduler(timezone=settings.timezone)


def register_jobs(feed: ChangeFeed) -> None:
    """Register all periodic jobs if not already present."""
    interval = settings.snapshot_poll_interval_seconds
    if interval > 0 and scheduler.get_job("snapshot_poll") is None:
        scheduler.add_job(
            snapshot_poll,
            IntervalTrigger(seconds=interval, timezone=settings.timezone),
            args=[feed],
            id="snapshot_poll",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
