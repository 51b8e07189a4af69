"""AdPulse — Scheduler Jobs.

APScheduler cron jobs for the retention purges, evaluated in the fixed
report offset (UTC+3 by default):
  - yesterday's clicks, daily at 00:00
  - previous month's approvals, on the 1st at 00:00

A failed run is logged; the next run proceeds on its own schedule.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from app.config import settings
from app.core.cache import APPROVALS_TAG, get_cache
from app.database import get_session
from app.reporting.retention import (
    purge_previous_month_approvals,
    purge_yesterdays_clicks,
    utc_offset_label,
)
from app.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler(timezone=settings.report_tz)


async def click_cleanup_job():
    """Delete yesterday's click counters."""
    logger.info("Scheduled click cleanup starting...")
    try:
        session = next(get_session())
        try:
            result = purge_yesterdays_clicks(session)
        finally:
            session.close()
        logger.info(
            f"Scheduled click cleanup complete: {result.message}",
            extra={"operation": "purge_clicks", "affected_rows": result.deleted},
        )
    except Exception as e:
        logger.error(f"Scheduled click cleanup failed: {e}")


async def approval_cleanup_job():
    """Delete last month's approvals."""
    logger.info("Scheduled approval cleanup starting...")
    try:
        session = next(get_session())
        try:
            result = purge_previous_month_approvals(session)
        finally:
            session.close()
        get_cache().invalidate(APPROVALS_TAG)
        logger.info(
            f"Scheduled approval cleanup complete: {result.message}",
            extra={"operation": "purge_approvals", "affected_rows": result.deleted},
        )
    except Exception as e:
        logger.error(f"Scheduled approval cleanup failed: {e}")


def start_scheduler():
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler.add_job(
        click_cleanup_job,
        "cron",
        hour=0,
        minute=0,
        id="click_cleanup",
        replace_existing=True,
        misfire_grace_time=3600,
    )
    scheduler.add_job(
        approval_cleanup_job,
        "cron",
        day=1,
        hour=0,
        minute=0,
        id="approval_cleanup",
        replace_existing=True,
        misfire_grace_time=3600,
    )
    scheduler.start()
    logger.info(f"Scheduler started. Retention jobs run at 00:00 {utc_offset_label()}")


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
