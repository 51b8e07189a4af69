"""AdPulse — Retention Purges.

Shared by the scheduled jobs and the on-demand DELETE endpoints, so both
paths use identical date math. All dates are computed in the fixed report
offset (UTC+3 by default). Re-running a purge deletes nothing new.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import delete
from sqlmodel import Session

from app.config import settings
from app.core.logging import get_logger
from app.models.reporting_models import Approval, Click
from app.reporting.filters import end_of_day, report_today, start_of_day

logger = get_logger("reporting.retention")


@dataclass(frozen=True)
class PurgeResult:
    deleted: int
    start: date
    end: date

    @property
    def message(self) -> str:
        if self.start == self.end:
            return f"Deleted {self.deleted} rows for {self.start.isoformat()}"
        return (
            f"Deleted {self.deleted} rows for "
            f"{self.start.isoformat()} - {self.end.isoformat()}"
        )


def yesterday(now: Optional[datetime] = None) -> date:
    return report_today(now) - timedelta(days=1)


def previous_month(now: Optional[datetime] = None) -> tuple[date, date]:
    """First and last calendar day of the month before ``now``."""
    first_this_month = report_today(now).replace(day=1)
    last_prev = first_this_month - timedelta(days=1)
    return last_prev.replace(day=1), last_prev


def purge_yesterdays_clicks(
    session: Session, now: Optional[datetime] = None
) -> PurgeResult:
    """Delete click counters dated exactly yesterday."""
    day = yesterday(now)
    result = session.exec(delete(Click).where(Click.date == day))  # type: ignore
    session.commit()
    deleted = result.rowcount or 0
    logger.info(
        f"Purged {deleted} clicks for {day.isoformat()}",
        extra={"operation": "purge_clicks", "affected_rows": deleted},
    )
    return PurgeResult(deleted=deleted, start=day, end=day)


def purge_previous_month_approvals(
    session: Session, now: Optional[datetime] = None
) -> PurgeResult:
    """Delete approvals created during the previous calendar month."""
    first, last = previous_month(now)
    result = session.exec(
        delete(Approval).where(
            Approval.created_at >= start_of_day(first),  # type: ignore
            Approval.created_at <= end_of_day(last),  # type: ignore
        )
    )
    session.commit()
    deleted = result.rowcount or 0
    logger.info(
        f"Purged {deleted} approvals for {first.isoformat()} - {last.isoformat()}",
        extra={"operation": "purge_approvals", "affected_rows": deleted},
    )
    return PurgeResult(deleted=deleted, start=first, end=last)


def utc_offset_label() -> str:
    return f"UTC{settings.report_utc_offset_hours:+d}"
