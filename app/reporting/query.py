"""AdPulse — Reporting Query Layer.

Date-bounded, paginated reads over approvals and clicks. The count and the
page are two separate statements with the same predicate; they are not run
in one transaction.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from app.core.errors import ParameterValidationError
from app.core.logging import get_logger
from app.models.reporting_models import Approval, Click
from app.reporting.filters import end_of_day, start_of_day

logger = get_logger("reporting.query")

DATE_FORMAT = "%Y-%m-%d"
DATE_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass
class Page:
    """One page of rows plus counts computed with the same predicate."""

    rows: List[Any] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0


def parse_day(name: str, value: Optional[str]) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` query value; None passes through."""
    if value is None or value == "":
        return None
    try:
        if not DATE_SHAPE.fullmatch(value):
            raise ValueError(value)
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ParameterValidationError(
            [{"param": name, "value": value, "msg": f"Invalid {name} format (YYYY-MM-DD)"}]
        )


def parse_range(start_date: Optional[str], end_date: Optional[str]):
    """Validate both bounds, reporting every bad one at once."""
    errors = []
    parsed = []
    for name, value in (("start_date", start_date), ("end_date", end_date)):
        try:
            parsed.append(parse_day(name, value))
        except ParameterValidationError as e:
            errors.extend(e.errors)
            parsed.append(None)
    if errors:
        raise ParameterValidationError(errors)
    return parsed[0], parsed[1]


def clamp_limit(limit: int, maximum: int) -> int:
    """Oversized limits are clamped to the table maximum, not rejected."""
    return max(1, min(maximum, int(limit)))


def total_pages_for(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def _approval_conditions(start: Optional[date], end: Optional[date]) -> list:
    # A lone bound is validated upstream but filters nothing.
    if start is None or end is None:
        return []
    return [
        Approval.created_at >= start_of_day(start),
        Approval.created_at <= end_of_day(end),
    ]


def count_approvals(
    session: Session, start: Optional[date] = None, end: Optional[date] = None
) -> int:
    stmt = select(func.count()).select_from(Approval)
    conditions = _approval_conditions(start, end)
    if conditions:
        stmt = stmt.where(*conditions)
    return int(session.exec(stmt).one())


def approvals_fingerprint(
    session: Session, start: Optional[date] = None, end: Optional[date] = None
) -> str:
    """Row count and highest id inside the range.

    Approvals are only ever inserted or purged, so any write that changes
    the range's rows changes this value.
    """
    stmt = select(func.count(), func.max(Approval.id)).select_from(Approval)
    conditions = _approval_conditions(start, end)
    if conditions:
        stmt = stmt.where(*conditions)
    count, max_id = session.exec(stmt).one()
    return f"{int(count)}:{max_id or 0}"


def list_approvals(
    session: Session,
    page: int = 1,
    limit: int = 1000,
    start: Optional[date] = None,
    end: Optional[date] = None,
    fetch_all: bool = False,
) -> Page:
    """Approvals newest first, restricted to ``[start 00:00, end 23:59:59.999999]``.

    ``fetch_all`` skips pagination but still applies the date predicate.
    """
    conditions = _approval_conditions(start, end)
    total = count_approvals(session, start, end)

    stmt = select(Approval)
    if conditions:
        stmt = stmt.where(*conditions)
    stmt = stmt.order_by(Approval.created_at.desc(), Approval.id.desc())  # type: ignore
    if not fetch_all:
        stmt = stmt.offset((page - 1) * limit).limit(limit)

    rows = list(session.exec(stmt).all())
    total_pages = 1 if fetch_all else total_pages_for(total, limit)

    logger.info(
        f"Listed {len(rows)} of {total} approvals",
        extra={
            "operation": "list_approvals",
            "params": {
                "page": page,
                "limit": None if fetch_all else limit,
                "start_date": start.isoformat() if start else None,
                "end_date": end.isoformat() if end else None,
            },
        },
    )
    return Page(rows=rows, total=total, total_pages=total_pages)


def list_clicks(session: Session, page: int = 1, limit: int = 50) -> Page:
    """Click counters, busiest campaigns first."""
    total = int(session.exec(select(func.count()).select_from(Click)).one())
    rows = list(
        session.exec(
            select(Click)
            .order_by(Click.click_count.desc(), Click.campaign_id)  # type: ignore
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()
    )
    logger.info(
        f"Listed {len(rows)} of {total} clicks",
        extra={"operation": "list_clicks", "params": {"page": page, "limit": limit}},
    )
    return Page(rows=rows, total=total, total_pages=total_pages_for(total, limit))
