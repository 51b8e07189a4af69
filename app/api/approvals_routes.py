"""AdPulse — Approvals API Routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.config import settings
from app.core.cache import APPROVALS_TAG, ReportCache, get_cache
from app.core.logging import get_logger
from app.database import get_session
from app.models.reporting_models import ApprovalOut, ApprovalReport, PurgeResponse
from app.reporting.export import approvals_to_csv, export_filename
from app.reporting.filters import DateWindow, FilterMode, SortDirection, report_today
from app.reporting.query import clamp_limit, list_approvals, parse_day, parse_range
from app.reporting.report import (
    DEFAULT_PAGE_SIZE,
    ReportParams,
    build_report,
    filtered_records,
)
from app.reporting.retention import purge_previous_month_approvals

logger = get_logger("api.approvals")

router = APIRouter(prefix="/approvals", tags=["Approvals"])

SERVER_ERROR = "Internal server error"


def _report_params(
    mode: FilterMode = Query(FilterMode.RANGE, description="today | single_day | range"),
    day: Optional[str] = Query(None, description="Day for single_day mode (YYYY-MM-DD)"),
    start_date: Optional[str] = Query(None, description="Range start (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="Range end (YYYY-MM-DD)"),
    search: str = Query("", description="Matches campaign, buyer, country, offer, sub id"),
    sort: str = Query("id", description="Column to sort by"),
    direction: SortDirection = Query(SortDirection.ASC),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=1000),
) -> ReportParams:
    """Dependency — validates dashboard query params into ReportParams."""
    single = parse_day("day", day)
    start, end = parse_range(start_date, end_date)
    window = DateWindow.resolve(mode, day=single, start=start, end=end)
    return ReportParams(
        window=window,
        search=search,
        sort=sort,
        direction=direction,
        page=page,
        page_size=page_size,
    )


# ── Endpoints ──


@router.get("", response_model=List[ApprovalOut])
def get_approvals(
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.approvals_default_limit, ge=1),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    fetch_all: bool = Query(False, description="Skip pagination"),
    session: Session = Depends(get_session),
):
    """List approvals newest first, optionally bounded to a day range.

    Totals are returned in the ``X-Total-Count`` / ``X-Total-Pages`` headers.
    """
    start, end = parse_range(start_date, end_date)
    limit = clamp_limit(limit, settings.approvals_max_limit)

    try:
        result = list_approvals(
            session, page=page, limit=limit, start=start, end=end, fetch_all=fetch_all
        )
    except SQLAlchemyError as e:
        logger.error(
            f"Failed to list approvals: {e}",
            extra={
                "operation": "list_approvals",
                "params": {"page": page, "limit": limit,
                           "start_date": start_date, "end_date": end_date},
            },
        )
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    response.headers["Cache-Control"] = "no-store"
    response.headers["X-Total-Count"] = str(result.total)
    response.headers["X-Total-Pages"] = str(result.total_pages)
    return [ApprovalOut.from_row(row) for row in result.rows]


@router.get("/report", response_model=ApprovalReport)
def get_approvals_report(
    response: Response,
    params: ReportParams = Depends(_report_params),
    session: Session = Depends(get_session),
    cache: ReportCache = Depends(get_cache),
):
    """Filtered, sorted page plus top lists and the daily series."""
    try:
        report = build_report(session, params, cache)
    except SQLAlchemyError as e:
        logger.error(
            f"Failed to build approvals report: {e}",
            extra={"operation": "approvals_report", "params": params.cache_key()},
        )
        raise HTTPException(status_code=500, detail=SERVER_ERROR)
    response.headers["Cache-Control"] = "no-store"
    return report


@router.get("/export")
def export_approvals(
    params: ReportParams = Depends(_report_params),
    session: Session = Depends(get_session),
):
    """Download the whole filtered and sorted set as CSV."""
    try:
        records = filtered_records(session, params)
    except SQLAlchemyError as e:
        logger.error(
            f"Failed to export approvals: {e}",
            extra={"operation": "export_approvals", "params": params.cache_key()},
        )
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    filename = export_filename(report_today())
    logger.info(f"Exported {len(records)} approvals to {filename}")
    return Response(
        content=approvals_to_csv(records),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-store",
        },
    )


@router.delete("/older-than-six-months", response_model=PurgeResponse)
def purge_old_approvals(
    session: Session = Depends(get_session),
    cache: ReportCache = Depends(get_cache),
):
    """Delete approvals created during the previous calendar month.

    Same purge the monthly scheduled job runs.
    """
    try:
        result = purge_previous_month_approvals(session)
    except SQLAlchemyError as e:
        logger.error(f"Approvals purge failed: {e}", extra={"operation": "purge_approvals"})
        raise HTTPException(status_code=500, detail=SERVER_ERROR)
    cache.invalidate(APPROVALS_TAG)
    return PurgeResponse(message=result.message, deleted=result.deleted)
