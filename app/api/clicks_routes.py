"""AdPulse — Click-Stream API Routes."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.config import settings
from app.core.logging import get_logger
from app.database import get_session
from app.models.reporting_models import ClickOut, PurgeResponse
from app.reporting.query import clamp_limit, list_clicks
from app.reporting.retention import purge_yesterdays_clicks

logger = get_logger("api.clicks")

router = APIRouter(prefix="/clicks", tags=["Clicks"])


@router.get("", response_model=List[ClickOut])
def get_clicks(
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.clicks_default_limit, ge=1),
    session: Session = Depends(get_session),
):
    """List click counters, highest click count first."""
    limit = clamp_limit(limit, settings.clicks_max_limit)
    try:
        result = list_clicks(session, page=page, limit=limit)
    except SQLAlchemyError as e:
        logger.error(
            f"Failed to list clicks: {e}",
            extra={"operation": "list_clicks", "params": {"page": page, "limit": limit}},
        )
        raise HTTPException(status_code=500, detail="Internal server error")

    response.headers["Cache-Control"] = "no-store"
    response.headers["X-Total-Count"] = str(result.total)
    response.headers["X-Total-Pages"] = str(result.total_pages)
    return [ClickOut.from_row(row, settings.default_click_pixel) for row in result.rows]


@router.delete("/yesterday", response_model=PurgeResponse)
def purge_clicks_yesterday(session: Session = Depends(get_session)):
    """Delete yesterday's click counters (same purge as the daily job)."""
    try:
        result = purge_yesterdays_clicks(session)
    except SQLAlchemyError as e:
        logger.error(f"Clicks purge failed: {e}", extra={"operation": "purge_clicks"})
        raise HTTPException(status_code=500, detail="Internal server error")
    return PurgeResponse(message=result.message, deleted=result.deleted)
