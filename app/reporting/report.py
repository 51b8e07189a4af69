"""AdPulse — Approvals Report.

Runs the dashboard pipeline on the server:
  fetch window rows (unpaginated) → filter/search/sort → aggregate → page

Aggregated reports are cached under the ``approvals`` tag, which the
retention purge invalidates. Rows are inserted by an outside ingest process
that never touches the cache, so each key also carries the window's row
fingerprint; a report is reused only while that fingerprint is unchanged.
"""

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from app.core.cache import APPROVALS_TAG, ReportCache
from app.core.logging import get_logger
from app.models.reporting_models import ApprovalOut, ApprovalReport
from app.reporting.aggregation import summarize
from app.reporting.filters import DateWindow, SortDirection, apply_filters
from app.reporting.presentation import pagination_window, pluralize_approvals
from app.reporting.query import approvals_fingerprint, list_approvals

logger = get_logger("reporting.report")

DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True)
class ReportParams:
    """Resolved dashboard state."""

    window: DateWindow
    search: str = ""
    sort: Optional[str] = "id"
    direction: SortDirection = SortDirection.ASC
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def cache_key(self) -> str:
        return json.dumps(
            {
                "mode": self.window.mode.value,
                "start": self.window.start.isoformat(),
                "end": self.window.end.isoformat(),
                "search": self.search,
                "sort": self.sort,
                "direction": SortDirection(self.direction).value,
                "page": self.page,
                "page_size": self.page_size,
            },
            sort_keys=True,
        )


def load_window_records(session: Session, window: DateWindow) -> List[Dict[str, Any]]:
    """All approvals inside the window, as API payload rows."""
    result = list_approvals(
        session, start=window.start, end=window.end, fetch_all=True
    )
    return [ApprovalOut.from_row(row).model_dump() for row in result.rows]


def filtered_records(session: Session, params: ReportParams) -> List[Dict[str, Any]]:
    records = load_window_records(session, params.window)
    return apply_filters(
        records,
        window=params.window,
        query=params.search,
        sort=params.sort,
        direction=params.direction,
    )


def compute_report(session: Session, params: ReportParams) -> ApprovalReport:
    records = filtered_records(session, params)
    total = len(records)
    total_pages = math.ceil(total / params.page_size)
    offset = (params.page - 1) * params.page_size
    page_items = records[offset : offset + params.page_size]

    return ApprovalReport(
        total=total,
        total_pages=total_pages,
        page=params.page,
        pages=pagination_window(params.page, total_pages),
        label=pluralize_approvals(total),
        window_start=params.window.start.isoformat(),
        window_end=params.window.end.isoformat(),
        items=[ApprovalOut(**r) for r in page_items],
        **summarize(records, params.window),
    )


def build_report(
    session: Session, params: ReportParams, cache: ReportCache
) -> ApprovalReport:
    """Cached report for one dashboard state and one snapshot of its rows."""
    fingerprint = approvals_fingerprint(session, params.window.start, params.window.end)
    data = cache.get_or_compute(
        APPROVALS_TAG,
        f"report:{fingerprint}:{params.cache_key()}",
        lambda: compute_report(session, params).model_dump(),
    )
    return ApprovalReport.model_validate(data)
