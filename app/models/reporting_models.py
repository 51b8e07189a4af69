"""AdPulse — Reporting Models.

Approval and click rows are written by an external ingestion process and are
immutable here; only the retention jobs delete them.
"""

from datetime import date as date_type, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel
from sqlmodel import SQLModel, Field

from app.reporting.presentation import click_highlight


# ─────────────────────────────────────────────
# DATABASE MODELS
# ─────────────────────────────────────────────


class Approval(SQLModel, table=True):
    """A single approved conversion reported by the affiliate network."""

    __tablename__ = "approvals"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_name: str = Field(default="", description="Carries the [BUYER] token")
    adset_name: Optional[str] = None
    ad_name: Optional[str] = None
    offer_id: Optional[str] = None
    country: Optional[str] = Field(default=None, description="ISO 3166 alpha-2")
    revenue: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    sub_id: Optional[str] = None
    created_at: datetime = Field(index=True)


class Click(SQLModel, table=True):
    """Daily click counter per campaign."""

    __tablename__ = "clicks"

    campaign_id: str = Field(primary_key=True)
    date: date_type = Field(primary_key=True, index=True)
    campaign_name: str = ""
    pxl: Optional[str] = None
    click_count: int = 0
    notification_status: Optional[str] = Field(
        default=None, description="anomaly | warning | none"
    )


# ─────────────────────────────────────────────
# PYDANTIC SCHEMAS — API payloads
# ─────────────────────────────────────────────


class ApprovalOut(BaseModel):
    """Approval row as served by GET /approvals."""

    id: int
    campaign_name: str
    adset_name: Optional[str] = None
    ad_name: Optional[str] = None
    offer_id: Optional[str] = None
    country: Optional[str] = None
    revenue: Optional[float] = None
    sub_id: Optional[str] = None
    created_at: str

    @classmethod
    def from_row(cls, row: Approval) -> "ApprovalOut":
        return cls(
            id=row.id,
            campaign_name=row.campaign_name,
            adset_name=row.adset_name or None,
            ad_name=row.ad_name or None,
            offer_id=row.offer_id or None,
            country=row.country or None,
            revenue=float(row.revenue) if row.revenue is not None else None,
            sub_id=row.sub_id,
            created_at=row.created_at.isoformat(),
        )


class ClickOut(BaseModel):
    """Click row as served by GET /clicks."""

    campaign_id: str
    campaign_name: str
    pxl: str
    click_count: int
    date: str
    notification_status: str = "none"
    highlight: Optional[str] = None

    @classmethod
    def from_row(cls, row: Click, default_pxl: str) -> "ClickOut":
        status = row.notification_status or "none"
        return cls(
            campaign_id=row.campaign_id,
            campaign_name=row.campaign_name,
            pxl=row.pxl or default_pxl,
            click_count=row.click_count,
            date=row.date.isoformat(),
            notification_status=status,
            highlight=click_highlight(status),
        )


class PurgeResponse(BaseModel):
    """Outcome of a retention purge."""

    message: str
    deleted: int


class TopEntry(BaseModel):
    """One row of a top-N list."""

    label: str
    value: float


class DailyPoint(BaseModel):
    """Approvals count for one calendar day."""

    date: str
    count: int


class ApprovalReport(BaseModel):
    """Filtered, sorted and aggregated approvals view."""

    total: int
    total_pages: int
    page: int
    pages: List[int] = []
    label: str = ""
    window_start: str = ""
    window_end: str = ""
    items: List[ApprovalOut] = []
    top_buyers_count: List[TopEntry] = []
    top_buyers_revenue: List[TopEntry] = []
    top_countries_count: List[TopEntry] = []
    top_countries_revenue: List[TopEntry] = []
    top_offers_count: List[TopEntry] = []
    daily: List[DailyPoint] = []
