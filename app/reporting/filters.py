"""AdPulse — Filter / Search / Sort Composition.

Applied in a fixed order: date window → free-text search → stable sort.
Records are plain mappings (API payload rows), so a bad ``created_at`` or
``revenue`` never raises; it just falls out of date views or counts as 0.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional

from app.config import settings
from app.reporting.dimensions import buyer_of, country_of

EPOCH = datetime(1970, 1, 1)


class FilterMode(str, Enum):
    """Mutually exclusive date filter modes."""

    TODAY = "today"
    SINGLE_DAY = "single_day"
    RANGE = "range"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ── Value parsing ──


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a record timestamp into a naive wall-clock datetime in report time.

    Returns None for missing or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, date):
        ts = datetime.combine(value, time.min)
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if ts.tzinfo is not None:
        ts = ts.astimezone(settings.report_tz).replace(tzinfo=None)
    return ts


def parse_revenue(value: Any) -> float:
    """Numeric revenue; missing, non-numeric and NaN all count as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(amount) else amount


def report_today(now: Optional[datetime] = None) -> date:
    """Current calendar day in the fixed report offset."""
    now = now or datetime.now(settings.report_tz)
    if now.tzinfo is not None:
        now = now.astimezone(settings.report_tz)
    return now.date()


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


# ── Date window ──


@dataclass(frozen=True)
class DateWindow:
    """A resolved date filter: an inclusive ``[start, end]`` day span.

    ``today`` and ``single_day`` windows are one day wide.
    """

    mode: FilterMode
    start: date
    end: date

    @classmethod
    def resolve(
        cls,
        mode: FilterMode = FilterMode.RANGE,
        day: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> "DateWindow":
        """Build a window from dashboard filter state.

        Missing values default to today (single-day modes) or to the current
        month (range mode).
        """
        today = report_today(now)
        if mode == FilterMode.TODAY:
            return cls(mode, today, today)
        if mode == FilterMode.SINGLE_DAY:
            target = day or today
            return cls(mode, target, target)
        month_start = today.replace(day=1)
        next_month = (month_start + timedelta(days=32)).replace(day=1)
        start = start or month_start
        end = end or (next_month - timedelta(days=1))
        return cls(mode, start, end)

    def contains(self, ts: Optional[datetime]) -> bool:
        if ts is None:
            return False
        return start_of_day(self.start) <= ts <= end_of_day(self.end)

    def days(self) -> List[date]:
        """Every calendar day in the window, in order (empty if inverted)."""
        span = (self.end - self.start).days
        return [self.start + timedelta(days=i) for i in range(span + 1)]


def filter_by_window(
    records: Iterable[Mapping[str, Any]], window: DateWindow
) -> List[Mapping[str, Any]]:
    return [r for r in records if window.contains(parse_timestamp(r.get("created_at")))]


# ── Search ──


def _search_fields(record: Mapping[str, Any]) -> List[str]:
    return [
        str(record.get("campaign_name") or ""),
        buyer_of(record),
        country_of(record),
        str(record.get("offer_id") or ""),
        str(record.get("sub_id") or ""),
    ]


def matches_search(record: Mapping[str, Any], query: str) -> bool:
    """Case-insensitive substring match against any searchable field."""
    needle = (query or "").lower()
    if not needle:
        return True
    return any(needle in field.lower() for field in _search_fields(record))


def search_records(
    records: Iterable[Mapping[str, Any]], query: Optional[str]
) -> List[Mapping[str, Any]]:
    return [r for r in records if matches_search(r, query or "")]


# ── Sort ──


def _text_key(value: Any) -> tuple:
    text = "" if value is None else str(value)
    return (text.casefold(), text)


def sort_key_for(key: str) -> Callable[[Mapping[str, Any]], Any]:
    """Comparison key for a sortable column.

    ``buyer`` and ``country`` sort on the derived values, not the raw fields.
    """
    if key == "revenue":
        return lambda r: parse_revenue(r.get("revenue"))
    if key == "created_at":
        return lambda r: parse_timestamp(r.get("created_at")) or EPOCH
    if key == "buyer":
        return lambda r: _text_key(buyer_of(r))
    if key == "country":
        return lambda r: _text_key(country_of(r))
    return lambda r: _text_key(r.get(key))


def sort_records(
    records: Iterable[Mapping[str, Any]],
    key: str,
    direction: SortDirection = SortDirection.ASC,
) -> List[Mapping[str, Any]]:
    """Stable sort; equal keys keep their input order in both directions."""
    return sorted(
        records,
        key=sort_key_for(key),
        reverse=SortDirection(direction) == SortDirection.DESC,
    )


def apply_filters(
    records: Iterable[Mapping[str, Any]],
    window: Optional[DateWindow] = None,
    query: Optional[str] = None,
    sort: Optional[str] = None,
    direction: SortDirection = SortDirection.ASC,
) -> List[Mapping[str, Any]]:
    """Date window, then search, then sort."""
    rows = list(records)
    if window is not None:
        rows = filter_by_window(rows, window)
    rows = search_records(rows, query)
    if sort:
        rows = sort_records(rows, sort, direction)
    return rows
