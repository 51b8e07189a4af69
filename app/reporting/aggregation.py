"""AdPulse — Top-N Aggregation Engine.

Groups the filtered and sorted approvals by buyer, country and offer and
builds the daily series for the active window.

Ties in a top-N list are ordered by when the group was first seen while
scanning the input, never by a secondary key.
"""

from collections import Counter
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence, Tuple

from app.models.reporting_models import DailyPoint, TopEntry
from app.reporting.dimensions import UNKNOWN, buyer_of, country_of
from app.reporting.filters import DateWindow, parse_revenue, parse_timestamp
from app.core.logging import get_logger

logger = get_logger("reporting.aggregation")

TOP_N = 5

Record = Mapping[str, Any]


def offer_of(record: Record) -> str:
    offer = record.get("offer_id")
    return str(offer) if offer else UNKNOWN


def _group(
    records: Iterable[Record],
    label: Callable[[Record], str],
    weight: Callable[[Record], float],
) -> Dict[str, float]:
    # dict keeps first-seen order, which is the tie-break order
    groups: Dict[str, float] = {}
    for record in records:
        key = label(record)
        groups[key] = groups.get(key, 0) + weight(record)
    return groups


def top_n(groups: Dict[str, float], n: int = TOP_N) -> List[Tuple[str, float]]:
    """Highest values first; sorted() is stable so ties keep insertion order."""
    return sorted(groups.items(), key=lambda item: item[1], reverse=True)[:n]


def _count(record: Record) -> float:
    return 1


def _revenue(record: Record) -> float:
    return parse_revenue(record.get("revenue"))


def top_buyers_by_count(records: Sequence[Record], n: int = TOP_N):
    return top_n(_group(records, buyer_of, _count), n)


def top_buyers_by_revenue(records: Sequence[Record], n: int = TOP_N):
    return top_n(_group(records, buyer_of, _revenue), n)


def top_countries_by_count(records: Sequence[Record], n: int = TOP_N):
    return top_n(_group(records, country_of, _count), n)


def top_countries_by_revenue(records: Sequence[Record], n: int = TOP_N):
    return top_n(_group(records, country_of, _revenue), n)


def top_offers_by_count(records: Sequence[Record], n: int = TOP_N):
    return top_n(_group(records, offer_of, _count), n)


def daily_counts(records: Sequence[Record], window: DateWindow) -> List[DailyPoint]:
    """One zero-filled point per day of the window, in day order."""
    per_day: Counter = Counter()
    for record in records:
        ts = parse_timestamp(record.get("created_at"))
        if ts is not None:
            per_day[ts.date()] += 1
    return [
        DailyPoint(date=day.isoformat(), count=per_day.get(day, 0))
        for day in window.days()
    ]


def as_entries(pairs: List[Tuple[str, float]]) -> List[TopEntry]:
    return [TopEntry(label=label, value=value) for label, value in pairs]


def summarize(records: Sequence[Record], window: DateWindow) -> Dict[str, Any]:
    """Every top list and the daily series for one filtered record set."""
    summary = {
        "top_buyers_count": as_entries(top_buyers_by_count(records)),
        "top_buyers_revenue": as_entries(top_buyers_by_revenue(records)),
        "top_countries_count": as_entries(top_countries_by_count(records)),
        "top_countries_revenue": as_entries(top_countries_by_revenue(records)),
        "top_offers_count": as_entries(top_offers_by_count(records)),
        "daily": daily_counts(records, window),
    }
    logger.info(
        f"Aggregated {len(records)} approvals over {len(summary['daily'])} days"
    )
    return summary
