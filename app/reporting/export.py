"""AdPulse — CSV Export.

Only the campaign name is quoted; the other columns are assumed free of
commas and quotes.
"""

from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from app.reporting.dimensions import buyer_of, country_of
from app.reporting.filters import parse_timestamp

PLACEHOLDER = "—"

CSV_HEADER = "ID,Campaign,Buyer,Country,Offer,Revenue ($),SubID,Date"


def _text(value: Any) -> str:
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def format_revenue(value: Any) -> str:
    """Two decimals, or the placeholder when absent or not a number."""
    if value is None or value == "" or isinstance(value, bool):
        return PLACEHOLDER
    try:
        return f"{float(value):.2f}"
    except (TypeError, ValueError):
        return PLACEHOLDER


def format_timestamp(value: Any) -> str:
    ts = parse_timestamp(value)
    return ts.strftime("%Y-%m-%d %H:%M") if ts else PLACEHOLDER


def quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def approval_csv_row(record: Mapping[str, Any]) -> str:
    return ",".join(
        [
            _text(record.get("id")),
            quote(_text(record.get("campaign_name"))),
            buyer_of(record),
            country_of(record),
            _text(record.get("offer_id")),
            format_revenue(record.get("revenue")),
            _text(record.get("sub_id")),
            format_timestamp(record.get("created_at")),
        ]
    )


def approvals_to_csv(records: Iterable[Mapping[str, Any]]) -> str:
    """Header plus one line per record, in input order."""
    lines = [CSV_HEADER]
    lines.extend(approval_csv_row(r) for r in records)
    return "\n".join(lines)


def export_filename(today: Optional[date] = None) -> str:
    today = today or datetime.now().date()
    return f"approvals_{today.isoformat()}.csv"
