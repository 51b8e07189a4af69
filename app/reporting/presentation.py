"""AdPulse — Dashboard presentation helpers."""

from typing import Any, List, Optional

PAGE_WINDOW = 5


def pagination_window(current: int, total_pages: int, size: int = PAGE_WINDOW) -> List[int]:
    """Page numbers to render around ``current``, at most ``size`` of them."""
    if total_pages < 1:
        return []
    half = size // 2
    start = max(1, current - half)
    end = min(total_pages, start + size - 1)
    if end - start + 1 < size:
        start = max(1, end - size + 1)
    return list(range(start, end + 1))


def pluralize_approvals(count: Any) -> str:
    """Russian count phrase: 1 апрув, 2 апрува, 5 апрувов."""
    if not isinstance(count, int) or isinstance(count, bool):
        return "0 апрувов"
    last_digit = abs(count) % 10
    last_two = abs(count) % 100
    if 11 <= last_two <= 14:
        return f"{count} апрувов"
    if last_digit == 1:
        return f"{count} апрув"
    if 2 <= last_digit <= 4:
        return f"{count} апрува"
    return f"{count} апрувов"


def click_highlight(status: Optional[str]) -> Optional[str]:
    """Row highlight for a click notification status."""
    if status == "anomaly":
        return "danger"
    if status == "warning":
        return "warning"
    return None
