"""AdPulse — Derived Dimensions.

Buyer and country are never stored as columns. They are projected from raw
approval fields by the two pure functions below, and every grouping, sort and
search over those dimensions goes through them.

Buyer contract: the first ``[TOKEN]`` in ``campaign_name`` where TOKEN is one
or more uppercase Latin letters or digits. ``"[AB12] Summer"`` → ``"AB12"``.
Lowercase or mixed tokens (``[ab12]``) do not match.
"""

import re
from typing import Any, Mapping

from app.core.countries import COUNTRY_NAMES

UNKNOWN = "Unknown"

BUYER_TOKEN = re.compile(r"\[([A-Z0-9]+)\]")


def extract_buyer(campaign_name: Any) -> str:
    """Return the buyer code embedded in a campaign name, or ``"Unknown"``."""
    if not campaign_name or not isinstance(campaign_name, str):
        return UNKNOWN
    match = BUYER_TOKEN.search(campaign_name)
    return match.group(1) if match else UNKNOWN


def resolve_country(code: Any) -> str:
    """Map a two-letter code to its display name; unmapped codes pass through."""
    if not code:
        return UNKNOWN
    code = str(code)
    return COUNTRY_NAMES.get(code, code)


def buyer_of(record: Mapping[str, Any]) -> str:
    return extract_buyer(record.get("campaign_name"))


def country_of(record: Mapping[str, Any]) -> str:
    return resolve_country(record.get("country"))
