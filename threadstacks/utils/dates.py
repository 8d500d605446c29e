from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

# Absent or unparseable dates rank below every real timestamp, pre-1970 included
OLDEST = float("-inf")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Args:
        value: ISO-8601 timestamp, date-only string, or None

    Returns:
        Aware datetime, or None if the value is absent, unparseable, or
        falls outside the representable range once normalized to UTC
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        # Naive timestamps from the backend are UTC
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # e.g. 9999-12-31T23:00:00-05:00 lands in year 10000
        return None


def recency_key(value: Optional[str]) -> float:
    """Return epoch seconds for ordering; absent or unparseable sorts last."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return OLDEST
    return parsed.timestamp()
