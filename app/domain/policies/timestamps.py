"""Lenient timestamp normalization for date-like client input.

Clients send either a date-only string ("2024-06-01") or a full ISO timestamp
("2024-06-01T08:30:00Z"). Both are stored as timezone-aware UTC timestamps.
Anything that cannot be parsed is treated as "not provided" so that callers
fall back to their defaults instead of rejecting the request.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timezone

logger = logging.getLogger(__name__)

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps, convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_lenient_timestamp(value: object) -> datetime | None:
    """Normalize a date-like value to an aware UTC timestamp, or None.

    - ``datetime`` -> UTC (naive values are taken as UTC)
    - ``date`` or "YYYY-MM-DD" -> midnight UTC of that day
    - ISO 8601 timestamp string (a trailing "Z" is accepted) -> UTC
    - empty, unparseable or any other type -> None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if not isinstance(value, str):
        logger.debug("Ignoring non-string date value of type %s", type(value).__name__)
        return None

    raw = value.strip()
    if not raw:
        return None

    try:
        if _DATE_ONLY.match(raw):
            return datetime.combine(date.fromisoformat(raw), time.min, tzinfo=timezone.utc)
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        return to_utc(datetime.fromisoformat(raw))
    except ValueError:
        logger.debug("Unparseable date value %r treated as not provided", value)
        return None
