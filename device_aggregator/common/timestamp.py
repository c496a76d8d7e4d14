"""
Timestamp Utilities

All timestamps emitted by the aggregator are timezone-aware UTC
datetimes rendered as ISO-8601 (RFC 3339) strings.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def to_iso(ts: datetime) -> str:
    """
    Render a datetime as an ISO-8601 string.

    Naive datetimes are assumed to be UTC.

    Examples:
        2026-01-15 10:30:17.234+00:00 -> "2026-01-15T10:30:17.234000+00:00"
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.isoformat()


def utc_now_iso() -> str:
    """Current UTC time as ISO string"""
    return to_iso(utc_now())
