"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the portal are timezone-aware UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository boundaries to normalize datetimes read from the database.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def epoch_millis(dt: datetime) -> int:
    """Milliseconds since the Unix epoch (used as a storage key prefix)."""
    return int(dt.timestamp() * 1000)
