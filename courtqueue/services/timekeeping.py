"""Clock and session-time helpers.

All durations in this service are whole seconds. Every remaining-time
computation goes through :func:`remaining_seconds`.
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime read from the database to aware UTC.

    Naive values are treated as UTC (SQLite drops the offset).
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def elapsed_seconds(started_at: datetime, now: datetime) -> int:
    """Whole seconds elapsed since ``started_at``, never negative."""
    delta = (as_utc(now) - as_utc(started_at)).total_seconds()
    return max(0, int(delta))


def remaining_seconds(
    started_at: Optional[datetime], now: datetime, duration_seconds: int
) -> Optional[int]:
    """Seconds left in a session, floored at zero; None when no timer runs."""
    if started_at is None:
        return None
    return max(0, duration_seconds - elapsed_seconds(started_at, now))


def is_expired(started_at: Optional[datetime], now: datetime, duration_seconds: int) -> bool:
    remaining = remaining_seconds(started_at, now, duration_seconds)
    return remaining is not None and remaining == 0
