"""Scheduled lock evaluation.

Lock status is derived from the stored intervals and a query time only.
The ``is_locked`` column on courts is a read cache written by the sweep and
is never consulted here.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from courtqueue.models.scheduled_lock import ScheduledLock
from courtqueue.services.timekeeping import as_utc


@dataclass(frozen=True)
class LockStatus:
    """Lock state of one court at one instant."""

    is_locked: bool
    current_lock: Optional[ScheduledLock] = None
    future_locks: List[ScheduledLock] = field(default_factory=list)


def covers(lock: ScheduledLock, at: datetime) -> bool:
    """True if ``at`` falls inside the half-open interval [starts_at, ends_at)."""
    at = as_utc(at)
    return as_utc(lock.starts_at) <= at < as_utc(lock.ends_at)


def evaluate_locks(locks: Iterable[ScheduledLock], now: datetime) -> LockStatus:
    """
    Derive a court's lock status from its scheduled locks.

    When several locks cover ``now`` (overlapping windows), the one that
    started earliest is reported as the current lock. No other precedence
    between overlapping locks is defined.

    Args:
        locks: All scheduled locks of one court
        now: Query time

    Returns:
        LockStatus with the covering lock (if any) and the locks that start
        after ``now``, ordered by start
    """
    ordered = sorted(locks, key=lambda lock: (as_utc(lock.starts_at), lock.id or 0))
    now = as_utc(now)

    current = next((lock for lock in ordered if covers(lock, now)), None)
    future = [lock for lock in ordered if as_utc(lock.starts_at) > now]

    return LockStatus(is_locked=current is not None, current_lock=current, future_locks=future)


def overlapping(locks: Iterable[ScheduledLock], starts_at: datetime, ends_at: datetime) -> List[ScheduledLock]:
    """Existing locks whose interval intersects [starts_at, ends_at)."""
    starts_at, ends_at = as_utc(starts_at), as_utc(ends_at)
    return [
        lock for lock in locks
        if as_utc(lock.starts_at) < ends_at and starts_at < as_utc(lock.ends_at)
    ]
