"""Court snapshots for display.

Building a snapshot only reads. Expired timers show ``remaining_time == 0``
until the sweep rotates the court.
"""
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from courtqueue.core.config import settings
from courtqueue.models.active_assignment import ActiveAssignment
from courtqueue.models.court import Court
from courtqueue.models.scheduled_lock import ScheduledLock
from courtqueue.models.waiting_entry import WaitingEntry
from courtqueue.schemas.court import CourtSnapshot
from courtqueue.schemas.lock import ScheduledLockInDB
from courtqueue.schemas.player import PlayerSummary, WaitingPlayer
from courtqueue.services.court_store import CourtStore
from courtqueue.services.lock_evaluator import evaluate_locks
from courtqueue.services.timekeeping import as_utc, remaining_seconds, utcnow


def group_waiting(
    entries: Sequence[WaitingEntry], window_seconds: float
) -> List[List[WaitingEntry]]:
    """
    Cluster FIFO waiting entries into display groups.

    An entry joins the current group when it joined less than
    ``window_seconds`` after the group's first entry; otherwise it starts a
    new group. Entries keep their FIFO order.
    """
    groups: List[List[WaitingEntry]] = []
    anchor: Optional[datetime] = None

    for entry in entries:
        joined = as_utc(entry.joined_at)
        if groups and (joined - anchor).total_seconds() < window_seconds:
            groups[-1].append(entry)
        else:
            groups.append([entry])
            anchor = joined

    return groups


class SnapshotBuilder:
    """Projects stored court state into CourtSnapshot read views."""

    def __init__(
        self,
        capacity: Optional[int] = None,
        session_seconds: Optional[int] = None,
        group_window_seconds: Optional[float] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.capacity = capacity or settings.COURT_CAPACITY
        self.session_seconds = session_seconds or settings.SESSION_DURATION_SECONDS
        self.group_window_seconds = (
            group_window_seconds
            if group_window_seconds is not None
            else settings.GROUP_WINDOW_SECONDS
        )
        self.clock = clock

    def build(
        self,
        court: Court,
        active: Sequence[ActiveAssignment],
        waiting: Sequence[WaitingEntry],
        locks: Sequence[ScheduledLock],
        now: Optional[datetime] = None,
    ) -> CourtSnapshot:
        """Snapshot one court from already-loaded rows."""
        now = now or self.clock()
        status = evaluate_locks(locks, now)

        # No timer without occupants, whatever the stored column says
        remaining = (
            remaining_seconds(court.timer_started_at, now, self.session_seconds)
            if active
            else None
        )

        return CourtSnapshot(
            id=court.id,
            name=court.name,
            capacity=self.capacity,
            free_seats=max(0, self.capacity - len(active)),
            is_locked=status.is_locked,
            current_lock=(
                ScheduledLockInDB.model_validate(status.current_lock)
                if status.current_lock
                else None
            ),
            future_locks=[ScheduledLockInDB.model_validate(lock) for lock in status.future_locks],
            active_players=[PlayerSummary.model_validate(a.player) for a in active],
            waiting_groups=[
                [
                    WaitingPlayer(
                        id=entry.player.id,
                        username=entry.player.username,
                        first_name=entry.player.first_name,
                        last_name=entry.player.last_name,
                        is_marked=entry.player.is_marked,
                        is_flagged=entry.player.is_flagged,
                        joined_at=as_utc(entry.joined_at),
                    )
                    for entry in group
                ]
                for group in group_waiting(waiting, self.group_window_seconds)
            ],
            timer_started_at=as_utc(court.timer_started_at) if active else None,
            remaining_time=remaining,
        )

    async def build_one(self, store: CourtStore, court_id: int) -> CourtSnapshot:
        """Snapshot a single court."""
        court = await store.get_court(court_id)
        return self.build(
            court,
            await store.active_assignments(court_id),
            await store.waiting_entries(court_id),
            await store.locks(court_id),
        )

    async def build_all(self, store: CourtStore) -> List[CourtSnapshot]:
        """Snapshot every court at one shared instant."""
        courts, active, waiting, locks = await store.load_all()
        now = self.clock()
        return [
            self.build(court, active[court.id], waiting[court.id], locks[court.id], now)
            for court in courts
        ]


# Singleton instance
snapshot_builder = SnapshotBuilder()
