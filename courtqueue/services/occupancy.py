"""Court occupancy and rotation.

Each court moves between EMPTY (no active players, no timer) and OCCUPIED
(1..capacity active players, timer running). Players enter through
``admit``, leave through ``remove`` or a timed ``rotate``, and queued players
are seated strictly in join order by ``promote``.

All mutations of one court run under that court's asyncio lock. ``admit``
also holds the admission lock so the "not checked in anywhere" check and
the insert form one critical section across courts.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from courtqueue.core.config import settings
from courtqueue.core.errors import (
    AlreadyActiveError,
    CourtLockedError,
    InvalidGroupError,
    NotFoundError,
)
from courtqueue.models.active_assignment import ActiveAssignment
from courtqueue.models.court import Court
from courtqueue.models.player import Player
from courtqueue.models.waiting_entry import WaitingEntry
from courtqueue.services.court_store import CourtStore
from courtqueue.services.lock_evaluator import evaluate_locks
from courtqueue.services.timekeeping import is_expired, remaining_seconds, utcnow

logger = logging.getLogger(__name__)

ADMITTED = "active"
QUEUED = "queued"


@dataclass
class AdmitResult:
    court_id: int
    outcome: str
    player_ids: List[int]
    remaining_seconds: Optional[int] = None
    promoted_ids: List[int] = field(default_factory=list)


@dataclass
class RemoveResult:
    court_id: int
    removed_ids: List[int]
    promoted_ids: List[int]


@dataclass
class RotationResult:
    court_id: int
    evicted_ids: List[int]
    promoted_ids: List[int]


@dataclass
class SweepReport:
    """What one sweep pass changed."""

    started_at: datetime
    rotated: List[RotationResult] = field(default_factory=list)
    backfilled: Dict[int, List[int]] = field(default_factory=dict)
    lock_changed: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)


class OccupancyScheduler:
    """Admission, removal, promotion and rotation of court occupants."""

    def __init__(
        self,
        capacity: Optional[int] = None,
        session_seconds: Optional[int] = None,
        merge_min_remaining_seconds: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.capacity = capacity or settings.COURT_CAPACITY
        self.session_seconds = session_seconds or settings.SESSION_DURATION_SECONDS
        self.merge_min_remaining_seconds = (
            merge_min_remaining_seconds
            if merge_min_remaining_seconds is not None
            else settings.MERGE_MIN_REMAINING_SECONDS
        )
        self.clock = clock
        self._court_locks: Dict[int, asyncio.Lock] = {}
        self.admission_lock = asyncio.Lock()

    @asynccontextmanager
    async def locked_court(self, store: CourtStore, court_id: int):
        """
        Hold the mutual-exclusion lock of one court.

        A lock is only created once the court is known to exist, so requests
        for unknown ids leave nothing behind.
        """
        lock = self._court_locks.get(court_id)
        if lock is None:
            await store.get_court(court_id)
            lock = self._court_locks.setdefault(court_id, asyncio.Lock())
        async with lock:
            yield

    def forget(self, court_id: int):
        """Drop the lock of a deleted court."""
        self._court_locks.pop(court_id, None)

    def remaining(self, court: Court, now: Optional[datetime] = None) -> Optional[int]:
        return remaining_seconds(
            court.timer_started_at, now or self.clock(), self.session_seconds
        )

    # Admission

    def _validate_group(self, players: Sequence[Player]):
        if not players:
            raise InvalidGroupError("At least one player is required")
        if len(players) > self.capacity:
            raise InvalidGroupError(
                f"A group may have at most {self.capacity} players, got {len(players)}"
            )
        seen = set()
        for player in players:
            if player.id in seen:
                raise InvalidGroupError(f"Player '{player.username}' was submitted twice")
            seen.add(player.id)

    def can_merge(self, active_count: int, group_size: int, remaining: Optional[int]) -> bool:
        """Merge-vs-queue rule: seats for the whole group and enough session left."""
        if active_count + group_size > self.capacity:
            return False
        return remaining is None or remaining > self.merge_min_remaining_seconds

    async def admit(
        self, store: CourtStore, court_id: int, players: Sequence[Player]
    ) -> AdmitResult:
        """
        Admit a verified group of players to a court.

        The whole group is either seated (timer started if idle) or appended
        to the waiting queue with one shared join time. Any failed check
        rejects the whole group without touching stored state.

        Args:
            store: Court store bound to the caller's session
            court_id: Target court
            players: Verified players, 1..capacity, no duplicates

        Returns:
            AdmitResult saying whether the group went active or queued

        Raises:
            NotFoundError, InvalidGroupError, CourtLockedError,
            AlreadyActiveError, PersistenceError
        """
        players = list(players)
        self._validate_group(players)
        player_ids = [p.id for p in players]

        async with self.locked_court(store, court_id):
            async with self.admission_lock:
                court = await store.get_court(court_id)
                now = self.clock()

                status = evaluate_locks(await store.locks(court_id), now)
                if status.is_locked:
                    logger.warning(f"Rejected check-in on locked court {court_id}")
                    raise CourtLockedError(court_id, status.current_lock)

                placed = await store.placements(player_ids)
                for player in players:
                    if player.id in placed:
                        logger.warning(
                            f"Rejected check-in on court {court_id}: player {player.username} "
                            f"already on court {placed[player.id]}"
                        )
                        raise AlreadyActiveError(player.id, placed[player.id], player.username)

                # Players already queued take any free seats before this group
                active = await store.active_assignments(court_id)
                waiting = await store.waiting_entries(court_id)
                promoted = await self._promote(store, court, active, waiting, now)
                remaining = self.remaining(court, now)

                if self.can_merge(len(active) + len(promoted), len(players), remaining):
                    for player_id in player_ids:
                        store.add(ActiveAssignment(court_id=court_id, player_id=player_id, assigned_at=now))
                    if court.timer_started_at is None:
                        court.timer_started_at = now
                    outcome = ADMITTED
                else:
                    for player_id in player_ids:
                        store.add(WaitingEntry(court_id=court_id, player_id=player_id, joined_at=now))
                    outcome = QUEUED

                await store.commit()

        if promoted:
            logger.info(f"Court {court_id}: promoted queued players {promoted}")
        logger.info(
            f"Court {court_id}: group {player_ids} {'seated' if outcome == ADMITTED else 'queued'}"
        )
        return AdmitResult(
            court_id=court_id,
            outcome=outcome,
            player_ids=player_ids,
            remaining_seconds=self.remaining(court, now),
            promoted_ids=promoted,
        )

    # Removal

    async def remove(
        self, store: CourtStore, court_id: int, players: Sequence[Player]
    ) -> RemoveResult:
        """
        Remove players from a court's active set or queue, then backfill.

        Players not on this court are ignored.
        """
        wanted = {p.id for p in players}

        async with self.locked_court(store, court_id):
            court = await store.get_court(court_id)
            now = self.clock()

            active = await store.active_assignments(court_id)
            waiting = await store.waiting_entries(court_id)

            gone = [a for a in active if a.player_id in wanted]
            gone += [w for w in waiting if w.player_id in wanted]
            await store.delete_rows(gone)

            still_active = [a for a in active if a.player_id not in wanted]
            still_waiting = [w for w in waiting if w.player_id not in wanted]
            if not still_active:
                court.timer_started_at = None

            promoted = await self._promote(store, court, still_active, still_waiting, now)
            await store.commit()

        removed = [row.player_id for row in gone]
        if removed:
            logger.info(f"Court {court_id}: removed {removed}, promoted {promoted}")
        return RemoveResult(court_id=court_id, removed_ids=removed, promoted_ids=promoted)

    # Promotion

    async def _promote(
        self,
        store: CourtStore,
        court: Court,
        active: List[ActiveAssignment],
        waiting: List[WaitingEntry],
        now: datetime,
    ) -> List[int]:
        """Seat queued players in join order while seats are free. Caller holds the court lock."""
        free = self.capacity - len(active)
        if free <= 0 or not waiting:
            return []

        # Seats in an expired session are refilled by the rotation
        if is_expired(court.timer_started_at, now, self.session_seconds):
            return []

        status = evaluate_locks(await store.locks(court.id), now)
        if status.is_locked:
            logger.info(f"Court {court.id} is locked, holding {len(waiting)} queued players")
            return []

        # Strict FIFO, a group may be split across promotions
        seated = waiting[:free]
        for entry in seated:
            await store.delete_rows([entry])
            store.add(ActiveAssignment(court_id=court.id, player_id=entry.player_id, assigned_at=now))

        if court.timer_started_at is None:
            court.timer_started_at = now

        return [entry.player_id for entry in seated]

    async def promote(self, store: CourtStore, court_id: int) -> List[int]:
        """Backfill free seats on a court from its queue."""
        async with self.locked_court(store, court_id):
            court = await store.get_court(court_id)
            now = self.clock()
            active = await store.active_assignments(court_id)
            waiting = await store.waiting_entries(court_id)
            promoted = await self._promote(store, court, active, waiting, now)
            await store.commit()

        if promoted:
            logger.info(f"Court {court_id}: promoted {promoted}")
        return promoted

    # Rotation

    async def _rotate(self, store: CourtStore, court: Court, now: datetime) -> RotationResult:
        """Evict every active player and refill from the queue. Caller holds the court lock."""
        active = await store.active_assignments(court.id)
        await store.delete_rows(active)
        court.timer_started_at = None

        waiting = await store.waiting_entries(court.id)
        promoted = await self._promote(store, court, [], waiting, now)

        return RotationResult(
            court_id=court.id,
            evicted_ids=[a.player_id for a in active],
            promoted_ids=promoted,
        )

    async def rotate(self, store: CourtStore, court_id: int) -> RotationResult:
        """Force a rotation of one court regardless of its timer."""
        async with self.locked_court(store, court_id):
            court = await store.get_court(court_id)
            result = await self._rotate(store, court, self.clock())
            await store.commit()

        logger.info(
            f"Court {court_id} rotated: evicted {result.evicted_ids}, seated {result.promoted_ids}"
        )
        return result

    # Sweep

    async def sweep(self, store: CourtStore) -> SweepReport:
        """
        Rotate expired courts, backfill free seats and refresh lock caches.

        Each court is handled under its own lock and in its own transaction;
        a failure on one court is logged and the sweep moves on.
        """
        report = SweepReport(started_at=self.clock())
        # Plain ids, a rollback expires the loaded courts
        court_ids = [court.id for court in await store.list_courts()]
        logger.debug(f"Sweeping {len(court_ids)} courts")

        for court_id in court_ids:
            try:
                async with self.locked_court(store, court_id):
                    await self._sweep_court(store, court_id, report)
            except NotFoundError:
                logger.debug(f"Court {court_id} deleted during sweep")
            except Exception as e:
                logger.error(f"Sweep failed for court {court_id}: {e}", exc_info=True)
                await store.rollback()
                report.failed.append(court_id)

        return report

    async def _sweep_court(self, store: CourtStore, court_id: int, report: SweepReport):
        court = await store.get_court(court_id)
        now = self.clock()

        if is_expired(court.timer_started_at, now, self.session_seconds):
            result = await self._rotate(store, court, now)
            report.rotated.append(result)
            logger.info(
                f"Court {court_id} session expired: evicted {result.evicted_ids}, "
                f"seated {result.promoted_ids}"
            )
        else:
            active = await store.active_assignments(court_id)
            waiting = await store.waiting_entries(court_id)
            promoted = await self._promote(store, court, active, waiting, now)
            if promoted:
                report.backfilled[court_id] = promoted
                logger.info(f"Court {court_id} backfilled with {promoted}")

        status = evaluate_locks(await store.locks(court_id), now)
        if court.is_locked != status.is_locked:
            report.lock_changed.append(court_id)
            logger.info(f"Court {court_id} is now {'locked' if status.is_locked else 'unlocked'}")
        court.is_locked = status.is_locked
        court.lock_refreshed_at = now

        await store.commit()


# Singleton instance
occupancy_scheduler = OccupancyScheduler()
