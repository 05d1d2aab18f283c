"""Court store: typed data access over one database session."""
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from courtqueue.core.errors import NotFoundError, PersistenceError
from courtqueue.models.active_assignment import ActiveAssignment
from courtqueue.models.court import Court
from courtqueue.models.player import Player
from courtqueue.models.scheduled_lock import ScheduledLock
from courtqueue.models.waiting_entry import WaitingEntry

logger = logging.getLogger(__name__)


class CourtStore:
    """Reads and writes court state through a single AsyncSession.

    Reads always refresh already-loaded rows (``populate_existing``) so a
    caller that has just taken a court lock sees committed state.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _scalars(self, stmt) -> list:
        try:
            result = await self.db.execute(stmt.execution_options(populate_existing=True))
        except SQLAlchemyError as e:
            logger.error(f"Query failed: {e}")
            await self.db.rollback()
            raise PersistenceError("Storage unavailable, please retry") from e
        return list(result.scalars().unique().all())

    async def commit(self):
        """Commit the pending transaction or roll it back and raise PersistenceError."""
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Commit failed, rolling back: {e}")
            await self.db.rollback()
            raise PersistenceError("Storage unavailable, change was not applied") from e

    async def rollback(self):
        await self.db.rollback()

    # Courts

    async def get_court(self, court_id: int) -> Court:
        courts = await self._scalars(select(Court).where(Court.id == court_id))
        if not courts:
            raise NotFoundError(f"Court {court_id} not found")
        return courts[0]

    async def find_court_by_name(self, name: str) -> Optional[Court]:
        courts = await self._scalars(select(Court).where(Court.name == name))
        return courts[0] if courts else None

    async def list_courts(self) -> List[Court]:
        return await self._scalars(select(Court).order_by(Court.id))

    def add(self, obj):
        self.db.add(obj)

    async def delete_court(self, court: Court):
        """Delete a court with its locks, assignments and waiting entries."""
        for model in (ScheduledLock, ActiveAssignment, WaitingEntry):
            await self.db.execute(delete(model).where(model.court_id == court.id))
        await self.db.delete(court)

    # Players

    async def get_player(self, player_id: int) -> Player:
        players = await self._scalars(select(Player).where(Player.id == player_id))
        if not players:
            raise NotFoundError(f"Player {player_id} not found")
        return players[0]

    async def find_player_by_username(self, username: str) -> Optional[Player]:
        players = await self._scalars(select(Player).where(Player.username == username))
        return players[0] if players else None

    async def list_players(self) -> List[Player]:
        return await self._scalars(select(Player).order_by(Player.id))

    # Occupancy

    async def active_assignments(self, court_id: int) -> List[ActiveAssignment]:
        return await self._scalars(
            select(ActiveAssignment)
            .where(ActiveAssignment.court_id == court_id)
            .order_by(ActiveAssignment.assigned_at, ActiveAssignment.id)
        )

    async def waiting_entries(self, court_id: int) -> List[WaitingEntry]:
        """Waiting entries of one court in FIFO order."""
        return await self._scalars(
            select(WaitingEntry)
            .where(WaitingEntry.court_id == court_id)
            .order_by(WaitingEntry.joined_at, WaitingEntry.id)
        )

    async def placements(self, player_ids: Iterable[int]) -> Dict[int, int]:
        """Map each given player that is active or waiting anywhere to its court id."""
        player_ids = list(player_ids)
        if not player_ids:
            return {}

        found = {}
        for model in (ActiveAssignment, WaitingEntry):
            rows = await self._scalars(select(model).where(model.player_id.in_(player_ids)))
            for row in rows:
                found.setdefault(row.player_id, row.court_id)
        return found

    async def delete_rows(self, rows: Iterable):
        for row in rows:
            await self.db.delete(row)

    # Locks

    async def locks(self, court_id: int) -> List[ScheduledLock]:
        return await self._scalars(
            select(ScheduledLock)
            .where(ScheduledLock.court_id == court_id)
            .order_by(ScheduledLock.starts_at, ScheduledLock.id)
        )

    async def get_lock(self, court_id: int, lock_id: int) -> ScheduledLock:
        locks = await self._scalars(
            select(ScheduledLock).where(
                ScheduledLock.id == lock_id, ScheduledLock.court_id == court_id
            )
        )
        if not locks:
            raise NotFoundError(f"Lock {lock_id} not found on court {court_id}")
        return locks[0]

    # Bulk loads for snapshots

    async def load_all(self):
        """Load every court with its assignments, waiting entries and locks.

        Returns:
            (courts, active_by_court, waiting_by_court, locks_by_court)
        """
        courts = await self.list_courts()
        active = await self._scalars(
            select(ActiveAssignment).order_by(ActiveAssignment.assigned_at, ActiveAssignment.id)
        )
        waiting = await self._scalars(
            select(WaitingEntry).order_by(WaitingEntry.joined_at, WaitingEntry.id)
        )
        locks = await self._scalars(
            select(ScheduledLock).order_by(ScheduledLock.starts_at, ScheduledLock.id)
        )

        return (
            courts,
            _group_by_court(active),
            _group_by_court(waiting),
            _group_by_court(locks),
        )


def _group_by_court(rows) -> Dict[int, list]:
    grouped = defaultdict(list)
    for row in rows:
        grouped[row.court_id].append(row)
    return grouped
