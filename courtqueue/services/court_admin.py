"""Court and scheduled lock administration."""
import logging
from datetime import datetime, timedelta
from typing import List

import pytz

from courtqueue.core.config import settings
from courtqueue.core.errors import AlreadyExistsError, InvalidIntervalError
from courtqueue.models.court import Court
from courtqueue.models.scheduled_lock import ScheduledLock
from courtqueue.schemas.lock import ScheduledLockCreate
from courtqueue.services.court_store import CourtStore
from courtqueue.services.lock_evaluator import overlapping
from courtqueue.services.occupancy import OccupancyScheduler
from courtqueue.services.timekeeping import as_utc

logger = logging.getLogger(__name__)


class CourtAdminService:
    """Creates and deletes courts and their scheduled locks."""

    def __init__(self, scheduler: OccupancyScheduler):
        self.scheduler = scheduler

    async def create_court(self, store: CourtStore, name: str) -> Court:
        if await store.find_court_by_name(name):
            raise AlreadyExistsError(f"Court '{name}' already exists")

        court = Court(name=name, is_locked=False)
        store.add(court)
        await store.commit()
        logger.info(f"Created court {court.name} ({court.id})")
        return court

    async def delete_court(self, store: CourtStore, court_id: int):
        """Delete a court together with its locks, players and queue."""
        async with self.scheduler.locked_court(store, court_id):
            court = await store.get_court(court_id)
            await store.delete_court(court)
            await store.commit()
        self.scheduler.forget(court_id)
        logger.info(f"Deleted court {court_id}")

    def resolve_interval(self, data: ScheduledLockCreate, now: datetime):
        """
        Turn a lock request into an aware UTC [start, end) pair.

        Raises:
            InvalidIntervalError: missing fields or end not after start
        """
        if data.starts_at is not None and data.start_time_local is not None:
            raise InvalidIntervalError("Give either starts_at or start_time_local, not both")

        if data.starts_at is not None:
            starts_at = as_utc(data.starts_at)
        elif data.start_time_local is not None:
            venue_tz = pytz.timezone(settings.VENUE_TIMEZONE)
            today = as_utc(now).astimezone(venue_tz).date()
            local_start = venue_tz.localize(datetime.combine(today, data.start_time_local))
            starts_at = local_start.astimezone(pytz.UTC)
        else:
            raise InvalidIntervalError("A lock needs starts_at or start_time_local")

        if data.ends_at is not None and data.duration_minutes is not None:
            raise InvalidIntervalError("Give either ends_at or duration_minutes, not both")

        if data.ends_at is not None:
            ends_at = as_utc(data.ends_at)
        elif data.duration_minutes is not None:
            ends_at = starts_at + timedelta(minutes=data.duration_minutes)
        else:
            raise InvalidIntervalError("A lock needs ends_at or duration_minutes")

        if ends_at <= starts_at:
            raise InvalidIntervalError("Lock end must be after its start")

        return starts_at, ends_at

    async def add_lock(self, store: CourtStore, court_id: int, data: ScheduledLockCreate) -> ScheduledLock:
        """Validate and store a scheduled lock on a court."""
        starts_at, ends_at = self.resolve_interval(data, self.scheduler.clock())

        async with self.scheduler.locked_court(store, court_id):
            await store.get_court(court_id)

            clashes = overlapping(await store.locks(court_id), starts_at, ends_at)
            if clashes:
                logger.warning(
                    f"Lock on court {court_id} overlaps existing locks {[c.id for c in clashes]}"
                )

            lock = ScheduledLock(
                court_id=court_id,
                starts_at=starts_at,
                ends_at=ends_at,
                reason=data.reason,
            )
            store.add(lock)
            await store.commit()

        logger.info(
            f"Scheduled lock {lock.id} on court {court_id}: "
            f"{starts_at.isoformat()} - {ends_at.isoformat()}"
        )
        return lock

    async def list_locks(self, store: CourtStore, court_id: int) -> List[ScheduledLock]:
        await store.get_court(court_id)
        return await store.locks(court_id)

    async def remove_lock(self, store: CourtStore, court_id: int, lock_id: int):
        async with self.scheduler.locked_court(store, court_id):
            lock = await store.get_lock(court_id, lock_id)
            await store.delete_rows([lock])
            await store.commit()
        logger.info(f"Removed lock {lock_id} from court {court_id}")
