"""Shared router dependencies."""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from courtqueue.core.database import get_db
from courtqueue.services.court_store import CourtStore
from courtqueue.services.occupancy import OccupancyScheduler, occupancy_scheduler
from courtqueue.services.snapshot import SnapshotBuilder, snapshot_builder


async def get_store(db: AsyncSession = Depends(get_db)) -> CourtStore:
    return CourtStore(db)


def get_scheduler() -> OccupancyScheduler:
    return occupancy_scheduler


def get_snapshot_builder() -> SnapshotBuilder:
    return snapshot_builder
