"""Scheduled lock endpoints."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from courtqueue.api.deps import get_scheduler, get_store
from courtqueue.core.errors import CourtQueueError
from courtqueue.schemas.lock import ScheduledLockCreate, ScheduledLockInDB
from courtqueue.services.court_admin import CourtAdminService
from courtqueue.services.court_store import CourtStore
from courtqueue.services.occupancy import OccupancyScheduler

router = APIRouter(prefix="/courts/{court_id}/locks", tags=["locks"])


@router.post("", response_model=ScheduledLockInDB, status_code=201)
async def create_lock(
    court_id: int,
    lock: ScheduledLockCreate,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """
    Schedule a maintenance lock on a court.

    While a lock is in effect no players can check in to the court and
    queued players are not seated. Players already on court keep playing.

    Args:
        court_id: Court ID
        lock: starts_at with ends_at or duration_minutes, or
            start_time_local with duration_minutes; optional reason

    Returns:
        Created lock
    """
    try:
        return await CourtAdminService(scheduler).add_lock(store, court_id, lock)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[ScheduledLockInDB])
async def list_locks(
    court_id: int,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """List a court's scheduled locks ordered by start."""
    try:
        return await CourtAdminService(scheduler).list_locks(store, court_id)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{lock_id}", status_code=204)
async def delete_lock(
    court_id: int,
    lock_id: int,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """Remove a scheduled lock."""
    try:
        await CourtAdminService(scheduler).remove_lock(store, court_id, lock_id)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
