"""Court endpoints."""
import time
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from courtqueue.api.deps import get_scheduler, get_snapshot_builder, get_store
from courtqueue.core.errors import CourtQueueError
from courtqueue.schemas.court import CourtCreate, CourtInDB, CourtSnapshot
from courtqueue.schemas.occupancy import RotationSummary, SweepResponse
from courtqueue.services.court_admin import CourtAdminService
from courtqueue.services.court_store import CourtStore
from courtqueue.services.occupancy import OccupancyScheduler
from courtqueue.services.snapshot import SnapshotBuilder

router = APIRouter(prefix="/courts", tags=["courts"])


@router.post("", response_model=CourtInDB, status_code=201)
async def create_court(
    court: CourtCreate,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """
    Create a new court.

    Args:
        court: Court name
        store: Court store

    Returns:
        Created court
    """
    try:
        return await CourtAdminService(scheduler).create_court(store, court.name)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[CourtSnapshot])
async def list_courts(
    store: CourtStore = Depends(get_store),
    builder: SnapshotBuilder = Depends(get_snapshot_builder),
):
    """
    List every court with its players, queue, timer and locks.

    Reading never rotates a court; an expired court shows a remaining time of
    zero until the next sweep.
    """
    try:
        return await builder.build_all(store)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/sweep", response_model=SweepResponse)
async def run_sweep(
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """
    Run one sweep now instead of waiting for the background job.

    Rotates expired courts, backfills free seats and refreshes lock flags.
    """
    started = time.monotonic()
    try:
        report = await scheduler.sweep(store)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return SweepResponse(
        started_at=report.started_at,
        rotated=[
            RotationSummary(
                court_id=r.court_id, evicted_ids=r.evicted_ids, promoted_ids=r.promoted_ids
            )
            for r in report.rotated
        ],
        backfilled=report.backfilled,
        lock_changed=report.lock_changed,
        failed=report.failed,
        duration_ms=round((time.monotonic() - started) * 1000, 2),
    )


@router.get("/{court_id}", response_model=CourtSnapshot)
async def get_court(
    court_id: int,
    store: CourtStore = Depends(get_store),
    builder: SnapshotBuilder = Depends(get_snapshot_builder),
):
    """
    Get a specific court's snapshot.

    Args:
        court_id: Court ID

    Returns:
        Court snapshot
    """
    try:
        return await builder.build_one(store, court_id)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{court_id}", status_code=204)
async def delete_court(
    court_id: int,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """
    Delete a court with its locks, players and queue.

    Args:
        court_id: Court ID
    """
    try:
        await CourtAdminService(scheduler).delete_court(store, court_id)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
