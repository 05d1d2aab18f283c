"""Check-in and check-out endpoints."""
import logging
from fastapi import APIRouter, Depends, HTTPException

from courtqueue.api.deps import get_scheduler, get_snapshot_builder, get_store
from courtqueue.core.errors import CourtQueueError
from courtqueue.schemas.occupancy import (
    CheckInRequest,
    CheckInResponse,
    CheckOutRequest,
    RemoveResponse,
    StaffRemoveRequest,
)
from courtqueue.services.court_store import CourtStore
from courtqueue.services.credentials import credential_verifier
from courtqueue.services.occupancy import OccupancyScheduler
from courtqueue.services.snapshot import SnapshotBuilder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courts/{court_id}", tags=["occupancy"])


@router.post("/check-in", response_model=CheckInResponse)
async def check_in(
    court_id: int,
    request: CheckInRequest,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
    builder: SnapshotBuilder = Depends(get_snapshot_builder),
):
    """
    Check a group of up to four players in to a court.

    Every credential is verified before the court is touched. The group is
    seated together if there is room and more than the merge threshold left
    on the session, otherwise it joins the back of the queue together.

    Args:
        court_id: Court ID
        request: Credentials of each player in the group

    Returns:
        Whether the group is active or queued, and the court afterwards
    """
    try:
        players = await credential_verifier.verify_all(store, request.players)
        result = await scheduler.admit(store, court_id, players)
        snapshot = await builder.build_one(store, court_id)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return CheckInResponse(outcome=result.outcome, player_ids=result.player_ids, court=snapshot)


@router.post("/check-out", response_model=RemoveResponse)
async def check_out(
    court_id: int,
    request: CheckOutRequest,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
    builder: SnapshotBuilder = Depends(get_snapshot_builder),
):
    """
    Players leave a court (or its queue); free seats are backfilled.

    Players not on this court are ignored.
    """
    try:
        players = await credential_verifier.verify_all(store, request.players)
        result = await scheduler.remove(store, court_id, players)
        snapshot = await builder.build_one(store, court_id)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return RemoveResponse(
        removed_ids=result.removed_ids, promoted_ids=result.promoted_ids, court=snapshot
    )


@router.post("/players/remove", response_model=RemoveResponse)
async def staff_remove(
    court_id: int,
    request: StaffRemoveRequest,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
    builder: SnapshotBuilder = Depends(get_snapshot_builder),
):
    """Staff removal of players by id; unknown player ids are rejected."""
    try:
        players = [await store.get_player(player_id) for player_id in request.player_ids]
        result = await scheduler.remove(store, court_id, players)
        snapshot = await builder.build_one(store, court_id)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    logger.info(f"Staff removed {result.removed_ids} from court {court_id}")
    return RemoveResponse(
        removed_ids=result.removed_ids, promoted_ids=result.promoted_ids, court=snapshot
    )
