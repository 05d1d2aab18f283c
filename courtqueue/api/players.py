"""Player endpoints."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from courtqueue.api.deps import get_scheduler, get_store
from courtqueue.core.errors import CourtQueueError
from courtqueue.schemas.player import PlayerCreate, PlayerFlagUpdate, PlayerInDB, PlayerMarkUpdate
from courtqueue.services.court_store import CourtStore
from courtqueue.services.credentials import credential_verifier
from courtqueue.services.occupancy import OccupancyScheduler
from courtqueue.services.player_admin import PlayerAdminService

router = APIRouter(prefix="/players", tags=["players"])


@router.post("", response_model=PlayerInDB, status_code=201)
async def create_player(
    player: PlayerCreate,
    store: CourtStore = Depends(get_store),
):
    """
    Register a player who can then check in with username and password.

    Args:
        player: Username, password and optional names

    Returns:
        Created player
    """
    try:
        return await credential_verifier.register(store, player)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[PlayerInDB])
async def list_players(
    store: CourtStore = Depends(get_store),
):
    """List all registered players."""
    return await store.list_players()


@router.delete("", status_code=204)
async def clear_players(
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """Delete every player, taking each off their court or queue first."""
    try:
        await PlayerAdminService(scheduler).clear_players(store)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{player_id}", status_code=204)
async def delete_player(
    player_id: int,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """
    Delete a player.

    A player on a court or in a queue is removed first, so the court's
    free seats are backfilled and an emptied court stops its timer.

    Args:
        player_id: Player ID
    """
    try:
        await PlayerAdminService(scheduler).delete_player(store, player_id)
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{player_id}/mark", response_model=PlayerInDB)
async def mark_player(
    player_id: int,
    update: PlayerMarkUpdate,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """Set a player's mark."""
    try:
        return await PlayerAdminService(scheduler).set_status(
            store, player_id, "is_marked", update.is_marked
        )
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{player_id}/flag", response_model=PlayerInDB)
async def flag_player(
    player_id: int,
    update: PlayerFlagUpdate,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """Set a player's flag."""
    try:
        return await PlayerAdminService(scheduler).set_status(
            store, player_id, "is_flagged", update.is_flagged
        )
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{player_id}/toggle-mark", response_model=PlayerInDB)
async def toggle_mark(
    player_id: int,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """Flip a player's mark."""
    try:
        return await PlayerAdminService(scheduler).set_status(store, player_id, "is_marked")
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{player_id}/toggle-flag", response_model=PlayerInDB)
async def toggle_flag(
    player_id: int,
    store: CourtStore = Depends(get_store),
    scheduler: OccupancyScheduler = Depends(get_scheduler),
):
    """Flip a player's flag."""
    try:
        return await PlayerAdminService(scheduler).set_status(store, player_id, "is_flagged")
    except CourtQueueError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
