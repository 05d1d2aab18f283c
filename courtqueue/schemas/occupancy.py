"""Check-in, check-out and sweep schemas."""
from pydantic import BaseModel, Field
from typing import List, Dict, Optional
from datetime import datetime

from courtqueue.schemas.court import CourtSnapshot


class PlayerCredential(BaseModel):
    """Username/password pair submitted at the court."""

    username: str
    password: str


class CheckInRequest(BaseModel):
    """Schema for checking a group of players in to a court."""

    players: List[PlayerCredential] = Field(..., min_length=1)


class CheckOutRequest(BaseModel):
    """Schema for players leaving a court."""

    players: List[PlayerCredential] = Field(..., min_length=1)


class StaffRemoveRequest(BaseModel):
    """Schema for staff removing players by id."""

    player_ids: List[int] = Field(..., min_length=1)


class CheckInResponse(BaseModel):
    """Result of a check-in."""

    outcome: str  # active, queued
    player_ids: List[int]
    court: CourtSnapshot


class RemoveResponse(BaseModel):
    """Result of a removal."""

    removed_ids: List[int]
    promoted_ids: List[int]
    court: CourtSnapshot


class RotationSummary(BaseModel):
    court_id: int
    evicted_ids: List[int]
    promoted_ids: List[int]


class SweepResponse(BaseModel):
    """Result of one sweep pass."""

    started_at: datetime
    rotated: List[RotationSummary] = []
    backfilled: Dict[int, List[int]] = {}
    lock_changed: List[int] = []
    failed: List[int] = []
    duration_ms: Optional[float] = None
