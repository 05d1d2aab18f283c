"""Court schemas."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from courtqueue.schemas.lock import ScheduledLockInDB
from courtqueue.schemas.player import PlayerSummary, WaitingPlayer


class CourtCreate(BaseModel):
    """Schema for creating a court."""

    name: str = Field(..., min_length=1, max_length=100)


class CourtInDB(BaseModel):
    """Schema for a court record."""

    id: int
    name: str
    timer_started_at: Optional[datetime] = None
    is_locked: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CourtSnapshot(BaseModel):
    """Read view of one court at one instant."""

    id: int
    name: str
    capacity: int
    free_seats: int
    is_locked: bool
    current_lock: Optional[ScheduledLockInDB] = None
    future_locks: List[ScheduledLockInDB] = []
    active_players: List[PlayerSummary] = []
    waiting_groups: List[List[WaitingPlayer]] = []
    timer_started_at: Optional[datetime] = None
    remaining_time: Optional[int] = None  # seconds
