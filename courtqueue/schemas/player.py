"""Player schemas."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class PlayerBase(BaseModel):
    """Base player schema."""

    username: str = Field(..., min_length=1, max_length=64)
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class PlayerCreate(PlayerBase):
    """Schema for registering a player."""

    password: str = Field(..., min_length=4)


class PlayerInDB(PlayerBase):
    """Schema for a player record."""

    id: int
    is_marked: bool = False
    is_flagged: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PlayerMarkUpdate(BaseModel):
    """Schema for setting a player's mark."""

    is_marked: bool


class PlayerFlagUpdate(BaseModel):
    """Schema for setting a player's flag."""

    is_flagged: bool


class PlayerSummary(BaseModel):
    """Player as shown on a court."""

    id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_marked: bool = False
    is_flagged: bool = False

    model_config = ConfigDict(from_attributes=True)


class WaitingPlayer(PlayerSummary):
    """Queued player with the time they joined."""

    joined_at: datetime
