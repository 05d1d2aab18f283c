"""Scheduled lock schemas."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, time


class ScheduledLockCreate(BaseModel):
    """
    Schema for scheduling a lock.

    Give ``starts_at`` with either ``ends_at`` or ``duration_minutes``, or
    ``start_time_local`` (today, venue timezone) with ``duration_minutes``.
    """

    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    start_time_local: Optional[time] = None
    duration_minutes: Optional[int] = Field(default=None, ge=1, le=7 * 24 * 60)
    reason: Optional[str] = Field(default=None, max_length=200)


class ScheduledLockInDB(BaseModel):
    """Schema for a scheduled lock record."""

    id: int
    court_id: int
    starts_at: datetime
    ends_at: datetime
    reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
