"""API schemas."""
from courtqueue.schemas.court import (
    CourtCreate,
    CourtInDB,
    CourtSnapshot,
)
from courtqueue.schemas.lock import (
    ScheduledLockCreate,
    ScheduledLockInDB,
)
from courtqueue.schemas.player import (
    PlayerCreate,
    PlayerInDB,
    PlayerMarkUpdate,
    PlayerFlagUpdate,
    PlayerSummary,
    WaitingPlayer,
)
from courtqueue.schemas.occupancy import (
    PlayerCredential,
    CheckInRequest,
    CheckOutRequest,
    StaffRemoveRequest,
    CheckInResponse,
    RemoveResponse,
    SweepResponse,
)

__all__ = [
    "CourtCreate",
    "CourtInDB",
    "CourtSnapshot",
    "ScheduledLockCreate",
    "ScheduledLockInDB",
    "PlayerCreate",
    "PlayerInDB",
    "PlayerMarkUpdate",
    "PlayerFlagUpdate",
    "PlayerSummary",
    "WaitingPlayer",
    "PlayerCredential",
    "CheckInRequest",
    "CheckOutRequest",
    "StaffRemoveRequest",
    "CheckInResponse",
    "RemoveResponse",
    "SweepResponse",
]
