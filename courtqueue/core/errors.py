"""Errors raised by the court services.

Every error carries the HTTP status code the routers answer with.
"""
from typing import Optional


class CourtQueueError(Exception):
    """Base class for court scheduling errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CourtQueueError):
    """A referenced court, lock or player does not exist."""

    status_code = 404


class AuthFailure(CourtQueueError):
    """A submitted username/password pair did not verify."""

    status_code = 401

    def __init__(self, username: str):
        super().__init__(f"Invalid credentials for player '{username}'")
        self.username = username


class AlreadyActiveError(CourtQueueError):
    """A player is already active or waiting on some court."""

    status_code = 409

    def __init__(self, player_id: int, court_id: int, username: Optional[str] = None):
        who = f"'{username}'" if username else f"{player_id}"
        super().__init__(f"Player {who} is already checked in on court {court_id}")
        self.player_id = player_id
        self.court_id = court_id


class CourtLockedError(CourtQueueError):
    """The court is under a scheduled lock right now."""

    status_code = 423

    def __init__(self, court_id: int, lock):
        super().__init__(
            f"Court {court_id} is locked until {lock.ends_at.isoformat()}"
            + (f": {lock.reason}" if lock.reason else "")
        )
        self.court_id = court_id
        self.lock = lock


class InvalidGroupError(CourtQueueError):
    """The submitted player group is empty, too large or has duplicates."""


class InvalidIntervalError(CourtQueueError):
    """A lock interval is malformed."""


class PersistenceError(CourtQueueError):
    """The storage layer failed; the change was not applied."""

    status_code = 503


class AlreadyExistsError(CourtQueueError):
    """A court name or username is already taken."""
