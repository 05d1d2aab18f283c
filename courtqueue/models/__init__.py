"""Database models."""
from courtqueue.models.court import Court
from courtqueue.models.player import Player
from courtqueue.models.active_assignment import ActiveAssignment
from courtqueue.models.waiting_entry import WaitingEntry
from courtqueue.models.scheduled_lock import ScheduledLock

__all__ = ["Court", "Player", "ActiveAssignment", "WaitingEntry", "ScheduledLock"]
