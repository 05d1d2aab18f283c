"""Waiting entry model."""
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from courtqueue.core.database import Base


class WaitingEntry(Base):
    """A queued player waiting for a seat, ordered by join time."""

    __tablename__ = "waiting_entries"

    id = Column(Integer, primary_key=True, index=True)
    court_id = Column(Integer, ForeignKey("courts.id", ondelete="CASCADE"), nullable=False, index=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), unique=True, nullable=False)
    joined_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    court = relationship("Court", back_populates="waiting_entries")
    player = relationship("Player", lazy="joined")

    # FIFO reads are always (court_id, joined_at, id)
    __table_args__ = (
        Index("ix_waiting_court_joined", "court_id", "joined_at"),
    )
