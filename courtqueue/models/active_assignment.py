"""Active assignment model."""
from sqlalchemy import Column, Integer, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from courtqueue.core.database import Base


class ActiveAssignment(Base):
    """A player occupying one seat on a court."""

    __tablename__ = "active_assignments"

    id = Column(Integer, primary_key=True, index=True)
    court_id = Column(Integer, ForeignKey("courts.id", ondelete="CASCADE"), nullable=False, index=True)
    # A player holds at most one seat anywhere
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), unique=True, nullable=False)
    assigned_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    court = relationship("Court", back_populates="active_assignments")
    player = relationship("Player", lazy="joined")
