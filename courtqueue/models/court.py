"""Court model."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from courtqueue.core.database import Base


class Court(Base):
    """Represents a shared court with a fixed number of seats."""

    __tablename__ = "courts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    # Set when the active set becomes non-empty, cleared when it empties
    timer_started_at = Column(DateTime(timezone=True), nullable=True)
    # Read cache refreshed by the sweep; admission never trusts it
    is_locked = Column(Boolean, default=False, nullable=False)
    lock_refreshed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    active_assignments = relationship(
        "ActiveAssignment", back_populates="court", cascade="all, delete-orphan", passive_deletes=True
    )
    waiting_entries = relationship(
        "WaitingEntry", back_populates="court", cascade="all, delete-orphan", passive_deletes=True
    )
    locks = relationship(
        "ScheduledLock", back_populates="court", cascade="all, delete-orphan", passive_deletes=True
    )
