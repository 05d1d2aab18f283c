"""Scheduled lock model."""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from courtqueue.core.database import Base


class ScheduledLock(Base):
    """A maintenance window [starts_at, ends_at) during which a court takes no new players."""

    __tablename__ = "scheduled_locks"

    id = Column(Integer, primary_key=True, index=True)
    court_id = Column(Integer, ForeignKey("courts.id", ondelete="CASCADE"), nullable=False, index=True)
    starts_at = Column(DateTime(timezone=True), nullable=False)
    ends_at = Column(DateTime(timezone=True), nullable=False)
    reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    court = relationship("Court", back_populates="locks")

    __table_args__ = (
        CheckConstraint("ends_at > starts_at", name="ck_scheduled_locks_interval"),
    )
