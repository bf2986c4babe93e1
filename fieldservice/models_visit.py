"""
Visit Models for Job Execution
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .models import generate_public_id

# Status workflow: Scheduled → InProgress → Completed
# Cancelled can be reached from Scheduled or InProgress
VISIT_STATUSES = ("Scheduled", "InProgress", "Completed", "Cancelled")


class Visit(Base):
    """A single scheduled service visit belonging to a job"""

    __tablename__ = "visits"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(
        String(36), unique=True, nullable=False, index=True, default=generate_public_id
    )

    # Relationships
    org_id = Column(String(64), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    # Invoices are owned by the billing side; only the link is kept here
    invoice_id = Column(String(64), nullable=True)

    visit_number = Column(Integer, nullable=False)  # Sequential number within job

    # Scheduling
    scheduled_at = Column(DateTime, nullable=False, index=True)
    duration = Column(Integer, default=120, nullable=False)  # Minutes

    status = Column(String(50), default="Scheduled", nullable=False, index=True)
    completed_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    job = relationship("Job", back_populates="visits")
