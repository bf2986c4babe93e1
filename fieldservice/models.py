import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


class Job(Base):
    """A unit of work for a client; its schedule fields drive visit generation"""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(
        String(36), unique=True, nullable=False, index=True, default=generate_public_id
    )
    org_id = Column(String(64), nullable=False, index=True)
    client_id = Column(String(64), nullable=False, index=True)

    # Job details
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    job_number = Column(String(50), nullable=True)
    status = Column(String(50), default="Draft", nullable=False, index=True)
    priority = Column(String(20), default="normal", nullable=False)

    # Scheduling
    start_date = Column(DateTime, nullable=True)
    start_time = Column(String(10), nullable=True)  # HH:MM format
    duration = Column(Integer, default=120, nullable=False)  # Minutes

    # Recurrence
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_pattern = Column(String(20), nullable=True)  # daily, weekly, biweekly, monthly
    recurring_days = Column(JSON, nullable=True)  # [0-6], 0 = Sunday
    recurring_end_date = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    visits = relationship(
        "Visit",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="Visit.scheduled_at",
    )
