"""Job domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import (
    validate_days_of_week,
    validate_recurring_pattern,
    validate_time_hhmm,
)
from ..visits.schemas import VisitResponse


class JobCreate(BaseModel):
    """Schema for creating a new job"""

    orgId: str = Field(..., min_length=1)
    clientId: str = Field(..., min_length=1)
    title: Optional[str] = None
    description: Optional[str] = None
    jobNumber: Optional[str] = None
    status: str = "Draft"
    priority: str = "normal"

    # Scheduling
    startDate: Optional[datetime] = None
    startTime: Optional[str] = None
    duration: int = Field(120, gt=0)
    isRecurring: bool = False
    recurringPattern: Optional[str] = None
    recurringDays: Optional[list[int]] = None
    recurringEndDate: Optional[datetime] = None

    @field_validator("startTime")
    @classmethod
    def validate_start_time(cls, v):
        return validate_time_hhmm(v)

    @field_validator("recurringPattern")
    @classmethod
    def validate_pattern(cls, v):
        return validate_recurring_pattern(v)

    @field_validator("recurringDays")
    @classmethod
    def validate_days(cls, v):
        return validate_days_of_week(v)

    @model_validator(mode="after")
    def check_recurrence(self):
        if self.isRecurring:
            if not self.recurringPattern:
                raise ValueError("Recurring jobs need a recurring pattern")
            if not self.startDate:
                raise ValueError("Recurring jobs need a start date")
        if (
            self.recurringEndDate is not None
            and self.startDate is not None
            and self.recurringEndDate.date() < self.startDate.date()
        ):
            raise ValueError("Recurring end date cannot be before the start date")
        return self


class JobUpdate(BaseModel):
    """Schema for updating an existing job; only provided fields change"""

    title: Optional[str] = None
    description: Optional[str] = None
    jobNumber: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    startDate: Optional[datetime] = None
    startTime: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0)
    recurringPattern: Optional[str] = None
    recurringDays: Optional[list[int]] = None
    recurringEndDate: Optional[datetime] = None

    @field_validator("startTime")
    @classmethod
    def validate_start_time(cls, v):
        return validate_time_hhmm(v)

    @field_validator("recurringPattern")
    @classmethod
    def validate_pattern(cls, v):
        return validate_recurring_pattern(v)

    @field_validator("recurringDays")
    @classmethod
    def validate_days(cls, v):
        return validate_days_of_week(v)


class JobResponse(BaseModel):
    """Schema for job response"""

    id: int
    public_id: str
    orgId: str
    clientId: str
    title: Optional[str]
    description: Optional[str]
    jobNumber: Optional[str]
    status: str
    priority: str
    startDate: Optional[datetime]
    startTime: Optional[str]
    duration: int
    isRecurring: bool
    recurringPattern: Optional[str]
    recurringDays: Optional[list[int]]
    recurringEndDate: Optional[datetime]
    visitCount: int
    created_at: Optional[datetime] = None


class JobDetailResponse(JobResponse):
    visits: list[VisitResponse] = []
