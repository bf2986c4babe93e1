"""Visit domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_visit_status


class VisitResponse(BaseModel):
    """Schema for visit response"""

    id: int
    public_id: str
    orgId: str
    jobId: int
    invoiceId: Optional[str]
    visitNumber: int
    scheduledAt: datetime
    duration: int
    status: str
    completedAt: Optional[datetime]
    notes: Optional[str]

    class Config:
        from_attributes = True


class VisitUpdate(BaseModel):
    """Schema for editing a single visit independently of its job"""

    scheduledAt: Optional[datetime] = None
    duration: Optional[int] = Field(None, gt=0)
    status: Optional[str] = None
    completedAt: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is None:
            return v
        return validate_visit_status(v)


class VisitStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_visit_status(v)


class VisitDeleteResponse(BaseModel):
    success: bool
    invoiceUnlinked: bool
    invoiceId: Optional[str] = None
