"""Scheduling domain schemas - Pydantic models for schedule previews"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ...config import DEFAULT_VISIT_PREVIEW_COUNT, MAX_VISIT_PREVIEW_COUNT
from .recurrence import DEFAULT_DURATION_MINUTES, RecurrenceRule


class RecurrencePreviewRequest(BaseModel):
    """
    Candidate schedule from the job form.

    Deliberately lenient: the form posts this on every change, so half-typed
    times and unknown patterns must still produce a response.
    """

    isRecurring: bool = False
    recurringPattern: Optional[str] = None
    recurringDays: Optional[list[int]] = None
    startDate: Optional[datetime] = None
    startTime: Optional[str] = None
    recurringEndDate: Optional[datetime] = None
    duration: Optional[int] = Field(None, gt=0)
    limit: int = Field(DEFAULT_VISIT_PREVIEW_COUNT, ge=0, le=MAX_VISIT_PREVIEW_COUNT)

    def to_rule(self) -> RecurrenceRule:
        return RecurrenceRule(
            is_recurring=self.isRecurring,
            pattern=self.recurringPattern,
            days_of_week=self.recurringDays or (),
            start_date=self.startDate,
            start_time=self.startTime,
            end_date=self.recurringEndDate,
            duration_minutes=self.duration or DEFAULT_DURATION_MINUTES,
        )


class PreviewVisit(BaseModel):
    scheduledAt: datetime
    duration: int


class VisitPreviewResponse(BaseModel):
    """Schema for "N visits will be created, starting with ..." """

    count: int
    visits: list[PreviewVisit]
    patternRecognized: bool
