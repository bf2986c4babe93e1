"""Scheduling router - visit previews for unsaved job schedules"""

import logging
from datetime import datetime

from fastapi import APIRouter

from .recurrence import count, has_known_pattern, preview
from .schemas import PreviewVisit, RecurrencePreviewRequest, VisitPreviewResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduling", tags=["Scheduling"])


@router.post("/preview", response_model=VisitPreviewResponse)
async def preview_visits(data: RecurrencePreviewRequest):
    """Show how many visits a schedule will create and when the first ones fall"""
    rule = data.to_rule()
    # Pin "now" so count and preview agree for schedules without a start date
    now = datetime.now()

    total = count(rule, now=now)
    dates = preview(rule, data.limit, now=now)
    recognized = not rule.is_recurring or has_known_pattern(rule)

    logger.debug(f"Schedule preview: pattern={rule.pattern} count={total}")

    return VisitPreviewResponse(
        count=total,
        visits=[PreviewVisit(scheduledAt=d, duration=rule.duration_minutes) for d in dates],
        patternRecognized=recognized,
    )
