"""Shared validation utilities"""

import re
from typing import Iterable, Optional

from ..domain.scheduling.recurrence import PATTERNS
from ..models_visit import VISIT_STATUSES


def validate_time_hhmm(value: Optional[str]) -> Optional[str]:
    """
    Validate a 24-hour "HH:MM" time and normalize it to zero-padded form.

    Args:
        value: Time string such as "9:05" or "14:00"

    Returns:
        Normalized time string ("09:05")

    Raises:
        ValueError: If the time is not a valid 24-hour clock time
    """
    if not value:
        return None

    match = re.match(r"^(\d{1,2}):(\d{2})$", value.strip())
    if not match:
        raise ValueError("Time must be in HH:MM format")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError("Time must be a valid 24-hour clock time")

    return f"{hours:02d}:{minutes:02d}"


def validate_recurring_pattern(pattern: Optional[str]) -> Optional[str]:
    """Lowercase the pattern and reject anything the scheduler cannot expand"""
    if pattern is None:
        return None

    pattern = pattern.strip().lower()
    if not pattern:
        return None
    if pattern not in PATTERNS:
        raise ValueError(f"Recurring pattern must be one of: {', '.join(PATTERNS)}")
    return pattern


def validate_days_of_week(days: Optional[Iterable[int]]) -> Optional[list[int]]:
    """Deduplicate and sort weekdays (0 = Sunday ... 6 = Saturday)"""
    if days is None:
        return None

    cleaned = sorted(set(days))
    for day in cleaned:
        if day < 0 or day > 6:
            raise ValueError("Days of week must be between 0 (Sunday) and 6 (Saturday)")
    return cleaned


def validate_visit_status(status: str) -> str:
    if status not in VISIT_STATUSES:
        raise ValueError(f"Status must be one of: {', '.join(VISIT_STATUSES)}")
    return status
