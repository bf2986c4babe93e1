"""
Scheduling Domain

Turns a job's schedule fields into visits.

- recurrence.py: pure expansion of a RecurrenceRule into Occurrences
- schemas.py:    preview request/response models
- router.py:     POST /scheduling/preview

Persisting the generated visits belongs to the jobs domain; this package has
no knowledge of the database.
"""

from .recurrence import (
    MAX_VISITS,
    MAX_YEARS,
    Occurrence,
    RecurrenceRule,
    count,
    expand,
    has_known_pattern,
    preview,
    should_generate_on_date,
)

__all__ = [
    "MAX_VISITS",
    "MAX_YEARS",
    "Occurrence",
    "RecurrenceRule",
    "count",
    "expand",
    "has_known_pattern",
    "preview",
    "should_generate_on_date",
]
