"""
Recurring visit generation

Expands a job's recurrence rule into the concrete visits it produces.
Generation is bounded to 5 years or 1,825 visits, whichever comes first,
so every rule terminates no matter how it is configured.

Supported patterns: daily, weekly, biweekly, monthly.
- weekly/biweekly honour the selected weekdays (0 = Sunday) and fall back to
  the start date's weekday when none are selected
- biweekly only generates in even weeks counted from the start date
- monthly keeps the start date's day of month, rolling back to the last day
  of shorter months (Jan 31 -> Feb 28 -> Mar 31)

Everything here is pure: no database, no clock unless the caller omits `now`
for a one-off rule without a start date.
"""

import calendar
import itertools
import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Iterator, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

MAX_YEARS = 5
MAX_VISITS = 1825  # 5 years * 365 days (safeguard for daily jobs)
DEFAULT_DURATION_MINUTES = 120

DAILY = "daily"
WEEKLY = "weekly"
BIWEEKLY = "biweekly"
MONTHLY = "monthly"
PATTERNS = (DAILY, WEEKLY, BIWEEKLY, MONTHLY)

SCHEDULED = "Scheduled"

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")


class RecurrenceRule(BaseModel):
    """Schedule configuration of a job, rebuilt from the job's fields on every call"""

    model_config = ConfigDict(frozen=True)

    is_recurring: bool = False
    pattern: Optional[str] = None
    days_of_week: frozenset[int] = frozenset()
    start_date: Optional[datetime] = None
    start_time: Optional[str] = None
    end_date: Optional[datetime] = None
    duration_minutes: int = DEFAULT_DURATION_MINUTES

    @field_validator("pattern", mode="before")
    @classmethod
    def normalize_pattern(cls, v):
        if isinstance(v, str):
            return v.strip().lower() or None
        return v

    @field_validator("days_of_week", mode="before")
    @classmethod
    def default_days(cls, v):
        return frozenset() if v is None else v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def promote_date(cls, v):
        # Plain calendar dates start at midnight
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.min)
        return v

    @classmethod
    def from_job(cls, job) -> "RecurrenceRule":
        """Build a rule from a persisted job (or anything with the same attributes)"""
        return cls(
            is_recurring=bool(job.is_recurring),
            pattern=job.recurring_pattern,
            days_of_week=job.recurring_days or (),
            start_date=job.start_date,
            start_time=job.start_time,
            end_date=job.recurring_end_date,
            duration_minutes=job.duration or DEFAULT_DURATION_MINUTES,
        )


class Occurrence(BaseModel):
    """One generated visit, ready to be persisted by the caller"""

    model_config = ConfigDict(frozen=True)

    scheduled_at: datetime
    duration_minutes: int
    status: str = SCHEDULED


def parse_start_time(value: Optional[str]) -> Optional[Tuple[int, int]]:
    """
    Parse "HH:MM" into (hours, minutes).

    Returns None for missing or malformed input instead of raising: previews
    are computed while the user is still typing.
    """
    if not value:
        return None

    match = _TIME_RE.match(value)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours < 24 and minutes < 60:
            return hours, minutes

    logger.debug(f"Ignoring unparsable start time: {value!r}")
    return None


def apply_time(moment: datetime, time_of_day: Optional[Tuple[int, int]]) -> datetime:
    if time_of_day is None:
        return moment
    hours, minutes = time_of_day
    return moment.replace(hour=hours, minute=minutes, second=0, microsecond=0)


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _weekday(moment: datetime) -> int:
    """Day of week with 0 = Sunday"""
    return moment.isoweekday() % 7


def has_known_pattern(rule: RecurrenceRule) -> bool:
    return rule.pattern in PATTERNS


def effective_end_date(rule: RecurrenceRule) -> datetime:
    """Exclusive end of generation, never later than start + MAX_YEARS"""
    start = _start_of_day(rule.start_date)
    try:
        max_end = start + relativedelta(years=MAX_YEARS)
    except (ValueError, OverflowError):
        # Start is within MAX_YEARS of the last representable date
        max_end = datetime.max.replace(tzinfo=start.tzinfo)
    if rule.end_date is None:
        return max_end

    end = _start_of_day(rule.end_date).replace(tzinfo=start.tzinfo)
    return min(end, max_end)


def _matches_weekday(candidate: datetime, rule: RecurrenceRule, start: datetime) -> bool:
    if rule.days_of_week:
        return _weekday(candidate) in rule.days_of_week
    # No specific days selected: repeat on the start date's weekday
    return _weekday(candidate) == _weekday(start)


def should_generate_on_date(candidate: datetime, rule: RecurrenceRule, start: datetime) -> bool:
    """Whether the recurrence produces a visit on the candidate date"""
    pattern = rule.pattern

    if pattern == DAILY:
        return True

    if pattern == WEEKLY:
        return _matches_weekday(candidate, rule, start)

    if pattern == BIWEEKLY:
        # Weeks are counted from the rule's start, not from the first visit
        weeks_since_start = (candidate - start).days // 7
        if weeks_since_start % 2 != 0:
            return False
        return _matches_weekday(candidate, rule, start)

    if pattern == MONTHLY:
        if candidate.day == start.day:
            return True
        # Rolled back to the last day of a shorter month
        last_day = calendar.monthrange(candidate.year, candidate.month)[1]
        return candidate.day == last_day and candidate.day < start.day

    return False


def _candidate_dates(start: datetime, pattern: Optional[str]) -> Iterator[datetime]:
    """
    Candidate stream; the caller enforces both ceilings.

    Ends early only when the next candidate would be past datetime.max.
    """
    if pattern == MONTHLY:
        # Always offset from the start so a clamped month does not drift later ones
        for months in itertools.count():
            try:
                candidate = start + relativedelta(months=months)
            except (ValueError, OverflowError):
                return
            yield candidate
    else:
        current = start
        while True:
            yield current
            try:
                current += timedelta(days=1)
            except OverflowError:
                return


def expand(rule: RecurrenceRule, now: Optional[datetime] = None) -> List[Occurrence]:
    """
    Generate every visit the rule produces.

    Non-recurring rules (or recurring ones without a start date) produce a
    single visit at the start date, or at `now` when there is no start date.
    Recurring rules stop at the effective end date (exclusive) or after
    MAX_VISITS visits.
    """
    time_of_day = parse_start_time(rule.start_time)

    if not rule.is_recurring or rule.start_date is None:
        moment = rule.start_date or now or datetime.now()
        return [
            Occurrence(
                scheduled_at=apply_time(moment, time_of_day),
                duration_minutes=rule.duration_minutes,
            )
        ]

    if not has_known_pattern(rule):
        logger.warning(f"Unknown recurring pattern {rule.pattern!r}, no visits generated")
        return []

    start = _start_of_day(rule.start_date)
    end = effective_end_date(rule)

    occurrences: List[Occurrence] = []
    for candidate in _candidate_dates(start, rule.pattern):
        if candidate >= end or len(occurrences) >= MAX_VISITS:
            break
        if should_generate_on_date(candidate, rule, start):
            occurrences.append(
                Occurrence(
                    scheduled_at=apply_time(candidate, time_of_day),
                    duration_minutes=rule.duration_minutes,
                )
            )

    return occurrences


def count(rule: RecurrenceRule, now: Optional[datetime] = None) -> int:
    """Number of visits the rule will create, for previews before saving"""
    return len(expand(rule, now=now))


def preview(rule: RecurrenceRule, n: int = 10, now: Optional[datetime] = None) -> List[datetime]:
    """First `n` visit times"""
    if n <= 0:
        return []
    return [occurrence.scheduled_at for occurrence in expand(rule, now=now)[:n]]
