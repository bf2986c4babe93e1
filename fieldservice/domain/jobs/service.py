"""Job service - Business logic for job operations"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Job
from ..scheduling.recurrence import RecurrenceRule, expand
from .repository import JobRepository
from .schemas import JobCreate, JobUpdate

logger = logging.getLogger(__name__)

# Job fields that change when and how long a one-off job's visit happens
SCHEDULE_FIELDS = ("start_date", "start_time", "duration")


class JobService:
    """Service layer for job business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = JobRepository()

    def get_jobs(self, org_id: Optional[str] = None) -> list[Job]:
        return self.repo.get_jobs(self.db, org_id)

    def get_job(self, job_id: int) -> Job:
        job = self.repo.get_job_by_id(self.db, job_id)
        if not job:
            raise HTTPException(status_code=404, detail="Job not found")
        return job

    def create_job(self, data: JobCreate) -> Job:
        """Create a job and all of its visits up front"""
        logger.info(f"Creating job for org {data.orgId} (recurring={data.isRecurring})")

        job_data = {
            "org_id": data.orgId,
            "client_id": data.clientId,
            "title": data.title,
            "description": data.description,
            "job_number": data.jobNumber,
            "status": data.status,
            "priority": data.priority,
            "start_date": data.startDate,
            "start_time": data.startTime,
            "duration": data.duration,
            "is_recurring": data.isRecurring,
            "recurring_pattern": data.recurringPattern if data.isRecurring else None,
            "recurring_days": data.recurringDays if data.isRecurring else None,
            "recurring_end_date": data.recurringEndDate if data.isRecurring else None,
        }

        try:
            job = self.repo.create_job(self.db, **job_data)
            occurrences = expand(RecurrenceRule.from_job(job))
            self.repo.add_visits(self.db, job, occurrences)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create job for org {data.orgId}: {e}")
            raise

        self.db.refresh(job)
        logger.info(f"Created job {job.id} with {len(occurrences)} visit(s)")
        return job

    def update_job(self, job_id: int, data: JobUpdate) -> Job:
        """
        Update a job.

        Visits are independent once created, so edits to a recurring job's
        schedule only affect future generation. A one-off job owns exactly one
        visit, which follows the job's date, time and duration.
        """
        job = self.get_job(job_id)

        if job.is_recurring:
            start_date = data.startDate or job.start_date
            end_date = data.recurringEndDate or job.recurring_end_date
            if start_date and end_date and end_date.date() < start_date.date():
                raise HTTPException(
                    status_code=422,
                    detail="Recurring end date cannot be before the start date",
                )

        updates = {
            "title": data.title,
            "description": data.description,
            "job_number": data.jobNumber,
            "status": data.status,
            "priority": data.priority,
            "start_date": data.startDate,
            "start_time": data.startTime,
            "duration": data.duration,
        }
        if job.is_recurring:
            updates.update(
                {
                    "recurring_pattern": data.recurringPattern,
                    "recurring_days": data.recurringDays,
                    "recurring_end_date": data.recurringEndDate,
                }
            )

        schedule_changed = any(
            updates[field] is not None and updates[field] != getattr(job, field)
            for field in SCHEDULE_FIELDS
        )

        self.repo.update_job(self.db, job, **updates)

        if schedule_changed and not job.is_recurring:
            self._sync_one_off_visit(job)

        self.db.commit()
        self.db.refresh(job)
        return job

    def _sync_one_off_visit(self, job: Job) -> None:
        """Move a one-off job's visit to match the job's schedule"""
        occurrence = expand(RecurrenceRule.from_job(job))[0]
        visit = job.visits[0] if job.visits else None

        if visit is None:
            logger.info(f"One-off job {job.id} had no visit, creating one")
            self.repo.add_visits(self.db, job, [occurrence])
            return

        if visit.invoice_id:
            logger.warning(f"Visit {visit.id} is invoiced, not moving it with job {job.id}")
            return

        visit.scheduled_at = occurrence.scheduled_at
        visit.duration = occurrence.duration_minutes
        logger.info(f"Synced visit {visit.id} to job {job.id} schedule")

    def delete_job(self, job_id: int) -> None:
        job = self.get_job(job_id)
        self.repo.delete_job(self.db, job)
        logger.info(f"Deleted job {job_id}")
