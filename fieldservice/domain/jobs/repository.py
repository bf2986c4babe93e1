"""Job repository - Database operations for jobs and their generated visits"""

from typing import Iterable, Optional

from sqlalchemy.orm import Session, selectinload

from ...models import Job
from ...models_visit import Visit
from ..scheduling.recurrence import Occurrence


class JobRepository:
    """Repository for job database operations"""

    @staticmethod
    def get_jobs(db: Session, org_id: Optional[str] = None) -> list[Job]:
        """Get all jobs, newest first"""
        query = db.query(Job).options(selectinload(Job.visits))
        if org_id:
            query = query.filter(Job.org_id == org_id)
        return query.order_by(Job.created_at.desc(), Job.id.desc()).all()

    @staticmethod
    def get_job_by_id(db: Session, job_id: int) -> Optional[Job]:
        return (
            db.query(Job)
            .options(selectinload(Job.visits))
            .filter(Job.id == job_id)
            .first()
        )

    @staticmethod
    def create_job(db: Session, **job_data) -> Job:
        """Add a job and flush so it has an id; the caller commits"""
        job = Job(**job_data)
        db.add(job)
        db.flush()
        return job

    @staticmethod
    def add_visits(db: Session, job: Job, occurrences: Iterable[Occurrence]) -> list[Visit]:
        """Turn generated occurrences into visit rows numbered from 1"""
        visits = []
        for number, occurrence in enumerate(occurrences, start=1):
            visit = Visit(
                org_id=job.org_id,
                job_id=job.id,
                visit_number=number,
                scheduled_at=occurrence.scheduled_at,
                duration=occurrence.duration_minutes,
                status=occurrence.status,
            )
            db.add(visit)
            visits.append(visit)
        return visits

    @staticmethod
    def update_job(db: Session, job: Job, **updates) -> Job:
        """Update a job with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(job, key):
                setattr(job, key, value)
        return job

    @staticmethod
    def delete_job(db: Session, job: Job) -> None:
        db.delete(job)
        db.commit()
