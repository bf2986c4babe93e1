"""Job router - FastAPI endpoints for job operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...models import Job
from ..visits.router import visit_to_response
from .schemas import JobCreate, JobDetailResponse, JobResponse, JobUpdate
from .service import JobService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def get_job_service(db: Session = Depends(get_db)) -> JobService:
    """Dependency injection for JobService"""
    return JobService(db)


def job_to_response(job: Job, visit_count: int) -> JobResponse:
    return JobResponse(
        id=job.id,
        public_id=job.public_id,
        orgId=job.org_id,
        clientId=job.client_id,
        title=job.title,
        description=job.description,
        jobNumber=job.job_number,
        status=job.status,
        priority=job.priority,
        startDate=job.start_date,
        startTime=job.start_time,
        duration=job.duration,
        isRecurring=job.is_recurring,
        recurringPattern=job.recurring_pattern,
        recurringDays=job.recurring_days,
        recurringEndDate=job.recurring_end_date,
        visitCount=visit_count,
        created_at=job.created_at,
    )


def job_to_detail(job: Job) -> JobDetailResponse:
    return JobDetailResponse(
        **job_to_response(job, len(job.visits)).model_dump(),
        visits=[visit_to_response(v) for v in job.visits],
    )


@router.get("", response_model=list[JobResponse])
async def get_jobs(
    org_id: Optional[str] = Query(None),
    service: JobService = Depends(get_job_service),
):
    """Get all jobs, optionally for a single organization"""
    return [job_to_response(job, len(job.visits)) for job in service.get_jobs(org_id)]


@router.get("/{job_id}", response_model=JobDetailResponse)
async def get_job(job_id: int, service: JobService = Depends(get_job_service)):
    """Get a job with its visits"""
    return job_to_detail(service.get_job(job_id))


@router.post("", response_model=JobDetailResponse, status_code=201)
async def create_job(data: JobCreate, service: JobService = Depends(get_job_service)):
    """Create a job and generate its visits"""
    job = service.create_job(data)
    return job_to_detail(job)


@router.patch("/{job_id}", response_model=JobDetailResponse)
async def update_job(
    job_id: int,
    data: JobUpdate,
    service: JobService = Depends(get_job_service),
):
    """Update a job; one-off jobs carry their visit along"""
    job = service.update_job(job_id, data)
    return job_to_detail(job)


@router.delete("/{job_id}")
async def delete_job(job_id: int, service: JobService = Depends(get_job_service)):
    """Delete a job and all of its visits"""
    service.delete_job(job_id)
    return {"message": "Job deleted successfully"}
