"""Visit router - FastAPI endpoints for individual visits"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...models_visit import Visit
from .schemas import VisitDeleteResponse, VisitResponse, VisitStatusUpdate, VisitUpdate
from .service import VisitService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/visits", tags=["Visits"])


def get_visit_service(db: Session = Depends(get_db)) -> VisitService:
    """Dependency injection for VisitService"""
    return VisitService(db)


def visit_to_response(visit: Visit) -> VisitResponse:
    return VisitResponse(
        id=visit.id,
        public_id=visit.public_id,
        orgId=visit.org_id,
        jobId=visit.job_id,
        invoiceId=visit.invoice_id,
        visitNumber=visit.visit_number,
        scheduledAt=visit.scheduled_at,
        duration=visit.duration,
        status=visit.status,
        completedAt=visit.completed_at,
        notes=visit.notes,
    )


@router.get("/job/{job_id}", response_model=list[VisitResponse])
async def get_job_visits(job_id: int, service: VisitService = Depends(get_visit_service)):
    """Get all visits of a job in schedule order"""
    return [visit_to_response(v) for v in service.get_visits_for_job(job_id)]


@router.get("/{visit_id}", response_model=VisitResponse)
async def get_visit(visit_id: int, service: VisitService = Depends(get_visit_service)):
    return visit_to_response(service.get_visit(visit_id))


@router.patch("/{visit_id}", response_model=VisitResponse)
async def update_visit(
    visit_id: int,
    data: VisitUpdate,
    service: VisitService = Depends(get_visit_service),
):
    """Edit a visit without affecting the rest of the job's schedule"""
    return visit_to_response(service.update_visit(visit_id, data))


@router.post("/{visit_id}/status", response_model=VisitResponse)
async def update_visit_status(
    visit_id: int,
    data: VisitStatusUpdate,
    service: VisitService = Depends(get_visit_service),
):
    return visit_to_response(service.update_status(visit_id, data.status))


@router.delete("/{visit_id}", response_model=VisitDeleteResponse)
async def delete_visit(
    visit_id: int,
    delete_invoice: bool = Query(False),
    service: VisitService = Depends(get_visit_service),
):
    """Delete a visit; invoiced visits require delete_invoice=true"""
    return service.delete_visit(visit_id, delete_invoice)
