"""Visit service - Business logic for visits after they are generated"""

import logging
from datetime import datetime

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models_visit import Visit
from .repository import VisitRepository
from .schemas import VisitUpdate

logger = logging.getLogger(__name__)


class VisitService:
    """
    Service layer for visits.

    Visits are independent of their job once created: editing a visit of a
    recurring job never touches the job. One-off jobs are the exception, where
    the job mirrors its only visit's time and duration.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = VisitRepository()

    def get_visits_for_job(self, job_id: int) -> list[Visit]:
        return self.repo.get_visits_for_job(self.db, job_id)

    def get_visit(self, visit_id: int) -> Visit:
        visit = self.repo.get_visit_by_id(self.db, visit_id)
        if not visit:
            raise HTTPException(status_code=404, detail="Visit not found")
        return visit

    def update_visit(self, visit_id: int, data: VisitUpdate) -> Visit:
        visit = self.get_visit(visit_id)

        if visit.invoice_id:
            # Invoiced visits only accept notes
            if data.notes is not None:
                visit.notes = data.notes
            self.db.commit()
            self.db.refresh(visit)
            return visit

        self.repo.update_visit(
            self.db,
            visit,
            scheduled_at=data.scheduledAt,
            duration=data.duration,
            status=data.status,
            completed_at=data.completedAt,
            notes=data.notes,
        )

        job = visit.job
        if not job.is_recurring:
            if data.scheduledAt is not None:
                job.start_date = data.scheduledAt
                job.start_time = f"{data.scheduledAt.hour:02d}:{data.scheduledAt.minute:02d}"
            if data.duration is not None:
                job.duration = data.duration
            logger.info(f"Synced one-off job {job.id} from visit {visit.id}")

        self.db.commit()
        self.db.refresh(visit)
        return visit

    def update_status(self, visit_id: int, status: str) -> Visit:
        visit = self.get_visit(visit_id)

        visit.status = status
        if status == "Completed":
            visit.completed_at = datetime.now()

        self.db.commit()
        self.db.refresh(visit)
        logger.info(f"Visit {visit_id} marked {status}")
        return visit

    def delete_visit(self, visit_id: int, delete_invoice: bool = False) -> dict:
        """Delete a visit; invoiced visits need explicit confirmation"""
        visit = self.get_visit(visit_id)
        invoice_id = visit.invoice_id

        if invoice_id and not delete_invoice:
            raise HTTPException(
                status_code=409,
                detail="Visit is invoiced. Confirm invoice removal to delete it.",
            )

        self.repo.delete_visit(self.db, visit)
        logger.info(f"Deleted visit {visit_id} (invoice unlinked: {bool(invoice_id)})")
        return {"success": True, "invoiceUnlinked": bool(invoice_id), "invoiceId": invoice_id}
