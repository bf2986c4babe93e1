"""Visit repository - Database operations for visits"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models_visit import Visit


class VisitRepository:
    """Repository for visit database operations"""

    @staticmethod
    def get_visits_for_job(db: Session, job_id: int) -> list[Visit]:
        return (
            db.query(Visit)
            .filter(Visit.job_id == job_id)
            .order_by(Visit.scheduled_at, Visit.visit_number)
            .all()
        )

    @staticmethod
    def get_visit_by_id(db: Session, visit_id: int) -> Optional[Visit]:
        return (
            db.query(Visit)
            .options(joinedload(Visit.job))
            .filter(Visit.id == visit_id)
            .first()
        )

    @staticmethod
    def update_visit(db: Session, visit: Visit, **updates) -> Visit:
        """Update a visit with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(visit, key):
                setattr(visit, key, value)
        return visit

    @staticmethod
    def delete_visit(db: Session, visit: Visit) -> None:
        db.delete(visit)
        db.commit()
