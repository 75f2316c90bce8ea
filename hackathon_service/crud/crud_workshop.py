# hackathon_service/crud/crud_workshop.py
import logging
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from hackathon_service.crud.base import CRUDBase
from hackathon_service.models.workshop import Workshop
from hackathon_service.models.workshop_registration import WorkshopRegistration
from hackathon_service.schemas.workshop import WorkshopCreate, WorkshopUpdate

logger = logging.getLogger(__name__)


class CRUDWorkshop(CRUDBase[Workshop, WorkshopCreate, WorkshopUpdate]):
    def get_active(self, db: Session) -> list[Workshop]:
        """Active workshops in schedule order."""
        return (
            db.query(self.model)
            .filter(self.model.is_active.is_(True))
            .order_by(self.model.date.asc(), self.model.start_time.asc())
            .all()
        )

    def get_all(self, db: Session) -> list[Workshop]:
        return (
            db.query(self.model)
            .order_by(self.model.date.asc(), self.model.start_time.asc())
            .all()
        )

    def get_registration_counts(
        self, db: Session, *, workshop_ids: Optional[list[str]] = None
    ) -> dict[str, int]:
        """
        Counts registrations per workshop in one grouped query.
        Workshops with no registrations are absent from the result.
        """
        query = db.query(
            WorkshopRegistration.workshop_id, func.count(WorkshopRegistration.id)
        )
        if workshop_ids is not None:
            query = query.filter(WorkshopRegistration.workshop_id.in_(workshop_ids))
        rows = query.group_by(WorkshopRegistration.workshop_id).all()
        return {workshop_id: count for workshop_id, count in rows}

    def remove_many(self, db: Session, *, workshop_ids: list[str]) -> int:
        """
        Deletes the given workshops; registrations go with them through the
        ON DELETE CASCADE foreign key.
        """
        try:
            deleted = (
                db.query(self.model)
                .filter(self.model.id.in_(workshop_ids))
                .delete(synchronize_session=False)
            )
            db.commit()
            return deleted
        except Exception as e:
            logger.error(
                f"Failed to bulk delete workshops: {str(e)}",
                exc_info=True,
                extra={"workshop_ids": workshop_ids},
            )
            db.rollback()
            raise

    def get_dashboard_stats(self, db: Session) -> dict:
        total, active, avg_capacity = db.query(
            func.count(self.model.id),
            func.sum(case((self.model.is_active.is_(True), 1), else_=0)),
            func.avg(self.model.max_capacity),
        ).one()
        total_registrations = db.query(func.count(WorkshopRegistration.id)).scalar() or 0
        return {
            "total_workshops": total or 0,
            "active_workshops": active or 0,
            "total_registrations": total_registrations,
            "average_capacity": round(float(avg_capacity or 0), 2),
        }


workshop = CRUDWorkshop(Workshop)
