# hackathon_service/services/workshop_service.py
"""
Workshop listing, registration and admin management.

Every public method either returns data or raises an ``AppError``; database
failures are logged here with context and surfaced as ``UpstreamFailure``.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hackathon_service import crud
from hackathon_service.core.config import settings
from hackathon_service.core.exceptions import (
    AlreadyRegistered,
    NotFound,
    NotRegistered,
    UpstreamFailure,
    WorkshopFull,
    WorkshopInactive,
)
from hackathon_service.crud.crud_workshop_registration import ClaimResult
from hackathon_service.models.workshop import Workshop
from hackathon_service.schemas.workshop import (
    AdminWorkshop,
    AdminWorkshopDetail,
    RegistrationOutcome,
    WorkshopCreate,
    WorkshopDashboardStats,
    WorkshopRegistrant,
    WorkshopUpdate,
    WorkshopWithStatus,
)
from hackathon_service.services.dashboard_cache import DashboardCache

logger = logging.getLogger(__name__)

CLAIM_ERRORS = {
    ClaimResult.WORKSHOP_NOT_FOUND: lambda: NotFound("Workshop not found"),
    ClaimResult.WORKSHOP_INACTIVE: WorkshopInactive,
    ClaimResult.ALREADY_REGISTERED: AlreadyRegistered,
    ClaimResult.FULL: WorkshopFull,
}


def is_full(max_capacity: Optional[int], current_registrations: int) -> bool:
    """A capacity of zero (or none) means unlimited."""
    return bool(max_capacity) and max_capacity > 0 and current_registrations >= max_capacity


class WorkshopService:
    def __init__(self, cache: DashboardCache):
        self.cache = cache

    # --- Participant operations ---

    def list_workshops(self, db: Session, *, user_id: str) -> list[WorkshopWithStatus]:
        """Active workshops with counts and the caller's registration status."""
        try:
            workshops = crud.workshop.get_active(db)
            counts = crud.workshop.get_registration_counts(
                db, workshop_ids=[w.id for w in workshops]
            )
            registered_ids = crud.workshop_registration.get_workshop_ids_for_user(
                db, user_id=user_id
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to fetch workshops for user {user_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id},
            )
            raise UpstreamFailure("fetch workshops") from e

        result = []
        for workshop in workshops:
            current = counts.get(workshop.id, 0)
            result.append(
                WorkshopWithStatus.model_validate(
                    {
                        **_workshop_fields(workshop),
                        "current_registrations": current,
                        "is_registered": workshop.id in registered_ids,
                        "is_full": is_full(workshop.max_capacity, current),
                    }
                )
            )
        return result

    def register(self, db: Session, *, user_id: str, workshop_id: str) -> RegistrationOutcome:
        try:
            participant = crud.user.get(db, id=user_id)
            if not participant:
                raise NotFound("Complete your registration before signing up for workshops")
            _, result = crud.workshop_registration.create_with_capacity_check(
                db, workshop_id=workshop_id, user=participant
            )
            if result != ClaimResult.CREATED:
                raise CLAIM_ERRORS[result]()
            outcome = self._outcome(db, workshop_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to register user {user_id} for workshop {workshop_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id, "workshop_id": workshop_id},
            )
            raise UpstreamFailure("register for workshop") from e

        self.cache.invalidate_dashboards(user_id)
        return outcome

    def unregister(self, db: Session, *, user_id: str, workshop_id: str) -> RegistrationOutcome:
        try:
            removed = crud.workshop_registration.remove_registration(
                db, user_id=user_id, workshop_id=workshop_id
            )
            if not removed:
                raise NotRegistered()
            outcome = self._outcome(db, workshop_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to unregister user {user_id} from workshop {workshop_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id, "workshop_id": workshop_id},
            )
            raise UpstreamFailure("unregister from workshop") from e

        self.cache.invalidate_dashboards(user_id)
        return outcome

    def _outcome(self, db: Session, workshop_id: str) -> RegistrationOutcome:
        workshop = crud.workshop.get(db, id=workshop_id)
        current = crud.workshop_registration.count_for_workshop(db, workshop_id=workshop_id)
        return RegistrationOutcome(
            workshop_id=workshop_id,
            current_registrations=current,
            is_full=is_full(workshop.max_capacity if workshop else 0, current),
        )

    # --- Admin operations ---

    def list_admin_workshops(self, db: Session) -> list[AdminWorkshop]:
        try:
            workshops = crud.workshop.get_all(db)
            counts = crud.workshop.get_registration_counts(db)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch admin workshop list: {str(e)}", exc_info=True)
            raise UpstreamFailure("fetch workshops") from e
        return [self._admin_view(w, counts.get(w.id, 0)) for w in workshops]

    def get_workshop(self, db: Session, *, workshop_id: str) -> AdminWorkshopDetail:
        try:
            workshop = crud.workshop.get(db, id=workshop_id)
            if not workshop:
                raise NotFound("Workshop not found")
            registrants = crud.workshop_registration.get_registrants(
                db, workshop_id=workshop_id
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to fetch workshop {workshop_id}: {str(e)}",
                exc_info=True,
                extra={"workshop_id": workshop_id},
            )
            raise UpstreamFailure("fetch workshop") from e
        return AdminWorkshopDetail.model_validate(
            {
                **_workshop_fields(workshop),
                "current_registrations": len(registrants),
                "is_full": is_full(workshop.max_capacity, len(registrants)),
                "registrations": registrants,
            }
        )

    def create_workshop(self, db: Session, *, obj_in: WorkshopCreate) -> AdminWorkshop:
        try:
            workshop = crud.workshop.create(db, obj_in=obj_in, event_name=settings.EVENT_NAME)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create workshop: {str(e)}", exc_info=True)
            raise UpstreamFailure("create workshop") from e
        logger.info(f"Workshop {workshop.id} created: {workshop.title}")
        self.cache.invalidate_admin()
        return self._admin_view(workshop, 0)

    def update_workshop(
        self, db: Session, *, workshop_id: str, obj_in: WorkshopUpdate
    ) -> AdminWorkshop:
        try:
            workshop = crud.workshop.get(db, id=workshop_id)
            if not workshop:
                raise NotFound("Workshop not found")
            workshop = crud.workshop.update(
                db,
                db_obj=workshop,
                obj_in=obj_in.model_dump(exclude_unset=True, exclude_none=True),
            )
            current = crud.workshop_registration.count_for_workshop(
                db, workshop_id=workshop_id
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to update workshop {workshop_id}: {str(e)}",
                exc_info=True,
                extra={"workshop_id": workshop_id},
            )
            raise UpstreamFailure("update workshop") from e
        self.cache.invalidate_admin()
        return self._admin_view(workshop, current)

    def delete_workshop(self, db: Session, *, workshop_id: str) -> None:
        """Registrations are removed by the database cascade."""
        try:
            removed = crud.workshop.remove(db, id=workshop_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to delete workshop {workshop_id}: {str(e)}",
                exc_info=True,
                extra={"workshop_id": workshop_id},
            )
            raise UpstreamFailure("delete workshop") from e
        if removed is None:
            raise NotFound("Workshop not found")
        logger.info(f"Workshop {workshop_id} deleted")
        self.cache.invalidate_admin()

    def bulk_delete_workshops(self, db: Session, *, workshop_ids: list[str]) -> int:
        try:
            deleted = crud.workshop.remove_many(db, workshop_ids=workshop_ids)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to bulk delete workshops: {str(e)}",
                exc_info=True,
                extra={"workshop_ids": workshop_ids},
            )
            raise UpstreamFailure("delete workshops") from e
        logger.info(f"Bulk deleted {deleted} of {len(workshop_ids)} workshops")
        self.cache.invalidate_admin()
        return deleted

    def get_dashboard_stats(self, db: Session) -> WorkshopDashboardStats:
        key = self.cache.admin_key("workshop_stats")
        cached = self.cache.get(key)
        if cached is not None:
            return WorkshopDashboardStats.model_validate(cached)
        try:
            stats = WorkshopDashboardStats(**crud.workshop.get_dashboard_stats(db))
        except SQLAlchemyError as e:
            logger.error(f"Failed to compute workshop stats: {str(e)}", exc_info=True)
            raise UpstreamFailure("fetch workshop stats") from e
        self.cache.set(key, stats.model_dump())
        return stats

    # --- Staff operations ---

    def list_registrations(
        self, db: Session, *, workshop_id: Optional[str] = None
    ) -> list[WorkshopRegistrant]:
        try:
            if workshop_id and not crud.workshop.get(db, id=workshop_id):
                raise NotFound("Workshop not found")
            rows = crud.workshop_registration.get_registrants(db, workshop_id=workshop_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to fetch workshop registrations: {str(e)}",
                exc_info=True,
                extra={"workshop_id": workshop_id},
            )
            raise UpstreamFailure("fetch registrations") from e
        return [WorkshopRegistrant.model_validate(row) for row in rows]

    def get_workshop_title(self, db: Session, *, workshop_id: str) -> str:
        try:
            workshop = crud.workshop.get(db, id=workshop_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch workshop {workshop_id}: {str(e)}", exc_info=True)
            raise UpstreamFailure("fetch workshop") from e
        if not workshop:
            raise NotFound("Workshop not found")
        return workshop.title

    def _admin_view(self, workshop: Workshop, current: int) -> AdminWorkshop:
        return AdminWorkshop.model_validate(
            {
                **_workshop_fields(workshop),
                "current_registrations": current,
                "is_full": is_full(workshop.max_capacity, current),
            }
        )


def _workshop_fields(workshop: Workshop) -> dict:
    return {
        "id": workshop.id,
        "title": workshop.title,
        "description": workshop.description,
        "event_name": workshop.event_name,
        "date": workshop.date,
        "start_time": workshop.start_time,
        "end_time": workshop.end_time,
        "location": workshop.location,
        "max_capacity": workshop.max_capacity,
        "is_active": workshop.is_active,
        "created_at": workshop.created_at,
        "updated_at": workshop.updated_at,
    }
