# hackathon_service/crud/crud_workshop_registration.py
"""
CRUD operations for workshop registrations.

Registering takes a row lock on the workshop so the duplicate check, the
capacity check and the insert happen inside one transaction.
"""

import logging
from typing import Optional

from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hackathon_service.models.lookups import Gender, Major
from hackathon_service.models.user import User
from hackathon_service.models.workshop import Workshop
from hackathon_service.models.workshop_registration import WorkshopRegistration

logger = logging.getLogger(__name__)


class ClaimResult:
    """Outcome of an attempt to take a seat in a workshop."""
    CREATED = "created"
    WORKSHOP_NOT_FOUND = "workshop_not_found"
    WORKSHOP_INACTIVE = "workshop_inactive"
    ALREADY_REGISTERED = "already_registered"
    FULL = "full"


class CRUDWorkshopRegistration:
    """CRUD operations for WorkshopRegistration."""

    def get_user_registration(
        self, db: Session, *, user_id: str, workshop_id: str
    ) -> Optional[WorkshopRegistration]:
        return (
            db.query(WorkshopRegistration)
            .filter(
                and_(
                    WorkshopRegistration.user_id == user_id,
                    WorkshopRegistration.workshop_id == workshop_id,
                )
            )
            .first()
        )

    def get_workshop_ids_for_user(self, db: Session, *, user_id: str) -> set[str]:
        rows = (
            db.query(WorkshopRegistration.workshop_id)
            .filter(WorkshopRegistration.user_id == user_id)
            .all()
        )
        return {row[0] for row in rows}

    def count_for_workshop(self, db: Session, *, workshop_id: str) -> int:
        return (
            db.query(func.count(WorkshopRegistration.id))
            .filter(WorkshopRegistration.workshop_id == workshop_id)
            .scalar()
            or 0
        )

    def create_with_capacity_check(
        self, db: Session, *, workshop_id: str, user: User
    ) -> tuple[Optional[WorkshopRegistration], str]:
        """
        Atomically check for a duplicate, check capacity and insert.

        Returns:
            (registration, ClaimResult) where registration is None unless
            the result is CREATED
        """
        try:
            # SELECT FOR UPDATE serializes concurrent claims on this workshop
            workshop = (
                db.query(Workshop)
                .filter(Workshop.id == workshop_id)
                .with_for_update()
                .first()
            )
            if not workshop:
                db.rollback()
                return None, ClaimResult.WORKSHOP_NOT_FOUND
            if not workshop.is_active:
                db.rollback()
                return None, ClaimResult.WORKSHOP_INACTIVE

            if self.get_user_registration(db, user_id=user.id, workshop_id=workshop_id):
                db.rollback()
                return None, ClaimResult.ALREADY_REGISTERED

            if workshop.max_capacity and workshop.max_capacity > 0:
                current_count = self.count_for_workshop(db, workshop_id=workshop_id)
                if current_count >= workshop.max_capacity:
                    logger.info(
                        f"Registration rejected for user {user.id} - workshop {workshop_id} "
                        f"at capacity ({current_count}/{workshop.max_capacity})"
                    )
                    db.rollback()
                    return None, ClaimResult.FULL

            registration = WorkshopRegistration(
                user_id=user.id,
                workshop_id=workshop_id,
                f_name=user.f_name,
                l_name=user.l_name,
                year_of_study=user.year_of_study,
                gender=user.gender,
                major=user.major,
            )
            db.add(registration)
            db.commit()
            db.refresh(registration)

            logger.info(f"User {user.id} registered for workshop {workshop_id}")
            return registration, ClaimResult.CREATED

        except IntegrityError:
            # The unique (user_id, workshop_id) constraint caught a concurrent duplicate
            db.rollback()
            return None, ClaimResult.ALREADY_REGISTERED
        except Exception as e:
            logger.error(
                f"Failed to register user {user.id} for workshop {workshop_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user.id, "workshop_id": workshop_id},
            )
            db.rollback()
            raise

    def remove_registration(self, db: Session, *, user_id: str, workshop_id: str) -> bool:
        """
        Deletes the user's registration.

        Returns:
            False if there was nothing to delete
        """
        try:
            registration = self.get_user_registration(
                db, user_id=user_id, workshop_id=workshop_id
            )
            if not registration:
                return False
            db.delete(registration)
            db.commit()
            logger.info(f"User {user_id} unregistered from workshop {workshop_id}")
            return True
        except Exception as e:
            logger.error(
                f"Failed to unregister user {user_id} from workshop {workshop_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id, "workshop_id": workshop_id},
            )
            db.rollback()
            raise

    def get_registrants(
        self, db: Session, *, workshop_id: Optional[str] = None
    ) -> list[dict]:
        """
        Registration rows joined with their workshop, the participant email
        and the gender/major labels of the registration snapshot.
        Ordered by workshop date then registration time.
        """
        query = (
            db.query(
                WorkshopRegistration,
                Workshop,
                User.email,
                Gender.gender,
                Major.major,
            )
            .join(Workshop, Workshop.id == WorkshopRegistration.workshop_id)
            .outerjoin(User, User.id == WorkshopRegistration.user_id)
            .outerjoin(Gender, Gender.id == WorkshopRegistration.gender)
            .outerjoin(Major, Major.id == WorkshopRegistration.major)
        )
        if workshop_id:
            query = query.filter(WorkshopRegistration.workshop_id == workshop_id)
        rows = query.order_by(
            Workshop.date.asc(),
            Workshop.start_time.asc(),
            WorkshopRegistration.registered_at.asc(),
        ).all()

        return [
            {
                "id": reg.id,
                "user_id": reg.user_id,
                "workshop_id": workshop.id,
                "workshop_title": workshop.title,
                "workshop_date": workshop.date,
                "start_time": workshop.start_time,
                "end_time": workshop.end_time,
                "location": workshop.location,
                "first_name": reg.f_name,
                "last_name": reg.l_name,
                "email": email,
                "year_of_study": reg.year_of_study,
                "gender": gender_label,
                "major": major_label,
                "registered_at": reg.registered_at,
            }
            for reg, workshop, email, gender_label, major_label in rows
        ]


workshop_registration = CRUDWorkshopRegistration()
