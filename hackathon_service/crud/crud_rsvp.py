# hackathon_service/crud/crud_rsvp.py
"""
CRUD operations for RSVP admission.

Every status transition that can change the confirmed count locks the
single ``confirmed_count`` row first, so admissions are serialized and the
capacity check always sees committed counts.
"""

import logging
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from hackathon_service.constants.statuses import ParticipantStatus
from hackathon_service.models.rsvp import ConfirmedCount, PreRegistration
from hackathon_service.models.user import User

logger = logging.getLogger(__name__)

COUNTER_ROW_ID = 1

OPEN_STATUSES = (ParticipantStatus.PENDING, ParticipantStatus.WAITLISTED)


class ConfirmResult:
    """Outcome of an attempt to confirm attendance."""
    CONFIRMED = "confirmed"
    ALREADY_CONFIRMED = "already_confirmed"
    NOT_OPEN = "not_open"
    FULL = "full"


class CRUDRsvp:
    """CRUD operations for participant RSVP state."""

    def get_confirmed_count(self, db: Session) -> int:
        return (
            db.query(func.count(User.id))
            .filter(User.status == ParticipantStatus.CONFIRMED)
            .scalar()
            or 0
        )

    def lock_counter(self, db: Session) -> ConfirmedCount:
        """SELECT FOR UPDATE on the counter row, creating it on first use."""
        counter = (
            db.query(ConfirmedCount)
            .filter(ConfirmedCount.id == COUNTER_ROW_ID)
            .with_for_update()
            .first()
        )
        if counter is None:
            counter = ConfirmedCount(id=COUNTER_ROW_ID, count=0)
            db.add(counter)
            db.flush()
        return counter

    def get_eligible_user_ids(self, db: Session, *, pool_size: int) -> list[str]:
        """
        The direct-RSVP eligibility view: pending or waitlisted users,
        pre-registered emails first, then by registration time, limited to
        the pool size minus the seats already confirmed.
        """
        remaining = max(pool_size - self.get_confirmed_count(db), 0)
        if remaining == 0:
            return []
        pre_registered = (
            db.query(PreRegistration.id)
            .filter(func.lower(PreRegistration.email) == func.lower(User.email))
            .correlate(User)
            .exists()
        )
        rows = (
            db.query(User.id)
            .filter(User.status.in_(OPEN_STATUSES))
            .order_by(case((pre_registered, 0), else_=1), User.timestamp.asc())
            .limit(remaining)
            .all()
        )
        return [row[0] for row in rows]

    def is_directly_eligible(self, db: Session, *, user_id: str, pool_size: int) -> bool:
        return user_id in self.get_eligible_user_ids(db, pool_size=pool_size)

    def confirm_with_capacity_check(
        self, db: Session, *, user: User, capacity: Optional[int]
    ) -> tuple[str, int]:
        """
        Atomically check the confirmed count against ``capacity`` and confirm.
        ``capacity=None`` skips the check (direct invitees).

        The user's status is read again under the lock, since ``user`` may
        have been loaded before another request confirmed or declined them.

        Returns:
            (ConfirmResult, confirmed_count) where the count is the committed value
        """
        try:
            counter = self.lock_counter(db)
            status = (
                db.query(User.status)
                .filter(User.id == user.id)
                .with_for_update()
                .scalar()
            )
            current_count = self.get_confirmed_count(db)

            if status == ParticipantStatus.CONFIRMED:
                db.rollback()
                return ConfirmResult.ALREADY_CONFIRMED, current_count
            if status not in OPEN_STATUSES:
                db.rollback()
                return ConfirmResult.NOT_OPEN, current_count

            if capacity is not None and current_count >= capacity:
                logger.info(
                    f"RSVP rejected for user {user.id} - event at capacity "
                    f"({current_count}/{capacity})"
                )
                db.rollback()
                return ConfirmResult.FULL, current_count

            user.status = ParticipantStatus.CONFIRMED
            counter.count = current_count + 1
            db.commit()
            db.refresh(user)

            logger.info(f"RSVP confirmed for user {user.id} ({counter.count} confirmed)")
            return ConfirmResult.CONFIRMED, current_count + 1

        except Exception as e:
            logger.error(
                f"Failed to confirm RSVP for user {user.id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user.id, "capacity": capacity},
            )
            db.rollback()
            raise

    def set_status(self, db: Session, *, user: User, status: str) -> int:
        """
        Moves one user to ``status`` under the counter lock.

        Returns:
            the confirmed count after the change
        """
        try:
            counter = self.lock_counter(db)
            user.status = status
            db.flush()
            counter.count = self.get_confirmed_count(db)
            db.commit()
            db.refresh(user)
            return counter.count
        except Exception as e:
            logger.error(
                f"Failed to set status {status} for user {user.id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user.id, "status": status},
            )
            db.rollback()
            raise

    def sync_counter(self, db: Session) -> int:
        """Recounts confirmed users into the counter row after admin edits."""
        try:
            counter = self.lock_counter(db)
            counter.count = self.get_confirmed_count(db)
            db.commit()
            return counter.count
        except Exception as e:
            logger.error(f"Failed to sync confirmed counter: {str(e)}", exc_info=True)
            db.rollback()
            raise


rsvp = CRUDRsvp()
