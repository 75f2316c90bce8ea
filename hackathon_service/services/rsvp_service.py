# hackathon_service/services/rsvp_service.py
"""
RSVP admission.

Direct invitees (pending and inside the eligibility view) confirm without a
capacity check. Everyone else who is pending or waitlisted competes first
come, first served for the remaining seats up to ``RSVP_CAPACITY``.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hackathon_service import crud
from hackathon_service.constants.statuses import ParticipantStatus
from hackathon_service.core.config import settings
from hackathon_service.core.exceptions import (
    EventFull,
    NotFound,
    RsvpNotAllowed,
    UpstreamFailure,
    ValidationFailed,
)
from hackathon_service.crud.crud_rsvp import OPEN_STATUSES, ConfirmResult
from hackathon_service.models.user import User
from hackathon_service.schemas.rsvp import LiveCount, RsvpState
from hackathon_service.services.dashboard_cache import DashboardCache
from hackathon_service.services.live_values import LivePublisher

logger = logging.getLogger(__name__)

CONFIRMED_MESSAGE = "You've confirmed your spot. See you at the event!"
PENDING_MESSAGE = "Your registration is pending. Please RSVP to secure your spot."
WAITLISTED_MESSAGE = (
    "We don't have a spot for you at this time. We'll email you if a slot opens up."
)
EVENT_FULL_MESSAGE = "The event is now full. We hope to see you next year!"
DECLINE_ACK_MESSAGE = (
    "Are you sure you want to decline? This action cannot be undone."
)

TERMINAL_STATUSES = (ParticipantStatus.DECLINED, ParticipantStatus.DENIED)


def spots_left_message(spots_left: int) -> str:
    plural = "" if spots_left == 1 else "s"
    return f"Save your spot now! Only {spots_left} spot{plural} left!"


def build_rsvp_state(
    *, status: str, directly_eligible: bool, confirmed_count: int, capacity: int
) -> RsvpState:
    """Pure mapping from (status, eligibility, live count) to what the panel shows."""
    spots_left = max(capacity - confirmed_count, 0)
    is_full = confirmed_count >= capacity
    state = {
        "status": status,
        "directly_eligible": directly_eligible,
        "confirmed_count": confirmed_count,
        "capacity": capacity,
        "spots_left": spots_left,
        "is_full": is_full,
    }

    if status == ParticipantStatus.CONFIRMED:
        return RsvpState(
            **state,
            mode="confirmed",
            can_confirm=False,
            can_decline=True,
            message=CONFIRMED_MESSAGE,
        )
    if status in TERMINAL_STATUSES:
        return RsvpState(**state, mode="hidden", can_confirm=False, can_decline=False)
    if status == ParticipantStatus.PENDING and directly_eligible:
        return RsvpState(
            **state,
            mode="direct",
            can_confirm=True,
            can_decline=True,
            message=PENDING_MESSAGE,
        )
    if status in OPEN_STATUSES and not directly_eligible:
        return RsvpState(
            **state,
            mode="first_come",
            can_confirm=not is_full,
            can_decline=True,
            message=EVENT_FULL_MESSAGE if is_full else spots_left_message(spots_left),
        )
    # Waitlisted but inside the eligibility view: an admin decides.
    return RsvpState(
        **state,
        mode="hidden",
        can_confirm=False,
        can_decline=True,
        message=WAITLISTED_MESSAGE,
    )


class RsvpService:
    def __init__(
        self,
        publisher: LivePublisher,
        cache: Optional[DashboardCache] = None,
        capacity: Optional[int] = None,
        eligible_pool: Optional[int] = None,
    ):
        self.publisher = publisher
        self.cache = cache
        self.capacity = capacity if capacity is not None else settings.RSVP_CAPACITY
        self.eligible_pool = (
            eligible_pool if eligible_pool is not None else settings.RSVP_ELIGIBLE_POOL
        )

    def _get_user(self, db: Session, user_id: str) -> User:
        user = crud.user.get(db, id=user_id)
        if not user:
            raise NotFound("Participant not found")
        return user

    def _state_for(self, db: Session, user: User) -> RsvpState:
        eligible = False
        if user.status in OPEN_STATUSES:
            eligible = crud.rsvp.is_directly_eligible(
                db, user_id=user.id, pool_size=self.eligible_pool
            )
        return build_rsvp_state(
            status=user.status,
            directly_eligible=eligible,
            confirmed_count=crud.rsvp.get_confirmed_count(db),
            capacity=self.capacity,
        )

    def get_state(self, db: Session, *, user_id: str) -> RsvpState:
        try:
            user = self._get_user(db, user_id)
            return self._state_for(db, user)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to load RSVP state for user {user_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id},
            )
            raise UpstreamFailure("load your RSVP status") from e

    def get_live_count(self, db: Session) -> LiveCount:
        try:
            count = crud.rsvp.get_confirmed_count(db)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read confirmed count: {str(e)}", exc_info=True)
            raise UpstreamFailure("load the confirmed count") from e
        return self.live_count(count)

    def live_count(self, count: int) -> LiveCount:
        return LiveCount(
            confirmed_count=count,
            capacity=self.capacity,
            spots_left=max(self.capacity - count, 0),
            is_full=count >= self.capacity,
        )

    def _announce(self, user_id: str, status: str, count: int) -> None:
        self.publisher.publish_confirmed_count(count)
        self.publisher.publish_status(user_id, status)
        if self.cache is not None:
            self.cache.invalidate_dashboards(user_id)

    def confirm(self, db: Session, *, user_id: str) -> RsvpState:
        """
        Confirms attendance. Confirming twice is a no-op success, so a
        retried request cannot fail or take a second seat.
        """
        try:
            user = self._get_user(db, user_id)
            if user.status == ParticipantStatus.CONFIRMED:
                return self._state_for(db, user)
            if user.status in TERMINAL_STATUSES:
                raise RsvpNotAllowed()

            eligible = crud.rsvp.is_directly_eligible(
                db, user_id=user_id, pool_size=self.eligible_pool
            )
            if user.status == ParticipantStatus.PENDING and eligible:
                capacity = None
            elif not eligible:
                capacity = self.capacity
            else:
                raise RsvpNotAllowed()

            result, count = crud.rsvp.confirm_with_capacity_check(
                db, user=user, capacity=capacity
            )
            if result == ConfirmResult.ALREADY_CONFIRMED:
                # A concurrent request got there first.
                return self._state_for(db, user)
            if result == ConfirmResult.NOT_OPEN:
                raise RsvpNotAllowed()
            if result == ConfirmResult.FULL:
                raise EventFull()
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to confirm RSVP for user {user_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id},
            )
            raise UpstreamFailure("confirm your RSVP") from e

        self._announce(user_id, ParticipantStatus.CONFIRMED, count)
        return build_rsvp_state(
            status=ParticipantStatus.CONFIRMED,
            directly_eligible=False,
            confirmed_count=count,
            capacity=self.capacity,
        )

    def decline(
        self, db: Session, *, user_id: str, acknowledge_irreversible: bool
    ) -> RsvpState:
        if not acknowledge_irreversible:
            raise ValidationFailed({"acknowledgeIrreversible": [DECLINE_ACK_MESSAGE]})
        try:
            user = self._get_user(db, user_id)
            if user.status in TERMINAL_STATUSES:
                raise RsvpNotAllowed("Your RSVP can no longer be changed")
            count = crud.rsvp.set_status(
                db, user=user, status=ParticipantStatus.DECLINED
            )
            state = self._state_for(db, user)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to decline RSVP for user {user_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id},
            )
            raise UpstreamFailure("decline your RSVP") from e

        logger.info(f"User {user_id} declined their spot")
        self._announce(user_id, ParticipantStatus.DECLINED, count)
        return state
