# hackathon_service/services/participant_admin_service.py
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hackathon_service import crud
from hackathon_service.core.exceptions import NotFound, UpstreamFailure
from hackathon_service.schemas.participant import (
    ParticipantAdminUpdate,
    ParticipantBulkUpdate,
    ParticipantBulkUpdateResult,
    ParticipantSummary,
)
from hackathon_service.services.analytics_service import participant_summary
from hackathon_service.services.dashboard_cache import DashboardCache
from hackathon_service.services.live_values import LivePublisher

logger = logging.getLogger(__name__)


def _column_values(obj_in: ParticipantAdminUpdate) -> dict:
    values = {}
    if obj_in.status is not None:
        values["status"] = obj_in.status
    if obj_in.checked_in is not None:
        values["checked_in"] = obj_in.checked_in
    return values


class ParticipantAdminService:
    """Admin edits to participants: status, check-in and removal."""

    def __init__(self, cache: DashboardCache, publisher: LivePublisher):
        self.cache = cache
        self.publisher = publisher

    def get_participant(self, db: Session, *, participant_id: str) -> ParticipantSummary:
        try:
            row = crud.user.get_with_labels(db, user_id=participant_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to fetch participant {participant_id}: {str(e)}", exc_info=True
            )
            raise UpstreamFailure("fetch participant") from e
        if row is None:
            raise NotFound("Participant not found")
        return participant_summary(row)

    def update_participant(
        self, db: Session, *, participant_id: str, obj_in: ParticipantAdminUpdate
    ) -> ParticipantSummary:
        result = self.bulk_update(
            db,
            obj_in=ParticipantBulkUpdate(
                participant_ids=[participant_id],
                status=obj_in.status,
                checked_in=obj_in.checked_in,
            ),
        )
        if result.updated_count == 0:
            raise NotFound("Participant not found")
        return self.get_participant(db, participant_id=participant_id)

    def bulk_update(
        self, db: Session, *, obj_in: ParticipantBulkUpdate
    ) -> ParticipantBulkUpdateResult:
        """
        Applies one status and/or check-in value to every listed participant
        in a single statement. Unknown ids are reported, not fatal.
        """
        requested = list(dict.fromkeys(obj_in.participant_ids))
        values = _column_values(obj_in)
        try:
            found = {u.id for u in crud.user.get_many(db, user_ids=requested)}
            not_found = [pid for pid in requested if pid not in found]
            updated_ids = [pid for pid in requested if pid in found]
            if updated_ids:
                crud.user.bulk_update(db, user_ids=updated_ids, values=values)
            count = None
            if "status" in values and updated_ids:
                count = crud.rsvp.sync_counter(db)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to bulk update participants: {str(e)}",
                exc_info=True,
                extra={"participant_ids": requested},
            )
            raise UpstreamFailure("update participants") from e

        logger.info(
            f"Bulk updated {len(updated_ids)} participants with {values}"
            + (f", {len(not_found)} not found" if not_found else "")
        )
        if count is not None:
            self.publisher.publish_confirmed_count(count)
            for pid in updated_ids:
                self.publisher.publish_status(pid, values["status"])
        self.cache.invalidate_admin()
        for pid in updated_ids:
            self.cache.invalidate_participant(pid)

        return ParticipantBulkUpdateResult(
            updated_count=len(updated_ids),
            updated_participants=updated_ids,
            not_found_ids=not_found,
            warning=(
                f"{len(not_found)} participant(s) were not found" if not_found else None
            ),
        )

    def bulk_delete(self, db: Session, *, participant_ids: list[str]) -> int:
        try:
            deleted = crud.user.remove_many(db, user_ids=participant_ids)
            count = crud.rsvp.sync_counter(db)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to delete participants: {str(e)}",
                exc_info=True,
                extra={"participant_ids": participant_ids},
            )
            raise UpstreamFailure("delete participants") from e
        logger.info(f"Deleted {deleted} participants")
        self.publisher.publish_confirmed_count(count)
        self.cache.invalidate_admin()
        for pid in participant_ids:
            self.cache.invalidate_participant(pid)
        return deleted
