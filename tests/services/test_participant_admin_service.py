# tests/services/test_participant_admin_service.py

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from hackathon_service import crud
from hackathon_service.core.exceptions import NotFound
from hackathon_service.models.rsvp import ConfirmedCount
from hackathon_service.schemas.participant import (
    ParticipantAdminUpdate,
    ParticipantBulkUpdate,
)
from hackathon_service.services.live_values import LivePublisher
from hackathon_service.services.participant_admin_service import ParticipantAdminService

from tests.utils.participant import create_random_participant


@pytest.fixture
def publisher():
    return MagicMock(spec=LivePublisher)


@pytest.fixture
def service(cache, publisher):
    return ParticipantAdminService(cache, publisher)


def test_bulk_update_reports_missing_ids(db, service, publisher):
    create_random_participant(db, "user_a")
    create_random_participant(db, "user_b")

    result = service.bulk_update(
        db,
        obj_in=ParticipantBulkUpdate(
            participant_ids=["user_a", "user_b", "ghost"], status="confirmed"
        ),
    )

    assert result.updated_count == 2
    assert result.updated_participants == ["user_a", "user_b"]
    assert result.not_found_ids == ["ghost"]
    assert result.warning == "1 participant(s) were not found"
    db.expire_all()
    assert crud.user.get(db, id="user_b").status == "confirmed"
    assert db.get(ConfirmedCount, 1).count == 2
    publisher.publish_confirmed_count.assert_called_once_with(2)


def test_bulk_check_in_leaves_status_alone(db, service, publisher):
    create_random_participant(db, "user_a", status="waitlisted")

    result = service.bulk_update(
        db, obj_in=ParticipantBulkUpdate(participant_ids=["user_a"], checked_in=True)
    )

    db.expire_all()
    user = crud.user.get(db, id="user_a")
    assert result.warning is None
    assert user.checked_in is True
    assert user.status == "waitlisted"
    publisher.publish_confirmed_count.assert_not_called()


def test_bulk_update_requires_a_change():
    with pytest.raises(ValidationError):
        ParticipantBulkUpdate(participant_ids=["user_a"])


def test_bulk_update_rejects_terminal_statuses():
    """Admins cannot set declined or denied through the bulk tools."""
    with pytest.raises(ValidationError):
        ParticipantBulkUpdate(participant_ids=["user_a"], status="declined")


def test_update_single_participant(db, service):
    create_random_participant(db, "user_a")

    participant = service.update_participant(
        db, participant_id="user_a", obj_in=ParticipantAdminUpdate(status="waitlisted")
    )

    assert participant.status == "waitlisted"


def test_update_unknown_participant(db, service):
    with pytest.raises(NotFound):
        service.update_participant(
            db, participant_id="ghost", obj_in=ParticipantAdminUpdate(checked_in=True)
        )


def test_bulk_delete_cascades(db, service, publisher):
    create_random_participant(db, "user_a", status="confirmed", interests=(1, 2))
    create_random_participant(db, "user_b")

    deleted = service.bulk_delete(db, participant_ids=["user_a"])

    assert deleted == 1
    assert crud.user.get_interest_ids(db, user_id="user_a") == []
    publisher.publish_confirmed_count.assert_called_once_with(0)
