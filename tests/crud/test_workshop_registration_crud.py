# tests/crud/test_workshop_registration_crud.py

from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError

from hackathon_service.crud.crud_workshop_registration import (
    ClaimResult,
    CRUDWorkshopRegistration,
)
from hackathon_service.models.user import User
from hackathon_service.models.workshop import Workshop
from hackathon_service.models.workshop_registration import WorkshopRegistration

registration_crud = CRUDWorkshopRegistration()


def _participant():
    return User(
        id="user_123",
        f_name="Ada",
        l_name="Lovelace",
        email="ada@example.com",
        year_of_study="3rd",
        gender=2,
        major=3,
    )


def _db_with_workshop(workshop, existing=None, current_count=0):
    db_session = MagicMock()
    query = db_session.query.return_value.filter.return_value
    # Locked workshop lookup
    query.with_for_update.return_value.first.return_value = workshop
    # Duplicate check
    query.first.return_value = existing
    # Capacity count
    query.scalar.return_value = current_count
    return db_session


def test_claim_missing_workshop():
    """
    A workshop id with no row is reported, and nothing is inserted.
    """
    db_session = _db_with_workshop(None)

    registration, result = registration_crud.create_with_capacity_check(
        db_session, workshop_id="wks_missing", user=_participant()
    )

    assert registration is None
    assert result == ClaimResult.WORKSHOP_NOT_FOUND
    db_session.add.assert_not_called()
    db_session.rollback.assert_called_once()


def test_claim_inactive_workshop():
    workshop = Workshop(id="wks_1", is_active=False, max_capacity=10)
    db_session = _db_with_workshop(workshop)

    _, result = registration_crud.create_with_capacity_check(
        db_session, workshop_id="wks_1", user=_participant()
    )

    assert result == ClaimResult.WORKSHOP_INACTIVE
    db_session.add.assert_not_called()


def test_claim_duplicate_registration():
    """
    A second registration for the same workshop is refused before the
    capacity check.
    """
    workshop = Workshop(id="wks_1", is_active=True, max_capacity=10)
    existing = WorkshopRegistration(user_id="user_123", workshop_id="wks_1")
    db_session = _db_with_workshop(workshop, existing=existing)

    _, result = registration_crud.create_with_capacity_check(
        db_session, workshop_id="wks_1", user=_participant()
    )

    assert result == ClaimResult.ALREADY_REGISTERED
    db_session.add.assert_not_called()


def test_claim_full_workshop():
    workshop = Workshop(id="wks_1", is_active=True, max_capacity=2)
    db_session = _db_with_workshop(workshop, current_count=2)

    _, result = registration_crud.create_with_capacity_check(
        db_session, workshop_id="wks_1", user=_participant()
    )

    assert result == ClaimResult.FULL
    db_session.add.assert_not_called()
    db_session.commit.assert_not_called()


def test_claim_snapshots_participant_details():
    """
    The registration row copies name, year, gender and major from the
    participant at registration time.
    """
    workshop = Workshop(id="wks_1", is_active=True, max_capacity=2)
    db_session = _db_with_workshop(workshop, current_count=1)

    _, result = registration_crud.create_with_capacity_check(
        db_session, workshop_id="wks_1", user=_participant()
    )

    assert result == ClaimResult.CREATED
    created_obj = db_session.add.call_args[0][0]
    assert created_obj.user_id == "user_123"
    assert created_obj.workshop_id == "wks_1"
    assert created_obj.f_name == "Ada"
    assert created_obj.l_name == "Lovelace"
    assert created_obj.year_of_study == "3rd"
    assert created_obj.gender == 2
    assert created_obj.major == 3
    db_session.commit.assert_called_once()


def test_claim_zero_capacity_is_unlimited():
    workshop = Workshop(id="wks_1", is_active=True, max_capacity=0)
    db_session = _db_with_workshop(workshop, current_count=500)

    _, result = registration_crud.create_with_capacity_check(
        db_session, workshop_id="wks_1", user=_participant()
    )

    assert result == ClaimResult.CREATED


def test_claim_concurrent_duplicate_maps_to_already_registered():
    """
    If the unique constraint fires on commit, the claim is reported as a
    duplicate rather than an error.
    """
    workshop = Workshop(id="wks_1", is_active=True, max_capacity=10)
    db_session = _db_with_workshop(workshop)
    db_session.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate"))

    registration, result = registration_crud.create_with_capacity_check(
        db_session, workshop_id="wks_1", user=_participant()
    )

    assert registration is None
    assert result == ClaimResult.ALREADY_REGISTERED
    db_session.rollback.assert_called_once()


def test_remove_registration_when_not_registered():
    db_session = MagicMock()
    db_session.query.return_value.filter.return_value.first.return_value = None

    assert (
        registration_crud.remove_registration(
            db_session, user_id="user_123", workshop_id="wks_1"
        )
        is False
    )
    db_session.delete.assert_not_called()
