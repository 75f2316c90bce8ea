# tests/crud/test_rsvp_crud.py

from hackathon_service import crud
from hackathon_service.crud.crud_rsvp import ConfirmResult
from hackathon_service.models.rsvp import ConfirmedCount

from tests.utils.participant import create_random_participant, pre_register


def test_eligible_ordering_puts_pre_registered_first(db):
    """
    Pre-registered emails come first regardless of registration time; the
    rest follow oldest first.
    """
    create_random_participant(db, "early", registered_days_ago=5)
    create_random_participant(db, "late", registered_days_ago=1, email="Late@Example.com")
    create_random_participant(db, "middle", registered_days_ago=3)
    pre_register(db, "late@example.com")

    ids = crud.rsvp.get_eligible_user_ids(db, pool_size=10)

    assert ids == ["late", "early", "middle"]


def test_eligible_pool_shrinks_with_confirmations(db):
    create_random_participant(db, "confirmed_1", status="confirmed", registered_days_ago=9)
    create_random_participant(db, "first", registered_days_ago=5)
    create_random_participant(db, "second", registered_days_ago=3)

    assert crud.rsvp.get_eligible_user_ids(db, pool_size=2) == ["first"]
    assert crud.rsvp.is_directly_eligible(db, user_id="second", pool_size=2) is False


def test_eligible_excludes_closed_statuses(db):
    create_random_participant(db, "declined", status="declined")
    create_random_participant(db, "denied", status="denied")
    create_random_participant(db, "waiting", status="waitlisted")

    assert crud.rsvp.get_eligible_user_ids(db, pool_size=10) == ["waiting"]


def test_confirm_rejects_at_capacity(db):
    create_random_participant(db, "confirmed_1", status="confirmed")
    user = create_random_participant(db, "hopeful", status="waitlisted")

    result, count = crud.rsvp.confirm_with_capacity_check(db, user=user, capacity=1)

    assert result == ConfirmResult.FULL
    assert count == 1
    assert crud.user.get(db, id="hopeful").status == "waitlisted"


def test_confirm_updates_counter_row(db):
    user = create_random_participant(db, "hopeful", status="waitlisted")

    result, count = crud.rsvp.confirm_with_capacity_check(db, user=user, capacity=1)

    assert result == ConfirmResult.CONFIRMED
    assert count == 1
    assert db.get(ConfirmedCount, 1).count == 1
    assert crud.user.get(db, id="hopeful").status == "confirmed"


def test_confirm_without_capacity_skips_check(db):
    create_random_participant(db, "confirmed_1", status="confirmed")
    user = create_random_participant(db, "invitee")

    result, count = crud.rsvp.confirm_with_capacity_check(db, user=user, capacity=None)

    assert result == ConfirmResult.CONFIRMED
    assert count == 2


def test_confirm_rereads_status_under_lock(db, session_factory):
    """A copy of the user loaded before another session confirmed them."""
    create_random_participant(db, "confirmed_1", status="confirmed")
    stale = create_random_participant(db, "racer", status="waitlisted")

    other = session_factory()
    crud.rsvp.confirm_with_capacity_check(
        other, user=crud.user.get(other, id="racer"), capacity=None
    )
    other.close()

    result, count = crud.rsvp.confirm_with_capacity_check(db, user=stale, capacity=2)

    assert result == ConfirmResult.ALREADY_CONFIRMED
    assert count == 2
    assert db.get(ConfirmedCount, 1).count == 2


def test_confirm_refuses_user_declined_meanwhile(db, session_factory):
    stale = create_random_participant(db, "racer", status="waitlisted")

    other = session_factory()
    crud.rsvp.set_status(other, user=crud.user.get(other, id="racer"), status="declined")
    other.close()

    result, count = crud.rsvp.confirm_with_capacity_check(db, user=stale, capacity=None)

    assert result == ConfirmResult.NOT_OPEN
    assert count == 0
    assert crud.user.get(db, id="racer").status == "declined"


def test_set_status_recounts(db):
    create_random_participant(db, "confirmed_1", status="confirmed")
    user = create_random_participant(db, "confirmed_2", status="confirmed")

    count = crud.rsvp.set_status(db, user=user, status="declined")

    assert count == 1
    assert db.get(ConfirmedCount, 1).count == 1
