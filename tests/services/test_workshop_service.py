# tests/services/test_workshop_service.py

import pytest

from hackathon_service import crud
from hackathon_service.core.exceptions import (
    AlreadyRegistered,
    NotFound,
    NotRegistered,
    WorkshopFull,
    WorkshopInactive,
)
from hackathon_service.models.workshop_registration import WorkshopRegistration
from hackathon_service.schemas.workshop import WorkshopCreate, WorkshopUpdate
from hackathon_service.services.workshop_service import WorkshopService, is_full

from tests.utils.participant import create_random_participant
from tests.utils.workshop import create_random_workshop


@pytest.fixture
def service(cache):
    return WorkshopService(cache)


@pytest.mark.parametrize(
    "max_capacity, current, expected",
    [(0, 1000, False), (None, 5, False), (10, 9, False), (10, 10, True), (10, 11, True)],
)
def test_is_full(max_capacity, current, expected):
    assert is_full(max_capacity, current) is expected


def test_register_and_list(db, service):
    create_random_participant(db, "user_a")
    workshop = create_random_workshop(db, max_capacity=2)

    outcome = service.register(db, user_id="user_a", workshop_id=workshop.id)
    listed = service.list_workshops(db, user_id="user_a")

    assert outcome.current_registrations == 1
    assert outcome.is_full is False
    assert len(listed) == 1
    assert listed[0].is_registered is True
    assert listed[0].current_registrations == 1


def test_register_twice(db, service):
    create_random_participant(db, "user_a")
    workshop = create_random_workshop(db)
    service.register(db, user_id="user_a", workshop_id=workshop.id)

    with pytest.raises(AlreadyRegistered) as exc:
        service.register(db, user_id="user_a", workshop_id=workshop.id)

    assert exc.value.message == "Already registered for this workshop"
    assert crud.workshop_registration.count_for_workshop(db, workshop_id=workshop.id) == 1


def test_register_full_workshop(db, service):
    """
    Once a workshop reaches capacity no further registration succeeds, and
    the count stays at capacity.
    """
    workshop = create_random_workshop(db, max_capacity=2)
    for user_id in ("user_a", "user_b", "user_c"):
        create_random_participant(db, user_id)
    service.register(db, user_id="user_a", workshop_id=workshop.id)
    service.register(db, user_id="user_b", workshop_id=workshop.id)

    with pytest.raises(WorkshopFull) as exc:
        service.register(db, user_id="user_c", workshop_id=workshop.id)

    assert exc.value.message == "Workshop is at full capacity"
    assert crud.workshop_registration.count_for_workshop(db, workshop_id=workshop.id) == 2
    assert service.list_workshops(db, user_id="user_c")[0].is_full is True


def test_register_inactive_workshop(db, service):
    create_random_participant(db, "user_a")
    workshop = create_random_workshop(db, is_active=False)

    with pytest.raises(WorkshopInactive):
        service.register(db, user_id="user_a", workshop_id=workshop.id)


def test_register_unknown_workshop(db, service):
    create_random_participant(db, "user_a")

    with pytest.raises(NotFound):
        service.register(db, user_id="user_a", workshop_id="wks_missing")


def test_register_requires_participant_record(db, service):
    workshop = create_random_workshop(db)

    with pytest.raises(NotFound):
        service.register(db, user_id="not_registered", workshop_id=workshop.id)


def test_unregister(db, service):
    create_random_participant(db, "user_a")
    workshop = create_random_workshop(db, max_capacity=1)
    service.register(db, user_id="user_a", workshop_id=workshop.id)

    outcome = service.unregister(db, user_id="user_a", workshop_id=workshop.id)

    assert outcome.current_registrations == 0
    assert outcome.is_full is False
    with pytest.raises(NotRegistered):
        service.unregister(db, user_id="user_a", workshop_id=workshop.id)


def test_register_again_after_unregister(db, service):
    create_random_participant(db, "user_a")
    workshop = create_random_workshop(db, max_capacity=1)
    service.register(db, user_id="user_a", workshop_id=workshop.id)
    service.unregister(db, user_id="user_a", workshop_id=workshop.id)

    outcome = service.register(db, user_id="user_a", workshop_id=workshop.id)

    assert outcome.current_registrations == 1
    assert outcome.is_full is True
    rows = (
        db.query(WorkshopRegistration)
        .filter_by(user_id="user_a", workshop_id=workshop.id)
        .count()
    )
    assert rows == 1


def test_register_takes_last_seat(db, service):
    workshop = create_random_workshop(db, max_capacity=2)
    for user_id in ("user_a", "user_b"):
        create_random_participant(db, user_id)
    service.register(db, user_id="user_a", workshop_id=workshop.id)

    outcome = service.register(db, user_id="user_b", workshop_id=workshop.id)

    assert outcome.current_registrations == 2
    assert outcome.is_full is True
    assert service.list_workshops(db, user_id="user_b")[0].is_registered is True


def test_list_hides_inactive_and_orders_by_schedule(db, service):
    create_random_workshop(db, title="Later", days_from_now=5)
    create_random_workshop(db, title="Sooner", days_from_now=2)
    create_random_workshop(db, title="Hidden", is_active=False)

    titles = [w.title for w in service.list_workshops(db, user_id="anyone")]

    assert titles == ["Sooner", "Later"]


def test_create_workshop_stamps_event_name(db, service):
    workshop_in = WorkshopCreate(
        title="  Docker 101  ",
        description="Containers from scratch for beginners.",
        date="2025-10-19",
        start_time="13:00",
        end_time="14:30",
        location="EB 2020",
        max_capacity=25,
    )

    created = service.create_workshop(db, obj_in=workshop_in)

    assert created.title == "Docker 101"
    assert created.event_name == "mruhacks2025"
    assert created.current_registrations == 0


def test_update_workshop_applies_only_sent_fields(db, service):
    workshop = create_random_workshop(db, title="Original", max_capacity=10)

    updated = service.update_workshop(
        db, workshop_id=workshop.id, obj_in=WorkshopUpdate(max_capacity=40)
    )

    assert updated.max_capacity == 40
    assert updated.title == "Original"


def test_update_unknown_workshop(db, service):
    with pytest.raises(NotFound):
        service.update_workshop(db, workshop_id="wks_missing", obj_in=WorkshopUpdate(title="X"))


def test_delete_workshop_cascades_registrations(db, service):
    create_random_participant(db, "user_a")
    workshop = create_random_workshop(db)
    service.register(db, user_id="user_a", workshop_id=workshop.id)

    service.delete_workshop(db, workshop_id=workshop.id)

    assert crud.workshop.get(db, id=workshop.id) is None
    assert db.query(WorkshopRegistration).count() == 0
    with pytest.raises(NotFound):
        service.delete_workshop(db, workshop_id=workshop.id)


def test_bulk_delete_workshops(db, service):
    first = create_random_workshop(db, title="One")
    second = create_random_workshop(db, title="Two")
    create_random_workshop(db, title="Three")

    deleted = service.bulk_delete_workshops(
        db, workshop_ids=[first.id, second.id, "wks_missing"]
    )

    assert deleted == 2
    assert [w.title for w in service.list_admin_workshops(db)] == ["Three"]


def test_get_workshop_includes_registrations(db, service):
    create_random_participant(db, "user_a", f_name="Ada", gender=2)
    workshop = create_random_workshop(db, title="Rust")
    service.register(db, user_id="user_a", workshop_id=workshop.id)

    detail = service.get_workshop(db, workshop_id=workshop.id)

    assert detail.current_registrations == 1
    assert detail.registrations[0].first_name == "Ada"
    assert detail.registrations[0].gender == "Female"
    assert detail.registrations[0].email == "user_a@example.com"
    assert detail.registrations[0].workshop_title == "Rust"


def test_list_registrations_for_unknown_workshop(db, service):
    with pytest.raises(NotFound):
        service.list_registrations(db, workshop_id="wks_missing")


def test_dashboard_stats(db, service, redis_mock):
    create_random_participant(db, "user_a")
    active = create_random_workshop(db, max_capacity=10)
    create_random_workshop(db, max_capacity=30, is_active=False)
    service.register(db, user_id="user_a", workshop_id=active.id)

    stats = service.get_dashboard_stats(db)

    assert stats.total_workshops == 2
    assert stats.active_workshops == 1
    assert stats.total_registrations == 1
    assert stats.average_capacity == 20.0
    redis_mock.setex.assert_called_once()


def test_dashboard_stats_served_from_cache(db, service, redis_mock):
    redis_mock.get.return_value = (
        '{"total_workshops": 9, "active_workshops": 3, '
        '"total_registrations": 40, "average_capacity": 12.5}'
    )

    stats = service.get_dashboard_stats(db)

    assert stats.total_workshops == 9
    redis_mock.setex.assert_not_called()
