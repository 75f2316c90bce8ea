# tests/services/test_admin_service.py

import pytest

from hackathon_service import crud
from hackathon_service.core.exceptions import (
    AuthorizationDenied,
    DomainRuleViolation,
    NotFound,
)
from hackathon_service.schemas.admin import AdminPromotion, AdminRoleChange
from hackathon_service.services.admin_service import AdminService

from tests.utils.participant import create_admin, create_random_participant

service = AdminService()


def test_status_for_non_admin(db):
    status = service.get_status(db, user_id="user_a")

    assert status.is_admin is False
    assert status.role is None


def test_promote_registered_user(db):
    actor = create_admin(db, "boss", role="admin")
    create_random_participant(db, "user_a", f_name="Ada")

    account = service.promote_user(
        db, actor=actor, obj_in=AdminPromotion(email="user_a@example.com")
    )

    assert account.id == "user_a"
    assert account.role == "volunteer"
    assert account.first_name == "Ada"
    assert service.get_status(db, user_id="user_a").is_admin is True


def test_promote_unknown_email(db):
    actor = create_admin(db, "boss")

    with pytest.raises(NotFound):
        service.promote_user(db, actor=actor, obj_in=AdminPromotion(email="who@example.com"))


def test_promote_existing_admin(db):
    actor = create_admin(db, "boss")
    create_random_participant(db, "user_a")
    create_admin(db, "user_a", role="volunteer")

    with pytest.raises(DomainRuleViolation) as exc:
        service.promote_user(db, actor=actor, obj_in=AdminPromotion(email="user_a@example.com"))

    assert exc.value.message == "User is already an admin"


def test_only_super_admin_grants_super_admin(db):
    actor = create_admin(db, "boss", role="admin")
    create_random_participant(db, "user_a")

    with pytest.raises(AuthorizationDenied):
        service.promote_user(
            db,
            actor=actor,
            obj_in=AdminPromotion(email="user_a@example.com", role="super_admin"),
        )


def test_change_role(db):
    actor = create_admin(db, "boss", role="super_admin")
    create_admin(db, "helper", role="volunteer")

    account = service.change_role(
        db, actor=actor, admin_id="helper", obj_in=AdminRoleChange(role="admin")
    )

    assert account.role == "admin"


def test_cannot_remove_self(db):
    actor = create_admin(db, "boss")

    with pytest.raises(DomainRuleViolation) as exc:
        service.remove_admin(db, actor=actor, admin_id="boss")

    assert exc.value.message == "You cannot remove your own admin privileges"


def test_admin_cannot_remove_super_admin(db):
    actor = create_admin(db, "boss", role="admin")
    create_admin(db, "owner", role="super_admin")

    with pytest.raises(AuthorizationDenied):
        service.remove_admin(db, actor=actor, admin_id="owner")

    assert crud.admin.get(db, id="owner") is not None


def test_remove_admin(db):
    actor = create_admin(db, "boss")
    create_admin(db, "helper", role="volunteer")

    service.remove_admin(db, actor=actor, admin_id="helper")

    assert crud.admin.get(db, id="helper") is None
