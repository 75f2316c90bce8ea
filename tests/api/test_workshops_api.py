from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.utils.auth import get_user_authentication_headers
from tests.utils.participant import create_admin, create_random_participant
from tests.utils.workshop import create_random_workshop


def test_workshops_require_authentication(client: TestClient) -> None:
    response = client.get("/api/v1/workshops")

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Authentication required"}


def test_invalid_token_is_rejected(client: TestClient) -> None:
    response = client.get(
        "/api/v1/workshops", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401


def test_list_workshops(client: TestClient, db: Session) -> None:
    create_random_participant(db, "user_a")
    workshop = create_random_workshop(db, title="Intro to Git", max_capacity=5)
    headers = get_user_authentication_headers("user_a")

    response = client.get("/api/v1/workshops", headers=headers)

    assert response.status_code == 200
    content = response.json()
    assert content["success"] is True
    assert content["data"][0]["id"] == workshop.id
    assert content["data"][0]["maxCapacity"] == 5
    assert content["data"][0]["currentRegistrations"] == 0
    assert content["data"][0]["isRegistered"] is False
    assert content["data"][0]["isFull"] is False


def test_register_then_duplicate(client: TestClient, db: Session) -> None:
    create_random_participant(db, "user_a")
    workshop = create_random_workshop(db)
    headers = get_user_authentication_headers("user_a")

    # First registration should succeed
    response1 = client.post(f"/api/v1/workshops/{workshop.id}/register", headers=headers)
    assert response1.status_code == 200
    assert response1.json()["message"] == "Successfully registered for workshop"
    assert response1.json()["data"]["currentRegistrations"] == 1

    # Second attempt should fail with a 409 Conflict
    response2 = client.post(f"/api/v1/workshops/{workshop.id}/register", headers=headers)
    assert response2.status_code == 409
    assert response2.json() == {
        "success": False,
        "error": "Already registered for this workshop",
    }


def test_register_full_workshop(client: TestClient, db: Session) -> None:
    create_random_participant(db, "user_a")
    create_random_participant(db, "user_b")
    workshop = create_random_workshop(db, max_capacity=1)

    client.post(
        f"/api/v1/workshops/{workshop.id}/register",
        headers=get_user_authentication_headers("user_a"),
    )
    response = client.post(
        f"/api/v1/workshops/{workshop.id}/register",
        headers=get_user_authentication_headers("user_b"),
    )

    assert response.status_code == 409
    assert response.json()["error"] == "Workshop is at full capacity"


def test_register_unknown_workshop(client: TestClient, db: Session) -> None:
    create_random_participant(db, "user_a")

    response = client.post(
        "/api/v1/workshops/wks_missing/register",
        headers=get_user_authentication_headers("user_a"),
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Workshop not found"


def test_unregister(client: TestClient, db: Session) -> None:
    create_random_participant(db, "user_a")
    workshop = create_random_workshop(db)
    headers = get_user_authentication_headers("user_a")
    client.post(f"/api/v1/workshops/{workshop.id}/register", headers=headers)

    response = client.delete(f"/api/v1/workshops/{workshop.id}/register", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["currentRegistrations"] == 0

    response = client.delete(f"/api/v1/workshops/{workshop.id}/register", headers=headers)
    assert response.status_code == 409
    assert response.json()["error"] == "Not registered for this workshop"


def test_registrations_are_staff_only(client: TestClient, db: Session) -> None:
    create_random_participant(db, "user_a")

    response = client.get(
        "/api/v1/workshops/registrations",
        headers=get_user_authentication_headers("user_a"),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Admin access required"


def test_inactive_admin_is_refused(client: TestClient, db: Session) -> None:
    create_admin(db, "former", status="suspended")

    response = client.get(
        "/api/v1/workshops/registrations",
        headers=get_user_authentication_headers("former"),
    )

    assert response.status_code == 403


def test_volunteer_lists_registrations(client: TestClient, db: Session) -> None:
    create_admin(db, "helper", role="volunteer")
    create_random_participant(db, "user_a", f_name="Ada")
    workshop = create_random_workshop(db)
    client.post(
        f"/api/v1/workshops/{workshop.id}/register",
        headers=get_user_authentication_headers("user_a"),
    )

    response = client.get(
        f"/api/v1/workshops/registrations?workshop={workshop.id}",
        headers=get_user_authentication_headers("helper"),
    )

    assert response.status_code == 200
    rows = response.json()["data"]
    assert len(rows) == 1
    assert rows[0]["firstName"] == "Ada"
    assert rows[0]["workshopTitle"] == workshop.title


def test_export_single_workshop(client: TestClient, db: Session) -> None:
    create_admin(db, "helper", role="volunteer")
    create_random_participant(db, "user_a", f_name="Ada", l_name="Lovelace")
    workshop = create_random_workshop(db, title="Intro to Git")
    client.post(
        f"/api/v1/workshops/{workshop.id}/register",
        headers=get_user_authentication_headers("user_a"),
    )

    response = client.get(
        f"/api/v1/workshops/registrations/export?workshop={workshop.id}",
        headers=get_user_authentication_headers("helper"),
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert (
        response.headers["content-disposition"]
        == 'attachment; filename="Intro_to_Git_registrations.csv"'
    )
    lines = response.text.splitlines()
    assert lines[0].startswith("Workshop Title,Date,Time,Location,Participant Name")
    assert '"Ada Lovelace"' in lines[1]


def test_export_all_with_no_registrations(client: TestClient, db: Session) -> None:
    create_admin(db, "helper", role="volunteer")

    response = client.get(
        "/api/v1/workshops/registrations/export",
        headers=get_user_authentication_headers("helper"),
    )

    assert response.status_code == 200
    assert "workshop-registrations-mruhacks2025.csv" in response.headers["content-disposition"]
    assert len(response.text.splitlines()) == 1
