import pytest

from storage import USERS


@pytest.fixture
def admin(make_user):
    return make_user(role="admin")


@pytest.mark.parametrize("role", ["admin", "project_manager", "team_lead", "developer"])
def test_admin_can_assign_each_role(client, admin, make_user, auth, store, role):
    user = make_user()

    response = client.post("/assign-role", headers=auth(admin), json={"user_id": user["id"], "role": role})

    assert response.status_code == 200
    assert response.json() == {
        "message": "Role assigned successfully.",
        "user": {"id": user["id"], "name": user["name"], "role": role},
    }
    assert store._tables[USERS][user["id"]]["role"] == role


def test_assigning_same_role_twice_is_idempotent(client, admin, make_user, auth, store):
    user = make_user()
    headers = auth(admin)
    payload = {"user_id": user["id"], "role": "team_lead"}

    first = client.post("/assign-role", headers=headers, json=payload)
    second = client.post("/assign-role", headers=headers, json=payload)

    assert first.json()["user"] == second.json()["user"]
    assert store._tables[USERS][user["id"]]["role"] == "team_lead"


def test_assign_role_overwrites_previous_role(client, admin, make_user, auth):
    user = make_user(role="developer")

    response = client.post("/assign-role", headers=auth(admin), json={"user_id": user["id"], "role": "team_lead"})

    assert response.json()["user"]["role"] == "team_lead"


@pytest.mark.parametrize("role", ["project_manager", "team_lead", "developer", None])
def test_non_admin_cannot_assign_roles(client, make_user, auth, store, role):
    actor = make_user(role=role)
    target = make_user()

    response = client.post("/assign-role", headers=auth(actor), json={"user_id": target["id"], "role": "admin"})

    assert response.status_code == 403
    assert response.json() == {"message": "Unauthorized. Only admins can assign roles."}
    assert store._tables[USERS][target["id"]]["role"] is None


def test_non_admin_gets_403_even_with_invalid_payload(client, make_user, auth):
    actor = make_user(role="developer")

    response = client.post("/assign-role", headers=auth(actor), json={"role": "overlord"})

    assert response.status_code == 403


@pytest.mark.parametrize("role", ["overlord", "unassigned", "", "ADMIN"])
def test_assign_role_rejects_unknown_role(client, admin, make_user, auth, role):
    user = make_user()

    response = client.post("/assign-role", headers=auth(admin), json={"user_id": user["id"], "role": role})

    assert response.status_code == 422
    assert response.json()["errors"] == {"role": ["The selected role is invalid."]}


def test_assign_role_to_missing_user(client, admin, auth):
    response = client.post("/assign-role", headers=auth(admin), json={"user_id": 999, "role": "developer"})

    assert response.status_code == 404
    assert response.json() == {"message": "User not found."}


def test_assign_role_requires_fields(client, admin, auth):
    response = client.post("/assign-role", headers=auth(admin), json={})

    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"user_id", "role"}
