"""
Integration tests for /auth/users.

Covers:
    - create (201, never returns the hash), then authenticate as the new user
    - 400 for missing fields, unknown roles and malformed bodies
    - 409 on duplicates
    - delete (200, then 404) and role updates (200, 400, 404)
    - non-admins cannot manage users
    - the alice scenario over HTTP
"""

import pytest

ADMIN = ("system_admin", "system_admin_pass")
READER = ("system_reader", "system_reader_pass")


def _create(client, username="alice", password="pw1", roles=("READ",), auth=ADMIN):
    return client.post(
        "/auth/users",
        json={"username": username, "password": password, "roles": list(roles)},
        auth=auth,
    )


def test_create_user(client):
    resp = _create(client, roles=("WRITE", "READ"))
    assert resp.status_code == 201
    data = resp.json()
    assert data["username"] == "alice"
    assert data["roles"] == ["READ", "WRITE"]
    assert "password" not in data and "password_hash" not in data

    assert client.get("/service/read/ping", auth=("alice", "pw1")).status_code == 200


def test_list_users(client):
    _create(client)
    users = client.get("/auth/users", auth=ADMIN).json()["users"]
    assert {"username": "alice", "roles": ["READ"]} in users
    assert [u["username"] for u in users] == sorted(u["username"] for u in users)
    assert all(set(u) == {"username", "roles"} for u in users)


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"password": "pw", "roles": ["READ"]}, "Username is required"),
        ({"username": "bob", "roles": ["READ"]}, "Password is required"),
        ({"username": "bob", "password": "pw"}, "At least one role is required"),
        ({"username": "bob", "password": "pw", "roles": []}, "At least one role is required"),
    ],
)
def test_create_user_missing_fields(client, payload, message):
    resp = client.post("/auth/users", json=payload, auth=ADMIN)
    assert resp.status_code == 400
    assert resp.json()["error"] == message


def test_create_user_invalid_role(client):
    resp = _create(client, username="bob", roles=("SUPERUSER",))
    assert resp.status_code == 400
    body = resp.json()
    assert "SUPERUSER" in body["error"]
    assert body["valid_roles"] == ["ADMIN", "READ", "WRITE"]
    assert client.get("/service/read/ping", auth=("bob", "pw1")).status_code == 401


def test_create_user_malformed_body(client):
    resp = client.post("/auth/users", json={"username": "bob", "password": "pw", "roles": "READ"}, auth=ADMIN)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request body"


def test_create_duplicate_conflicts(client):
    assert _create(client).status_code == 201
    resp = _create(client, password="other", roles=("ADMIN",))
    assert resp.status_code == 409
    assert resp.json()["username"] == "alice"
    # original password and roles still in force
    assert client.get("/service/read/ping", auth=("alice", "pw1")).status_code == 200
    assert client.get("/service/admin/ping", auth=("alice", "pw1")).status_code == 403


def test_create_requires_admin(client):
    assert _create(client, auth=READER).status_code == 403
    assert _create(client, auth=None).status_code == 401


def test_delete_user(client):
    _create(client)
    resp = client.delete("/auth/users/alice", auth=ADMIN)
    assert resp.status_code == 200
    assert resp.json()["username"] == "alice"
    assert client.get("/service/read/ping", auth=("alice", "pw1")).status_code == 401
    assert client.delete("/auth/users/alice", auth=ADMIN).status_code == 404


def test_delete_requires_admin(client):
    assert client.delete("/auth/users/system_writer", auth=READER).status_code == 403


def test_update_roles(client):
    _create(client)
    resp = client.put("/auth/users/alice/roles", json={"roles": ["WRITE"]}, auth=ADMIN)
    assert resp.status_code == 200
    assert resp.json()["new_roles"] == ["WRITE"]


def test_update_roles_unknown_user(client):
    resp = client.put("/auth/users/ghost/roles", json={"roles": ["READ"]}, auth=ADMIN)
    assert resp.status_code == 404
    assert resp.json()["error"] == "User not found"


@pytest.mark.parametrize("roles", [["SUPERUSER"], []])
def test_update_roles_invalid(client, roles):
    _create(client)
    resp = client.put("/auth/users/alice/roles", json={"roles": roles}, auth=ADMIN)
    assert resp.status_code == 400
    assert client.get("/service/read/ping", auth=("alice", "pw1")).status_code == 200


def test_update_after_delete_is_404(client):
    _create(client)
    client.delete("/auth/users/alice", auth=ADMIN)
    resp = client.put("/auth/users/alice/roles", json={"roles": ["READ"]}, auth=ADMIN)
    assert resp.status_code == 404


def test_seeded_admin_can_be_removed_like_any_account(client):
    _create(client, username="root2", roles=("ADMIN",))
    assert client.delete("/auth/users/system_admin", auth=("root2", "pw1")).status_code == 200
    assert client.get("/service/admin/ping", auth=ADMIN).status_code == 401


def test_alice_scenario_over_http(client):
    alice = ("alice", "pw1")
    _create(client)
    assert client.get("/service/read/ping", auth=alice).status_code == 200
    assert client.get("/service/write/ping", auth=alice).status_code == 403

    client.put("/auth/users/alice/roles", json={"roles": ["WRITE"]}, auth=ADMIN)
    assert client.get("/service/read/ping", auth=alice).status_code == 403
    assert client.get("/service/write/ping", auth=alice).status_code == 200


@pytest.mark.parametrize("username", ["a:b", "a/b"])
def test_create_user_rejects_names_basic_auth_or_paths_cannot_carry(client, username):
    resp = _create(client, username=username)
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Username may only contain")
    assert client.get("/auth/users", auth=ADMIN).json()["users"] == [
        {"username": "system_admin", "roles": ["ADMIN", "READ", "WRITE"]},
        {"username": "system_reader", "roles": ["READ"]},
        {"username": "system_writer", "roles": ["WRITE"]},
    ]


def test_created_user_round_trips_over_basic_auth(client):
    assert _create(client, username="ops@example.com").status_code == 201
    assert client.get("/service/read/ping", auth=("ops@example.com", "pw1")).status_code == 200
    assert client.delete("/auth/users/ops@example.com", auth=ADMIN).status_code == 200
