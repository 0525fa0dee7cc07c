"""Integration tests for group endpoints."""

import pytest
from fastapi.testclient import TestClient

from groupkeeper.models import AccountRole


@pytest.fixture
def alice(make_account):
    return make_account("alice")


@pytest.fixture
def authenticated_client(client: TestClient, alice, auth_headers):
    """Create a client authenticated as a standard account."""
    client.headers.update(auth_headers(alice))
    return client


def test_create_group(authenticated_client: TestClient):
    """Test creating a group."""
    response = authenticated_client.post("/api/groups", json={"name": "G1"})
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "G1"
    assert data["member_ids"] == []
    assert "id" in data


def test_create_duplicate_group(authenticated_client: TestClient):
    authenticated_client.post("/api/groups", json={"name": "G1"})
    response = authenticated_client.post("/api/groups", json={"name": "G1"})
    assert response.status_code == 400


def test_list_groups(authenticated_client: TestClient):
    """Test listing groups."""
    authenticated_client.post("/api/groups", json={"name": "G1"})

    response = authenticated_client.get("/api/groups")
    assert response.status_code == 200
    data = response.json()
    assert isinstance(data["data"], list)
    assert len(data["data"]) == 1


def test_groups_require_authentication(client: TestClient):
    response = client.get("/api/groups")
    assert response.status_code == 401


def test_update_group(authenticated_client: TestClient):
    """Test renaming a group."""
    group_id = authenticated_client.post("/api/groups", json={"name": "G1"}).json()["id"]

    response = authenticated_client.patch(f"/api/groups/{group_id}", json={"name": "Renamed"})
    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"


def test_delete_group_requires_elevated(authenticated_client: TestClient):
    group_id = authenticated_client.post("/api/groups", json={"name": "G1"}).json()["id"]

    response = authenticated_client.delete(f"/api/groups/{group_id}")
    assert response.status_code == 403


def test_delete_group(client: TestClient, make_account, make_group, auth_headers):
    """Test deleting a group."""
    admin = make_account("root", role=AccountRole.ELEVATED)
    group = make_group("G1")
    client.headers.update(auth_headers(admin))

    response = client.delete(f"/api/groups/{group.id}")
    assert response.status_code == 204

    response = client.get(f"/api/groups/{group.id}")
    assert response.status_code == 404


def test_add_and_remove_member(authenticated_client: TestClient, alice):
    """Adding then removing a member round-trips both sides."""
    group_id = authenticated_client.post("/api/groups", json={"name": "G1"}).json()["id"]

    response = authenticated_client.post(
        f"/api/groups/{group_id}/members", json={"name": "alice"}
    )
    assert response.status_code == 200
    assert response.json()["member_ids"] == [alice.id]
    account = authenticated_client.get(f"/api/accounts/{alice.id}").json()
    assert account["group_ids"] == [group_id]

    response = authenticated_client.delete(f"/api/groups/{group_id}/members/{alice.id}")
    assert response.status_code == 200
    assert response.json()["member_ids"] == []
    account = authenticated_client.get(f"/api/accounts/{alice.id}").json()
    assert account["group_ids"] == []


def test_add_member_twice(authenticated_client: TestClient):
    group_id = authenticated_client.post("/api/groups", json={"name": "G1"}).json()["id"]
    authenticated_client.post(f"/api/groups/{group_id}/members", json={"name": "alice"})

    response = authenticated_client.post(
        f"/api/groups/{group_id}/members", json={"name": "alice"}
    )
    assert response.status_code == 409


def test_add_unknown_member(authenticated_client: TestClient):
    group_id = authenticated_client.post("/api/groups", json={"name": "G1"}).json()["id"]
    response = authenticated_client.post(
        f"/api/groups/{group_id}/members", json={"name": "nobody"}
    )
    assert response.status_code == 404


def test_remove_non_member(authenticated_client: TestClient, alice):
    group_id = authenticated_client.post("/api/groups", json={"name": "G1"}).json()["id"]
    response = authenticated_client.delete(f"/api/groups/{group_id}/members/{alice.id}")
    assert response.status_code == 409


def test_groups_by_account(authenticated_client: TestClient):
    group_id = authenticated_client.post("/api/groups", json={"name": "G1"}).json()["id"]
    authenticated_client.post("/api/groups", json={"name": "G2"})

    response = authenticated_client.get("/api/groups/by-account/alice")
    assert response.status_code == 200
    assert response.json()["data"] == []

    authenticated_client.post(f"/api/groups/{group_id}/members", json={"name": "alice"})
    response = authenticated_client.get("/api/groups/by-account/alice")
    assert [g["name"] for g in response.json()["data"]] == ["G1"]

    response = authenticated_client.get("/api/groups/by-account/nobody")
    assert response.status_code == 404


def test_add_members_in_bulk(authenticated_client: TestClient, alice, make_account):
    bob = make_account("bob")
    group_id = authenticated_client.post("/api/groups", json={"name": "G1"}).json()["id"]

    response = authenticated_client.post(
        f"/api/groups/{group_id}/members/bulk", json={"account_ids": [alice.id, bob.id]}
    )

    assert response.status_code == 200
    assert response.json()["member_ids"] == [alice.id, bob.id]
    account = authenticated_client.get(f"/api/accounts/{bob.id}").json()
    assert account["group_ids"] == [group_id]


def test_add_members_in_bulk_with_missing_account(authenticated_client: TestClient, alice):
    group_id = authenticated_client.post("/api/groups", json={"name": "G1"}).json()["id"]

    response = authenticated_client.post(
        f"/api/groups/{group_id}/members/bulk", json={"account_ids": [alice.id, 999]}
    )

    assert response.status_code == 404
    assert authenticated_client.get(f"/api/groups/{group_id}").json()["member_ids"] == []
