"""Integration tests for account endpoints."""
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from groupkeeper.core.security import issue_token
from groupkeeper.models import AccountRole


@pytest.fixture
def admin(make_account):
    return make_account("root", role=AccountRole.ELEVATED)


@pytest.fixture
def admin_client(client: TestClient, admin, auth_headers):
    """A client authenticated as an elevated account."""
    client.headers.update(auth_headers(admin))
    return client


def new_account_data(name: str = "alice") -> dict:
    return {
        "name": name,
        "email": f"{name}@example.com",
        "password": "TestPassword123!",
    }


def test_create_account(admin_client: TestClient):
    """Elevated accounts can create accounts."""
    response = admin_client.post("/api/accounts", json=new_account_data())

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "alice"
    assert data["role"] == "standard"
    assert data["group_ids"] == []
    assert "password" not in data
    assert "hashed_password" not in data


def test_create_account_duplicate_email(admin_client: TestClient):
    admin_client.post("/api/accounts", json=new_account_data())
    response = admin_client.post("/api/accounts", json=new_account_data())
    assert response.status_code == 400


def test_create_account_as_standard_is_forbidden(
    client: TestClient, make_account, auth_headers
):
    """A standard account attempting an elevated-only action is forbidden."""
    alice = make_account("alice")

    response = client.post(
        "/api/accounts", json=new_account_data("bob"), headers=auth_headers(alice)
    )

    assert response.status_code == 403
    assert response.json()["detail"] == (
        "You do not have the authorization and permissions to access this resource."
    )


def test_create_account_with_expired_token_fails_closed(
    client: TestClient, admin, test_settings
):
    """Role-gated routes do not renew expired tokens."""
    token = issue_token(
        admin.email,
        admin.role,
        test_settings,
        issued_at=datetime.now(UTC) - timedelta(hours=30),
    )

    response = client.post(
        "/api/accounts",
        json=new_account_data(),
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 401


def test_create_account_without_token(client: TestClient):
    response = client.post("/api/accounts", json=new_account_data())
    assert response.status_code == 401


def test_list_and_get_accounts(admin_client: TestClient, admin):
    created = admin_client.post("/api/accounts", json=new_account_data()).json()

    response = admin_client.get("/api/accounts")
    assert response.status_code == 200
    assert {a["email"] for a in response.json()["data"]} == {admin.email, "alice@example.com"}

    response = admin_client.get(f"/api/accounts/{created['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "alice"

    response = admin_client.get("/api/accounts/999")
    assert response.status_code == 404


def test_update_account_ignores_membership(admin_client: TestClient, make_group):
    """General updates cannot overwrite the membership list."""
    make_group("G1")
    created = admin_client.post("/api/accounts", json=new_account_data()).json()

    response = admin_client.patch(
        f"/api/accounts/{created['id']}",
        json={"name": "alice2", "role": "elevated", "group_ids": [1]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "alice2"
    assert data["role"] == "elevated"
    assert data["group_ids"] == []


def test_delete_account(admin_client: TestClient):
    created = admin_client.post("/api/accounts", json=new_account_data()).json()

    response = admin_client.delete(f"/api/accounts/{created['id']}")
    assert response.status_code == 204

    response = admin_client.get(f"/api/accounts/{created['id']}")
    assert response.status_code == 404


def test_join_groups(admin_client: TestClient, make_group):
    """The bulk endpoint joins several groups and updates both sides."""
    g1 = make_group("G1")
    g2 = make_group("G2")
    created = admin_client.post("/api/accounts", json=new_account_data()).json()

    response = admin_client.post(
        f"/api/accounts/{created['id']}/groups", json={"group_ids": [g1.id, g2.id, g1.id]}
    )

    assert response.status_code == 200
    assert response.json()["group_ids"] == [g1.id, g2.id]
    group = admin_client.get(f"/api/groups/{g2.id}").json()
    assert group["member_ids"] == [created["id"]]


def test_join_groups_with_missing_group(admin_client: TestClient, make_group):
    """A missing group aborts the batch."""
    g1 = make_group("G1")
    created = admin_client.post("/api/accounts", json=new_account_data()).json()

    response = admin_client.post(
        f"/api/accounts/{created['id']}/groups", json={"group_ids": [g1.id, 999]}
    )

    assert response.status_code == 404
    account = admin_client.get(f"/api/accounts/{created['id']}").json()
    assert account["group_ids"] == []


def test_accounts_by_group(admin_client: TestClient, make_group):
    make_group("G1")
    admin_client.post("/api/accounts", json=new_account_data())

    response = admin_client.get("/api/accounts/by-group/G1")
    assert response.status_code == 200
    assert response.json()["data"] == []

    response = admin_client.get("/api/accounts/by-group/missing")
    assert response.status_code == 404


def test_list_accounts_renders_stored_email_as_is(admin_client: TestClient, make_account):
    """Responses do not re-validate stored emails."""
    make_account("local", email="local@localhost")

    response = admin_client.get("/api/accounts")

    assert response.status_code == 200
    assert "local@localhost" in {a["email"] for a in response.json()["data"]}


def test_join_group_by_name(admin_client: TestClient, make_group):
    g1 = make_group("G1")
    created = admin_client.post("/api/accounts", json=new_account_data()).json()

    response = admin_client.post(
        f"/api/accounts/{created['id']}/groups/by-name", json={"name": "G1"}
    )

    assert response.status_code == 200
    assert response.json()["group_ids"] == [g1.id]
    assert admin_client.get(f"/api/groups/{g1.id}").json()["member_ids"] == [created["id"]]

    response = admin_client.post(
        f"/api/accounts/{created['id']}/groups/by-name", json={"name": "G1"}
    )
    assert response.status_code == 409

    response = admin_client.post(
        f"/api/accounts/{created['id']}/groups/by-name", json={"name": "missing"}
    )
    assert response.status_code == 404


def test_create_account_with_tampered_token_is_unauthorized(client: TestClient):
    """Elevated routes reject a bad token before authentication can turn it into a 500."""
    response = client.post(
        "/api/accounts",
        json=new_account_data(),
        headers={"Authorization": "Bearer not.a.token"},
    )
    assert response.status_code == 401


def test_create_account_password_bounds(admin_client: TestClient):
    data = new_account_data()
    data["password"] = "short"
    assert admin_client.post("/api/accounts", json=data).status_code == 422

    data["password"] = "x" * 73
    assert admin_client.post("/api/accounts", json=data).status_code == 422
