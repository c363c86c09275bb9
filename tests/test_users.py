"""Tests for employee management endpoints."""

import pytest
from fastapi import status

from app.api.errors import STATUS_BY_CODE
from app.core.exceptions import ErrorCode
from app.schemas.users import ROLES

USERS_URL = "/api/v1/users"


@pytest.fixture
def owner_headers(owner, login, bearer):
    return bearer(login("owner", "owner-password")["token"]["access_token"])


@pytest.fixture
def alice_headers(alice, login, bearer):
    return bearer(login("alice", "alice-password")["token"]["access_token"])


@pytest.fixture
def new_user_data():
    return {
        "full_name": "Budi Santoso",
        "username": "budi",
        "email": "budi@viplaundry.com",
        "password": "budi-password",
        "phone_number": "081234567890",
        "role": "courier",
    }


class TestCreateUser:
    """Test employee creation."""

    def test_create_user(self, client, owner_headers, new_user_data, login):
        """Test an owner can create an employee who can then log in."""
        response = client.post(USERS_URL, json=new_user_data, headers=owner_headers)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["username"] == "budi"
        assert data["role"] == "courier"
        assert data["is_active"] is True
        assert data["last_login_at"] is None
        assert "password" not in data

        assert login("budi", "budi-password")["user"]["username"] == "budi"

    def test_create_duplicate(self, client, owner_headers, new_user_data):
        """Test reusing a username, email or phone number is rejected."""
        client.post(USERS_URL, json=new_user_data, headers=owner_headers)

        for field, value in (
            ("username", "budi"),
            ("email", "budi@viplaundry.com"),
            ("phone_number", "081234567890"),
        ):
            payload = {
                **new_user_data,
                "username": "other",
                "email": "other@viplaundry.com",
                "phone_number": "089999999999",
                field: value,
            }
            response = client.post(USERS_URL, json=payload, headers=owner_headers)
            assert response.status_code == status.HTTP_409_CONFLICT, field
            assert response.json()["data"]["error_code"] == "DUPLICATE_DATA"

    def test_create_invalid_payload(self, client, owner_headers, new_user_data):
        """Test short passwords, bad emails and unknown roles are rejected."""
        for field, value in (
            ("password", "short"),
            ("email", "not-an-email"),
            ("role", "manager"),
            ("phone_number", "08-12"),
        ):
            response = client.post(
                USERS_URL, json={**new_user_data, field: value}, headers=owner_headers
            )
            assert response.status_code == status.HTTP_400_BAD_REQUEST, field

    def test_create_strips_markup_from_name(self, client, owner_headers, new_user_data):
        """Test HTML in the display name is removed before storing."""
        payload = {**new_user_data, "full_name": "<b>Budi</b>   Santoso"}
        response = client.post(USERS_URL, json=payload, headers=owner_headers)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["full_name"] == "Budi Santoso"

    def test_create_name_that_is_only_markup(self, client, owner_headers, new_user_data):
        payload = {**new_user_data, "full_name": "<b>   </b>"}
        response = client.post(USERS_URL, json=payload, headers=owner_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["data"]["errors"][0]["field"] == "full_name"

    def test_create_requires_owner(self, client, alice_headers, new_user_data):
        """Test non-owners cannot create employees."""
        response = client.post(USERS_URL, json=new_user_data, headers=alice_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["data"]["error_code"] == "FORBIDDEN_ACCESS"

    def test_create_requires_token(self, client, new_user_data):
        response = client.post(USERS_URL, json=new_user_data)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestReadUsers:
    """Test listing and fetching employees."""

    def test_list_users(self, client, owner_headers, alice):
        response = client.get(USERS_URL, headers=owner_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["total"] == 2
        assert {u["username"] for u in data["users"]} == {"owner", "alice"}

    def test_get_user(self, client, owner_headers, alice):
        response = client.get(f"{USERS_URL}/{alice.id}", headers=owner_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["email"] == "alice@viplaundry.com"

    def test_get_missing_user(self, client, owner_headers):
        response = client.get(f"{USERS_URL}/9999", headers=owner_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["data"]["error_code"] == "RESOURCE_NOT_FOUND"

    def test_list_requires_owner(self, client, alice_headers):
        response = client.get(USERS_URL, headers=alice_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestUpdateUser:
    """Test profile updates."""

    def test_update_self(self, client, alice, alice_headers):
        """Test a cashier can update their own profile."""
        response = client.put(
            f"{USERS_URL}/{alice.id}",
            json={"full_name": "Alice Wijaya"},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["full_name"] == "Alice Wijaya"
        assert data["updated_at"] is not None

    @pytest.mark.parametrize("role", ROLES)
    def test_every_role_can_update_self(self, client, create_user, login, bearer, role):
        """Test each employee role passes the role gate for its own profile."""
        user = create_user(f"{role}-user", password="role-password", role=role)
        headers = bearer(login(f"{role}-user", "role-password")["token"]["access_token"])

        response = client.put(
            f"{USERS_URL}/{user.id}", json={"full_name": "Renamed Person"}, headers=headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["role"] == role

    def test_non_owner_cannot_change_own_role(self, client, alice, alice_headers):
        """Test role and active flag changes from non-owners are ignored."""
        response = client.put(
            f"{USERS_URL}/{alice.id}",
            json={"role": "owner", "is_active": False},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["role"] == "cashier"
        assert data["is_active"] is True

    def test_non_owner_cannot_update_others(self, client, owner, alice_headers):
        response = client.put(
            f"{USERS_URL}/{owner.id}",
            json={"full_name": "Hijacked"},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_owner_updates_role(self, client, alice, owner_headers):
        response = client.put(
            f"{USERS_URL}/{alice.id}", json={"role": "staff"}, headers=owner_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["role"] == "staff"

    def test_update_to_taken_username(self, client, owner, alice, owner_headers):
        response = client.put(
            f"{USERS_URL}/{alice.id}", json={"username": "owner"}, headers=owner_headers
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_password_change(self, client, alice, alice_headers, login):
        response = client.put(
            f"{USERS_URL}/{alice.id}",
            json={"password": "a-brand-new-password"},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert login("alice", "a-brand-new-password")["user"]["id"] == alice.id


class TestDeleteUser:
    """Test soft deletion."""

    def test_deactivate_user(self, client, alice, owner_headers):
        """Test a deactivated employee can no longer log in."""
        response = client.delete(f"{USERS_URL}/{alice.id}", headers=owner_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] == {"id": alice.id}

        login = client.post(
            "/api/v1/auth/login", json={"username": "alice", "password": "alice-password"}
        )
        assert login.status_code == status.HTTP_403_FORBIDDEN

    def test_cannot_delete_self(self, client, owner, owner_headers):
        response = client.delete(f"{USERS_URL}/{owner.id}", headers=owner_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "Action not permitted (cannot delete self)"

    def test_delete_missing_user(self, client, owner_headers):
        response = client.delete(f"{USERS_URL}/9999", headers=owner_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND


def test_every_error_code_has_a_status():
    assert set(STATUS_BY_CODE) == set(ErrorCode)


def test_roles_follow_role_type():
    assert ROLES == ("owner", "cashier", "staff", "courier")
