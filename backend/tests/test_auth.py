"""
Tests for registration, login and token claims.
"""

from jose import jwt

from utils.auth_utils import ALGORITHM, SECRET_KEY, create_access_token


def register(client, username, token=None, role="employee"):
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return client.post(
        "/auth/register",
        json={"username": username, "password": "s3cret-pass", "role": role},
        headers=headers,
    )


class TestRegistration:

    def test_first_user_becomes_admin(self, client):
        response = register(client, "owner", role="user")
        assert response.status_code == 201
        assert response.json()["role"] == "admin"

    def test_later_users_need_admin(self, client):
        admin_token = register(client, "owner").json()["access_token"]

        assert register(client, "clerk").status_code == 401

        employee = register(client, "clerk", token=admin_token)
        assert employee.status_code == 201
        assert employee.json()["role"] == "employee"

        assert register(client, "intruder", token=employee.json()["access_token"]).status_code == 403

    def test_duplicate_username(self, client):
        admin_token = register(client, "owner").json()["access_token"]
        assert register(client, "owner", token=admin_token).status_code == 400


class TestLogin:

    def test_login_returns_token_with_role(self, client):
        register(client, "owner")

        response = client.post("/auth/login", data={"username": "owner", "password": "s3cret-pass"})

        assert response.status_code == 200
        claims = jwt.decode(response.json()["access_token"], SECRET_KEY, algorithms=[ALGORITHM])
        assert claims["sub"] == "owner"
        assert claims["role"] == "admin"

    def test_wrong_password(self, client):
        register(client, "owner")
        response = client.post("/auth/login", data={"username": "owner", "password": "nope"})
        assert response.status_code == 401


class TestTokens:

    def test_token_round_trip(self):
        token = create_access_token({"sub": "clerk", "role": "employee"})
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        assert claims["sub"] == "clerk"
        assert "exp" in claims
