from __future__ import annotations

import pytest

from unipath.core.security import create_access_token
from unipath.db.repositories import Repository

from tests.helpers import bearer, register


def test_register_then_login_returns_token_without_password(client) -> None:
    created = register(client, "Asha Rao", "Asha@Example.com", password="s3cret")

    assert set(created) == {"_id", "name", "email", "role", "token"}
    assert created["email"] == "asha@example.com"
    assert created["role"] == "student"
    assert created["token"]

    login = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "s3cret"})
    assert login.status_code == 200
    body = login.json()
    assert body["_id"] == created["_id"]
    assert body["token"]
    assert "password" not in body and "passwordHash" not in body

    me = client.get("/api/auth/me", headers=bearer(body["token"]))
    assert me.status_code == 200
    assert me.json()["email"] == "asha@example.com"
    assert "password_hash" not in me.json()


def test_login_failures_are_indistinguishable(client) -> None:
    register(client, "Asha Rao", "asha@example.com", password="s3cret")

    wrong_password = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "s3cret"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid credentials"}


def test_duplicate_registration_is_rejected(client) -> None:
    register(client, "Asha Rao", "asha@example.com")

    response = client.post("/api/auth", json={"name": "Other", "email": "ASHA@example.com", "password": "pw"})

    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


@pytest.mark.parametrize(
    "body",
    [
        {"email": "a@example.com", "password": "pw"},
        {"name": "A", "password": "pw"},
        {"name": "A", "email": "a@example.com"},
        {"name": "A", "email": "not-an-email", "password": "pw"},
        {"name": "", "email": "a@example.com", "password": "pw"},
    ],
)
def test_register_requires_fields(client, body) -> None:
    assert client.post("/api/auth", json=body).status_code == 422


def test_register_rejects_unknown_role(client) -> None:
    response = client.post(
        "/api/auth", json={"name": "A", "email": "a@example.com", "password": "pw", "role": "root"}
    )
    assert response.status_code == 400


def test_register_accepts_explicit_role(client) -> None:
    assert register(client, "Admin", "admin@example.com", role="admin")["role"] == "admin"


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Bearer garbage"}, {"Authorization": "Basic abc"}],
)
def test_me_requires_valid_token(client, headers) -> None:
    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authorized"


def test_token_for_deleted_account_is_not_found(client) -> None:
    response = client.get("/api/auth/me", headers=bearer(create_access_token(9999)))
    assert response.status_code == 404


def test_registration_losing_email_race_is_rejected(client, monkeypatch) -> None:
    register(client, "Asha Rao", "asha@example.com")
    # Both requests pass the lookup; the unique index decides.
    monkeypatch.setattr(Repository, "get_account_by_email", lambda self, email: None)

    response = client.post("/api/auth", json={"name": "Other", "email": "asha@example.com", "password": "pw"})

    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"
