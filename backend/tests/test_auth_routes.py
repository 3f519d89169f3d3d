"""Tests for app/routes/auth.py: registration, cookie session, Bearer fallback."""

import uuid

from app.core.config import settings
from app.core.security import create_access_token

_USER = {"first_name": "Alice", "email": "alice@example.com", "password": "SecurePass123"}


def _login(client, user=_USER):
    return client.post(
        "/auth/login", json={"email": user["email"], "password": user["password"]}
    )


def test_register_creates_user_and_sets_cookie(client):
    resp = client.post("/auth/register", json=_USER)

    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == _USER["email"]
    assert body["first_name"] == "Alice"
    assert body["role"] == "user"
    assert "password_hash" not in body
    assert settings.COOKIE_NAME in resp.cookies


def test_register_duplicate_email_returns_400(client):
    client.post("/auth/register", json=_USER)

    resp = client.post("/auth/register", json=_USER)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


def test_register_weak_password_returns_422(client):
    resp = client.post("/auth/register", json={**_USER, "password": "short"})
    assert resp.status_code == 422


def test_register_short_first_name_returns_422(client):
    resp = client.post("/auth/register", json={**_USER, "first_name": "Al"})
    assert resp.status_code == 422


def test_login_returns_token_and_sets_httponly_cookie(client):
    client.post("/auth/register", json=_USER)
    client.cookies.clear()

    resp = _login(client)

    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == _USER["email"]
    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith(f"{settings.COOKIE_NAME}=")
    assert "HttpOnly" in set_cookie


def test_login_wrong_password_returns_401(client):
    client.post("/auth/register", json=_USER)

    resp = _login(client, {**_USER, "password": "WrongPass999"})

    assert resp.status_code == 401


def test_me_with_cookie(client):
    client.post("/auth/register", json=_USER)

    resp = client.get("/auth/me")

    assert resp.status_code == 200
    assert resp.json()["email"] == _USER["email"]


def test_me_with_bearer_header(client):
    client.post("/auth/register", json=_USER)
    token = _login(client).json()["access_token"]
    client.cookies.clear()

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200


def test_me_without_credentials_returns_401(client):
    assert client.get("/auth/me").status_code == 401


def test_me_with_garbage_token_returns_401(client):
    resp = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_me_with_token_for_unknown_user_returns_401(client):
    token = create_access_token(data={"sub": str(uuid.uuid4())})

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401


def test_logout_clears_cookie(client):
    client.post("/auth/register", json=_USER)

    resp = client.post("/auth/logout")

    assert resp.status_code == 200
    assert client.get("/auth/me").status_code == 401


def test_logout_without_session_returns_401(client):
    assert client.post("/auth/logout").status_code == 401
