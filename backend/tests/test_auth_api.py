from __future__ import annotations


def test_login_returns_token_and_user(client, admin_user):
    response = client.post("/api/auth/login", json={"email": "Admin@Example.com", "password": "admin123"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["token"]
    assert payload["user"]["email"] == "admin@example.com"
    assert payload["user"]["roles"] == ["ADMIN", "USER"]


def test_login_rejects_bad_password(client, admin_user):
    response = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "nope"})

    assert response.status_code == 401


def test_materials_require_token_when_auth_enabled(client, auth_enabled):
    assert client.get("/api/materials").status_code == 401
    assert client.get("/api/audit-trail").status_code == 401


def test_token_grants_access(client, auth_enabled, auth_headers):
    response = client.get("/api/materials", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["content"] == []


def test_tampered_token_is_rejected(client, auth_enabled, auth_headers):
    headers = {"Authorization": auth_headers["Authorization"] + "x"}

    assert client.get("/api/materials", headers=headers).status_code == 401


def test_me_and_register(client, auth_enabled):
    registered = client.post(
        "/api/auth/register",
        json={"email": "new@example.com", "password": "secret1", "name": "New Person"},
    )
    assert registered.status_code == 201
    token = registered.json()["token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["roles"] == ["USER"]

    duplicate = client.post("/api/auth/register", json={"email": "new@example.com", "password": "secret1"})
    assert duplicate.status_code == 400


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
