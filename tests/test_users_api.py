"""User profile API tests."""

import uuid

import pytest


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_get_my_profile(client, user_tokens):
    email, tokens = user_tokens
    r = await client.get("/api/v1/users/me", headers=_auth(tokens["access_token"]))
    assert r.status_code == 200
    profile = r.json()
    assert profile["email"] == email
    assert profile["name"] == "Ann"
    assert profile["avatar_id"] is None
    assert "password_hash" not in profile


@pytest.mark.asyncio
async def test_profile_routes_require_auth(client):
    for method, path in [
        ("GET", "/api/v1/users/me"),
        ("PUT", "/api/v1/users/me"),
        ("PUT", "/api/v1/users/me/password"),
        ("GET", f"/api/v1/users/{uuid.uuid4()}"),
    ]:
        r = await client.request(method, path, json={})
        assert r.status_code == 401, path


@pytest.mark.asyncio
async def test_update_my_profile(client, user_tokens):
    _, tokens = user_tokens
    avatar = str(uuid.uuid4())
    r = await client.put(
        "/api/v1/users/me",
        json={"name": "Annabel", "bio": "Builds things", "avatar_id": avatar},
        headers=_auth(tokens["access_token"]),
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Annabel"
    assert r.json()["bio"] == "Builds things"
    assert r.json()["avatar_id"] == avatar

    r = await client.get("/api/v1/users/me", headers=_auth(tokens["access_token"]))
    assert r.json()["name"] == "Annabel"


@pytest.mark.asyncio
async def test_update_profile_validation(client, user_tokens):
    _, tokens = user_tokens
    r = await client.put(
        "/api/v1/users/me",
        json={"name": "A", "bio": "x" * 501},
        headers=_auth(tokens["access_token"]),
    )
    assert r.status_code == 400
    fields = {d["field"] for d in r.json()["error"]["details"]}
    assert fields == {"name", "bio"}


@pytest.mark.asyncio
async def test_change_password_ends_sessions(client, user_tokens):
    email, tokens = user_tokens
    r = await client.put(
        "/api/v1/users/me/password",
        json={"current_password": "password123", "new_password": "brand-new-pass"},
        headers=_auth(tokens["access_token"]),
    )
    assert r.status_code == 204

    r = await client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 401

    r = await client.post(
        "/api/v1/auth/login", json={"email": email, "password": "brand-new-pass"}
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_change_password_wrong_current(client, user_tokens):
    _, tokens = user_tokens
    r = await client.put(
        "/api/v1/users/me/password",
        json={"current_password": "not-it", "new_password": "brand-new-pass"},
        headers=_auth(tokens["access_token"]),
    )
    assert r.status_code == 401
    assert r.json()["error"]["message"] == "Current password is incorrect"


@pytest.mark.asyncio
async def test_get_user_by_id(client, user_tokens):
    _, tokens = user_tokens
    me = (await client.get("/api/v1/users/me", headers=_auth(tokens["access_token"]))).json()

    r = await client.get(f"/api/v1/users/{me['id']}", headers=_auth(tokens["access_token"]))
    assert r.status_code == 200
    assert r.json() == me


@pytest.mark.asyncio
async def test_get_unknown_user(client, user_tokens):
    _, tokens = user_tokens
    r = await client.get(f"/api/v1/users/{uuid.uuid4()}", headers=_auth(tokens["access_token"]))
    assert r.status_code == 404
    assert r.json()["error"] == {"code": "NOT_FOUND", "message": "User not found"}


@pytest.mark.asyncio
async def test_get_user_bad_id(client, user_tokens):
    _, tokens = user_tokens
    r = await client.get("/api/v1/users/not-a-uuid", headers=_auth(tokens["access_token"]))
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
