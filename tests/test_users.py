# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""User registration and profile update."""

from httpx import AsyncClient

from roleplay_server.auth import verify_password
from roleplay_server.models import User


async def test_register_user(client: AsyncClient):
    """Register returns 201 with the user and never the password."""
    payload = {"email": "a@b.com", "username": "a", "password": "secret1"}
    r = await client.post("/users", json=payload)
    assert r.status_code == 201
    user = r.json()["user"]
    assert user["id"]
    assert user["email"] == "a@b.com"
    assert user["username"] == "a"
    assert user["avatar"] == ""
    assert "password" not in user
    assert "passwordHash" not in user


async def test_register_duplicate_email(client: AsyncClient):
    await client.post("/users", json={"email": "a@b.com", "username": "a", "password": "secret1"})
    r = await client.post("/users", json={"email": "a@b.com", "username": "other", "password": "secret1"})
    assert r.status_code == 409
    body = r.json()
    assert body["code"] == "BAD_REQUEST"
    assert body["status"] == 409
    assert body["message"] == "email already in use"


async def test_register_duplicate_username(client: AsyncClient):
    await client.post("/users", json={"email": "a@b.com", "username": "a", "password": "secret1"})
    r = await client.post("/users", json={"email": "c@d.com", "username": "a", "password": "secret1"})
    assert r.status_code == 409
    assert r.json()["message"] == "username already in use"


async def test_register_concurrent_duplicate(client: AsyncClient, monkeypatch):
    """The unique constraint still answers 409 when the lookup misses a concurrent insert."""
    await client.post("/users", json={"email": "a@b.com", "username": "a", "password": "secret1"})

    async def _not_found(db, value):
        return None

    monkeypatch.setattr("roleplay_server.services.users.find_by_email", _not_found)
    monkeypatch.setattr("roleplay_server.services.users.find_by_username", _not_found)
    r = await client.post("/users", json={"email": "a@b.com", "username": "a", "password": "secret1"})
    assert r.status_code == 409
    body = r.json()
    assert body["code"] == "BAD_REQUEST"
    assert body["status"] == 409


async def test_register_invalid_payload(client: AsyncClient):
    r = await client.post("/users", json={"email": "not-an-email", "username": "a"})
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "BAD_REQUEST"
    assert body["status"] == 422
    assert body["errors"]


async def test_update_user(client: AsyncClient, make_user, auth_headers, session_maker):
    """Avatar is kept when omitted; the new password is stored hashed."""
    user = await make_user(avatar="https://example.com/me.png")
    r = await client.put(
        f"/users/{user.id}",
        json={"email": "new@example.com", "password": "newpass"},
        headers=auth_headers(user),
    )
    assert r.status_code == 200
    body = r.json()["user"]
    assert body["email"] == "new@example.com"
    assert body["avatar"] == "https://example.com/me.png"

    async with session_maker() as session:
        stored = await session.get(User, user.id)
        assert stored.password_hash != "newpass"
        assert verify_password("newpass", stored.password_hash)


async def test_update_user_avatar(client: AsyncClient, make_user, auth_headers):
    user = await make_user()
    r = await client.put(
        f"/users/{user.id}",
        json={"email": user.email, "password": "newpass", "avatar": "https://example.com/a.png"},
        headers=auth_headers(user),
    )
    assert r.status_code == 200
    assert r.json()["user"]["avatar"] == "https://example.com/a.png"


async def test_update_unknown_user(client: AsyncClient, make_user, auth_headers):
    user = await make_user()
    r = await client.put(
        "/users/999999",
        json={"email": "x@example.com", "password": "newpass"},
        headers=auth_headers(user),
    )
    assert r.status_code == 404
    assert r.json()["code"] == "BAD_REQUEST"


async def test_update_other_user_forbidden(client: AsyncClient, make_user, auth_headers):
    user = await make_user()
    other = await make_user()
    r = await client.put(
        f"/users/{other.id}",
        json={"email": "x@example.com", "password": "newpass"},
        headers=auth_headers(user),
    )
    assert r.status_code == 403


async def test_update_email_taken(client: AsyncClient, make_user, auth_headers):
    user = await make_user()
    other = await make_user()
    r = await client.put(
        f"/users/{user.id}",
        json={"email": other.email, "password": "newpass"},
        headers=auth_headers(user),
    )
    assert r.status_code == 409


async def test_update_requires_auth(client: AsyncClient, make_user):
    user = await make_user()
    r = await client.put(f"/users/{user.id}", json={"email": "x@example.com", "password": "newpass"})
    assert r.status_code == 401
    assert r.json()["code"] == "UNAUTHORIZED"
