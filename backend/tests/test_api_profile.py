from __future__ import annotations

import httpx

from app.cache import profile_key
from app.main import app


async def test_read_profile(client: httpx.AsyncClient, auth_headers: dict, test_user):
    res = await client.get("/api/v1/profile", headers=auth_headers)
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["email"] == "test@test.com"
    assert data["display_name"] == "Test User"
    assert data["id"] == str(test_user.id)
    assert app.state.cache.get(profile_key(test_user.id)) is not None


async def test_update_profile_refreshes_cached_profile(
    client: httpx.AsyncClient, auth_headers: dict, test_user
):
    await client.get("/api/v1/profile", headers=auth_headers)

    res = await client.patch(
        "/api/v1/profile", headers=auth_headers, json={"display_name": "Ana Souza"}
    )
    assert res.status_code == 200
    assert res.json()["data"]["display_name"] == "Ana Souza"
    assert app.state.cache.get(profile_key(test_user.id)) is None

    res = await client.get("/api/v1/profile", headers=auth_headers)
    assert res.json()["data"]["display_name"] == "Ana Souza"


async def test_profile_unauthorized(client: httpx.AsyncClient):
    res = await client.get("/api/v1/profile")
    assert res.status_code == 401
    assert res.json()["detail"] == "Usuário não autenticado"


async def test_change_password(client: httpx.AsyncClient, auth_headers: dict):
    res = await client.put(
        "/api/v1/profile/password",
        headers=auth_headers,
        json={"current_password": "testpass", "new_password": "newpass1"},
    )
    assert res.status_code == 204

    res = await client.post(
        "/api/v1/auth/login", json={"email": "test@test.com", "password": "newpass1"}
    )
    assert res.status_code == 200

    res = await client.post(
        "/api/v1/auth/login", json={"email": "test@test.com", "password": "testpass"}
    )
    assert res.status_code == 401


async def test_change_password_wrong_current(client: httpx.AsyncClient, auth_headers: dict):
    res = await client.put(
        "/api/v1/profile/password",
        headers=auth_headers,
        json={"current_password": "wrongpass", "new_password": "newpass1"},
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "A senha atual está incorreta"


async def test_change_password_must_differ(client: httpx.AsyncClient, auth_headers: dict):
    res = await client.put(
        "/api/v1/profile/password",
        headers=auth_headers,
        json={"current_password": "testpass", "new_password": "testpass"},
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "A nova senha deve ser diferente da senha atual"


async def test_change_password_too_short(client: httpx.AsyncClient, auth_headers: dict):
    res = await client.put(
        "/api/v1/profile/password",
        headers=auth_headers,
        json={"current_password": "testpass", "new_password": "123"},
    )
    assert res.status_code == 422
