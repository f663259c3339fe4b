"""Integration tests for registration, login and token checks."""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_register_login_and_me(client: AsyncClient) -> None:
    """A user can register, log in, and read their own profile."""

    payload = {"username": "  wolf  ", "password": "secret123"}
    response = await client.post("/api/auth/register", json=payload)
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["username"] == "wolf"
    assert data["user"]["role"] == "Neutral"
    assert data["tokenType"] == "bearer"
    assert data["token"]
    assert data["expiresAt"]

    login = await client.post("/api/auth/login", json={"username": "wolf", "password": "secret123"})
    assert login.status_code == 200
    token = login.json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    me = await client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["username"] == "wolf"
    assert "passwordHash" not in me.json()

    verify = await client.get("/api/auth/verify", headers=headers)
    assert verify.status_code == 200
    assert verify.json()["valid"] is True
    assert verify.json()["user"]["id"] == me.json()["id"]


@pytest.mark.asyncio
async def test_duplicate_username_conflicts(client: AsyncClient) -> None:
    payload = {"username": "wolf", "password": "secret123"}
    assert (await client.post("/api/auth/register", json=payload)).status_code == 201
    response = await client.post("/api/auth/register", json=payload)
    assert response.status_code == 409
    assert response.json()["code"] == "conflict"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, field",
    [
        ({"username": "wo", "password": "secret123"}, "username"),
        ({"username": "wolf", "password": "123"}, "password"),
        ({"username": "wolf"}, "password"),
    ],
)
async def test_register_validation(client: AsyncClient, payload: dict, field: str) -> None:
    response = await client.post("/api/auth/register", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "validation_error"
    assert field in {error["field"] for error in body["errors"]}


@pytest.mark.asyncio
async def test_bad_credentials_share_one_message(client: AsyncClient) -> None:
    await client.post("/api/auth/register", json={"username": "wolf", "password": "secret123"})

    wrong_password = await client.post(
        "/api/auth/login", json={"username": "wolf", "password": "nope123"}
    )
    unknown_user = await client.post(
        "/api/auth/login", json={"username": "ghost", "password": "secret123"}
    )
    for response in (wrong_password, unknown_user):
        assert response.status_code == 401
        assert response.json()["reason"] == "invalid_credentials"
    assert wrong_password.json()["detail"] == unknown_user.json()["detail"]


@pytest.mark.asyncio
async def test_missing_token(client: AsyncClient) -> None:
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["reason"] == "missing_token"
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_invalid_tokens_report_reason(client: AsyncClient, app) -> None:
    garbage = await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert garbage.status_code == 401
    assert garbage.json()["reason"] == "malformed"

    ghost_token = app.state.token_service.issue(9999, "ghost")
    ghost = await client.get("/api/auth/verify", headers={"Authorization": f"Bearer {ghost_token}"})
    assert ghost.status_code == 401
    assert ghost.json()["reason"] == "user_not_found"


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
