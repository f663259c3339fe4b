"""Test fixtures for the backend."""
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dayzone.bootstrap import initialize_database
from dayzone.config import Settings
from dayzone.main import create_app
from dayzone.models import Role
from dayzone.repositories import UserRepository
from dayzone.security import hash_password

ADMIN_PASSWORD = "admin-pass"
DEFAULT_PASSWORD = "secret123"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file and upload directory."""

    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test_backend.db'}",
        secret_key="test-secret-key-that-is-long-enough-for-hs256",
        upload_dir=str(tmp_path / "uploads"),
        admin_password=ADMIN_PASSWORD,
        seed_sample_data=False,
    )


@pytest_asyncio.fixture
async def app(settings: Settings):
    """Application with its schema created and the admin seeded."""

    app = create_app(settings)
    await initialize_database(app.state.database, settings)
    yield app
    await app.state.database.dispose()


@pytest_asyncio.fixture
async def client(app) -> AsyncClient:
    """Provide an HTTP client for integration tests."""

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture
async def session(app):
    """A session on the test database for calling the core directly."""

    async with app.state.database.sessionmaker() as session:
        yield session


@pytest_asyncio.fixture
async def make_user(app):
    """Create a user with the given role and return it with auth headers."""

    async def _make(username: str, role: Role = Role.NEUTRAL, password: str = DEFAULT_PASSWORD):
        async with app.state.database.sessionmaker() as session:
            user = await UserRepository(session).create(username, hash_password(password), role)
            await session.commit()
        token = app.state.token_service.issue(user.id, user.username)
        return user, bearer(token)

    return _make


@pytest_asyncio.fixture
async def admin_headers(client: AsyncClient) -> dict[str, str]:
    response = await client.post(
        "/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return bearer(response.json()["token"])
