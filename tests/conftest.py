"""
Inkpost Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets its own SQLite file (aiosqlite) under tmp_path, a fresh
       application built by create_app(), and an httpx AsyncClient talking to
       it over ASGITransport. The application lifespan runs for real, so tables
       are created exactly as in production.

Fixture Hierarchy (all function-scoped):
    test_settings ─▶ app ─▶ test_client ─▶ auth_headers / second_user_headers
                      └──▶ db_session
    mock_db_session          (no database at all, for service unit tests)
"""

import os
from typing import AsyncGenerator, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the module-level default settings away from any real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./inkpost_test.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-not-real")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from inkpost.config import Settings  # noqa: E402
from inkpost.main import create_app  # noqa: E402

TEST_PASSWORD = "correct horse battery staple"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'inkpost.db'}",
        jwt_secret_key="test-secret-not-real",
        jwt_access_token_expire_minutes=5,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """A fully started application (lifespan entered, tables created)."""
    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient routed straight into the app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def db_session(app):
    """A session on the same database the app uses, for direct assertions."""
    async with app.state.database.session() as session:
        yield session


async def register_and_login(
    client: AsyncClient,
    name: str,
    email: str,
    password: str = TEST_PASSWORD,
) -> Dict[str, str]:
    """Create a user through the API and return its Authorization header."""
    response = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text

    response = await client.post(
        "/api/auth/login",
        json={"email": email, "password": password},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture
async def auth_headers(test_client) -> Dict[str, str]:
    return await register_and_login(test_client, "Ada Lovelace", "ada@example.com")


@pytest_asyncio.fixture
async def second_user_headers(test_client) -> Dict[str, str]:
    return await register_and_login(test_client, "Grace Hopper", "grace@example.com")


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for service unit tests.

    Usage:
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await post_service.delete_post(mock_db_session, uuid4())
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session
