# tests/conftest.py
"""
Pytest configuration for the Cryptic Chest test suite.

- pytest-asyncio in auto mode (see pyproject.toml)
- A fresh in-memory SQLite database per test, injected into the app by
  overriding the get_db dependency
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cryptic_chest.app import models  # noqa: F401
from cryptic_chest.app.db.base import Base, get_db
from cryptic_chest.app.main import app
from cryptic_chest.app.services.cache import PasswordCache


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache():
    return PasswordCache()


@pytest_asyncio.fixture
async def client(session_factory, cache):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.password_cache = cache
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register_and_login(client, email="alice@example.com", password="correct horse", name="Alice"):
    response = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    user = response.json()

    response = await client.post("/api/auth/login", data={"username": email, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["access_token"]
    return user, {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def alice(client):
    """(user, headers) for a registered, logged-in user."""
    return await register_and_login(client)
