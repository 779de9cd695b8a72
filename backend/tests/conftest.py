"""
Barrel + Verse Backend — Test Configuration (conftest.py)
===========================================================

What:  Shared pytest fixtures for the whole suite.

Fixture Hierarchy (all function-scoped):
    ├── memory_storage: fresh MemoryStorage
    ├── database_storage: DatabaseStorage on an in-memory aiosqlite database
    ├── storage: parametrized over both backends (contract tests)
    ├── app / client: FastAPI app on memory_storage + HTTPX AsyncClient
    ├── make_client: extra clients, each with its own cookie jar (one per user)
    └── user_client / admin_client: clients already logged in
"""

import os

# Settings are read at import time: configure the environment first
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = ""
os.environ["SESSION_SECRET"] = "test-session-secret-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"

from contextlib import AsyncExitStack, asynccontextmanager  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import barrelverse.models  # noqa: E402,F401
from barrelverse.database import Base, build_session_factory  # noqa: E402
from barrelverse.main import create_app  # noqa: E402
from barrelverse.schemas.user import NewUser  # noqa: E402
from barrelverse.security import hash_password  # noqa: E402
from barrelverse.storage import DatabaseStorage, MemoryStorage  # noqa: E402

DEFAULT_PASSWORD = "correct-horse-battery"


# ══════════════════════════════════════════════════════════════════════════
# Storage Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def memory_storage():
    """A fresh, empty in-memory store."""
    return MemoryStorage()


@asynccontextmanager
async def sqlite_storage():
    """
    DatabaseStorage over an in-memory SQLite database.

    StaticPool keeps one connection, so every session sees the same
    in-memory database and the tables created here.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    storage = DatabaseStorage(build_session_factory(engine), engine=engine)
    try:
        yield storage
    finally:
        await storage.close()


@pytest_asyncio.fixture
async def database_storage():
    async with sqlite_storage() as storage:
        yield storage


@pytest_asyncio.fixture(params=["memory", "database"])
async def storage(request):
    """Runs a test once per Storage implementation."""
    if request.param == "memory":
        yield MemoryStorage()
    else:
        async with sqlite_storage() as db_storage:
            yield db_storage


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(memory_storage):
    return create_app(storage=memory_storage)


@pytest_asyncio.fixture
async def make_client(app):
    """
    Factory for HTTPX clients talking to the same app.

    Each client keeps its own cookies, i.e. its own session.

    Usage:
        async def test_two_users(make_client):
            alice = await make_client()
            bob = await make_client()
    """
    async with AsyncExitStack() as stack:
        async def factory() -> AsyncClient:
            transport = ASGITransport(app=app)
            return await stack.enter_async_context(
                AsyncClient(transport=transport, base_url="http://test")
            )
        yield factory


@pytest_asyncio.fixture
async def client(make_client):
    """An anonymous client."""
    return await make_client()


async def create_account(storage, email, name="Test User", password=DEFAULT_PASSWORD, is_admin=False):
    """Insert a user straight into storage (bypassing the HTTP register flow)."""
    return await storage.create_user(
        NewUser(email=email, password=await hash_password(password), name=name),
        is_admin=is_admin,
    )


async def logged_in_client(make_client, storage, email, is_admin=False):
    user = await create_account(storage, email, is_admin=is_admin)
    client = await make_client()
    response = await client.post(
        "/api/auth/login", json={"email": email, "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 200, response.text
    client.user = user
    return client


@pytest_asyncio.fixture
async def user_client(make_client, memory_storage):
    """A client logged in as a regular (non-admin) user; `.user` is the account."""
    return await logged_in_client(make_client, memory_storage, "member@example.com")


@pytest_asyncio.fixture
async def admin_client(make_client, memory_storage):
    """A client logged in as an admin; `.user` is the account."""
    return await logged_in_client(make_client, memory_storage, "admin@example.com", is_admin=True)


@pytest.fixture
def course_payload():
    return {
        "title": "Old World Masterclass",
        "description": "Burgundy, Barolo and Rioja side by side.",
        "price": "19.99",
        "category": "masterclass",
    }


@pytest.fixture
def experience_payload():
    return {
        "title": "Harvest Tasting Dinner",
        "description": "Five courses, five pours.",
        "price": "120",
        "location": "Napa, CA",
        "maxAttendees": 24,
    }
