"""
Barrel + Verse Backend — Application Wiring Tests
===================================================

What:  Things that belong to the app as a whole rather than one route:
       health check, error envelope, request ids, configuration checks.

What we test:
    ✅ /health reports the backend, 503 when storage is unreachable
    ✅ Storage failures become a generic 500 (no internals leaked)
    ✅ Every error body carries the request id echoed in X-Request-ID
    ✅ Unknown routes still answer with an `error` field
    ✅ Production refuses to start without DATABASE_URL or with the dev secret
    ✅ create_storage picks the backend from DATABASE_URL
"""

import pytest
from httpx import ASGITransport, AsyncClient

from barrelverse.config import DEFAULT_SESSION_SECRET, Settings
from barrelverse.exceptions import ConfigurationError, DatabaseError
from barrelverse.main import GENERIC_SERVER_ERROR, create_app
from barrelverse.storage import DatabaseStorage, MemoryStorage, create_storage


class UnreachableStorage(MemoryStorage):
    """MemoryStorage whose backing store has gone away."""

    async def health_check(self) -> bool:
        return False

    async def list_published_courses(self):
        raise DatabaseError(context={"operation": "list_published_courses"})


async def client_for(storage):
    transport = ASGITransport(app=create_app(storage=storage))
    return AsyncClient(transport=transport, base_url="http://test")


def make_settings(**values):
    return Settings(_env_file=None, **values)


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["storage"] == "memory"
        assert body["storage_status"] == "connected"
        assert body["version"] == "1.0.0"

    @pytest.mark.asyncio
    async def test_unreachable_storage_is_503(self):
        async with await client_for(UnreachableStorage()) as client:
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["storage_status"] == "disconnected"


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_storage_failure_is_generic_500(self):
        async with await client_for(UnreachableStorage()) as client:
            response = await client.get("/api/courses")

        assert response.status_code == 500
        assert response.json()["error"] == GENERIC_SERVER_ERROR
        assert "list_published_courses" not in response.text

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/api/auth/me", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"
        assert response.json()["request_id"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client):
        response = await client.get("/api/courses")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/wines")

        assert response.status_code == 404
        assert "error" in response.json()


class TestConfiguration:

    def test_production_requires_database_url(self):
        settings = make_settings(environment="production", session_secret="a-real-production-secret")

        with pytest.raises(ConfigurationError, match="DATABASE_URL"):
            create_app(app_settings=settings)

    def test_production_rejects_default_secret(self):
        settings = make_settings(
            environment="production",
            database_url="postgresql+asyncpg://u:p@db/barrelverse",
            session_secret=DEFAULT_SESSION_SECRET,
        )

        with pytest.raises(ConfigurationError, match="SESSION_SECRET"):
            create_app(app_settings=settings)

    def test_blank_database_url_means_unset(self):
        assert make_settings(database_url="  ").database_url is None

    def test_invalid_environment(self):
        with pytest.raises(ValueError):
            make_settings(environment="staging")

    def test_cors_origins_list(self):
        settings = make_settings(cors_origins="http://a.test, http://b.test,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_memory_storage_without_url(self):
        assert isinstance(create_storage(make_settings(environment="development")), MemoryStorage)

    def test_database_storage_with_url(self):
        storage = create_storage(make_settings(database_url="sqlite+aiosqlite:///:memory:"))
        assert isinstance(storage, DatabaseStorage)

    def test_factory_refuses_memory_in_production(self):
        with pytest.raises(ConfigurationError):
            create_storage(make_settings(environment="production"))
