"""
Barrel + Verse Backend — Database Engine & Session Factory
============================================================

What:  Async SQLAlchemy engine construction, session factory and the ORM base.
How:   The engine is built lazily from a URL (only when DATABASE_URL is set),
       so importing this module never opens a connection.
Who:   Used by DatabaseStorage, Alembic's env.py and the test suite.

Connection Pooling Strategy (PostgreSQL):
    pool_size / max_overflow come from settings.
    pool_pre_ping validates connections before use.
    pool_recycle=3600 recycles connections every hour.
    SQLite URLs (tests) skip pool arguments: their pool classes reject them.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from barrelverse.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata; Alembic autogenerate and the
    test fixtures (metadata.create_all) both read from it.
    """
    pass


def build_engine(database_url: str, settings: Settings) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Args:
        database_url: Async SQLAlchemy URL (postgresql+asyncpg://..., sqlite+aiosqlite://...)
        settings: Application settings providing pool sizing and log level

    Returns:
        A configured AsyncEngine. No connection is made until first use.
    """
    kwargs = {
        # Echo SQL only when debugging
        "echo": settings.log_level == "DEBUG",
    }
    if not database_url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create the session factory bound to an engine.

    expire_on_commit=False: rows stay readable after commit, which the
    storage layer relies on when it converts ORM rows into schemas.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
