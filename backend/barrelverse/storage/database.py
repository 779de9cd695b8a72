"""
Barrel + Verse Backend — Relational Storage (async SQLAlchemy)
================================================================

What:  Storage implementation backed by PostgreSQL (or any async SQLAlchemy URL).
How:   Every operation opens its own session and transaction from the session
       factory, runs equality-filtered queries, and converts ORM rows to the
       API schemas before the session closes.
Who:   Selected by create_storage() when DATABASE_URL is configured.

Null coercion invariant:
    Before any INSERT, every nullable column of the entity is written with an
    explicit value: the caller's, or None. Rows therefore never depend on
    whether a client included an optional field. Partial updates only write
    the fields supplied (a supplied null is written as NULL).

Error mapping:
    IntegrityError on users.email    → ConflictError (400)
    any other SQLAlchemyError        → DatabaseError (500, detail logged only)
    Concurrency control is left to the database's transactions; nothing here
    locks or retries.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from barrelverse import models
from barrelverse.config import Settings
from barrelverse.database import build_engine, build_session_factory
from barrelverse.exceptions import ConflictError, DatabaseError
from barrelverse.models._columns import new_id, new_session_token, utcnow
from barrelverse.schemas.course import Course, CourseCreate
from barrelverse.schemas.experience import Experience, ExperienceCreate
from barrelverse.schemas.purchase import Purchase, PurchaseCreate
from barrelverse.schemas.session import SessionRecord
from barrelverse.schemas.user import NewUser, User
from barrelverse.storage.base import (
    COURSE_NULLABLE_FIELDS,
    DEFAULT_PURCHASE_STATUS,
    EXPERIENCE_NULLABLE_FIELDS,
    PURCHASE_NULLABLE_FIELDS,
    Storage,
    published_default,
)

logger = logging.getLogger(__name__)

# Schema fields whose columns are NUMERIC(10, 2)
_MONEY_FIELDS = ("price", "amount")


def coerce_nullable(values: Dict[str, Any], nullable_fields: Iterable[str]) -> Dict[str, Any]:
    """
    Return a copy of `values` where every nullable field is present,
    explicitly None when the caller left it out.
    """
    row = dict(values)
    for name in nullable_fields:
        row[name] = row.get(name)
    return row


def to_columns(values: Dict[str, Any]) -> Dict[str, Any]:
    """Convert schema values to column values (money strings → Decimal)."""
    row = dict(values)
    for name in _MONEY_FIELDS:
        if row.get(name) is not None:
            row[name] = Decimal(row[name])
    return row


class DatabaseStorage(Storage):
    """Persistent Storage implementation. Active whenever DATABASE_URL is set."""

    kind = "database"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str, settings: Settings) -> "DatabaseStorage":
        engine = build_engine(database_url, settings)
        return cls(build_session_factory(engine), engine=engine)

    @asynccontextmanager
    async def _transaction(
        self, operation: str, conflict_message: Optional[str] = None
    ) -> AsyncIterator[AsyncSession]:
        """
        Yield a session inside a transaction: commit on success, roll back on error.

        Args:
            operation: Name used in logs and DatabaseError context
            conflict_message: When given, an IntegrityError becomes ConflictError
        """
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except IntegrityError as e:
                if conflict_message:
                    logger.info("%s rejected: unique constraint violated", operation)
                    raise ConflictError(conflict_message) from e
                logger.error("Integrity error during %s: %s", operation, str(e))
                raise DatabaseError(
                    context={"operation": operation, "error_type": type(e).__name__}
                ) from e
            except SQLAlchemyError as e:
                logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
                raise DatabaseError(
                    context={"operation": operation, "error_type": type(e).__name__}
                ) from e

    # ── Users ─────────────────────────────────────────────────────────────
    async def get_user(self, user_id: str) -> Optional[User]:
        async with self._transaction("get_user") as session:
            row = await session.get(models.User, user_id)
            return User.model_validate(row) if row else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        async with self._transaction("get_user_by_email") as session:
            result = await session.execute(
                select(models.User).where(models.User.email == email)
            )
            row = result.scalar_one_or_none()
            return User.model_validate(row) if row else None

    async def create_user(self, data: NewUser, is_admin: bool = False) -> User:
        async with self._transaction("create_user", conflict_message="Email already registered") as session:
            row = models.User(
                id=new_id(),
                email=data.email,
                password=data.password,
                name=data.name,
                is_admin=is_admin,
                created_at=utcnow(),
            )
            session.add(row)
            await session.flush()
            return User.model_validate(row)

    async def set_user_admin(self, user_id: str, is_admin: bool) -> Optional[User]:
        async with self._transaction("set_user_admin") as session:
            row = await session.get(models.User, user_id)
            if row is None:
                return None
            row.is_admin = is_admin
            await session.flush()
            return User.model_validate(row)

    # ── Courses ───────────────────────────────────────────────────────────
    async def list_courses(self) -> List[Course]:
        async with self._transaction("list_courses") as session:
            result = await session.execute(
                select(models.Course).order_by(models.Course.created_at)
            )
            return [Course.model_validate(row) for row in result.scalars().all()]

    async def list_published_courses(self) -> List[Course]:
        async with self._transaction("list_published_courses") as session:
            result = await session.execute(
                select(models.Course)
                .where(models.Course.is_published.is_(True))
                .order_by(models.Course.created_at)
            )
            return [Course.model_validate(row) for row in result.scalars().all()]

    async def get_course(self, course_id: str) -> Optional[Course]:
        async with self._transaction("get_course") as session:
            row = await session.get(models.Course, course_id)
            return Course.model_validate(row) if row else None

    async def create_course(self, data: CourseCreate) -> Course:
        now = utcnow()
        values = coerce_nullable(data.model_dump(), COURSE_NULLABLE_FIELDS)
        values["is_published"] = published_default(data.is_published)
        async with self._transaction("create_course") as session:
            row = models.Course(id=new_id(), created_at=now, updated_at=now, **to_columns(values))
            session.add(row)
            await session.flush()
            return Course.model_validate(row)

    async def update_course(self, course_id: str, changes: Dict[str, Any]) -> Optional[Course]:
        async with self._transaction("update_course") as session:
            row = await session.get(models.Course, course_id)
            if row is None:
                return None
            self._apply(row, changes)
            await session.flush()
            return Course.model_validate(row)

    async def delete_course(self, course_id: str) -> bool:
        async with self._transaction("delete_course") as session:
            result = await session.execute(
                delete(models.Course).where(models.Course.id == course_id)
            )
            return result.rowcount > 0

    # ── Experiences ───────────────────────────────────────────────────────
    async def list_experiences(self) -> List[Experience]:
        async with self._transaction("list_experiences") as session:
            result = await session.execute(
                select(models.Experience).order_by(models.Experience.created_at)
            )
            return [Experience.model_validate(row) for row in result.scalars().all()]

    async def list_published_experiences(self) -> List[Experience]:
        async with self._transaction("list_published_experiences") as session:
            result = await session.execute(
                select(models.Experience)
                .where(models.Experience.is_published.is_(True))
                .order_by(models.Experience.created_at)
            )
            return [Experience.model_validate(row) for row in result.scalars().all()]

    async def get_experience(self, experience_id: str) -> Optional[Experience]:
        async with self._transaction("get_experience") as session:
            row = await session.get(models.Experience, experience_id)
            return Experience.model_validate(row) if row else None

    async def create_experience(self, data: ExperienceCreate) -> Experience:
        now = utcnow()
        values = coerce_nullable(data.model_dump(), EXPERIENCE_NULLABLE_FIELDS)
        values["is_published"] = published_default(data.is_published)
        async with self._transaction("create_experience") as session:
            row = models.Experience(
                id=new_id(),
                current_attendees=0,
                created_at=now,
                updated_at=now,
                **to_columns(values),
            )
            session.add(row)
            await session.flush()
            return Experience.model_validate(row)

    async def update_experience(
        self, experience_id: str, changes: Dict[str, Any]
    ) -> Optional[Experience]:
        async with self._transaction("update_experience") as session:
            row = await session.get(models.Experience, experience_id)
            if row is None:
                return None
            self._apply(row, changes)
            await session.flush()
            return Experience.model_validate(row)

    async def delete_experience(self, experience_id: str) -> bool:
        async with self._transaction("delete_experience") as session:
            result = await session.execute(
                delete(models.Experience).where(models.Experience.id == experience_id)
            )
            return result.rowcount > 0

    # ── Purchases ─────────────────────────────────────────────────────────
    async def create_purchase(self, user_id: str, data: PurchaseCreate) -> Purchase:
        values = coerce_nullable(data.model_dump(), PURCHASE_NULLABLE_FIELDS)
        async with self._transaction("create_purchase") as session:
            row = models.Purchase(
                id=new_id(),
                user_id=user_id,
                status=DEFAULT_PURCHASE_STATUS,
                created_at=utcnow(),
                **to_columns(values),
            )
            session.add(row)
            await session.flush()
            return Purchase.model_validate(row)

    async def list_user_purchases(self, user_id: str) -> List[Purchase]:
        async with self._transaction("list_user_purchases") as session:
            result = await session.execute(
                select(models.Purchase)
                .where(models.Purchase.user_id == user_id)
                .order_by(models.Purchase.created_at)
            )
            return [Purchase.model_validate(row) for row in result.scalars().all()]

    async def get_purchase(self, purchase_id: str) -> Optional[Purchase]:
        async with self._transaction("get_purchase") as session:
            row = await session.get(models.Purchase, purchase_id)
            return Purchase.model_validate(row) if row else None

    # ── Sessions ──────────────────────────────────────────────────────────
    async def create_session(self, user_id: str, expires_at: datetime) -> SessionRecord:
        async with self._transaction("create_session") as session:
            row = models.UserSession(
                id=new_session_token(),
                user_id=user_id,
                created_at=utcnow(),
                expires_at=expires_at,
            )
            session.add(row)
            await session.flush()
            return SessionRecord.model_validate(row)

    async def get_session_record(self, session_id: str) -> Optional[SessionRecord]:
        async with self._transaction("get_session_record") as session:
            row = await session.get(models.UserSession, session_id)
            return SessionRecord.model_validate(row) if row else None

    async def delete_session(self, session_id: str) -> bool:
        async with self._transaction("delete_session") as session:
            result = await session.execute(
                delete(models.UserSession).where(models.UserSession.id == session_id)
            )
            return result.rowcount > 0

    # ── Lifecycle ─────────────────────────────────────────────────────────
    async def health_check(self) -> bool:
        """
        Runs SELECT 1; False (and a warning) when the database is unreachable.

        Driver-level connection failures (refused, reset, DNS) surface as
        OSError rather than SQLAlchemyError, so both are caught.
        """
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Health check: database unreachable: %s", str(e))
            return False

    async def close(self) -> None:
        """Dispose the engine's pool; called from the app's shutdown hook."""
        if self._engine is not None:
            await self._engine.dispose()

    # ── Helpers ───────────────────────────────────────────────────────────
    @staticmethod
    def _apply(row: Any, changes: Dict[str, Any]) -> None:
        for name, value in to_columns(changes).items():
            setattr(row, name, value)
        row.updated_at = utcnow()
