"""
Barrel + Verse Backend — In-Memory Storage
============================================

What:  Dict-backed Storage for development and tests.
How:   One dict per entity keyed by generated id; list operations scan all
       values with a predicate. Everything is lost when the process exits.

Returned entities are deep copies, so a caller mutating a result cannot
change what is stored.

Concurrency:
    No locks. Each method runs without awaiting anything, so on a single
    event loop no two mutations interleave. Running this store behind a
    multi-threaded server would need a lock around every mutation.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import BaseModel

from barrelverse.exceptions import ConflictError
from barrelverse.models._columns import new_id, new_session_token, utcnow
from barrelverse.schemas.course import Course, CourseCreate
from barrelverse.schemas.experience import Experience, ExperienceCreate
from barrelverse.schemas.purchase import Purchase, PurchaseCreate
from barrelverse.schemas.session import SessionRecord
from barrelverse.schemas.user import NewUser, User
from barrelverse.storage.base import DEFAULT_PURCHASE_STATUS, Storage, published_default

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _copy(entity: Optional[T]) -> Optional[T]:
    return entity.model_copy(deep=True) if entity is not None else None


def _scan(table: Dict[str, T], predicate: Callable[[T], bool] = lambda _: True) -> List[T]:
    return [entity.model_copy(deep=True) for entity in table.values() if predicate(entity)]


class MemoryStorage(Storage):
    """Volatile Storage implementation. Default when DATABASE_URL is unset."""

    kind = "memory"

    def __init__(self) -> None:
        self.users: Dict[str, User] = {}
        self.courses: Dict[str, Course] = {}
        self.experiences: Dict[str, Experience] = {}
        self.purchases: Dict[str, Purchase] = {}
        self.sessions: Dict[str, SessionRecord] = {}

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.users.clear()
        self.courses.clear()
        self.experiences.clear()
        self.purchases.clear()
        self.sessions.clear()

    # ── Users ─────────────────────────────────────────────────────────────
    async def get_user(self, user_id: str) -> Optional[User]:
        return _copy(self.users.get(user_id))

    async def get_user_by_email(self, email: str) -> Optional[User]:
        for user in self.users.values():
            if user.email == email:
                return _copy(user)
        return None

    async def create_user(self, data: NewUser, is_admin: bool = False) -> User:
        if any(user.email == data.email for user in self.users.values()):
            raise ConflictError("Email already registered")
        user = User(
            id=new_id(),
            email=data.email,
            password=data.password,
            name=data.name,
            is_admin=is_admin,
            created_at=utcnow(),
        )
        self.users[user.id] = user
        return _copy(user)

    async def set_user_admin(self, user_id: str, is_admin: bool) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        self.users[user_id] = user.model_copy(update={"is_admin": is_admin})
        return _copy(self.users[user_id])

    # ── Courses ───────────────────────────────────────────────────────────
    async def list_courses(self) -> List[Course]:
        return _scan(self.courses)

    async def list_published_courses(self) -> List[Course]:
        return _scan(self.courses, lambda course: course.is_published)

    async def get_course(self, course_id: str) -> Optional[Course]:
        return _copy(self.courses.get(course_id))

    async def create_course(self, data: CourseCreate) -> Course:
        now = utcnow()
        values = data.model_dump()
        values["is_published"] = published_default(data.is_published)
        course = Course(id=new_id(), created_at=now, updated_at=now, **values)
        self.courses[course.id] = course
        return _copy(course)

    async def update_course(self, course_id: str, changes: Dict[str, Any]) -> Optional[Course]:
        return self._merge(self.courses, course_id, changes)

    async def delete_course(self, course_id: str) -> bool:
        return self.courses.pop(course_id, None) is not None

    # ── Experiences ───────────────────────────────────────────────────────
    async def list_experiences(self) -> List[Experience]:
        return _scan(self.experiences)

    async def list_published_experiences(self) -> List[Experience]:
        return _scan(self.experiences, lambda experience: experience.is_published)

    async def get_experience(self, experience_id: str) -> Optional[Experience]:
        return _copy(self.experiences.get(experience_id))

    async def create_experience(self, data: ExperienceCreate) -> Experience:
        now = utcnow()
        values = data.model_dump()
        values["is_published"] = published_default(data.is_published)
        experience = Experience(
            id=new_id(),
            current_attendees=0,
            created_at=now,
            updated_at=now,
            **values,
        )
        self.experiences[experience.id] = experience
        return _copy(experience)

    async def update_experience(
        self, experience_id: str, changes: Dict[str, Any]
    ) -> Optional[Experience]:
        return self._merge(self.experiences, experience_id, changes)

    async def delete_experience(self, experience_id: str) -> bool:
        return self.experiences.pop(experience_id, None) is not None

    # ── Purchases ─────────────────────────────────────────────────────────
    async def create_purchase(self, user_id: str, data: PurchaseCreate) -> Purchase:
        purchase = Purchase(
            id=new_id(),
            user_id=user_id,
            status=DEFAULT_PURCHASE_STATUS,
            created_at=utcnow(),
            **data.model_dump(),
        )
        self.purchases[purchase.id] = purchase
        return _copy(purchase)

    async def list_user_purchases(self, user_id: str) -> List[Purchase]:
        return _scan(self.purchases, lambda purchase: purchase.user_id == user_id)

    async def get_purchase(self, purchase_id: str) -> Optional[Purchase]:
        return _copy(self.purchases.get(purchase_id))

    # ── Sessions ──────────────────────────────────────────────────────────
    async def create_session(self, user_id: str, expires_at: datetime) -> SessionRecord:
        record = SessionRecord(
            id=new_session_token(),
            user_id=user_id,
            created_at=utcnow(),
            expires_at=expires_at,
        )
        self.sessions[record.id] = record
        return _copy(record)

    async def get_session_record(self, session_id: str) -> Optional[SessionRecord]:
        return _copy(self.sessions.get(session_id))

    async def delete_session(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None

    # ── Helpers ───────────────────────────────────────────────────────────
    def _merge(self, table: Dict[str, T], entity_id: str, changes: Dict[str, Any]) -> Optional[T]:
        current = table.get(entity_id)
        if current is None:
            return None
        updated = current.model_copy(update={**changes, "updated_at": utcnow()})
        table[entity_id] = updated
        return _copy(updated)
