"""
Barrel + Verse Backend — Storage Interface (Data Access Layer)
================================================================

What:  The uniform, async contract both storage backends implement.
Who:   Services call it; routes reach it through the get_storage dependency.

Contract:
    - Lookups return the entity or None. A missing row is never an exception.
    - Lists return a (possibly empty) list.
    - create_* assigns a random UUID string id plus timestamps and applies
      the defaulting rules below; callers cannot choose an id.
    - update_* merges only the supplied fields, always refreshes updated_at
      (even for an empty change set) and returns None for an unknown id
      without writing anything.
    - delete_* returns False for an unknown id.
    - Sessions are keyed by an unguessable token (secrets.token_urlsafe),
      never by a predictable id.
    - No caching: every call reads the backing store.

Defaulting rules (identical in every implementation):
    Course.is_published          → True when unspecified
    Experience.is_published      → True when unspecified
    Experience.current_attendees → always 0 on creation
    Purchase.status              → always "completed" on creation
    Omitted nullable fields      → explicit None
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from barrelverse.schemas.course import Course, CourseCreate
from barrelverse.schemas.experience import Experience, ExperienceCreate
from barrelverse.schemas.purchase import Purchase, PurchaseCreate
from barrelverse.schemas.session import SessionRecord
from barrelverse.schemas.user import NewUser, User

DEFAULT_PURCHASE_STATUS = "completed"

# Nullable columns per entity; writes always carry these keys, None when omitted
COURSE_NULLABLE_FIELDS = ("long_description", "image", "duration", "level")
EXPERIENCE_NULLABLE_FIELDS = ("long_description", "image", "date", "location", "max_attendees")
PURCHASE_NULLABLE_FIELDS = ("stripe_payment_id",)


def published_default(value: Optional[bool]) -> bool:
    return True if value is None else value


class Storage(ABC):
    """
    Abstract data access layer for users, courses, experiences and purchases.

    Implementations:
        MemoryStorage   — process memory, default outside production
        DatabaseStorage — async SQLAlchemy over DATABASE_URL
    """

    #: Short backend name reported by /health and startup logs
    kind: str = "abstract"

    # ── Users ─────────────────────────────────────────────────────────────
    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def create_user(self, data: NewUser, is_admin: bool = False) -> User:
        """Insert a user. Raises ConflictError if the email is taken."""

    @abstractmethod
    async def set_user_admin(self, user_id: str, is_admin: bool) -> Optional[User]:
        ...

    # ── Courses ───────────────────────────────────────────────────────────
    @abstractmethod
    async def list_courses(self) -> List[Course]:
        ...

    @abstractmethod
    async def list_published_courses(self) -> List[Course]:
        ...

    @abstractmethod
    async def get_course(self, course_id: str) -> Optional[Course]:
        ...

    @abstractmethod
    async def create_course(self, data: CourseCreate) -> Course:
        ...

    @abstractmethod
    async def update_course(self, course_id: str, changes: Dict[str, Any]) -> Optional[Course]:
        ...

    @abstractmethod
    async def delete_course(self, course_id: str) -> bool:
        ...

    # ── Experiences ───────────────────────────────────────────────────────
    @abstractmethod
    async def list_experiences(self) -> List[Experience]:
        ...

    @abstractmethod
    async def list_published_experiences(self) -> List[Experience]:
        ...

    @abstractmethod
    async def get_experience(self, experience_id: str) -> Optional[Experience]:
        ...

    @abstractmethod
    async def create_experience(self, data: ExperienceCreate) -> Experience:
        ...

    @abstractmethod
    async def update_experience(
        self, experience_id: str, changes: Dict[str, Any]
    ) -> Optional[Experience]:
        ...

    @abstractmethod
    async def delete_experience(self, experience_id: str) -> bool:
        ...

    # ── Purchases ─────────────────────────────────────────────────────────
    @abstractmethod
    async def create_purchase(self, user_id: str, data: PurchaseCreate) -> Purchase:
        ...

    @abstractmethod
    async def list_user_purchases(self, user_id: str) -> List[Purchase]:
        ...

    @abstractmethod
    async def get_purchase(self, purchase_id: str) -> Optional[Purchase]:
        ...

    # ── Sessions ──────────────────────────────────────────────────────────
    @abstractmethod
    async def create_session(self, user_id: str, expires_at: datetime) -> SessionRecord:
        """Store a session for `user_id` under a fresh random token."""

    @abstractmethod
    async def get_session_record(self, session_id: str) -> Optional[SessionRecord]:
        """The stored session, expired or not; None once deleted."""

    @abstractmethod
    async def delete_session(self, session_id: str) -> bool:
        ...

    # ── Lifecycle ─────────────────────────────────────────────────────────
    async def health_check(self) -> bool:
        """True when the backing store can serve requests."""
        return True

    async def close(self) -> None:
        """Release connections. No-op for backends without any."""
