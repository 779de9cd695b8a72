"""
Barrel + Verse Backend — Session SQLAlchemy Model
===================================================

What:  ORM model for the `sessions` table, one row per logged-in browser.

Table Design:
    - id: 43-char random token (secrets.token_urlsafe), the value the signed
      cookie carries; not a UUID, so it cannot be guessed from other ids
    - user_id: owner; the user is looked up again on every request
    - expires_at: lookups past this instant are treated as logged out
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from barrelverse.database import Base
from barrelverse.models._columns import timestamp_column


class UserSession(Base):
    """Server-side record behind a session cookie."""

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
    )

    created_at: Mapped[datetime] = timestamp_column("When the user logged in (UTC)")

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="End of the session's lifetime (UTC)",
    )

    __table_args__ = (
        Index("idx_sessions_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<UserSession(user_id={self.user_id}, expires_at={self.expires_at})>"
