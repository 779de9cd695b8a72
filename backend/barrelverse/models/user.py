"""
Barrel + Verse Backend — User SQLAlchemy Model
================================================

What:  ORM model for the `users` table.
Who:   Read and written only by DatabaseStorage; Alembic mirrors it in 001.

Table Design:
    - id: random UUID string, assigned by the storage layer
    - email: unique index; duplicate registration surfaces as ConflictError
    - password: argon2 hash produced by barrelverse.security — never plaintext
    - is_admin: only the admin CLI sets this; no HTTP route can
"""

from datetime import datetime

from sqlalchemy import Boolean, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from barrelverse.database import Base
from barrelverse.models._columns import id_column, timestamp_column


class User(Base):
    """A registered site visitor; admins manage the catalogue."""

    __tablename__ = "users"

    id: Mapped[str] = id_column()

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
        comment="Login identifier — unique across all users",
    )

    password: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Salted argon2 hash of the user's password",
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)

    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Grants access to /api/admin/* routes",
    )

    created_at: Mapped[datetime] = timestamp_column("When the account was registered (UTC)")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, is_admin={self.is_admin})>"
