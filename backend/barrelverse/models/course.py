"""
Barrel + Verse Backend — Course SQLAlchemy Model
==================================================

What:  ORM model for the `courses` table (masterclasses, video courses, memberships).
Who:   DatabaseStorage; Alembic revision 001.

Column notes:
    - price: NUMERIC(10, 2) — fixed point, so "19.99" reads back as "19.99"
    - category / level: plain text; enum membership is enforced by the API schemas
    - is_published: false hides the course from /api/courses but not from admins
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Numeric, String, Text, true
from sqlalchemy.orm import Mapped, mapped_column

from barrelverse.database import Base
from barrelverse.models._columns import id_column, timestamp_column


class Course(Base):
    """A purchasable course listed in the Courses section."""

    __tablename__ = "courses"

    id: Mapped[str] = id_column()
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    long_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Price in the site currency, two decimal places",
    )

    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # masterclass | video | membership
    category: Mapped[str] = mapped_column(String(32), nullable=False)

    # Free text, e.g. "2 hours" or "Self-paced"
    duration: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # beginner | intermediate | advanced
    level: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    is_published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    created_at: Mapped[datetime] = timestamp_column("When the course was created (UTC)")
    updated_at: Mapped[datetime] = timestamp_column("Last modification (UTC), bumped on every update")

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, category='{self.category}', published={self.is_published})>"
