"""
Barrel + Verse Backend — Experience SQLAlchemy Model
======================================================

What:  ORM model for the `experiences` table (tastings, tours, dinners).
Who:   DatabaseStorage; Alembic revision 001.

current_attendees is server-maintained: it starts at 0 on every insert and
no create payload can set it.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, Numeric, Text, text, true
from sqlalchemy.orm import Mapped, mapped_column

from barrelverse.database import Base
from barrelverse.models._columns import id_column, timestamp_column


class Experience(Base):
    """A bookable, usually dated, event listed in the Experiences section."""

    __tablename__ = "experiences"

    id: Mapped[str] = id_column()
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    long_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # NULL means no capacity limit
    max_attendees: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    current_attendees: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    is_published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    created_at: Mapped[datetime] = timestamp_column("When the experience was created (UTC)")
    updated_at: Mapped[datetime] = timestamp_column("Last modification (UTC), bumped on every update")

    def __repr__(self) -> str:
        return (
            f"<Experience(id={self.id}, attendees={self.current_attendees}/"
            f"{self.max_attendees}, published={self.is_published})>"
        )
