"""
Barrel + Verse Backend — Purchase SQLAlchemy Model
====================================================

What:  ORM model for the `purchases` table.

Relationships:
    user_id → users.id is a real foreign key.
    (item_type, item_id) points at a course or an experience; it is resolved
    by the application and deliberately carries no foreign key, since it can
    reference either of two tables.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Index, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from barrelverse.database import Base
from barrelverse.models._columns import id_column, timestamp_column


class Purchase(Base):
    """A completed (or pending/refunded) order of a single course or experience."""

    __tablename__ = "purchases"

    id: Mapped[str] = id_column()

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
    )

    # course | experience
    item_type: Mapped[str] = mapped_column(String(32), nullable=False)
    item_id: Mapped[str] = mapped_column(String(36), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    stripe_payment_id: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="External payment provider reference, when one exists",
    )

    # pending | completed | refunded
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="completed",
        server_default=text("'completed'"),
    )

    created_at: Mapped[datetime] = timestamp_column("When the purchase was recorded (UTC)")

    # Every purchase listing filters on the owner
    __table_args__ = (
        Index("idx_purchases_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Purchase(id={self.id}, item={self.item_type}:{self.item_id}, status='{self.status}')>"
