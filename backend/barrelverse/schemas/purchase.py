"""
Barrel + Verse Backend — Purchase Schemas
===========================================

What:  The purchase payload and the Purchase entity.

PurchaseCreate has no userId or status field: the owner always comes from
the session and new purchases are always "completed".
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from barrelverse.schemas.common import ApiModel, Price

ItemType = Literal["course", "experience"]
PurchaseStatus = Literal["pending", "completed", "refunded"]


class PurchaseCreate(ApiModel):
    """POST /api/purchases body."""
    item_type: ItemType
    item_id: str = Field(min_length=1)
    amount: Price
    stripe_payment_id: Optional[str] = None


class Purchase(ApiModel):
    """Stored purchase record."""
    id: str
    user_id: str
    item_type: ItemType
    item_id: str
    amount: Price
    stripe_payment_id: Optional[str] = None
    status: PurchaseStatus = "completed"
    created_at: datetime
