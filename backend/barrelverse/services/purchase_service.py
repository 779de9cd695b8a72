"""
Barrel + Verse Backend — Purchase Service
===========================================

What:  Records purchases and reads them back for their owner.
Who:   Called by routes/purchases.py, always with the session's user id.

Ownership:
    The owner is never taken from the request body. Reads go through the
    same id, and a purchase that belongs to someone else is reported as
    not found, exactly like a missing one, so purchase ids cannot be probed.

No payment provider is contacted; stripePaymentId is stored as given.
"""

import logging
from typing import List

from barrelverse.exceptions import NotFoundError
from barrelverse.schemas.purchase import Purchase, PurchaseCreate
from barrelverse.storage import Storage

logger = logging.getLogger(__name__)


class PurchaseService:
    """Purchase recording and per-user lookups. Status is set by storage, never by clients."""

    async def record(self, storage: Storage, user_id: str, payload: PurchaseCreate) -> Purchase:
        """Record a purchase owned by `user_id`; status is always "completed"."""
        purchase = await storage.create_purchase(user_id, payload)
        logger.info(
            "User %s purchased %s %s (purchase %s)",
            user_id, purchase.item_type, purchase.item_id, purchase.id,
        )
        return purchase

    async def list_for_user(self, storage: Storage, user_id: str) -> List[Purchase]:
        return await storage.list_user_purchases(user_id)

    async def get_for_user(self, storage: Storage, user_id: str, purchase_id: str) -> Purchase:
        """Another user's purchase is reported as not found."""
        purchase = await storage.get_purchase(purchase_id)
        if purchase is None or purchase.user_id != user_id:
            raise NotFoundError(resource="Purchase", resource_id=purchase_id)
        return purchase


purchase_service = PurchaseService()
