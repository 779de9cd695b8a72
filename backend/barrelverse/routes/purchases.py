"""
Barrel + Verse Backend — Purchase Routes
==========================================

What:  Lets a logged-in user record and review their own purchases.

Ownership:
    The owner is ALWAYS the session's user id. PurchaseCreate has no userId
    (or status) field, so a client-supplied value is dropped at validation.
"""

from typing import List

from fastapi import APIRouter, Depends

from barrelverse.dependencies import get_storage, require_user_id
from barrelverse.schemas.common import ErrorResponse
from barrelverse.schemas.purchase import Purchase, PurchaseCreate
from barrelverse.services.purchase_service import purchase_service
from barrelverse.storage import Storage

router = APIRouter(
    prefix="/api/purchases",
    tags=["Purchases"],
    responses={401: {"description": "No session", "model": ErrorResponse}},
)


@router.get("", response_model=List[Purchase], summary="List the caller's purchases")
async def list_purchases(
    user_id: str = Depends(require_user_id),
    storage: Storage = Depends(get_storage),
) -> List[Purchase]:
    return await purchase_service.list_for_user(storage, user_id)


@router.post(
    "",
    response_model=Purchase,
    responses={400: {"description": "Invalid body", "model": ErrorResponse}},
    summary="Record a purchase for the caller",
)
async def create_purchase(
    payload: PurchaseCreate,
    user_id: str = Depends(require_user_id),
    storage: Storage = Depends(get_storage),
) -> Purchase:
    return await purchase_service.record(storage, user_id, payload)


@router.get(
    "/{purchase_id}",
    response_model=Purchase,
    responses={404: {"description": "No such purchase for this user", "model": ErrorResponse}},
    summary="Get one of the caller's purchases",
)
async def get_purchase(
    purchase_id: str,
    user_id: str = Depends(require_user_id),
    storage: Storage = Depends(get_storage),
) -> Purchase:
    return await purchase_service.get_for_user(storage, user_id, purchase_id)
