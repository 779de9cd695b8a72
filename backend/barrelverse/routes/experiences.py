"""
Barrel + Verse Backend — Public Experience Routes
===================================================

What:  Read-only experience listings (tastings, dinners, tours) for visitors.
How:   Delegates to CatalogService without include_unpublished, so only
       published experiences are visible; an unpublished or unknown id
       answers 404 with the same body.
Who:   The public site; admins use /api/admin/experiences instead.
"""

from typing import List

from fastapi import APIRouter, Depends

from barrelverse.dependencies import get_storage
from barrelverse.schemas.common import ErrorResponse
from barrelverse.schemas.experience import Experience
from barrelverse.services.catalog_service import catalog_service
from barrelverse.storage import Storage

router = APIRouter(prefix="/api/experiences", tags=["Experiences"])


@router.get("", response_model=List[Experience], summary="List published experiences")
async def list_experiences(storage: Storage = Depends(get_storage)) -> List[Experience]:
    return await catalog_service.list_experiences(storage)


@router.get(
    "/{experience_id}",
    response_model=Experience,
    responses={404: {"description": "Experience not found or unpublished", "model": ErrorResponse}},
    summary="Get a published experience",
)
async def get_experience(experience_id: str, storage: Storage = Depends(get_storage)) -> Experience:
    return await catalog_service.get_experience(storage, experience_id)
