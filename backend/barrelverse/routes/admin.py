"""
Barrel + Verse Backend — Admin Catalogue Routes
=================================================

What:  Full CRUD over courses and experiences, unpublished items included.
Who:   The admin dashboard.

Access:
    Every route on this router runs the require_admin gate first:
    no session → 401, session of a non-admin (or of a deleted user) → 403.
    The gate runs before body validation, so an anonymous caller learns
    nothing about the payload format.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from barrelverse.dependencies import get_storage, require_admin
from barrelverse.schemas.common import ErrorResponse, SuccessResponse
from barrelverse.schemas.course import Course, CourseCreate, CourseUpdate
from barrelverse.schemas.experience import Experience, ExperienceCreate, ExperienceUpdate
from barrelverse.services.catalog_service import catalog_service
from barrelverse.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "No session", "model": ErrorResponse},
        403: {"description": "Not an admin", "model": ErrorResponse},
    },
)

_not_found = {404: {"description": "No item with this id", "model": ErrorResponse}}
_invalid = {400: {"description": "Invalid body", "model": ErrorResponse}}


# ── Courses ───────────────────────────────────────────────────────────────

@router.get("/courses", response_model=List[Course], summary="List all courses")
async def list_courses(storage: Storage = Depends(get_storage)) -> List[Course]:
    return await catalog_service.list_courses(storage, include_unpublished=True)


@router.get("/courses/{course_id}", response_model=Course, responses=_not_found,
            summary="Get any course, published or not")
async def get_course(course_id: str, storage: Storage = Depends(get_storage)) -> Course:
    return await catalog_service.get_course(storage, course_id, include_unpublished=True)


@router.post("/courses", response_model=Course, responses=_invalid, summary="Create a course")
async def create_course(payload: CourseCreate, storage: Storage = Depends(get_storage)) -> Course:
    return await catalog_service.create_course(storage, payload)


@router.put("/courses/{course_id}", response_model=Course, responses={**_invalid, **_not_found},
            summary="Partially update a course")
async def update_course(
    course_id: str,
    payload: CourseUpdate,
    storage: Storage = Depends(get_storage),
) -> Course:
    return await catalog_service.update_course(storage, course_id, payload)


@router.delete("/courses/{course_id}", response_model=SuccessResponse, responses=_not_found,
               summary="Delete a course")
async def delete_course(course_id: str, storage: Storage = Depends(get_storage)) -> SuccessResponse:
    await catalog_service.delete_course(storage, course_id)
    return SuccessResponse()


# ── Experiences ───────────────────────────────────────────────────────────

@router.get("/experiences", response_model=List[Experience], summary="List all experiences")
async def list_experiences(storage: Storage = Depends(get_storage)) -> List[Experience]:
    return await catalog_service.list_experiences(storage, include_unpublished=True)


@router.get("/experiences/{experience_id}", response_model=Experience, responses=_not_found,
            summary="Get any experience, published or not")
async def get_experience(experience_id: str, storage: Storage = Depends(get_storage)) -> Experience:
    return await catalog_service.get_experience(storage, experience_id, include_unpublished=True)


@router.post("/experiences", response_model=Experience, responses=_invalid,
             summary="Create an experience")
async def create_experience(
    payload: ExperienceCreate, storage: Storage = Depends(get_storage)
) -> Experience:
    return await catalog_service.create_experience(storage, payload)


@router.put("/experiences/{experience_id}", response_model=Experience,
            responses={**_invalid, **_not_found}, summary="Partially update an experience")
async def update_experience(
    experience_id: str,
    payload: ExperienceUpdate,
    storage: Storage = Depends(get_storage),
) -> Experience:
    return await catalog_service.update_experience(storage, experience_id, payload)


@router.delete("/experiences/{experience_id}", response_model=SuccessResponse,
               responses=_not_found, summary="Delete an experience")
async def delete_experience(
    experience_id: str, storage: Storage = Depends(get_storage)
) -> SuccessResponse:
    await catalog_service.delete_experience(storage, experience_id)
    return SuccessResponse()
