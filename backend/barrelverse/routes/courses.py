"""
Barrel + Verse Backend — Public Course Routes
===============================================

What:  Read-only course catalogue for site visitors.
Only published courses are visible; an unpublished course answers 404.
"""

from typing import List

from fastapi import APIRouter, Depends

from barrelverse.dependencies import get_storage
from barrelverse.schemas.common import ErrorResponse
from barrelverse.schemas.course import Course
from barrelverse.services.catalog_service import catalog_service
from barrelverse.storage import Storage

router = APIRouter(prefix="/api/courses", tags=["Courses"])


@router.get("", response_model=List[Course], summary="List published courses")
async def list_courses(storage: Storage = Depends(get_storage)) -> List[Course]:
    return await catalog_service.list_courses(storage)


@router.get(
    "/{course_id}",
    response_model=Course,
    responses={404: {"description": "Course not found or unpublished", "model": ErrorResponse}},
    summary="Get a published course",
)
async def get_course(course_id: str, storage: Storage = Depends(get_storage)) -> Course:
    return await catalog_service.get_course(storage, course_id)
