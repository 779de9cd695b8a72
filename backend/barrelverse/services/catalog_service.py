"""
Barrel + Verse Backend — Catalog Service
==========================================

What:  Courses and experiences, with the visibility rule applied in one place.

Visibility:
    Public reads  → published items only; an unpublished item is reported
                    as not found, exactly like a missing one.
    Admin reads   → every item.

Writes are admin-only (the gate lives on the router); they pass validated
payloads straight to Storage and turn "no such id" into NotFoundError.
"""

import logging
from typing import List

from barrelverse.exceptions import NotFoundError
from barrelverse.schemas.course import Course, CourseCreate, CourseUpdate
from barrelverse.schemas.experience import Experience, ExperienceCreate, ExperienceUpdate
from barrelverse.storage import Storage

logger = logging.getLogger(__name__)


class CatalogService:
    """Read and manage the course and experience catalogue."""

    # ── Courses ───────────────────────────────────────────────────────────
    async def list_courses(self, storage: Storage, include_unpublished: bool = False) -> List[Course]:
        if include_unpublished:
            return await storage.list_courses()
        return await storage.list_published_courses()

    async def get_course(
        self, storage: Storage, course_id: str, include_unpublished: bool = False
    ) -> Course:
        course = await storage.get_course(course_id)
        if course is None or not (include_unpublished or course.is_published):
            raise NotFoundError(resource="Course", resource_id=course_id)
        return course

    async def create_course(self, storage: Storage, payload: CourseCreate) -> Course:
        course = await storage.create_course(payload)
        logger.info("Created course %s (published=%s)", course.id, course.is_published)
        return course

    async def update_course(self, storage: Storage, course_id: str, payload: CourseUpdate) -> Course:
        course = await storage.update_course(course_id, payload.changes())
        if course is None:
            raise NotFoundError(resource="Course", resource_id=course_id)
        logger.info("Updated course %s", course_id)
        return course

    async def delete_course(self, storage: Storage, course_id: str) -> None:
        if not await storage.delete_course(course_id):
            raise NotFoundError(resource="Course", resource_id=course_id)
        logger.info("Deleted course %s", course_id)

    # ── Experiences ───────────────────────────────────────────────────────
    async def list_experiences(
        self, storage: Storage, include_unpublished: bool = False
    ) -> List[Experience]:
        if include_unpublished:
            return await storage.list_experiences()
        return await storage.list_published_experiences()

    async def get_experience(
        self, storage: Storage, experience_id: str, include_unpublished: bool = False
    ) -> Experience:
        experience = await storage.get_experience(experience_id)
        if experience is None or not (include_unpublished or experience.is_published):
            raise NotFoundError(resource="Experience", resource_id=experience_id)
        return experience

    async def create_experience(self, storage: Storage, payload: ExperienceCreate) -> Experience:
        experience = await storage.create_experience(payload)
        logger.info("Created experience %s (published=%s)", experience.id, experience.is_published)
        return experience

    async def update_experience(
        self, storage: Storage, experience_id: str, payload: ExperienceUpdate
    ) -> Experience:
        experience = await storage.update_experience(experience_id, payload.changes())
        if experience is None:
            raise NotFoundError(resource="Experience", resource_id=experience_id)
        logger.info("Updated experience %s", experience_id)
        return experience

    async def delete_experience(self, storage: Storage, experience_id: str) -> None:
        if not await storage.delete_experience(experience_id):
            raise NotFoundError(resource="Experience", resource_id=experience_id)
        logger.info("Deleted experience %s", experience_id)


catalog_service = CatalogService()
