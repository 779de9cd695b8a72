"""
Barrel + Verse Backend — Course Schemas
=========================================

What:  Create/update payloads and the Course entity.

Validation rules:
    title, description: non-empty
    price:              decimal string, up to 8 digits and 2 decimals (normalised to 2)
    category:           masterclass | video | membership
    level:              beginner | intermediate | advanced (optional)
    isPublished:        optional; storage defaults it to true
"""

from datetime import datetime
from typing import ClassVar, Literal, Optional, Tuple

from pydantic import Field

from barrelverse.schemas.common import ApiModel, PartialUpdateModel, Price

CourseCategory = Literal["masterclass", "video", "membership"]
CourseLevel = Literal["beginner", "intermediate", "advanced"]


class CourseCreate(ApiModel):
    """POST /api/admin/courses body."""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    long_description: Optional[str] = None
    price: Price
    image: Optional[str] = None
    category: CourseCategory
    duration: Optional[str] = None
    level: Optional[CourseLevel] = None
    is_published: Optional[bool] = None


class CourseUpdate(PartialUpdateModel):
    """PUT /api/admin/courses/{id} body; only the fields sent are changed."""
    non_nullable_fields: ClassVar[Tuple[str, ...]] = ("title", "description", "price", "category", "is_published")

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    long_description: Optional[str] = None
    price: Optional[Price] = None
    image: Optional[str] = None
    category: Optional[CourseCategory] = None
    duration: Optional[str] = None
    level: Optional[CourseLevel] = None
    is_published: Optional[bool] = None


class Course(ApiModel):
    """Stored course record."""
    id: str
    title: str
    description: str
    long_description: Optional[str] = None
    price: Price
    image: Optional[str] = None
    category: CourseCategory
    duration: Optional[str] = None
    level: Optional[CourseLevel] = None
    is_published: bool = True
    created_at: datetime
    updated_at: datetime
