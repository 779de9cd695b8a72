"""
Barrel + Verse Backend — Experience Schemas
=============================================

What:  Create/update payloads and the Experience entity.

currentAttendees is not part of either payload, so any value a client
sends is dropped during validation; storage sets it to 0 on creation.
"""

from datetime import datetime
from typing import ClassVar, Optional, Tuple

from pydantic import Field

from barrelverse.schemas.common import ApiModel, PartialUpdateModel, Price

# experiences.max_attendees is a 32-bit INTEGER column
MAX_ATTENDEES = 2_147_483_647


class ExperienceCreate(ApiModel):
    """POST /api/admin/experiences body."""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    long_description: Optional[str] = None
    price: Price
    image: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
    max_attendees: Optional[int] = Field(default=None, ge=0, le=MAX_ATTENDEES)
    is_published: Optional[bool] = None


class ExperienceUpdate(PartialUpdateModel):
    """PUT /api/admin/experiences/{id} body."""
    non_nullable_fields: ClassVar[Tuple[str, ...]] = ("title", "description", "price", "is_published")

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    long_description: Optional[str] = None
    price: Optional[Price] = None
    image: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
    max_attendees: Optional[int] = Field(default=None, ge=0, le=MAX_ATTENDEES)
    is_published: Optional[bool] = None


class Experience(ApiModel):
    """Stored experience record."""
    id: str
    title: str
    description: str
    long_description: Optional[str] = None
    price: Price
    image: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
    max_attendees: Optional[int] = None
    current_attendees: int = 0
    is_published: bool = True
    created_at: datetime
    updated_at: datetime
