"""
Barrel + Verse Backend — Session Record Schema
================================================

What:  The server-side half of a login session.
How:   The signed cookie carries only the record's random id; the record
       maps it to a user and an expiry. Logging out deletes the record, so a
       copy of the cookie is worthless afterwards.
"""

from datetime import datetime, timezone

from pydantic import field_validator

from barrelverse.schemas.common import ApiModel


class SessionRecord(ApiModel):
    """Stored session, as returned by Storage."""
    id: str
    user_id: str
    created_at: datetime
    expires_at: datetime

    @field_validator("created_at", "expires_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo; they were written as UTC
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
