"""Helpers shared by every table and both storage backends: ids, tokens, UTC timestamps."""

import secrets
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Random (non-sequential) identifier, stored as its 36-char string form."""
    return str(uuid.uuid4())


def id_column():
    return mapped_column(String(36), primary_key=True, default=new_id)


def timestamp_column(comment: str):
    return mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        comment=comment,
    )


def new_session_token() -> str:
    """Unguessable session key; 32 random bytes, URL-safe base64."""
    return secrets.token_urlsafe(32)
