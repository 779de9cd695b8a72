"""
Barrel + Verse Backend — User & Auth Schemas
==============================================

What:  Registration/login payloads and the two user shapes.
How:   `User` is the storage-level entity and includes the password hash;
       `UserResponse` is the only shape routes ever serialize, and it has no
       password field at all.
"""

from datetime import datetime

from pydantic import EmailStr, Field

from barrelverse.schemas.common import ApiModel

MIN_PASSWORD_LENGTH = 8


class RegisterRequest(ApiModel):
    """POST /api/auth/register body."""
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(min_length=1)


class LoginRequest(ApiModel):
    """POST /api/auth/login body. No length rule: any mismatch is just 'Invalid credentials'."""
    email: EmailStr
    password: str


class NewUser(ApiModel):
    """What the auth service hands to Storage.create_user (password already hashed)."""
    email: str
    password: str
    name: str


class User(ApiModel):
    """Stored user record, as returned by Storage."""
    id: str
    email: str
    password: str
    name: str
    is_admin: bool = False
    created_at: datetime


class UserResponse(ApiModel):
    """Public view of a user: everything except the password hash."""
    id: str
    email: str
    name: str
    is_admin: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls.model_validate(user.model_dump(exclude={"password"}))
