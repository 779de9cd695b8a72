"""
Barrel + Verse Backend — Auth Service
=======================================

What:  Registration, login, logout and current-user lookup.
Who:   Called by routes/auth.py.

Flow (register):
    duplicate email? → ConflictError (400)
    hash password    → threadpool (argon2)
    create user      → Storage.create_user
    start session    → SessionContext.establish(user.id), stored server-side

Flow (login):
    unknown email or wrong password → AuthenticationError("Invalid credentials")
    Both failures share one message and one argon2 verification, so neither
    the body nor the response time reveals whether the email is registered.
"""

import logging

from barrelverse.exceptions import AuthenticationError, ConflictError, NotFoundError
from barrelverse.schemas.user import LoginRequest, NewUser, RegisterRequest, UserResponse
from barrelverse.security import SessionContext, burn_verification, hash_password, verify_password
from barrelverse.storage import Storage

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Account and session operations. Responses never include the password hash."""

    async def register(
        self, storage: Storage, session: SessionContext, payload: RegisterRequest
    ) -> UserResponse:
        """
        Create an account and log the caller in.

        Raises:
            ConflictError: the email is already registered
        """
        if await storage.get_user_by_email(payload.email) is not None:
            raise ConflictError("Email already registered")

        user = await storage.create_user(
            NewUser(
                email=payload.email,
                password=await hash_password(payload.password),
                name=payload.name,
            )
        )
        await session.establish(user.id)
        logger.info("Registered user %s", user.id)
        return UserResponse.from_user(user)

    async def login(
        self, storage: Storage, session: SessionContext, payload: LoginRequest
    ) -> UserResponse:
        """
        Check credentials and start a session.

        Raises:
            AuthenticationError: unknown email or wrong password (same message)
        """
        user = await storage.get_user_by_email(payload.email)
        if user is None:
            await burn_verification(payload.password)
            logger.info("Login rejected: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not await verify_password(payload.password, user.password):
            logger.info("Login rejected: wrong password for user %s", user.id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        await session.establish(user.id)
        logger.info("User %s logged in", user.id)
        return UserResponse.from_user(user)

    async def logout(self, session: SessionContext) -> None:
        """Delete the stored session; SessionError propagates as a 500."""
        user_id = await session.user_id()
        if await session.destroy():
            logger.info("User %s logged out", user_id or "(expired session)")

    async def current_user(self, storage: Storage, user_id: str) -> UserResponse:
        """
        Resolve the session's user.

        Raises:
            NotFoundError: the account was removed after the session started
        """
        user = await storage.get_user(user_id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=user_id)
        return UserResponse.from_user(user)


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
