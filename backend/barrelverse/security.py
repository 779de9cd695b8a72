"""
Barrel + Verse Backend — Password Hashing & Session Context
=============================================================

What:  The two primitives the access-control layer is built on.

Password hashing:
    passlib CryptContext with the argon2 scheme: salted, memory-hard, and
    verified with the library's constant-time comparison. Hashing is
    CPU-bound, so both calls run in Starlette's threadpool and the event
    loop only suspends at that boundary. Plaintext is never logged.

Session context:
    The signed cookie (Starlette SessionMiddleware, itsdangerous) carries a
    random token and nothing else. The token names a SessionRecord in
    Storage holding the user id and expiry; logout deletes that record, so a
    replayed copy of the cookie no longer authenticates anyone. Handlers
    never touch request.session directly; they receive a SessionContext via
    dependency injection.
"""

import logging
from datetime import timedelta
from typing import Any, MutableMapping, Optional

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from barrelverse.exceptions import SessionError
from barrelverse.models._columns import utcnow
from barrelverse.storage import Storage

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

# The only key ever written to the signed session cookie
SESSION_TOKEN_KEY = "sid"

# Verified against when a login names an unknown email, so both failure
# paths cost one argon2 verification.
_dummy_hash: Optional[str] = None


async def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh random salt."""
    return await run_in_threadpool(pwd_context.hash, password)


async def verify_password(password: str, hashed: str) -> bool:
    """Constant-time check of `password` against a stored hash."""
    return await run_in_threadpool(pwd_context.verify, password, hashed)


async def burn_verification(password: str) -> None:
    """Spend one verification's worth of time without a real account."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = await hash_password("barrelverse-placeholder-password")
    await verify_password(password, _dummy_hash)


class SessionContext:
    """
    The caller's session, as seen by handlers and gates.

    `cookie` is the signed cookie's mapping (request.session, or a dict in
    tests) and holds nothing but the session token. The token resolves to a
    SessionRecord in Storage; without that record the cookie means nothing.
    """

    def __init__(self, cookie: MutableMapping[str, Any], storage: Storage, max_age: int) -> None:
        self._cookie = cookie
        self._storage = storage
        self._max_age = max_age
        self._resolved = False
        self._user_id: Optional[str] = None

    @property
    def token(self) -> Optional[str]:
        value = self._cookie.get(SESSION_TOKEN_KEY)
        return value if isinstance(value, str) and value else None

    async def user_id(self) -> Optional[str]:
        """The logged-in user's id; None without a live server-side record."""
        if self._resolved:
            return self._user_id
        token = self.token
        if token is not None:
            record = await self._storage.get_session_record(token)
            if record is not None and not record.is_expired(utcnow()):
                self._user_id = record.user_id
        self._resolved = True
        return self._user_id

    async def establish(self, user_id: str) -> None:
        """Start a fresh session for `user_id`; any previous one is deleted."""
        try:
            previous = self.token
            if previous is not None:
                await self._storage.delete_session(previous)
            record = await self._storage.create_session(
                user_id, utcnow() + timedelta(seconds=self._max_age)
            )
            self._cookie.clear()
            self._cookie[SESSION_TOKEN_KEY] = record.id
        except Exception as e:
            logger.error("Failed to establish session: %s", str(e))
            raise SessionError("Failed to start session") from e
        self._user_id = user_id
        self._resolved = True

    async def destroy(self) -> bool:
        """
        End the session: delete the stored record, then drop the cookie.

        Returns:
            True when a stored session was deleted.

        Raises:
            SessionError: the record could not be deleted. The cookie is
                          left in place, so the failure is never mistaken
                          for a successful logout.
        """
        try:
            token = self.token
            removed = await self._storage.delete_session(token) if token else False
            self._cookie.clear()
        except Exception as e:
            logger.error("Failed to destroy session: %s", str(e))
            raise SessionError("Logout failed") from e
        self._user_id = None
        self._resolved = True
        return removed
