"""
Barrel + Verse Backend — Dependency Wiring & Access-Control Gates
===================================================================

What:  FastAPI dependencies that hand routes their collaborators, and the
       two guards protected routes declare.

Gates:
    require_user_id — the cookie must name a live stored session, else 401.
                      Does not check that the user still exists.
    require_admin   — require_user_id, plus the id must resolve to a user
                      whose is_admin flag is set, else 403.

Usage:
    router = APIRouter(dependencies=[Depends(require_admin)])

    @router.get("/api/purchases")
    async def list_purchases(user_id: str = Depends(require_user_id)): ...
"""

import logging

from fastapi import Depends, Request

from barrelverse.exceptions import AuthenticationError, AuthorizationError
from barrelverse.schemas.user import User
from barrelverse.security import SessionContext
from barrelverse.storage import Storage

logger = logging.getLogger(__name__)


def get_storage(request: Request) -> Storage:
    """The process-wide Storage installed by create_app()."""
    return request.app.state.storage


def get_session(request: Request, storage: Storage = Depends(get_storage)) -> SessionContext:
    """The caller's session: the cookie's token, resolved against Storage."""
    return SessionContext(request.session, storage, request.app.state.settings.session_max_age)


async def require_user_id(session: SessionContext = Depends(get_session)) -> str:
    """Authenticated gate: returns the session's user id or raises 401."""
    user_id = await session.user_id()
    if user_id is None:
        raise AuthenticationError("Unauthorized")
    return user_id


async def require_admin(
    user_id: str = Depends(require_user_id),
    storage: Storage = Depends(get_storage),
) -> User:
    """Admin gate: returns the admin user, 401 without a session, 403 otherwise."""
    user = await storage.get_user(user_id)
    if user is None or not user.is_admin:
        logger.warning("Admin access denied for user %s", user_id)
        raise AuthorizationError("Forbidden - Admin access required")
    return user
