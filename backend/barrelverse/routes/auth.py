"""
Barrel + Verse Backend — Auth Route Handlers
==============================================

What:  Account registration, login/logout and the current-user endpoint.
How:   Bodies are validated by the Pydantic schemas (400 with field errors on
       failure); the session is injected as a SessionContext.

Every user returned here is a UserResponse: the password hash is not a
field of that schema, so it cannot be serialized by accident.
"""

import logging

from fastapi import APIRouter, Depends

from barrelverse.dependencies import get_session, get_storage, require_user_id
from barrelverse.schemas.common import ErrorResponse, SuccessResponse
from barrelverse.schemas.user import LoginRequest, RegisterRequest, UserResponse
from barrelverse.security import SessionContext
from barrelverse.services.auth_service import auth_service
from barrelverse.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=UserResponse,
    responses={
        400: {"description": "Invalid body or email already registered", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create an account and start a session",
)
async def register(
    payload: RegisterRequest,
    session: SessionContext = Depends(get_session),
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    return await auth_service.register(storage, session, payload)


@router.post(
    "/login",
    response_model=UserResponse,
    responses={
        400: {"description": "Invalid body", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Log in with email and password",
)
async def login(
    payload: LoginRequest,
    session: SessionContext = Depends(get_session),
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    """
    Unknown email and wrong password both answer 401 "Invalid credentials".
    """
    return await auth_service.login(storage, session, payload)


@router.post(
    "/logout",
    response_model=SuccessResponse,
    responses={500: {"description": "Session could not be destroyed", "model": ErrorResponse}},
    summary="End the current session",
)
async def logout(session: SessionContext = Depends(get_session)) -> SuccessResponse:
    await auth_service.logout(session)
    return SuccessResponse()


@router.get(
    "/me",
    response_model=UserResponse,
    responses={
        401: {"description": "No session", "model": ErrorResponse},
        404: {"description": "Session user no longer exists", "model": ErrorResponse},
    },
    summary="Return the logged-in user",
)
async def me(
    user_id: str = Depends(require_user_id),
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    return await auth_service.current_user(storage, user_id)
