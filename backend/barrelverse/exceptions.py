"""
Barrel + Verse Backend — Custom Exception Hierarchy
=====================================================

What:  Application-specific exceptions for every error path of the API.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers (registered in main.py) map them to HTTP status
       codes and a JSON body whose `error` field holds the message.
Who:   Raised by services, storage and access-control gates.

Exception Hierarchy:
    BarrelVerseError (base)
    ├── ValidationError       → 400 Bad Request
    ├── ConflictError         → 400 Bad Request (duplicate unique key)
    ├── AuthenticationError   → 401 Unauthorized
    ├── AuthorizationError    → 403 Forbidden
    ├── NotFoundError         → 404 Not Found
    ├── SessionError          → 500 Internal Server Error
    ├── DatabaseError         → 500 Internal Server Error (detail withheld)
    └── ConfigurationError    → raised at startup, never reaches a client

Storage lookups never raise for a missing row; they return None and the
service layer turns that into NotFoundError.
"""

from typing import Any, Dict, Optional


class BarrelVerseError(Exception):
    """
    Base exception for all Barrel + Verse application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BarrelVerseError):
    """
    Raised when client input fails a business rule the schemas cannot express.

    HTTP: 400 Bad Request. Schema-level failures (missing field, bad enum,
    malformed price) come from FastAPI's RequestValidationError instead and
    are rendered with the same status.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(BarrelVerseError):
    """
    Raised when a create would duplicate a unique key (user email).

    HTTP: 400 Bad Request, matching the public API contract.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(BarrelVerseError):
    """
    Raised when a request carries no authenticated session, or when login
    credentials are rejected.

    HTTP: 401 Unauthorized.

    Login uses the same "Invalid credentials" message for an unknown email
    and for a wrong password, so responses do not reveal which accounts exist.
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(BarrelVerseError):
    """
    Raised when an authenticated session lacks the required privilege.

    HTTP: 403 Forbidden (distinct from 401: the caller IS identified).
    """

    def __init__(
        self,
        message: str = "Forbidden - Admin access required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BarrelVerseError):
    """
    Raised when a requested resource does not exist or is hidden by a
    visibility rule (unpublished item on a public route, another user's
    purchase).

    HTTP: 404 Not Found. The message never includes the id that was asked for.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource = resource


class SessionError(BarrelVerseError):
    """
    Raised when the session store fails to establish or destroy a session.

    HTTP: 500. Logout failures are reported, never treated as success.
    """

    def __init__(
        self,
        message: str = "Session operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BarrelVerseError):
    """
    Raised when a datastore operation fails unexpectedly.

    HTTP: 500. The client always receives a generic message; the SQL error
    class and operation name are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(BarrelVerseError):
    """
    Raised at startup when the configuration cannot produce a safe process,
    e.g. production mode without DATABASE_URL.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
