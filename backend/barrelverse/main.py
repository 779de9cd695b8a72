"""
Barrel + Verse Backend — FastAPI Application Factory
======================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() validates configuration, selects the Storage backend,
       registers middleware, exception handlers and routers.
Who:   uvicorn (`uvicorn barrelverse.main:app`) and the test suite, which
       calls create_app(storage=MemoryStorage()) for an isolated app.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: RequestID → Session → AccessLog → CORS │
    │                                                     │
    │  Routes:                                            │
    │   /api/auth/*        public / authenticated         │
    │   /api/courses*      public (published only)        │
    │   /api/experiences*  public (published only)        │
    │   /api/admin/*       admin gate                     │
    │   /api/purchases*    authenticated gate             │
    │   /health                                           │
    │                                                     │
    │  app.state.storage: MemoryStorage | DatabaseStorage │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Factory time: validate config (production without DATABASE_URL fails
                  here, before the server binds), build Storage.
    Startup:      configure logging, log the active backend.
    Shutdown:     Storage.close() releases database connections.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from barrelverse import __version__
from barrelverse.config import Settings, settings
from barrelverse.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BarrelVerseError,
    ConfigurationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    SessionError,
    ValidationError,
)
from barrelverse.middleware.logging import RequestLoggingMiddleware
from barrelverse.middleware.request_id import RequestIDMiddleware, request_id_var
from barrelverse.routes import admin, auth, courses, experiences, health, purchases
from barrelverse.storage import Storage, create_storage

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure the root logger once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout
    (container runtimes collect stdout). Chatty third-party loggers are
    raised to WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Barrel + Verse backend %s starting (%s)", __version__, app_settings.environment)
    logger.info("Storage backend: %s", app.state.storage.kind)
    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Barrel + Verse backend shutting down...")
    await app.state.storage.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, error, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "request_id": request_id_var.get("")},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every error path to a JSON body with an `error` field.

    Handler hierarchy:
        RequestValidationError  → 400, list of {field, message, type}
        ValidationError         → 400
        ConflictError           → 400
        AuthenticationError     → 401
        AuthorizationError      → 403
        NotFoundError           → 404
        StarletteHTTPException  → its own status (unknown route, 405, ...)
        SessionError            → 500, its message ("Logout failed")
        DatabaseError           → 500, generic message
        BarrelVerseError (base) → 500, generic message
        Exception (fallback)    → 500, generic message

    Internal details (SQL errors, stack traces) are logged server-side only.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        issues = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body",
                "message": err.get("msg", "Invalid value"),
                "type": err.get("type", "value_error"),
            }
            for err in exc.errors()
        ]
        logger.info("[%s] Request validation failed on %s: %d issue(s)",
                    request_id_var.get(""), request.url.path, len(issues))
        return _error(400, issues)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error(400, exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error(400, exc.message)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication(request: Request, exc: AuthenticationError):
        return _error(401, exc.message)

    @app.exception_handler(AuthorizationError)
    async def handle_authorization(request: Request, exc: AuthorizationError):
        return _error(403, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(SessionError)
    async def handle_session_error(request: Request, exc: SessionError):
        logger.error("[%s] Session error: %s", request_id_var.get(""), exc.message)
        return _error(500, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error(500, GENERIC_SERVER_ERROR)

    @app.exception_handler(BarrelVerseError)
    async def handle_app_error(request: Request, exc: BarrelVerseError):
        logger.error("[%s] Unhandled application error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error(500, GENERIC_SERVER_ERROR)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error(500, GENERIC_SERVER_ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    storage: Optional[Storage] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        storage: Storage to serve from. Defaults to create_storage(settings);
                 tests pass a fresh MemoryStorage.
        app_settings: Settings override (defaults to the module singleton).

    Raises:
        ConfigurationError: production mode without DATABASE_URL, or with
                            the development session secret.
    """
    app_settings = app_settings or settings
    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise ConfigurationError(str(e)) from e

    app = FastAPI(
        title="Barrel + Verse API",
        description="Accounts, wine courses, experiences and purchases for Barrel + Verse.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.storage = storage if storage is not None else create_storage(app_settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Session → AccessLog → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,  # session cookie
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.session_secret,
        session_cookie=app_settings.session_cookie_name,
        max_age=app_settings.session_max_age,
        same_site="lax",
        https_only=app_settings.is_production,
    )
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(courses.router)
    app.include_router(experiences.router)
    app.include_router(admin.router)
    app.include_router(purchases.router)
    app.include_router(health.router)

    return app


# uvicorn entry point: `uvicorn barrelverse.main:app`
app = create_app()
