"""
Barrel + Verse Backend — Access Log Middleware
================================================

What:  One log line per request on the `barrelverse.access` logger.

Logged:     method, path, status, duration, request id, client IP,
            whether a session cookie was presented (not validated here).
Not logged: bodies (passwords live there), cookies, session contents.

Level follows the status: 5xx → ERROR, 4xx → WARNING, else INFO.
/health is skipped; probes would drown everything else.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from barrelverse.middleware.request_id import request_id_var
from barrelverse.security import SESSION_TOKEN_KEY

logger = logging.getLogger("barrelverse.access")

SKIPPED_PATHS = frozenset({"/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Structured access logging for every API request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        has_session = "session" in request.scope and SESSION_TOKEN_KEY in request.session
        rid = request_id_var.get("")

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s%s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            " (session)" if has_session else "",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "has_session": has_session,
            },
        )
        return response
