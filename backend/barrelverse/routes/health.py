"""
Barrel + Verse Backend — Health Check Route
=============================================

What:  Liveness/readiness probe for Docker and load balancers.
How:   Asks the active Storage whether it can serve requests
       (SELECT 1 for the database, always true for memory).

    healthy   → 200
    unhealthy → 503 (storage unreachable; stop routing traffic here)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from barrelverse import __version__
from barrelverse.dependencies import get_storage
from barrelverse.schemas.common import HealthResponse
from barrelverse.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Storage unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(storage: Storage = Depends(get_storage)):
    reachable = await storage.health_check()
    body = HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        storage=storage.kind,
        storage_status="connected" if reachable else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not reachable:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
