"""
Inkpost Backend — Health Check Route
======================================

What:  Liveness/readiness probe for load balancers and container health checks.
How:   Runs `SELECT 1` through the application's Database handle.

    healthy:   database reachable   (HTTP 200)
    unhealthy: database unreachable (HTTP 503)
"""

import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from inkpost import __version__
from inkpost.database import Database, get_database
from inkpost.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(database: Database = Depends(get_database)):
    connected = await database.ping()

    body = HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not connected:
        return JSONResponse(status_code=503, content=body.model_dump(by_alias=True))
    return body
