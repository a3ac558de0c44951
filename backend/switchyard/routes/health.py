"""
Switchyard — Health Check Route
================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Reports the version, the size of the emitter stack and uptime. A
       service without emitters cannot send anything but its own errors,
       so an empty stack reports "degraded".
"""

import time

from fastapi import APIRouter, Request

from switchyard import __version__
from switchyard.schemas.health import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    emitters = len(request.app.state.emitters)
    return HealthResponse(
        status="ok" if emitters else "degraded",
        version=__version__,
        emitters=emitters,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
