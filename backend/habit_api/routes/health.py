"""
Habit Tracker Backend — Health Check Route
===========================================

What:  Health check endpoint for monitoring and load balancer probes.
Why:   Load balancers and container runtimes need a cheap "can this process
       serve requests" signal.
How:   Reads the store counters under its lock and reports them with uptime.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

There is no external dependency to probe: the store lives in this process.
The check is still useful because it exercises the store lock, so a
deadlocked store shows up as a hanging health check.
"""

import logging
import time

from fastapi import APIRouter, Depends, Request

from habit_api import __version__
from habit_api.schemas.habit import HealthResponse
from habit_api.services.habit_service import HabitService, get_habit_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns service status, version, habit counters and uptime.",
)
async def health_check(
    request: Request,
    service: HabitService = Depends(get_habit_service),
) -> HealthResponse:
    store = service.store
    with store.transaction():
        total = store.count()
        active = store.count_active()

    # Set by create_app(); missing only if someone mounts this router elsewhere
    started_at = getattr(request.app.state, "started_at", time.time())

    return HealthResponse(
        status="healthy",
        version=__version__,
        habits_total=total,
        habits_active=active,
        max_active_habits=service.max_active_habits,
        uptime_seconds=round(time.time() - started_at, 2),
    )
