"""
Habit Tracker Backend — Request Logging Middleware
===================================================

What:  One access log line per HTTP request, with status and duration.
Why:   Enables monitoring and debugging without uvicorn's access log, which
       knows nothing about request IDs.
How:   Measures time around call_next and logs on completion.
When:  Runs inside RequestIDMiddleware, so the request ID is available.

Log line:
    2026-01-15T12:00:00 [INFO] habit_api.access [a1b2c3d4]: POST /habit 201 3.2ms from 127.0.0.1

Level by status:
    5xx → ERROR, 4xx → WARNING (rejected business rules land here), else INFO

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("habit_api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, duration and client IP for each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Health checks run every few seconds; logging them buries real traffic
        if request.url.path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            client_ip,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
