"""
Habit Tracker Backend — Request ID Middleware
==============================================

What:  Assigns an ID to each incoming request and returns it in X-Request-ID.
Why:   Every log line and every error envelope of one request share the same
       ID, so a client can quote it and the matching log lines can be found.
How:   Stores the ID in a ContextVar; RequestIDLogFilter copies it into
       every log record so the log format can print %(request_id)s.
Who:   Applied to every request via Starlette middleware.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ── Context Variable ──────────────────────────────────────────────────────
# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDLogFilter(logging.Filter):
    """Adds `request_id` to every record ('-' outside of a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("") or "-"
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Reuse the client's X-Request-ID header if present
        2. Otherwise generate a short UUID
        3. Store it in the ContextVar and on request.state
        4. Echo it in the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 chars is plenty to correlate log lines and reads well in logs
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        # Not reset afterwards: the outermost 500 handler still needs it
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        return response
