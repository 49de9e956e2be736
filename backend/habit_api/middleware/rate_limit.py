"""
Habit Tracker Backend — Rate Limiting Middleware
=================================================

What:  Per-IP sliding window rate limiter.
Why:   Keeps a single misbehaving client from flooding the API.
How:   Tracks request timestamps per IP in memory using a sliding window.
When:  First in the middleware chain (rejects abuse before any processing).

Algorithm: Sliding Window Log
    1. Each IP gets a list of request timestamps
    2. On each request, drop timestamps older than the window
    3. If the remaining count >= limit, reject with 429
    4. Otherwise record the current timestamp and let the request through

Limits are per process, like the habit store itself.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Args:
        max_requests: Requests allowed per IP within one window
        window:       Window length in seconds

    Excluded paths: /health and the API docs are always reachable.

    Response on rate limit:
        HTTP 429 with a Retry-After header and the standard failure envelope
        (code RATE_LIMIT_EXCEEDED).
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    # Purge idle IPs after this many recorded requests
    CLEANUP_EVERY = 1000

    def __init__(self, app, max_requests: int = 300, window: int = 60):
        super().__init__(app)
        self.max_requests = max_requests
        self.window = window
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._since_cleanup = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        # Behind a proxy this is the proxy's IP; configure forwarded headers in uvicorn
        client_ip = request.client.host if request.client else "unknown"

        now = time.time()
        window_start = now - self.window

        # ── Sliding Window: drop expired entries ──────────────────────────
        recent = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = recent

        if len(recent) >= self.max_requests:
            retry_after = int(recent[0] + self.window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(recent),
                self.window,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "error": {
                        "code": "RATE_LIMIT_EXCEEDED",
                        "message": f"Too many requests. Please wait {retry_after} seconds before retrying.",
                        "details": {"retry_after": retry_after},
                    },
                    # RequestIDMiddleware has not run yet at this point
                    "request_id": request.headers.get("X-Request-ID"),
                },
                headers={"Retry-After": str(retry_after)},
            )

        recent.append(now)

        self._since_cleanup += 1
        if self._since_cleanup >= self.CLEANUP_EVERY:
            self._since_cleanup = 0
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Forget IPs with no request inside the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
