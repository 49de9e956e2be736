# Middleware package init
"""
Habit Tracker Backend — Middleware Package
===========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Rate Limit first: reject floods before any processing
    2. Request ID: correlation ID for logs and error envelopes
    3. Logging: access line with status and duration
    4. CORS: FastAPI's CORSMiddleware (handles preflight)

The rate limiter runs before the request ID is assigned, so its 429
responses carry a request_id only when the client sent X-Request-ID.
"""
