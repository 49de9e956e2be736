"""
Habit Tracker Backend — FastAPI Application Factory
====================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       exception handling and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       that owns its own HabitStore and HabitService.
Who:   Called by uvicorn (habit_api.main:app), by the `habit-api` entry point
       and by tests, which build a fresh app per test.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Rate Limit  │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────────┐ ┌──────────────┐  │
    │  │ /habit (CRUD + lifecycle)    │ │ GET /health  │  │
    │  └──────────────────────────────┘ └──────────────┘  │
    │                                                     │
    │  app.state:                                         │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ habit_store ◀── habit_service ◀── routes     │   │
    │  └──────────────────────────────────────────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ HabitError→own status │ Unexpected→500       │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from habit_api import __version__
from habit_api.config import Settings, settings
from habit_api.exceptions import HabitError, ValidationError
from habit_api.middleware.logging import RequestLoggingMiddleware
from habit_api.middleware.rate_limit import RateLimitMiddleware
from habit_api.middleware.request_id import RequestIDLogFilter, RequestIDMiddleware, request_id_var
from habit_api.routes import habits, health
from habit_api.services.habit_service import HabitService
from habit_api.store import HabitStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s

    The request ID comes from RequestIDLogFilter, attached to the handler so
    that records from every logger (ours, uvicorn's, httpx's) get one.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,  # Override any existing logging config
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging and report the effective limits.
    Shutdown: report how many habits are discarded with the process.

    The store and service are NOT created here but in create_app(), so an
    app driven without lifespan events (e.g. httpx's ASGITransport) works.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Habit Tracker Backend %s starting up...", __version__)
    logger.info(
        "Active-habit limit: %d | API prefix: %r",
        app_settings.max_active_habits,
        app_settings.api_prefix or "/",
    )
    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    store: HabitStore = app.state.habit_store
    logger.info("Shutting down; %d in-memory habits will be discarded", store.count())


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    code: str,
    message: str,
    details=None,
    headers=None,
) -> JSONResponse:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "request_id": request_id_var.get("") or None,
        },
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        HabitError (and subclasses) → its own status code and code
        RequestValidationError      → 400 VALIDATION_ERROR (e.g. malformed JSON)
        HTTPException               → its status code (unknown route, bad method)
        Exception (fallback)        → 500 INTERNAL_ERROR, details logged only
    """

    @app.exception_handler(HabitError)
    async def handle_habit_error(request: Request, exc: HabitError):
        """Expected failure: the client can act on the code and details."""
        logger.info("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        body = exc.to_dict()
        return _error_response(exc.status_code, body["code"], body["message"], body.get("details"))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body could not even be parsed; report it like any other validation failure."""
        details = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())) or "body",
                "message": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        return _error_response(400, ValidationError.code, "Validation failed", details)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        return _error_response(
            exc.status_code,
            code,
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        Security: the stack trace is logged server-side ONLY.
        """
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return _error_response(
            500,
            HabitError.code,
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Configuration to use; the module-level `settings`
                      singleton when omitted.

    Returns:
        A FastAPI instance with its own empty HabitStore.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Habit Tracker API",
        description=(
            "Create, edit, archive, restore and delete habits. "
            "Data is kept in memory for the lifetime of the process."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Shared State ──────────────────────────────────────────────────────
    store = HabitStore()
    app.state.settings = app_settings
    app.state.habit_store = store
    app.state.habit_service = HabitService(
        store=store,
        max_active_habits=app_settings.max_active_habits,
        default_user_id=app_settings.default_user_id,
    )
    app.state.started_at = time.time()

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RateLimit → RequestID → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    if app_settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            max_requests=app_settings.rate_limit_requests,
            window=app_settings.rate_limit_window,
        )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(habits.router, prefix=app_settings.api_prefix)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "habit_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `habit_api.main:app` to be importable
app = create_app()
