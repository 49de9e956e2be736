"""
Habit Tracker Backend — Application Configuration
==================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, middleware and entry point.
When:  Loaded once at module import time. Tests build their own instances
       and pass them to `create_app()`.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


# Owner id stamped on every habit until real users exist
DEFAULT_USER_ID = "00000000-0000-0000-0000-000000000000"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development.
    Attributes are grouped by concern for readability.
    """

    # ── Habit Rules ───────────────────────────────────────────────────────
    # What: Maximum number of habits that may be Active at the same time
    # Archived and inactive habits never count toward this limit
    max_active_habits: int = Field(default=20, ge=1, le=1000)

    # What: Owner id assigned to new habits (no multi-tenancy yet)
    default_user_id: str = Field(default=DEFAULT_USER_ID)

    # ── HTTP ──────────────────────────────────────────────────────────────
    # What: Prefix for the habit routes. Empty mounts them at /habit.
    api_prefix: str = Field(default="")

    # What: Allowed origins for cross-origin requests
    # Format: Comma-separated URLs (split by cors_origins_list)
    cors_origins: str = Field(default="http://localhost:5173")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalizes the prefix to '' or '/something' without a trailing slash."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # What: Controls verbosity of application logging
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-IP sliding window rate limit
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_requests: int = Field(default=300, ge=1, le=100000)
    rate_limit_window: int = Field(default=60, ge=1, le=86400)  # seconds

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # MAX_ACTIVE_HABITS and max_active_habits both work
    }


# Singleton instance used by the module-level app and the entry point
settings = Settings()
