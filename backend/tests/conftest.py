"""
Habit Tracker Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (fresh store, service, app, clients).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── store:            Empty HabitStore
    ├── service:          HabitService around `store` (limit 20)
    ├── habit_payload:    Factory for valid create payloads
    ├── test_settings:    Settings with rate limiting off and quiet logs
    ├── app:              create_app(test_settings), its own empty store
    ├── test_client:      HTTPX AsyncClient bound to `app`
    └── sync_client:      FastAPI TestClient (an httpx.Client) bound to `app`
"""

import os

# Override settings for testing BEFORE any package imports
# Why: The module-level app in habit_api.main is built at import time
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from habit_api.config import Settings
from habit_api.main import create_app
from habit_api.services.habit_service import HabitService
from habit_api.store import HabitStore


# ══════════════════════════════════════════════════════════════════════════
# Domain Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def store():
    return HabitStore()


@pytest.fixture
def service(store):
    """A service with the default 20-habit active limit."""
    return HabitService(store=store, max_active_habits=20)


@pytest.fixture
def habit_payload():
    """
    Factory for valid create payloads.

    Usage:
        body = habit_payload(nome="Correr", categoria="Fitness")
    """
    def _make(**overrides):
        payload = {
            "nome": "Meditar",
            "descricao": None,
            "categoria": "Bem-estar",
            "icone": "sparkles",
            "fuso_horario": "America/Sao_Paulo",
        }
        payload.update(overrides)
        return payload
    return _make


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings():
    return Settings(rate_limit_enabled=False, log_level="WARNING")


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to `app` through ASGITransport.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/habit")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sync_client(app):
    """Synchronous httpx client for HabitClient tests (no lifespan events)."""
    client = TestClient(app)
    yield client
    client.close()
