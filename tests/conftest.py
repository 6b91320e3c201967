"""
This file contains shared fixtures and configuration for the test suite.

Pytest will automatically discover and use the fixtures defined in this file.

The application is pointed at a throwaway SQLite database (via aiosqlite)
before any app module is imported. Every test starts from freshly created
tables and a clock frozen at noon UTC on FROZEN_NOW's date.
"""

import asyncio
import os
import tempfile
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path

_TEST_DIR = Path(tempfile.mkdtemp(prefix="daily_tasks_tests_"))
os.environ["DAILY_TASKS_DATABASE_URL"] = (
    f"sqlite+aiosqlite:///{(_TEST_DIR / 'test.db').as_posix()}"
)
os.environ["LOG_DIR"] = str(_TEST_DIR / "logs")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_TIMEZONE"] = "UTC"

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.db import reset_db  # noqa: E402
from app.utils.clock import FixedClock, get_clock  # noqa: E402

FROZEN_NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def fresh_database() -> None:
    """Drop and recreate all tables before each test."""
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(reset_db())
    finally:
        loop.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(FROZEN_NOW, timezone="UTC")


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """
    Create a new application instance for the test session.
    """
    from main import create_app

    return create_app()


@pytest.fixture
def client(app: FastAPI, clock: FixedClock) -> Generator[TestClient, None, None]:
    """
    Test client whose requests all see the frozen clock.
    The TestClient handles the application's lifespan events (startup/shutdown).
    """
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client: TestClient):
    """Register a user through the API and return (token, user payload)."""

    def _register(
        username: str, email: str | None = None, password: str = "secret1"
    ) -> tuple[str, dict]:
        response = client.post(
            "/api/v1/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["user"]

    return _register
