"""
Shared pytest configuration for the tennis tracker tests.

Uses a throwaway SQLite file per test so runs never touch a real database.

SAFETY: TEST_DATABASE_URL, when set, must name a database containing
"test"; anything else is refused to avoid wiping development data.
"""

import os

# Must be set before the app (and its rate limiter) is imported
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from tennis_tracker.database.db import Base, Database
from tennis_tracker.api.auth_dependencies import get_session_data
from tennis_tracker.models.schemas import OAuthTokens, SessionData


def _resolve_test_database_url(tmp_path) -> str:
    """Build the test database URL with safety checks.

    Raises ``RuntimeError`` if TEST_DATABASE_URL is set to a database whose
    name does not contain "test".
    """
    url = os.getenv("TEST_DATABASE_URL")
    if not url:
        return f"sqlite+aiosqlite:///{tmp_path / 'tennis_test.db'}"

    db_name = url.rsplit("/", 1)[-1].split("?")[0]
    if "test" not in db_name.lower():
        raise RuntimeError(
            f"SAFETY: Refusing to run tests against database '{db_name}'. "
            f"The database name must contain 'test'."
        )
    return url


@pytest.fixture
def test_database_url(tmp_path) -> str:
    return _resolve_test_database_url(tmp_path)


@pytest_asyncio.fixture
async def test_database(test_database_url):
    """Database with all tables created, disposed after the test."""
    database = Database(test_database_url, echo=False, poolclass=NullPool)
    await database.init_database()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def db_session(test_database):
    """Session on the test database."""
    async with test_database.session() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


# ============================================================================
# API fixtures
# ============================================================================


@pytest.fixture
def sync_database_url(test_database_url) -> str:
    return test_database_url.replace("+aiosqlite", "")


@pytest.fixture
def api_database(test_database_url, sync_database_url):
    """
    Database for route tests.

    Tables are created with a sync engine because TestClient runs the app on
    its own event loop.
    """
    sync_engine = create_engine(sync_database_url)
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return Database(test_database_url, echo=False, poolclass=NullPool)


@pytest.fixture
def app(api_database):
    from tennis_tracker.api.main import create_app

    application = create_app(api_database)
    yield application
    application.dependency_overrides.clear()


def login_as(app, user_id="user-a", tokens=True, email=None, name=None):
    """Make every request on ``app`` run as the given session."""
    session_data = SessionData(
        user_id=user_id,
        user_email=email or f"{user_id}@example.com",
        user_name=name or "Test User",
        tokens=OAuthTokens(access_token="access", refresh_token="refresh") if tokens else None,
    )
    app.dependency_overrides[get_session_data] = lambda: session_data
    return session_data


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_client(app):
    """Client signed in as user-a with calendar tokens."""
    login_as(app, "user-a")
    return TestClient(app)
