"""
Tennis Tracker API Server

FastAPI server for scheduling tennis matches, recording scores and reporting
statistics, with Google sign-in and Calendar sync.
"""

from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.middleware.sessions import SessionMiddleware
import logging
import os
import uvicorn
from slowapi import _rate_limit_exceeded_handler  # type: ignore
from slowapi.errors import RateLimitExceeded  # type: ignore

from tennis_tracker.api.routes import router, limiter as routes_limiter
from tennis_tracker.database.db import Database
from tennis_tracker.alembic.env import run_migrations_online_programmatic
from tennis_tracker.services import settings_service

# Set up logging
# Allow log level to be configured via environment variable (default: INFO)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, log_level, logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events."""
    # Startup
    logger.info("Starting up Tennis Tracker API...")
    database: Database = app.state.database

    # Run database migrations (also upgrades legacy single-user databases)
    try:
        logger.info("Running database migrations...")
        await run_migrations_online_programmatic(database.url)
        logger.info("✓ Database migrations completed")
    except Exception as e:
        logger.error(f"Database migration failed: {e}", exc_info=True)
        if settings_service.is_production():
            raise

    # Create any tables the migrations did not
    try:
        await database.init_database()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield  # App is running

    # Shutdown
    logger.info("Shutting down Tennis Tracker API...")
    try:
        await database.dispose()
        logger.info("✓ Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {e}", exc_info=True)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        database: Database to use; defaults to one built from DATABASE_URL
    """
    app = FastAPI(
        title="Tennis Tracker API",
        description="API for scheduling tennis matches, recording scores and tracking statistics",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.database = database or Database()

    # Setup rate limiter
    app.state.limiter = routes_limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Signed-cookie sessions
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings_service.get_session_secret(),
        session_cookie="session",
        max_age=settings_service.get_session_max_age(),
        same_site="none" if settings_service.get_session_https_only() else "lax",
        https_only=settings_service.get_session_https_only(),
    )

    # Add CORS middleware - origins configured via ALLOWED_ORIGINS env var
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings_service.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(router)

    @app.get("/health", response_class=PlainTextResponse)
    async def health():
        """Liveness check."""
        return "OK"

    return app


app = create_app()


def run():
    """Serve the app with uvicorn on PORT (default 3000)."""
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))


if __name__ == "__main__":
    run()
