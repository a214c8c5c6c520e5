"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.adapters.smtp.background import BackgroundEmailSender
from src.adapters.smtp.console import ConsoleEmailSender
from src.api.errors import install_error_handling
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "auth",
        "description": "Registration, email verification, login and profile",
    },
    {
        "name": "playlists",
        "description": "Playlists scoped to the caller's role",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Configures logging
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Starts the background email sender
    - Closes the sender and the pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store pool and sender in app state for dependency injection
    app.state.pool = pool
    email_sender = BackgroundEmailSender(ConsoleEmailSender(), max_workers=settings.email_workers)
    app.state.email_sender = email_sender

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    email_sender.shutdown(wait=True)
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="mulo-identity",
    description="Identity & Access API - Registration, email verification, "
    "session tokens and role-scoped resource access",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

install_error_handling(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
