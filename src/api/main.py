"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routers, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import Depends, FastAPI
from psycopg_pool import ConnectionPool

from src.adapters.repository import (
    InMemoryVerificationRepository,
    PostgresVerificationRepository,
    run_migrations,
)
from src.api.delivery import router as delivery_router
from src.api.dependencies import build_email_sender, get_repository
from src.api.errors import register_exception_handlers
from src.api.v1 import router as v1_router
from src.config.settings import get_settings
from src.domain.ports import VerificationRepository

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Contact Verification API v1 - Request and submit one-time codes",
    },
    {
        "name": "delivery",
        "description": "Delivery transport - Send verification emails and check transport health",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the verification store (connection pool + migrations for postgres)
    - Creates the delivery adapter
    - Closes both on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application...")

    pool = None
    if settings.repository_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            open=True,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.repository = PostgresVerificationRepository(pool)
    else:
        logger.warning("Using in-memory verification store; records are lost on restart")
        app.state.repository = InMemoryVerificationRepository()

    app.state.email_sender = build_email_sender(settings)
    logger.info("Delivery backend: %s", settings.email_backend)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    close = getattr(app.state.email_sender, "close", None)
    if close is not None:
        close()
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="contact-verification",
    description="Contact Verification API - One-time codes for email and phone contacts",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_exception_handlers(app)

app.include_router(v1_router, prefix="/v1")
app.include_router(delivery_router, prefix="/api")


@app.get("/health")
def health_check(
    repository: VerificationRepository = Depends(get_repository),
) -> dict[str, str]:
    """
    Health check endpoint with store validation.

    Returns 200 OK if application and store are healthy.
    A store failure surfaces as 503 via the PersistenceError handler.
    """
    repository.ping()
    return {"status": "healthy", "timestamp": datetime.now(UTC).isoformat()}
