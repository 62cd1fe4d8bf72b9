"""Application lifecycle management.

This module handles application startup and shutdown events: it checks and
prepares the user store, builds the authentication components once and
attaches them to ``app.state``, and disposes of the engine on shutdown.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from sessionauth.core.config.settings import settings
from sessionauth.core.logging import logger
from sessionauth.infrastructure.database.async_db import (
    AsyncSessionFactory,
    check_database_health,
    create_async_db_and_tables,
    engine,
)
from sessionauth.infrastructure.dependency_injection.auth_dependencies import build_auth_gate
from sessionauth.infrastructure.services import GoogleOAuthClient


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown of application resources.

        Raises:
            RuntimeError: If the database is unavailable during startup
        """
        if not await check_database_health():
            logger.error("database_unavailable_on_startup")
            raise RuntimeError("Database unavailable")
        await create_async_db_and_tables()

        app.state.auth_gate = build_auth_gate(AsyncSessionFactory, settings)
        if settings.google_oauth_enabled:
            app.state.oauth_client = GoogleOAuthClient.from_settings(settings)
        else:
            app.state.oauth_client = None
            logger.warning("google_oauth_disabled", reason="client credentials not configured")

        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        await engine.dispose()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
