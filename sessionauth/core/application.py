"""Application factory for creating and configuring the FastAPI application.

This module provides a factory function to create a properly configured FastAPI application
with all necessary middleware, exception handlers, and routers registered.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from sessionauth.adapters.api import api_router
from sessionauth.core.config.settings import settings
from sessionauth.core.handlers import register_exception_handlers
from sessionauth.core.lifecycle import create_lifespan_manager
from sessionauth.core.middleware import configure_middleware


def create_application() -> FastAPI:
    """Create and configure the FastAPI application.

    The authentication components are attached to ``app.state`` by the
    lifespan manager; tests that skip the lifespan set them directly.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Session-based authentication with local credentials and Google OAuth.",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
    )

    configure_middleware(app)
    register_exception_handlers(app)
    app.include_router(api_router)

    return app
