"""Middleware configuration for the FastAPI application.

This module handles the configuration and registration of all middleware
components: CORS, the signed cookie session and language handling.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from sessionauth.core.config.settings import Settings, settings as default_settings
from sessionauth.utils.i18n import get_request_language


def configure_middleware(app: FastAPI, settings: Settings = default_settings) -> None:
    """Configure all middleware for the FastAPI application.

    The session cookie is signed with ``SECRET_KEY``; a cookie that fails
    verification is treated as an empty session.

    Args:
        app (FastAPI): The FastAPI application instance
        settings (Settings): Application settings
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE_NAME,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        same_site=settings.SESSION_SAME_SITE,
        https_only=settings.SESSION_HTTPS_ONLY,
    )

    app.middleware("http")(set_language_middleware)


async def set_language_middleware(request: Request, call_next):
    """Resolve the request language and echo it in ``Content-Language``."""
    lang = get_request_language(request)
    request.state.language = lang
    response = await call_next(request)
    response.headers["Content-Language"] = lang
    return response
