from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into JSON responses. Only the page-view and JSON endpoints
(``/``, ``/me``) can raise into these handlers; the form endpoints go
through the auth gate, which turns failures into flash messages.

Response bodies carry a translated, generic ``detail`` and the error
``code``. The exception message itself is logged, never returned.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from sessionauth.core.exceptions import (
    AuthenticationError,
    SessionAuthError,
    StoreUnavailableError,
)
from sessionauth.utils.i18n import get_request_language, get_translated_message

__all__ = [
    "authentication_error_handler",
    "store_unavailable_error_handler",
    "session_auth_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _error_response(request: Request, status_code: int, exc: SessionAuthError, message_key: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": get_translated_message(message_key, get_request_language(request)),
            "code": exc.code,
        },
    )


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles `AuthenticationError`, returning a `401 Unauthorized`.

    Raised by the ``CurrentUser`` guard for anonymous callers.

    Args:
        request: The incoming `Request` object.
        exc: The `AuthenticationError` instance.

    Returns:
        A `JSONResponse` with a 401 status code and error detail.
    """
    logger.warning(
        "Authentication failure",
        error=exc.code,
        client_ip=request.client.host if request.client else None,
        path=request.url.path,
    )
    return _error_response(request, status.HTTP_401_UNAUTHORIZED, exc, "login_required")


async def store_unavailable_error_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    """Handles `StoreUnavailableError`, returning a `503 Service Unavailable`.

    The underlying driver error was already logged by the repository.
    """
    logger.error("User store unavailable", path=request.url.path)
    return _error_response(
        request, status.HTTP_503_SERVICE_UNAVAILABLE, exc, "service_temporarily_unavailable"
    )


async def session_auth_error_handler(request: Request, exc: SessionAuthError) -> JSONResponse:
    """Fallback for any other application error, returning a `500`."""
    logger.error("Unhandled application error", error=exc.code, message=exc.message, path=request.url.path)
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "service_temporarily_unavailable"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Starlette picks the handler registered for the closest class in the
    exception's MRO, so subclasses fall back to their parent's handler.
    """
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_error_handler)
    app.add_exception_handler(SessionAuthError, session_auth_error_handler)
