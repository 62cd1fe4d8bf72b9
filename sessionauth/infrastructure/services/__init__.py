"""External service adapters."""

from .oauth import GoogleOAuthClient

__all__ = ["GoogleOAuthClient"]
