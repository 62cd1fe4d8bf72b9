"""OAuth client port.

The OAuth2 wire protocol (authorization redirect, state validation, code
exchange, userinfo fetch) is performed by an infrastructure adapter. The
domain only consumes the resulting ``OAuthProfile``.
"""

from abc import ABC, abstractmethod

from starlette.requests import Request
from starlette.responses import Response

from sessionauth.domain.value_objects.oauth_profile import OAuthProfile


class IOAuthClient(ABC):
    """Interface for the provider handshake."""

    provider: str

    @abstractmethod
    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        """Return the redirect response that starts the authorization flow."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_profile(self, request: Request) -> OAuthProfile:
        """Complete the callback: exchange the code and return the verified profile.

        Raises:
            ProviderError: If the handshake or the userinfo fetch failed.
        """
        raise NotImplementedError
