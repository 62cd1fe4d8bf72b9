"""Google OAuth2 / OpenID Connect client built on Authlib's Starlette integration.

This adapter owns the wire protocol: the authorization redirect, the state
check (Authlib keeps the state in the request session), the code exchange and
the userinfo fetch. It hands the domain an ``OAuthProfile`` and nothing else.
"""

from typing import Any, Dict

import httpx
from authlib.integrations.starlette_client import OAuth, OAuthError
from starlette.requests import Request
from starlette.responses import Response
from structlog import get_logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from sessionauth.core.config.settings import Settings
from sessionauth.core.exceptions import ProviderError
from sessionauth.domain.interfaces.oauth import IOAuthClient
from sessionauth.domain.value_objects.oauth_profile import OAuthProfile

logger = get_logger(__name__)

GOOGLE_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"


class GoogleOAuthClient(IOAuthClient):
    """Authlib-backed Google OAuth2 client.

    Attributes:
        oauth (OAuth): Authlib registry holding the ``google`` client.
    """

    provider = "google"

    def __init__(self, client_id: str, client_secret: str, scope: str = "openid email profile"):
        self.oauth = OAuth()
        self.oauth.register(
            name=self.provider,
            client_id=client_id,
            client_secret=client_secret,
            server_metadata_url=GOOGLE_METADATA_URL,
            client_kwargs={"scope": scope},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleOAuthClient":
        return cls(
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET.get_secret_value(),
            scope=settings.GOOGLE_SCOPE,
        )

    @property
    def client(self):
        return self.oauth.create_client(self.provider)

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        try:
            return await self.client.authorize_redirect(request, redirect_uri)
        except (OAuthError, httpx.HTTPError) as e:
            logger.error("OAuth authorization redirect failed", provider=self.provider, error_type=type(e).__name__)
            raise ProviderError("Could not start the OAuth flow") from e

    async def fetch_profile(self, request: Request) -> OAuthProfile:
        try:
            token = await self.client.authorize_access_token(request)
            userinfo = token.get("userinfo") or await self._fetch_user_info(token)
        except OAuthError as e:
            logger.warning(
                "OAuth callback rejected by provider",
                provider=self.provider,
                error=getattr(e, "error", None),
            )
            raise ProviderError("OAuth handshake failed") from e
        except httpx.HTTPError as e:
            logger.error("OAuth provider unreachable", provider=self.provider, error_type=type(e).__name__)
            raise ProviderError("OAuth provider unreachable") from e

        return OAuthProfile.from_provider_payload(self.provider, userinfo, token)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _fetch_user_info(self, token: Dict[str, Any]) -> Dict[str, Any]:
        """Fetch user info from the provider, retrying transient network errors."""
        return dict(await self.client.userinfo(token=token))
