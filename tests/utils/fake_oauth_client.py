"""Scriptable stand-in for the Google OAuth client.

``authorize_redirect`` stores a state value in the session like Authlib does;
``fetch_profile`` returns whatever profile (or error) the test queued.
"""

from typing import Optional

from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from sessionauth.core.exceptions import ProviderError
from sessionauth.domain.interfaces.oauth import IOAuthClient
from sessionauth.domain.value_objects.oauth_profile import OAuthProfile

AUTHORIZE_URL = "https://accounts.example.test/o/oauth2/auth"


class FakeOAuthClient(IOAuthClient):
    provider = "google"

    def __init__(self):
        self.next_profile: Optional[OAuthProfile] = None
        self.next_error: Optional[ProviderError] = None
        self.redirect_uris = []

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        self.redirect_uris.append(redirect_uri)
        request.session["_state_google_fake"] = {"redirect_uri": redirect_uri}
        return RedirectResponse(f"{AUTHORIZE_URL}?state=fake&redirect_uri={redirect_uri}", status_code=302)

    async def fetch_profile(self, request: Request) -> OAuthProfile:
        request.session.pop("_state_google_fake", None)
        if self.next_error is not None:
            raise self.next_error
        if self.next_profile is None:
            raise ProviderError("No authorization response")
        return self.next_profile
