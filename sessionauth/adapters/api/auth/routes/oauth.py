"""OAuth endpoints.

``/auth/oauth/start`` redirects the browser to the provider;
``/auth/oauth/callback`` completes the handshake through the OAuth client,
then hands the resulting profile to the auth gate. Handshake failures and
identity-resolution failures both end on the landing page with a flash
message; provider error details are only logged.
"""

import structlog
from fastapi import APIRouter, Request

from sessionauth.adapters.api.auth.utils import redirect_for
from sessionauth.core.config.settings import settings
from sessionauth.core.exceptions import ProviderError
from sessionauth.domain.services.auth import Flash, GateResult
from sessionauth.infrastructure.dependency_injection.auth_dependencies import (
    AuthGateDep,
    OAuthClientDep,
)
from sessionauth.utils.i18n import get_request_language, get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()


def _not_configured(request: Request):
    language = get_request_language(request)
    result = GateResult(
        success=False,
        flash=Flash("error", get_translated_message("oauth_not_configured", language)),
    )
    return redirect_for(result, request.session)


@router.get("/start", summary="Start the OAuth sign-in flow")
async def oauth_start(request: Request, gate: AuthGateDep, oauth_client: OAuthClientDep):
    if oauth_client is None:
        logger.warning("OAuth start requested but no provider is configured")
        return _not_configured(request)

    redirect_uri = settings.GOOGLE_REDIRECT_URI or str(request.url_for("oauth_callback"))
    try:
        return await oauth_client.authorize_redirect(request, redirect_uri)
    except ProviderError as e:
        return redirect_for(gate.handle_oauth_failure(get_request_language(request), e), request.session)


@router.get("/callback", name="oauth_callback", summary="Complete the OAuth sign-in flow")
async def oauth_callback(request: Request, gate: AuthGateDep, oauth_client: OAuthClientDep):
    language = get_request_language(request)
    if oauth_client is None:
        return _not_configured(request)

    try:
        profile = await oauth_client.fetch_profile(request)
    except ProviderError as e:
        logger.warning("OAuth handshake failed", provider=oauth_client.provider, code=e.code)
        return redirect_for(gate.handle_oauth_failure(language, e), request.session)

    result = await gate.handle_oauth_callback(profile, request.session, language)
    logger.info(
        "OAuth callback finished",
        provider=profile.provider,
        success=result.success,
        error=result.error_code,
        endpoint="oauth_callback",
    )
    return redirect_for(result, request.session)
