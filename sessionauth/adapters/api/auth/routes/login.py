"""Login endpoint.

Accepts the email/password form, delegates to the auth gate and redirects
back to the landing page. Success and failure redirect to the same place;
a failure carries a generic "invalid email or password" flash that never
says which field was wrong.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Form, Request

from sessionauth.adapters.api.auth.schemas import CredentialsForm
from sessionauth.adapters.api.auth.utils import redirect_for
from sessionauth.infrastructure.dependency_injection.auth_dependencies import AuthGateDep
from sessionauth.utils.i18n import get_request_language

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    summary="Sign in with email and password",
    response_description="Redirect to the landing page",
)
async def login_user(
    request: Request,
    payload: Annotated[CredentialsForm, Form()],
    gate: AuthGateDep,
):
    language = get_request_language(request)
    result = await gate.handle_login(payload.email, payload.password, request.session, language)
    logger.info("Login attempt finished", success=result.success, error=result.error_code, endpoint="login")
    return redirect_for(result, request.session)
