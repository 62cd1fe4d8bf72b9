"""/register route module.

Creates a local account from the email/password form. Registration does not
sign the user in; the flash message tells them to log in.
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


@router.post("", summary="Register a new local account")
async def register_user(
    request: Request,
    payload: Annotated[CredentialsForm, Form()],
    gate: AuthGateDep,
):
    result = await gate.handle_register(
        payload.email, payload.password, get_request_language(request)
    )
    logger.info(
        "Registration attempt finished", success=result.success, error=result.error_code, endpoint="register"
    )
    return redirect_for(result, request.session)
