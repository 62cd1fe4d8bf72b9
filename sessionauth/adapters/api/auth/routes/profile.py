"""Profile update route: change the signed-in user's email and/or password."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Form, Request

from sessionauth.adapters.api.auth.schemas import ProfileForm
from sessionauth.adapters.api.auth.utils import redirect_for
from sessionauth.infrastructure.dependency_injection.auth_dependencies import AuthGateDep
from sessionauth.utils.i18n import get_request_language

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("", summary="Update the current user's email or password")
async def update_profile(
    request: Request,
    payload: Annotated[ProfileForm, Form()],
    gate: AuthGateDep,
):
    result = await gate.handle_profile_update(
        request.session,
        email=payload.email,
        password=payload.password,
        language=get_request_language(request),
    )
    logger.info("Profile update finished", success=result.success, error=result.error_code, endpoint="profile")
    return redirect_for(result, request.session)
