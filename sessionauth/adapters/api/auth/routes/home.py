"""Landing page data and the protected ``/me`` endpoint.

Rendering is left to the client: ``/`` returns the signed-in user (or null)
together with the flash messages queued by the previous redirect.
"""

import structlog
from fastapi import APIRouter, Request

from sessionauth.adapters.api.auth.schemas import HomeResponse, UserOut
from sessionauth.adapters.api.auth.utils import pop_flashes
from sessionauth.core.dependencies.auth import CurrentUser, OptionalUser

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/", response_model=HomeResponse, summary="Current user and pending messages")
async def home(request: Request, user: OptionalUser) -> HomeResponse:
    flashes = pop_flashes(request.session)
    return HomeResponse(
        user=UserOut.from_entity(user) if user else None,
        errors=flashes.get("error", []),
        info=flashes.get("info", []),
    )


@router.get("/me", response_model=UserOut, summary="The signed-in user")
async def current_user(user: CurrentUser) -> UserOut:
    return UserOut.from_entity(user)
