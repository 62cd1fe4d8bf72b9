import structlog
from fastapi import APIRouter, Request

from sessionauth.adapters.api.auth.utils import redirect_for
from sessionauth.infrastructure.dependency_injection.auth_dependencies import AuthGateDep

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("", summary="Sign out and clear the session")
async def logout_user(request: Request, gate: AuthGateDep):
    result = gate.handle_logout(request.session)
    logger.info("User logged out", endpoint="logout")
    return redirect_for(result, request.session)
