from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, Request

from sessionauth.core.exceptions import AuthenticationError
from sessionauth.domain.entities.user import User
from sessionauth.infrastructure.dependency_injection.auth_dependencies import AuthGateDep

__all__ = [
    "get_optional_user",
    "get_current_user",
    "CurrentUser",
    "OptionalUser",
]


async def get_optional_user(request: Request, gate: AuthGateDep) -> Optional[User]:  # noqa: D401
    """Return the signed-in :class:`User`, or ``None`` for anonymous callers.

    Store failures propagate as ``StoreUnavailableError`` and are rendered by
    the global exception handlers.
    """
    return await gate.require_user(request.session)


async def get_current_user(
    user: Annotated[Optional[User], Depends(get_optional_user)],
) -> User:  # noqa: D401
    """Guard for protected routes; anonymous callers get a 401."""
    if user is None:
        raise AuthenticationError("Authentication required", code="login_required")
    return user


OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]
CurrentUser = Annotated[User, Depends(get_current_user)]
