from __future__ import annotations

"""Authentication router package: bundles login, registration, OAuth and session endpoints."""

from fastapi import APIRouter

from .routes import home as home_route
from .routes import login as login_route
from .routes import logout as logout_route
from .routes import oauth as oauth_route
from .routes import profile as profile_route
from .routes import register as register_route

router = APIRouter(tags=["auth"])

router.include_router(home_route.router)
router.include_router(login_route.router, prefix="/login")
router.include_router(register_route.router, prefix="/register")
router.include_router(profile_route.router, prefix="/profile")
router.include_router(oauth_route.router, prefix="/auth/oauth")
router.include_router(logout_route.router, prefix="/logout")

__all__ = ["router"]
