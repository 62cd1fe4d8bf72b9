from fastapi import APIRouter

from sessionauth.adapters.api.auth import router as auth_router
from sessionauth.adapters.api.health import router as health_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(health_router)

__all__ = ["api_router"]
