from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from sessionauth.core.config.settings import settings
from sessionauth.infrastructure.database.async_db import check_database_health
from sessionauth.utils.i18n import get_request_language, get_translated_message

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    message: str
    services: Dict[str, str]
    timestamp: datetime


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(request: Request):
    """Report whether the user store answers queries."""
    db_healthy = await check_database_health()
    language = get_request_language(request)
    message_key = "system_operational" if db_healthy else "service_temporarily_unavailable"
    body = HealthResponse(
        status="ok" if db_healthy else "degraded",
        env=settings.APP_ENV,
        message=get_translated_message(message_key, language),
        services={"database": "healthy" if db_healthy else "unhealthy"},
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if db_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(mode="json"),
    )
