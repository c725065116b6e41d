"""
Health check API endpoints.

Routes: GET /health, GET /health/db, GET /health/ai

Dependencies: flashai.boundary.db, flashai.configs
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from flashai.api.deps import get_settings_dependency
from flashai.boundary.db import get_async_db
from flashai.configs import Settings


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)) -> HealthResponse:
    """Database health check."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database unavailable: {e}",
        ) from e
    return HealthResponse(status="healthy", message="Database connection OK")


@router.get("/ai", response_model=HealthResponse)
async def health_check_ai(settings: Settings = Depends(get_settings_dependency)) -> HealthResponse:
    """Report whether vision and synthesis credentials are configured."""
    if not settings.ai_configured:
        return HealthResponse(status="degraded", message="AI credentials not configured")
    return HealthResponse(status="healthy", message="AI services configured")
