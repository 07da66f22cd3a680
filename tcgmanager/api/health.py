"""
Health check endpoint.

The service holds no database or session state, so liveness is all there is.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from tcgmanager.config import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    app: str


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Returns healthy if the service is running."""
    return HealthResponse(status="healthy", app=settings.app_name)
