"""Health check endpoint for monitoring API availability.

This module provides endpoints for health checks and basic API information.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ai_router import __version__

router = APIRouter(prefix="/api")


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Current health status (healthy/degraded)
        timestamp: Current server timestamp
        version: API version
        providers_available: Providers with a credential configured
        providers_total: Registered providers
    """

    status: str
    timestamp: datetime
    version: str
    providers_available: int = 0
    providers_total: int = 0


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    The API is degraded when no provider has a credential, since every
    selection method except parallel would fail.

    Returns:
        HealthResponse: System health information
    """
    registry = request.app.state.router.registry
    available = len(registry.list_available())

    return HealthResponse(
        status="healthy" if available > 0 else "degraded",
        timestamp=datetime.now(UTC),
        version=__version__,
        providers_available=available,
        providers_total=len(registry),
    )


@router.get("/", response_model=dict[str, str])
async def root() -> dict[str, str]:
    """Root endpoint.

    Returns basic API information and documentation links.
    """
    return {
        "name": "UMKM AI Router API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/health",
        "alternatives": "/api/ai-alternatives",
    }
