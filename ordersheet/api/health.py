"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    from ordersheet.infrastructure.config import settings

    return HealthResponse(
        status="healthy",
        service="ordersheet",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check() -> dict[str, str | int]:
    """Check if service is ready to accept requests.

    Reads the catalog once; the store degrades to an empty catalog rather
    than failing, so this only reports how many products are visible.
    """
    from ordersheet.application.order_desk_service import get_order_desk_service

    products = await get_order_desk_service().list_products()
    return {"status": "ready", "product_count": len(products)}
