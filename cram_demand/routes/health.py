"""
Health check route for the CRAM Demand backend.

This endpoint is PUBLIC and provides a simple status check for load
balancers and deployment verification. It does not check the provider
configuration or the knowledge base.
"""

import logging

from fastapi import APIRouter

from cram_demand.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

# Create router with no prefix (mounted at root level in main.py)
router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    tags=["system"],
    status_code=200,
)
async def health_check() -> HealthResponse:
    """
    Public health check endpoint.

    Example response:
        {
            "status": "ok"
        }
    """
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok")
