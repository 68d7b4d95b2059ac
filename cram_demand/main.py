"""
FastAPI application entry point for the CRAM Demand backend.

This module creates the FastAPI app instance, registers the error envelope
handler and all routers.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cram_demand.config import settings
from cram_demand.routes.health import router as health_router
from cram_demand.routes.knowledge_base import router as knowledge_base_router
from cram_demand.routes.recommend import router as recommend_router
from cram_demand.utils.errors import GatewayError

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: Uses CORS_ALLOWED_ORIGINS (none allowed if unset)
    - Any other environment: Allows all origins for local dev

    Returns:
        List of allowed origin URLs, or ["*"] for development.
    """
    if settings.is_production():
        origins = settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed. Set CORS_ALLOWED_ORIGINS for browser clients."
            )
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


# Create FastAPI app
app = FastAPI(
    title="CRAM Demand API",
    description="Recommendation gateway between the CRAM Demand form and the model provider",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    """
    Render every gateway failure as the JSON error envelope.

    Body: {"error": <message>, "code": <code>, "details": <optional>}
    """
    logger.error(
        f"{request.method} {request.url.path} failed: "
        f"code={exc.code} status={exc.status_code} message={exc.message}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Keep unexpected failures inside the JSON error envelope."""
    logger.exception(f"{request.method} {request.url.path} failed with unexpected {type(exc).__name__}")

    error = GatewayError("Internal server error.")
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_dict()
    )


# Configure CORS with environment-based origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(knowledge_base_router)
app.include_router(recommend_router)

logger.info("FastAPI app initialized successfully")
