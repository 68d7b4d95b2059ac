"""
FastAPI route for the recommendation gateway.

Endpoints:
- POST /api/recommend: One schema-constrained recommendation

The body is read raw rather than through a Pydantic parameter so that the
configuration check and the knowledge base load happen before the body is
validated. Errors are raised as GatewayError subclasses and rendered by the
handler in main.py as {"error": ..., "code": ..., "details": ...}.
"""

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from cram_demand.schemas.recommendations import ErrorResponse, RecommendationResponse
from cram_demand.services.recommendation_service import generate_recommendation

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["recommendations"]
)


def get_provider_transport() -> Optional[httpx.AsyncBaseTransport]:
    """
    Transport used for the provider call.

    None means httpx's default network transport; tests override this
    dependency with an httpx.MockTransport.
    """
    return None


@router.post(
    "/recommend",
    response_model=RecommendationResponse,
    status_code=200,
    summary="Generate a content recommendation",
    responses={
        400: {"model": ErrorResponse, "description": "Body is not a JSON object"},
        422: {"model": ErrorResponse, "description": "Body violates the request contract"},
        500: {"model": ErrorResponse, "description": "Configuration or knowledge base error"},
        502: {"model": ErrorResponse, "description": "Provider error or invalid provider response"},
    },
    description="""
    Forwards the form inputs plus the knowledge base to the model provider and
    returns its schema-constrained recommendation unmodified.

    **Frontend Flow:**
    1. User fills initiative, buying job, engines, audience, priority, trigger context
    2. User clicks "Generate Recommendation"
    3. POST /api/recommend with the inputs
    4. Render the returned cards, or the error message on failure

    **Architecture:**
    Single Azure OpenAI chat completion with a json_schema response format.
    The result is re-validated locally before being returned.
    """
)
async def recommend_endpoint(
    request: Request,
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_provider_transport),
) -> JSONResponse:
    """
    Recommendation endpoint.

    - Config check, KB load, body parse/validate: service layer
    - Call LLM: single provider call via service layer
    - Return response: parsed provider JSON, verbatim
    """
    logger.info("POST /api/recommend called")

    body = await request.body()
    result = await generate_recommendation(body, transport=transport)

    return JSONResponse(status_code=200, content=result)
