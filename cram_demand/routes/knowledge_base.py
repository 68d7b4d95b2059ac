"""
Knowledge base route.

The form loads the knowledge base on its own, independently of any
recommendation call, to populate its initiative choice list.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter

from cram_demand.schemas.recommendations import ErrorResponse
from cram_demand.services.knowledge_base import load_knowledge_base

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["knowledge-base"]
)


@router.get(
    "/knowledge-base",
    summary="Knowledge base document",
    description="Returns the static knowledge base document as stored, read fresh on each call.",
    responses={500: {"model": ErrorResponse, "description": "Knowledge base unreadable"}},
)
async def knowledge_base_endpoint() -> Dict[str, Any]:
    logger.debug("GET /api/knowledge-base called")
    return load_knowledge_base()
