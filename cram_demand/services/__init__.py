"""
Service layer for the CRAM Demand backend.

Services act as the glue between routes (HTTP layer) and the model provider:
- knowledge_base: loads the static knowledge base document
- recommendation_service: validates, calls the provider, re-validates
"""

from .knowledge_base import initiative_options, load_knowledge_base, vocabulary_violations
from .recommendation_service import generate_recommendation

__all__ = [
    "generate_recommendation",
    "initiative_options",
    "load_knowledge_base",
    "vocabulary_violations",
]
