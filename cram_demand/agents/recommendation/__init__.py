"""
Recommendation System - Schema-Constrained LLM Architecture

This package contains the pieces that talk to the model provider.

Architecture:
- Pattern: Single-shot LLM call (no tools, no retries)
- Provider: Azure OpenAI chat completions
- Output: Structured JSON (response_format=json_schema, derived from Pydantic)

The service layer is in:
- cram_demand/services/recommendation_service.py

Prompt templates are in:
- cram_demand/agents/recommendation/prompts.py
"""

from cram_demand.agents.recommendation.client import AzureOpenAIChatClient
from cram_demand.agents.recommendation.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
)
from cram_demand.agents.recommendation.schema import (
    RECOMMENDATION_RESPONSE_SCHEMA,
    response_format,
)

__all__ = [
    "AzureOpenAIChatClient",
    "RECOMMENDATION_SYSTEM_PROMPT",
    "RECOMMENDATION_RESPONSE_SCHEMA",
    "build_recommendation_user_prompt",
    "response_format",
]
