"""
Recommendation Service - Azure OpenAI with Structured Outputs

This service is the recommendation gateway: a validated pass-through between
the form and the model provider.

Architecture:
- Pattern: Single-shot LLM call (one HTTP request per invocation)
- Provider: Azure OpenAI chat completions
- Output: response_format=json_schema derived from the Pydantic response models
- Grounding: the whole knowledge base is embedded in the user prompt

Flow:
1. Check provider configuration (fail before any network call)
2. Load the knowledge base (fresh on every call)
3. Parse and validate the request body
4. Build system + user prompts and call the provider once
5. Parse the returned JSON and validate it locally against the contract
6. Return the parsed structure unmodified

Every failure raises a GatewayError subclass; nothing is retried and there is
no degraded success path.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import ValidationError

from cram_demand.agents.recommendation import (
    RECOMMENDATION_SYSTEM_PROMPT,
    AzureOpenAIChatClient,
    build_recommendation_user_prompt,
    response_format,
)
from cram_demand.config import settings
from cram_demand.schemas.recommendations import RecommendationRequest, RecommendationResponse
from cram_demand.services.knowledge_base import load_knowledge_base, vocabulary_violations
from cram_demand.utils.errors import (
    ConfigurationError,
    InvalidProviderResponseError,
    InvalidRequestError,
    RequestValidationFailed,
)
from cram_demand.utils.logging import truncate

logger = logging.getLogger(__name__)

RawBody = Union[bytes, str, Dict[str, Any], None]


def _validation_details(error: ValidationError) -> List[Dict[str, Any]]:
    """JSON-safe summary of pydantic errors."""
    return [
        {"loc": [str(part) for part in item["loc"]], "msg": item["msg"], "type": item["type"]}
        for item in error.errors()
    ]


def _get_provider_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> AzureOpenAIChatClient:
    """
    Build the provider client from current settings.

    Raises:
        ConfigurationError: If endpoint, key or deployment is missing.
    """
    missing = settings.missing_provider_settings()
    if missing:
        logger.error(f"Provider configuration missing: {', '.join(missing)}")
        raise ConfigurationError(
            f"Recommendation service is not configured. Missing: {', '.join(missing)}.",
            details={"missing": missing},
        )

    return AzureOpenAIChatClient(
        endpoint=settings.AZURE_OPENAI_ENDPOINT,
        api_key=settings.AZURE_OPENAI_API_KEY,
        deployment=settings.AZURE_OPENAI_DEPLOYMENT,
        api_version=settings.AZURE_OPENAI_API_VERSION,
        timeout_sec=settings.AZURE_OPENAI_TIMEOUT_SECONDS,
        temperature=settings.AZURE_OPENAI_TEMPERATURE,
        transport=transport,
    )


def parse_request_body(raw_body: RawBody) -> Dict[str, Any]:
    """
    Turn the HTTP body into a dict.

    Malformed JSON and non-object bodies are rejected instead of being
    replaced with an empty structure.

    Raises:
        InvalidRequestError: If the body is empty, not JSON, or not an object.
    """
    if isinstance(raw_body, dict):
        return raw_body

    if raw_body is None or not raw_body.strip():
        raise InvalidRequestError("Request body is empty.")

    try:
        parsed = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Rejecting malformed request body: {e}")
        raise InvalidRequestError("Request body is not valid JSON.") from e

    if not isinstance(parsed, dict):
        raise InvalidRequestError("Request body must be a JSON object.")

    return parsed


def validate_request(inputs: Dict[str, Any], knowledge_base: Dict[str, Any]) -> RecommendationRequest:
    """
    Check a parsed body against the request contract and the knowledge base.

    Raises:
        RequestValidationFailed: On any contract violation or unknown initiative.
    """
    try:
        request = RecommendationRequest.model_validate(inputs, strict=True)
    except ValidationError as e:
        logger.warning(f"Request failed validation with {e.error_count()} errors")
        raise RequestValidationFailed("Request does not match the expected shape.", details=_validation_details(e)) from e

    if request.initiative_id not in knowledge_base["initiatives"]:
        raise RequestValidationFailed(
            f"Unknown initiative_id '{request.initiative_id}'.",
            details={"known_initiatives": list(knowledge_base["initiatives"])},
        )

    return request


def parse_provider_content(
    content: str,
    request: RecommendationRequest,
    knowledge_base: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Parse the provider's JSON text and re-check it against the contract.

    The provider's schema enforcement is not trusted on its own: the closed
    schema, enumerations, counts, rank uniqueness, the input echo and the
    knowledge base vocabulary are all verified here.

    Returns:
        The parsed structure, unmodified.

    Raises:
        InvalidProviderResponseError: If any check fails.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse provider content: {e}")
        logger.debug(f"Raw content: {content[:500]}")
        raise InvalidProviderResponseError("Model provider returned content that is not valid JSON.") from e

    try:
        response = RecommendationResponse.model_validate(data, strict=True)
    except ValidationError as e:
        logger.error(f"Provider content violates the response schema ({e.error_count()} errors)")
        raise InvalidProviderResponseError(
            "Model provider returned content that does not match the recommendation schema.",
            details=_validation_details(e),
        ) from e

    if response.inputs_echo != request:
        logger.error("Provider inputs_echo differs from the submitted request")
        raise InvalidProviderResponseError(
            "Model provider did not echo the submitted inputs.",
            details={"inputs_echo": data["inputs_echo"]},
        )

    violations = vocabulary_violations(knowledge_base, data)
    if violations:
        logger.error(f"Provider used vocabulary outside the knowledge base: {violations}")
        raise InvalidProviderResponseError(
            "Model provider used vocabulary outside the knowledge base.",
            details=violations,
        )

    return data


async def generate_recommendation(
    raw_body: RawBody,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    Run one recommendation through the model provider.

    Args:
        raw_body: Request body as received (bytes/str JSON text, or a dict)
        transport: Optional httpx transport for the provider call

    Returns:
        Response structure exactly as returned by the provider

    Raises:
        GatewayError subclasses, see cram_demand.utils.errors
    """
    client = _get_provider_client(transport)

    knowledge_base = load_knowledge_base()

    inputs = parse_request_body(raw_body)
    request = validate_request(inputs, knowledge_base)

    logger.info(
        f"Recommendation requested: initiative_id={request.initiative_id}, "
        f"buying_job_id={request.buying_job_id}, primary_engine={request.primary_engine}, "
        f"trigger_context='{truncate(request.trigger_context)}'"
    )

    user_prompt = build_recommendation_user_prompt(
        knowledge_base=knowledge_base,
        inputs=request.model_dump(),
    )

    content = await client.complete_json(
        system_prompt=RECOMMENDATION_SYSTEM_PROMPT,
        user_prompt=user_prompt,
        response_format=response_format(),
    )

    result = parse_provider_content(content, request, knowledge_base)

    logger.info(f"Returning {len(result['recommended_assets'])} recommended assets")
    return result
