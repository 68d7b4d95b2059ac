"""
Structured-output contract sent to the model provider.

The schema is derived from the pydantic response models so that the contract
given to the provider and the one re-checked locally cannot drift apart.
Keywords the provider's strict mode does not accept are stripped; the local
pydantic validation still enforces them.
"""

from typing import Any, Dict

from cram_demand.schemas.recommendations import RecommendationResponse

SCHEMA_NAME = "cram_recommendation"

# Keywords rejected by strict structured outputs
_UNSUPPORTED_KEYWORDS = {"examples", "default", "minLength", "maxLength"}


def _strip_unsupported(node: Any) -> Any:
    if isinstance(node, list):
        return [_strip_unsupported(item) for item in node]
    if not isinstance(node, dict):
        return node

    cleaned: Dict[str, Any] = {}
    for key, value in node.items():
        if key in _UNSUPPORTED_KEYWORDS:
            continue
        if key in ("properties", "$defs"):
            # Keys of these maps are names, not keywords
            cleaned[key] = {name: _strip_unsupported(sub) for name, sub in value.items()}
        else:
            cleaned[key] = _strip_unsupported(value)
    return cleaned


def build_response_schema() -> Dict[str, Any]:
    """JSON schema for RecommendationResponse, ready for response_format."""
    return _strip_unsupported(RecommendationResponse.model_json_schema())


RECOMMENDATION_RESPONSE_SCHEMA: Dict[str, Any] = build_response_schema()


def response_format() -> Dict[str, Any]:
    """The response_format block of a chat completions request."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": SCHEMA_NAME,
            "strict": True,
            "schema": RECOMMENDATION_RESPONSE_SCHEMA,
        },
    }
