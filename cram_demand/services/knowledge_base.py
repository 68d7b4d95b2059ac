"""
Knowledge base loader.

The knowledge base is a static JSON document (initiatives, buying jobs,
asset/channel/format vocabularies and mapping tables). It is read from disk
on every call: no caching and no mutation. Only the initiatives table and the
vocabulary lists are interpreted here; every other section is passed through
to the model provider as-is.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from cram_demand.config import settings
from cram_demand.utils.errors import KnowledgeBaseError

logger = logging.getLogger(__name__)

# Response field -> knowledge base vocabulary list it must come from
VOCABULARY_FIELDS = {
    "asset_type": "asset_types",
    "primary_channel": "channels",
    "format": "formats",
}


def load_knowledge_base(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Read and parse the knowledge base document.

    Args:
        path: Location of the JSON document. Defaults to
              settings.KNOWLEDGE_BASE_PATH.

    Returns:
        The parsed document. Callers must treat it as read-only.

    Raises:
        KnowledgeBaseError: If the file cannot be read, is not valid JSON,
            or has no usable initiatives table.
    """
    kb_path = path or settings.KNOWLEDGE_BASE_PATH

    try:
        with open(kb_path, "r", encoding="utf-8") as handle:
            document = json.load(handle)
    except OSError as e:
        logger.error(f"Could not read knowledge base at {kb_path}: {e}")
        raise KnowledgeBaseError("Knowledge base could not be read.") from e
    except UnicodeDecodeError as e:
        logger.error(f"Knowledge base at {kb_path} is not UTF-8 text: {e}")
        raise KnowledgeBaseError("Knowledge base is not valid UTF-8 text.") from e
    except json.JSONDecodeError as e:
        logger.error(f"Knowledge base at {kb_path} is not valid JSON: {e}")
        raise KnowledgeBaseError("Knowledge base is not valid JSON.") from e

    _check_initiatives(document)

    logger.debug(
        f"Loaded knowledge base version={document.get('version', 'unknown')} "
        f"with {len(document['initiatives'])} initiatives"
    )
    return document


def _check_initiatives(document: Any) -> None:
    """Ensure the consumed part of the document has the expected shape."""
    if not isinstance(document, dict):
        raise KnowledgeBaseError("Knowledge base must be a JSON object.")

    initiatives = document.get("initiatives")
    if not isinstance(initiatives, dict):
        raise KnowledgeBaseError("Knowledge base has no 'initiatives' mapping.")

    for key, initiative in initiatives.items():
        if not isinstance(initiative, dict) or "id" not in initiative or "name" not in initiative:
            raise KnowledgeBaseError(f"Initiative '{key}' must carry an id and a name.")


def initiative_options(kb: Dict[str, Any]) -> List[Tuple[str, str]]:
    """(id, display name) pairs in document order, for choice lists."""
    return [(key, initiative["name"]) for key, initiative in kb.get("initiatives", {}).items()]


def vocabulary_violations(kb: Dict[str, Any], response: Dict[str, Any]) -> List[str]:
    """
    Find asset vocabulary in a response that the knowledge base does not declare.

    A vocabulary is only enforced when the knowledge base defines the
    corresponding list; documents without it are treated as unconstrained.

    Args:
        kb: Parsed knowledge base
        response: A response that already passed schema validation

    Returns:
        Human-readable violation messages (empty when everything is known)
    """
    violations: List[str] = []

    described = list(response["recommended_assets"]) + [response["top_asset_build_spec"]]
    for field, vocabulary_key in VOCABULARY_FIELDS.items():
        allowed = kb.get(vocabulary_key)
        if not isinstance(allowed, list):
            continue
        for value in _unknown(allowed, (item[field] for item in described)):
            violations.append(f"{field} '{value}' is not in knowledge base {vocabulary_key}")

    artifacts = kb.get("internal_artifacts")
    if isinstance(artifacts, list):
        referenced = (
            name
            for asset in response["recommended_assets"]
            for name in asset["supported_internal_artifacts"]
        )
        for value in _unknown(artifacts, referenced):
            violations.append(f"supported artifact '{value}' is not in knowledge base internal_artifacts")

    return violations


def _unknown(allowed: List[Any], values: Iterable[str]) -> List[str]:
    allowed_set = {item for item in allowed if isinstance(item, str)}
    unknown: List[str] = []
    for value in values:
        if value not in allowed_set and value not in unknown:
            unknown.append(value)
    return unknown
