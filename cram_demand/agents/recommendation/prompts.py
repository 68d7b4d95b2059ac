"""
Recommendation Prompt Templates

Contains the system prompt and user prompt builder for the recommendation
gateway.

Architecture:
- Pattern: Single-shot LLM call with schema-constrained output
- Provider: Azure OpenAI chat completions (response_format=json_schema)
- Temperature: 0.2 (near-deterministic)
- Grounding: the full knowledge base is embedded in the user prompt

Prompt Engineering Pattern:
- Uses XML tags for structured content
- System prompt defines role and operating rules
- User prompt carries the knowledge base and the caller's inputs as JSON
"""

import json
from typing import Any, Dict

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

RECOMMENDATION_SYSTEM_PROMPT = """You are a B2B healthcare content strategist for CRAM Demand, a content recommendation engine for demand generation teams.

<role>
Given a strategic initiative, a buying job, stakeholder engines, an audience and a trigger context, you recommend the three content assets most likely to move the buyer forward, specify how to build the top asset, and list the proof and objection handling each engine needs.
</role>

<rules>
1. USE ONLY KNOWLEDGE BASE VOCABULARY. Asset types, channels, formats and internal artifacts MUST be copied exactly from the knowledge base. Never invent new names.
2. You MAY adapt ranking, emphasis and outline structure to the trigger context.
3. Return exactly 3 recommended assets ranked 1, 2 and 3. The top asset build spec describes the rank-1 asset.
4. Echo the caller's inputs unchanged in inputs_echo.
5. Record every knowledge base artifact you used, the steps of your decision, and any assumption that goes beyond the knowledge base in traceability.
</rules>

<output_format>
Return only a JSON object conforming to the provided JSON schema.
No markdown code blocks, no explanatory text.
</output_format>"""


# =============================================================================
# USER PROMPT BUILDER
# =============================================================================

def build_recommendation_user_prompt(
    knowledge_base: Dict[str, Any],
    inputs: Dict[str, Any],
) -> str:
    """
    Build the user prompt with the knowledge base and the caller's inputs.

    Args:
        knowledge_base: Parsed knowledge base document (embedded verbatim)
        inputs: Validated request fields, as sent by the caller

    Returns:
        str: Formatted user prompt
    """
    kb_json = json.dumps(knowledge_base, indent=2, ensure_ascii=False)
    inputs_json = json.dumps(inputs, indent=2, ensure_ascii=False)

    return f"""Produce a content recommendation for the inputs below.

<knowledge_base>
{kb_json}
</knowledge_base>

<inputs>
{inputs_json}
</inputs>

<instructions>
1. Read the initiative and buying job entries referenced by the inputs.
2. Start from the asset candidates the knowledge base maps to the buying job.
3. Rank 3 assets for the primary engine first, then the secondary engines, for the given audience and strategic priority.
4. Use the trigger context to adjust ranking, emphasis and the outline of the top asset.
5. Fill proof_requirements and objection_handling for all four engines.
</instructions>"""
