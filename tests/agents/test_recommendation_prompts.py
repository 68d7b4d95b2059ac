"""
Tests for the prompt builder and the structured-output schema.
"""

import json

from cram_demand.agents.recommendation import (
    RECOMMENDATION_RESPONSE_SCHEMA,
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
    response_format,
)


def _walk(node):
    if isinstance(node, dict):
        yield node
        for value in node.values():
            yield from _walk(value)
    elif isinstance(node, list):
        for item in node:
            yield from _walk(item)


class TestPrompts:

    def test_system_prompt_states_operating_rules(self):
        assert "knowledge base" in RECOMMENDATION_SYSTEM_PROMPT.lower()
        assert "Never invent" in RECOMMENDATION_SYSTEM_PROMPT
        assert "exactly 3" in RECOMMENDATION_SYSTEM_PROMPT
        assert "JSON schema" in RECOMMENDATION_SYSTEM_PROMPT

    def test_user_prompt_embeds_knowledge_base_and_inputs(self, scenario_request):
        kb = {"initiatives": {"reduce_denials": {"id": "reduce_denials", "name": "Reduce Claim Denials"}}}

        prompt = build_recommendation_user_prompt(knowledge_base=kb, inputs=scenario_request)

        kb_json = prompt.split("<knowledge_base>")[1].split("</knowledge_base>")[0]
        inputs_json = prompt.split("<inputs>")[1].split("</inputs>")[0]
        assert json.loads(kb_json) == kb
        assert json.loads(inputs_json) == scenario_request


class TestResponseSchema:

    def test_top_level_is_closed_and_fully_required(self):
        schema = RECOMMENDATION_RESPONSE_SCHEMA

        assert schema["additionalProperties"] is False
        assert set(schema["required"]) == {
            "inputs_echo",
            "trigger_context_summary",
            "recommended_assets",
            "top_asset_build_spec",
            "proof_requirements",
            "objection_handling",
            "traceability",
        }

    def test_every_object_is_closed(self):
        objects = [node for node in _walk(RECOMMENDATION_RESPONSE_SCHEMA) if node.get("type") == "object"]

        assert objects
        assert all(node.get("additionalProperties") is False for node in objects)

    def test_counts_and_enums_are_declared(self):
        defs = RECOMMENDATION_RESPONSE_SCHEMA["$defs"]
        assets = RECOMMENDATION_RESPONSE_SCHEMA["properties"]["recommended_assets"]

        assert assets["minItems"] == 3
        assert assets["maxItems"] == 3
        assert defs["RecommendedAsset"]["properties"]["rank"]["enum"] == [1, 2, 3]
        assert defs["RecommendedAsset"]["properties"]["confidence"]["enum"] == ["low", "medium", "high"]
        assert defs["TopAssetBuildSpec"]["properties"]["outline"]["minItems"] == 4
        assert defs["TopAssetBuildSpec"]["properties"]["outline"]["maxItems"] == 12

    def test_unsupported_keywords_are_stripped(self):
        keys = {key for node in _walk(RECOMMENDATION_RESPONSE_SCHEMA) for key in node}

        assert "examples" not in keys
        assert "minLength" not in keys
        assert "maxLength" not in keys

    def test_response_format_wraps_schema_in_strict_mode(self):
        block = response_format()

        assert block["type"] == "json_schema"
        assert block["json_schema"]["strict"] is True
        assert block["json_schema"]["schema"] is RECOMMENDATION_RESPONSE_SCHEMA
