"""
Pytest configuration for CRAM Demand tests.

Sets up test environment and shared fixtures: a valid request, a
provider-shaped recommendation built from it, and a recording
httpx.MockTransport standing in for the model provider.
"""
import copy
import json
import os
from typing import Any, Callable, Dict, List

import httpx
import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("AZURE_OPENAI_ENDPOINT", "https://test-resource.openai.azure.com")
os.environ.setdefault("AZURE_OPENAI_API_KEY", "test-azure-api-key")
os.environ.setdefault("AZURE_OPENAI_DEPLOYMENT", "test-deployment")


SCENARIO_REQUEST: Dict[str, Any] = {
    "initiative_id": "reduce_denials",
    "buying_job_id": "vendor_selection",
    "primary_engine": "risk_compliance",
    "secondary_engines": [],
    "audience_type": "executive",
    "strategic_priority": "high",
    "trigger_context": "Denials up 15% this quarter.",
}


def _asset(rank: int, asset_type: str, channel: str, fmt: str) -> Dict[str, Any]:
    return {
        "rank": rank,
        "asset_type": asset_type,
        "primary_channel": channel,
        "format": fmt,
        "use_case": f"Use {asset_type} to support vendor evaluation.",
        "why_recommended": [
            "Matches the vendor selection buying job.",
            "Addresses the risk and compliance engine first.",
        ],
        "supported_internal_artifacts": ["Reference Customer Stories"],
        "engine_alignment": ["risk_compliance"],
        "audience_alignment": "executive",
        "confidence": "high" if rank == 1 else "medium",
    }


def build_recommendation(inputs: Dict[str, Any]) -> Dict[str, Any]:
    """A recommendation that satisfies every contract rule for the given inputs."""
    return {
        "inputs_echo": copy.deepcopy(inputs),
        "trigger_context_summary": "Denial rates rose 15% this quarter, raising audit exposure.",
        "recommended_assets": [
            _asset(1, "Security & Compliance Brief", "Sales Meeting", "PDF"),
            _asset(2, "Case Study", "Email", "PDF"),
            _asset(3, "Vendor Comparison Guide", "Website", "Web Page"),
        ],
        "top_asset_build_spec": {
            "asset_type": "Security & Compliance Brief",
            "primary_channel": "Sales Meeting",
            "format": "PDF",
            "messaging_angle": "Cut denials without adding compliance risk.",
            "outline": [
                {
                    "section_title": title,
                    "section_goal": f"Explain {title.lower()}.",
                    "required_elements": ["Key point", "Supporting proof"],
                }
                for title in ("Situation", "Risk Exposure", "Controls", "Next Steps")
            ],
        },
        "proof_requirements": {
            "financial": ["Denial write-off reduction"],
            "operational": ["Rework hours saved"],
            "technical": ["Integration with billing system"],
            "risk_compliance": ["Audit trail coverage"],
        },
        "objection_handling": {
            "finance": [
                {
                    "objection": "Budget is frozen.",
                    "response": "Savings fund the program within two quarters.",
                    "proof_points": ["Customer ROI Model"],
                }
            ],
            "care_delivery": [],
            "technology": [],
            "risk_compliance": [
                {
                    "objection": "New vendors add audit risk.",
                    "response": "Controls map to existing audit requirements.",
                    "proof_points": ["Security Questionnaire Responses"],
                }
            ],
        },
        "traceability": {
            "kb_artifacts_referenced": ["asset_candidate_map.vendor_selection"],
            "decision_trace": ["Selected candidates for vendor_selection", "Ranked for risk_compliance"],
            "assumptions": [],
        },
    }


def chat_completion(content: Any) -> Dict[str, Any]:
    """Azure OpenAI chat completions body wrapping the given message content."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content, "refusal": None},
                "finish_reason": "stop",
            }
        ],
    }


class RecordingProvider:
    """Callable MockTransport handler that records every request it receives."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def scenario_request() -> Dict[str, Any]:
    return copy.deepcopy(SCENARIO_REQUEST)


@pytest.fixture
def recommendation_factory() -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    return build_recommendation


@pytest.fixture
def echoing_provider() -> RecordingProvider:
    """Provider that answers 200 with a valid recommendation echoing the prompt inputs."""

    def respond(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        user_prompt = body["messages"][1]["content"]
        inputs_json = user_prompt.split("<inputs>")[1].split("</inputs>")[0]
        recommendation = build_recommendation(json.loads(inputs_json))
        return httpx.Response(200, json=chat_completion(json.dumps(recommendation)))

    return RecordingProvider(respond)


@pytest.fixture
def provider_returning() -> Callable[..., RecordingProvider]:
    """Build a provider that always answers with the given status and body."""

    def factory(status_code: int = 200, json_body: Any = None, text: str = "") -> RecordingProvider:
        def respond(request: httpx.Request) -> httpx.Response:
            if json_body is not None:
                return httpx.Response(status_code, json=json_body)
            return httpx.Response(status_code, text=text)

        return RecordingProvider(respond)

    return factory


@pytest.fixture
def completion_body() -> Callable[[Any], Dict[str, Any]]:
    return chat_completion
