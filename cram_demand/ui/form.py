"""
Form state, validation and gateway client for the recommendation page.

Nothing in here depends on Streamlit, so the client-side rules can be tested
directly:
- initiative defaults to the first knowledge base key once it is loaded
- a blank initiative or trigger context blocks submission with a message
- the primary engine is dropped from secondary_engines before sending
- only one submission is in flight at a time
- a failed call shows its message and clears any previous result
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import httpx

from cram_demand.schemas.recommendations import BUYING_JOBS

logger = logging.getLogger(__name__)

BUYING_JOB_OPTIONS: List[Tuple[str, str]] = [
    ("problem_identification", "Problem Identification"),
    ("solution_exploration", "Solution Exploration"),
    ("requirements_building", "Requirements Building"),
    ("vendor_selection", "Vendor Selection"),
    ("purchase", "Purchase"),
]

ENGINE_OPTIONS: List[Tuple[str, str]] = [
    ("finance", "Finance"),
    ("care_delivery", "Care Delivery"),
    ("technology", "Technology"),
    ("risk_compliance", "Risk & Compliance"),
]

AUDIENCE_OPTIONS: List[Tuple[str, str]] = [
    ("executive", "Executive"),
    ("operational", "Operational"),
    ("technical", "Technical"),
    ("cross_functional", "Cross-functional"),
]

PRIORITY_OPTIONS: List[Tuple[str, str]] = [
    ("high", "High"),
    ("medium", "Medium"),
    ("low", "Low"),
]

MISSING_INITIATIVE_MESSAGE = "Select an initiative."
MISSING_TRIGGER_MESSAGE = "Add a short trigger context (1-2 sentences)."
EMPTY_RESPONSE_MESSAGE = "API returned empty/non-JSON response."


class SubmissionError(Exception):
    """A gateway call failed; the message is shown to the user as-is."""


@dataclass
class RecommendationForm:
    """Current values of the form fields."""
    initiative_id: str = ""
    buying_job_id: str = BUYING_JOBS[0]
    primary_engine: str = "finance"
    secondary_engines: List[str] = field(default_factory=list)
    audience_type: str = "executive"
    strategic_priority: str = "high"
    trigger_context: str = ""

    def toggle_secondary(self, engine: str) -> None:
        if engine in self.secondary_engines:
            self.secondary_engines = [e for e in self.secondary_engines if e != engine]
        else:
            self.secondary_engines = self.secondary_engines + [engine]

    def validate(self) -> Optional[str]:
        """Return the message blocking submission, or None when the form is complete."""
        if not self.initiative_id:
            return MISSING_INITIATIVE_MESSAGE
        if not self.trigger_context.strip():
            return MISSING_TRIGGER_MESSAGE
        return None

    def to_payload(self) -> Dict[str, Any]:
        """Request body for POST /api/recommend."""
        return {
            "initiative_id": self.initiative_id,
            "buying_job_id": self.buying_job_id,
            "primary_engine": self.primary_engine,
            "secondary_engines": [e for e in self.secondary_engines if e != self.primary_engine],
            "audience_type": self.audience_type,
            "strategic_priority": self.strategic_priority,
            "trigger_context": self.trigger_context.strip(),
        }


class GatewayClient:
    """Synchronous client for the gateway endpoints used by the page."""

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 180.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout_sec
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    def fetch_knowledge_base(self) -> Dict[str, Any]:
        try:
            with self._client() as client:
                response = client.get("/api/knowledge-base")
        except httpx.HTTPError as e:
            raise SubmissionError(f"Failed to load KB: {e}") from e

        if not response.is_success:
            raise SubmissionError(f"Failed to load KB: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise SubmissionError("Failed to load KB: response is not JSON") from e

    def recommend(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST the payload and return the parsed recommendation.

        Raises:
            SubmissionError: With the gateway's error message, the raw body,
                or a generic message, mirroring what the page displays.
        """
        try:
            with self._client() as client:
                response = client.post("/api/recommend", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Gateway unreachable: {e!r}")
            raise SubmissionError(f"Could not reach the recommendation service: {e}") from e

        raw_text = response.text
        data: Any = None
        if raw_text:
            try:
                data = json.loads(raw_text)
            except ValueError:
                # non-JSON response (e.g., HTML error page)
                data = None

        if not response.is_success:
            message = None
            if isinstance(data, dict):
                message = data.get("error")
            raise SubmissionError(message or raw_text or f"Request failed ({response.status_code})")

        if not data:
            raise SubmissionError(EMPTY_RESPONSE_MESSAGE)

        return data


class RecommendationSession:
    """
    Everything the page shows: form values, choice lists, busy flag, result and error.

    Mirrors one browser tab: at most one call outstanding, no queueing.
    """

    def __init__(self, client: GatewayClient):
        self.client = client
        self.form = RecommendationForm()
        self.knowledge_base: Optional[Dict[str, Any]] = None
        self.busy = False
        self.error = ""
        self.result: Optional[Dict[str, Any]] = None

    @property
    def initiative_options(self) -> List[Tuple[str, str]]:
        if not self.knowledge_base:
            return []
        return [
            (key, initiative.get("name", key))
            for key, initiative in (self.knowledge_base.get("initiatives") or {}).items()
        ]

    def load_knowledge_base(self) -> None:
        """Fetch the knowledge base and default the initiative to its first key."""
        try:
            self.knowledge_base = self.client.fetch_knowledge_base()
        except SubmissionError as e:
            self.error = str(e)
            return

        options = self.initiative_options
        if options:
            self.form.initiative_id = options[0][0]

    def generate(self) -> bool:
        """
        Validate and submit the form.

        Returns:
            True if the gateway was called, False if submission was blocked
            (busy or invalid form).
        """
        if self.busy:
            logger.debug("Submission ignored: a request is already in flight")
            return False

        self.error = ""
        self.result = None

        message = self.form.validate()
        if message:
            self.error = message
            return False

        payload = self.form.to_payload()

        self.busy = True
        try:
            self.result = self.client.recommend(payload)
        except SubmissionError as e:
            self.error = str(e)
        finally:
            self.busy = False

        return True
