"""
Pydantic schemas for the recommendation endpoint.

These models define the strict request/response contracts between the UI,
the gateway and the model provider. The response models are also the source
of the JSON schema sent to the provider as its structured-output format, and
are used to re-validate what the provider returns.
"""

from typing import Any, List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ============================================================================
# ENUMERATIONS
# ============================================================================

BuyingJob = Literal[
    "problem_identification",
    "solution_exploration",
    "requirements_building",
    "vendor_selection",
    "purchase",
]
Engine = Literal["finance", "care_delivery", "technology", "risk_compliance"]
Audience = Literal["executive", "operational", "technical", "cross_functional"]
Priority = Literal["high", "medium", "low"]
Confidence = Literal["low", "medium", "high"]

BUYING_JOBS: List[str] = list(get_args(BuyingJob))
ENGINES: List[str] = list(get_args(Engine))
AUDIENCES: List[str] = list(get_args(Audience))
PRIORITIES: List[str] = list(get_args(Priority))


class ClosedModel(BaseModel):
    """Base for contract models: undeclared fields are rejected."""
    model_config = ConfigDict(extra="forbid")


# ============================================================================
# REQUEST MODELS
# ============================================================================

class RecommendationRequest(ClosedModel):
    """
    Request for a content recommendation.

    initiative_id is checked against the knowledge base by the service layer,
    since the set of initiatives lives in the document rather than in code.
    """
    initiative_id: str = Field(
        ...,
        description="Key of an initiative in the knowledge base",
        min_length=1,
        examples=["reduce_denials"]
    )
    buying_job_id: BuyingJob = Field(
        ...,
        description="Stage of the buying journey",
        examples=["vendor_selection"]
    )
    primary_engine: Engine = Field(
        ...,
        description="Stakeholder domain the content must lead with",
        examples=["risk_compliance"]
    )
    secondary_engines: List[Engine] = Field(
        ...,
        description="Additional stakeholder domains, never including primary_engine",
        examples=[["finance", "technology"]]
    )
    audience_type: Audience = Field(..., examples=["executive"])
    strategic_priority: Priority = Field(..., examples=["high"])
    trigger_context: str = Field(
        ...,
        description="Why the recommendation is needed now (1-2 sentences)",
        examples=["Denials up 15% this quarter."]
    )

    @field_validator("trigger_context")
    @classmethod
    def trigger_context_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("trigger_context must not be blank")
        return value

    @model_validator(mode="after")
    def secondary_excludes_primary(self) -> "RecommendationRequest":
        if self.primary_engine in self.secondary_engines:
            raise ValueError("secondary_engines must not contain primary_engine")
        return self


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class RecommendedAsset(ClosedModel):
    """One ranked asset recommendation."""
    rank: Literal[1, 2, 3]
    asset_type: str
    primary_channel: str
    format: str
    use_case: str
    why_recommended: List[str] = Field(..., min_length=2, max_length=6)
    supported_internal_artifacts: List[str] = Field(..., min_length=1)
    engine_alignment: List[Engine] = Field(..., min_length=1)
    audience_alignment: Audience
    confidence: Confidence


class OutlineSection(ClosedModel):
    section_title: str
    section_goal: str
    required_elements: List[str] = Field(..., min_length=2, max_length=8)


class TopAssetBuildSpec(ClosedModel):
    """Build instructions for the rank-1 asset."""
    asset_type: str
    primary_channel: str
    format: str
    messaging_angle: str
    outline: List[OutlineSection] = Field(..., min_length=4, max_length=12)


class ProofRequirements(ClosedModel):
    financial: List[str]
    operational: List[str]
    technical: List[str]
    risk_compliance: List[str]


class ObjectionEntry(ClosedModel):
    objection: str
    response: str
    proof_points: List[str]


class ObjectionHandling(ClosedModel):
    finance: List[ObjectionEntry]
    care_delivery: List[ObjectionEntry]
    technology: List[ObjectionEntry]
    risk_compliance: List[ObjectionEntry]


class Traceability(ClosedModel):
    kb_artifacts_referenced: List[str]
    decision_trace: List[str]
    assumptions: List[str]


class RecommendationResponse(ClosedModel):
    """
    Complete recommendation returned by the provider and passed to the caller.

    Cross-field rules the JSON schema cannot express are enforced here:
    - ranks 1, 2 and 3 each appear exactly once
    - the build spec describes the rank-1 asset
    """
    inputs_echo: RecommendationRequest
    trigger_context_summary: str
    recommended_assets: List[RecommendedAsset] = Field(..., min_length=3, max_length=3)
    top_asset_build_spec: TopAssetBuildSpec
    proof_requirements: ProofRequirements
    objection_handling: ObjectionHandling
    traceability: Traceability

    @model_validator(mode="after")
    def check_ranking(self) -> "RecommendationResponse":
        ranks = sorted(asset.rank for asset in self.recommended_assets)
        if ranks != [1, 2, 3]:
            raise ValueError(f"recommended_assets ranks must be 1, 2 and 3 exactly once, got {ranks}")

        top = next(asset for asset in self.recommended_assets if asset.rank == 1)
        spec = self.top_asset_build_spec
        if (spec.asset_type, spec.primary_channel, spec.format) != (
            top.asset_type, top.primary_channel, top.format
        ):
            raise ValueError("top_asset_build_spec must describe the rank-1 asset")
        return self


# ============================================================================
# ERROR ENVELOPE
# ============================================================================

class ErrorResponse(BaseModel):
    """Body of every non-200 response from the gateway."""
    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code", examples=["upstream_error"])
    details: Optional[Any] = Field(None, description="Optional diagnostic detail")
