"""
Error taxonomy for the recommendation gateway.

Every failure is terminal for the call. Each error carries the HTTP status
and machine-readable code used by the exception handler in main.py to build
the JSON envelope: {"error": <message>, "code": <code>, "details": ...}.
"""

from typing import Any, Optional


class GatewayError(Exception):
    """Base class for failures surfaced to the caller."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body: dict = {"error": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class ConfigurationError(GatewayError):
    """Required provider settings are absent. Raised before any network call."""

    status_code = 500
    code = "configuration_error"


class KnowledgeBaseError(GatewayError):
    """The knowledge-base document could not be read or parsed."""

    status_code = 500
    code = "knowledge_base_error"


class InvalidRequestError(GatewayError):
    """The request body is not a JSON object."""

    status_code = 400
    code = "invalid_request"


class RequestValidationFailed(GatewayError):
    """The request body parsed but violates the request contract."""

    status_code = 422
    code = "validation_error"


class UpstreamError(GatewayError):
    """The provider answered with a non-success HTTP status."""

    status_code = 502
    code = "upstream_error"

    def __init__(self, provider_status: int, body: str) -> None:
        super().__init__(
            f"Model provider returned HTTP {provider_status}: {body[:500]}",
            details={"provider_status": provider_status, "body": body[:2000]},
        )
        self.provider_status = provider_status
        self.body = body


class InvalidProviderResponseError(GatewayError):
    """The provider answered 2xx but its content is absent, unparseable or off-contract."""

    status_code = 502
    code = "invalid_provider_response"


class ProviderTransportError(GatewayError):
    """The provider could not be reached."""

    status_code = 502
    code = "transport_error"
