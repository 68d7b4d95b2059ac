"""
Azure OpenAI chat completions client.

A thin adapter over openai.AsyncAzureOpenAI for one schema-constrained
completion:
  - POST {endpoint}/openai/deployments/{deployment}/chat/completions?api-version=...
  - Body: { messages: [system, user], response_format, temperature }
  - Returns the assistant message content (JSON text, not yet parsed)

Exactly one request per call: SDK retries are disabled and nothing streams.
The raw HTTP response is inspected so an off-contract body is reported as
such instead of surfacing as an SDK parsing error.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from openai import APIConnectionError, APIStatusError, AsyncAzureOpenAI

from cram_demand.utils.errors import (
    InvalidProviderResponseError,
    ProviderTransportError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


class AzureOpenAIChatClient:
    """Chat completions against one Azure OpenAI deployment."""

    def __init__(
        self,
        *,
        endpoint: str,
        api_key: str,
        deployment: str,
        api_version: str,
        timeout_sec: float,
        temperature: float = 0.2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.api_key = api_key
        self.deployment = deployment
        self.api_version = api_version
        self.timeout = timeout_sec
        self.temperature = temperature
        self.transport = transport

    def _sdk_client(self) -> AsyncAzureOpenAI:
        return AsyncAzureOpenAI(
            azure_endpoint=self.endpoint,
            api_key=self.api_key,
            api_version=self.api_version,
            timeout=self.timeout,
            max_retries=0,
            http_client=httpx.AsyncClient(timeout=self.timeout, transport=self.transport),
        )

    async def complete_json(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        response_format: Dict[str, Any],
    ) -> str:
        """
        Request a schema-constrained completion and return its content.

        Raises:
            ProviderTransportError: The provider could not be reached
            UpstreamError: Non-success HTTP status (status and body included)
            InvalidProviderResponseError: No usable message content
        """
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        logger.info(f"Calling Azure OpenAI deployment={self.deployment} api_version={self.api_version}")

        try:
            async with self._sdk_client() as client:
                raw = await client.chat.completions.with_raw_response.create(
                    model=self.deployment,
                    messages=messages,
                    response_format=response_format,
                    temperature=self.temperature,
                )
        except APIStatusError as e:
            logger.error(f"Azure OpenAI returned HTTP {e.status_code}")
            raise UpstreamError(provider_status=e.status_code, body=e.response.text) from e
        except APIConnectionError as e:
            logger.error(f"Azure OpenAI unreachable: {e!r}")
            raise ProviderTransportError("Could not reach the model provider.") from e

        response = raw.http_response
        logger.info(f"Azure OpenAI responded HTTP {response.status_code}")
        return _extract_content(response)


def _extract_content(response: httpx.Response) -> str:
    """Pull the assistant message text out of a chat completions body."""
    try:
        body = response.json()
    except ValueError as e:
        logger.error(f"Provider body is not JSON: {response.text[:200]}")
        raise InvalidProviderResponseError("Model provider returned a non-JSON body.") from e

    try:
        message = body["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as e:
        raise InvalidProviderResponseError("Model provider response has no message.") from e

    if not isinstance(message, dict):
        raise InvalidProviderResponseError("Model provider response has no message.")

    refusal = message.get("refusal")
    if refusal:
        logger.warning("Azure OpenAI refused the request")
        raise InvalidProviderResponseError(f"Model provider refused the request: {refusal}")

    content = message.get("content")
    if not isinstance(content, str) or not content.strip():
        raise InvalidProviderResponseError("Model provider response has no content.")

    return content
