"""
Tests for the Azure OpenAI chat completions client.

The SDK talks to an httpx.MockTransport, so no network calls are made.
"""

import httpx
import pytest

from cram_demand.agents.recommendation.client import AzureOpenAIChatClient
from cram_demand.utils.errors import (
    InvalidProviderResponseError,
    ProviderTransportError,
    UpstreamError,
)

RESPONSE_FORMAT = {"type": "json_schema", "json_schema": {"name": "t", "strict": True, "schema": {}}}


def make_client(handler) -> AzureOpenAIChatClient:
    return AzureOpenAIChatClient(
        endpoint="https://test-resource.openai.azure.com/",
        api_key="secret-key",
        deployment="gpt-test",
        api_version="2024-08-01-preview",
        timeout_sec=5,
        transport=httpx.MockTransport(handler),
    )


async def complete(client: AzureOpenAIChatClient) -> str:
    return await client.complete_json(
        system_prompt="system text",
        user_prompt="user text",
        response_format=RESPONSE_FORMAT,
    )


class TestCompleteJson:

    @pytest.mark.asyncio
    async def test_success_returns_message_content(self, provider_returning, completion_body):
        provider = provider_returning(200, json_body=completion_body('{"ok": true}'))

        content = await complete(make_client(provider))

        assert content == '{"ok": true}'
        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_request_targets_deployment_with_key_header(self, provider_returning, completion_body):
        provider = provider_returning(200, json_body=completion_body("{}"))

        await complete(make_client(provider))

        request = provider.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/openai/deployments/gpt-test/chat/completions"
        assert request.url.params["api-version"] == "2024-08-01-preview"
        assert request.headers["api-key"] == "secret-key"

        body = provider.last_body()
        assert body["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]
        assert body["model"] == "gpt-test"
        assert body["response_format"] == RESPONSE_FORMAT
        assert "stream" not in body

    @pytest.mark.asyncio
    async def test_non_success_status_raises_upstream_error(self, provider_returning):
        provider = provider_returning(429, text="Rate limit exceeded")

        with pytest.raises(UpstreamError) as exc_info:
            await complete(make_client(provider))

        assert exc_info.value.provider_status == 429
        assert "429" in exc_info.value.message
        assert "Rate limit exceeded" in exc_info.value.message
        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_connection_failure_raises_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderTransportError):
            await complete(make_client(handler))

    @pytest.mark.asyncio
    async def test_non_json_body_is_invalid_response(self, provider_returning):
        provider = provider_returning(200, text="<html>gateway</html>")

        with pytest.raises(InvalidProviderResponseError, match="non-JSON"):
            await complete(make_client(provider))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_missing_content_is_invalid_response(self, provider_returning, completion_body, content):
        provider = provider_returning(200, json_body=completion_body(content))

        with pytest.raises(InvalidProviderResponseError, match="no content"):
            await complete(make_client(provider))

    @pytest.mark.asyncio
    async def test_missing_choices_is_invalid_response(self, provider_returning):
        provider = provider_returning(200, json_body={"choices": []})

        with pytest.raises(InvalidProviderResponseError, match="no message"):
            await complete(make_client(provider))

    @pytest.mark.asyncio
    async def test_refusal_is_invalid_response(self, provider_returning):
        body = {"choices": [{"message": {"role": "assistant", "content": None, "refusal": "I can't help."}}]}
        provider = provider_returning(200, json_body=body)

        with pytest.raises(InvalidProviderResponseError, match="refused"):
            await complete(make_client(provider))

    @pytest.mark.asyncio
    async def test_server_error_is_not_retried(self, provider_returning):
        provider = provider_returning(503, text="Service Unavailable")

        with pytest.raises(UpstreamError):
            await complete(make_client(provider))

        assert provider.calls == 1
