"""
Tests for OpenAICompletionClient.

The SDK call is patched; no network traffic is made.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import openai
import pytest

from api.features.chat.clients.base import FALLBACK_REPLY
from api.features.chat.clients.openai_client import OpenAICompletionClient
from api.features.chat.exceptions import COMPLETION_FAILED, CompletionError

MESSAGES = [{"role": "user", "content": "Hello, how can you help me?"}]


def _completion(*choices):
    return SimpleNamespace(choices=list(choices))


def _choice(content):
    return SimpleNamespace(message=SimpleNamespace(content=content))


@pytest.fixture
def client():
    return OpenAICompletionClient(api_key="sk-test-key-1234567890abcdefghij")


class TestInit:
    """Test client construction."""

    def test_defaults(self, client):
        assert client.model == "gpt-3.5-turbo"
        assert client.max_tokens == 1000
        assert client.temperature == 0.7
        assert client.timeout == 30.0

    def test_sdk_client_has_timeout_and_no_retries(self):
        client = OpenAICompletionClient(api_key="sk-test", timeout=5.0)

        assert client.client.max_retries == 0
        assert client.client.timeout == 5.0


class TestComplete:
    """Test complete method."""

    @pytest.mark.asyncio
    async def test_returns_first_choice_content(self, client):
        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(_choice("Hello! I can help you with various tasks.")),
        ):
            result = await client.complete(MESSAGES)

        assert result == "Hello! I can help you with various tasks."

    @pytest.mark.asyncio
    async def test_passes_model_parameters(self, client):
        mock_create = AsyncMock(return_value=_completion(_choice("ok")))

        with patch.object(client.client.chat.completions, "create", mock_create):
            await client.complete([{"role": "user", "content": "Test message"}])

        mock_create.assert_awaited_once_with(
            model="gpt-3.5-turbo",
            messages=[{"role": "user", "content": "Test message"}],
            max_tokens=1000,
            temperature=0.7,
        )

    @pytest.mark.asyncio
    async def test_null_content_returns_fallback(self, client):
        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(_choice(None)),
        ):
            assert await client.complete(MESSAGES) == FALLBACK_REPLY

    @pytest.mark.asyncio
    async def test_empty_choices_returns_fallback(self, client):
        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(),
        ):
            assert await client.complete(MESSAGES) == FALLBACK_REPLY

    @pytest.mark.asyncio
    async def test_malformed_choice_returns_fallback(self, client):
        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(SimpleNamespace(text="This is a different format")),
        ):
            assert await client.complete(MESSAGES) == FALLBACK_REPLY

    @pytest.mark.asyncio
    async def test_api_error_becomes_opaque_completion_error(self, client):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        api_error = openai.APIStatusError(
            "Rate limit exceeded",
            response=httpx.Response(429, request=request),
            body=None,
        )

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=api_error,
        ):
            with pytest.raises(CompletionError) as exc_info:
                await client.complete(MESSAGES)

        assert str(exc_info.value) == COMPLETION_FAILED
        assert "Rate limit" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_becomes_completion_error(self, client):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=openai.APITimeoutError(request=request),
        ):
            with pytest.raises(CompletionError):
                await client.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_network_error_becomes_completion_error(self, client):
        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=ConnectionError("Network error: Connection timeout"),
        ):
            with pytest.raises(CompletionError) as exc_info:
                await client.complete(MESSAGES)

        assert exc_info.value.message == COMPLETION_FAILED
