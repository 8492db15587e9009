"""Tests for the Anthropic provider (skipped when the extra is not installed)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

anthropic = pytest.importorskip("anthropic")

import httpx  # noqa: E402

from datagenie.llm.anthropic import AnthropicProvider  # noqa: E402
from datagenie.llm.models import LLMMessage, LLMRequest  # noqa: E402
from datagenie.models.errors import BackendConnectionError  # noqa: E402


@pytest.fixture
def provider():
    return AnthropicProvider(api_key="sk-ant-test", model="claude-sonnet-4-5", timeout=30)


@pytest.fixture
def request_pair():
    return LLMRequest(
        messages=[
            LLMMessage(role="system", content="schema prompt"),
            LLMMessage(role="user", content="QUERY: customers"),
        ]
    )


@pytest.mark.asyncio
async def test_system_prompt_sent_separately(provider, request_pair):
    mock_response = MagicMock()
    mock_response.content = [MagicMock(type="text", text="SELECT 1")]
    mock_response.model = "claude-sonnet-4-5"
    mock_response.usage.input_tokens = 12
    mock_response.usage.output_tokens = 3
    mock_response.stop_reason = "end_turn"
    mock_response.id = "msg_1"

    mock_create = AsyncMock(return_value=mock_response)
    with patch.object(provider.client.messages, "create", mock_create):
        response = await provider.generate(request_pair)

    kwargs = mock_create.call_args.kwargs
    assert kwargs["system"] == "schema prompt"
    assert kwargs["messages"] == [{"role": "user", "content": "QUERY: customers"}]
    assert response.content == "SELECT 1"
    assert response.usage.total_tokens == 15


@pytest.mark.asyncio
async def test_connection_error_mapped(provider, request_pair):
    error = anthropic.APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com"))
    with patch.object(provider.client.messages, "create", new_callable=AsyncMock, side_effect=error):
        with pytest.raises(BackendConnectionError):
            await provider.generate(request_pair)
