"""Tests for the backend dispatcher and the user message format."""

import asyncio

import pytest

from datagenie.llm.dispatcher import USER_INSTRUCTION, BackendDispatcher, build_user_prompt
from datagenie.models.errors import BackendConnectionError, BackendTimeoutError


class TestBuildUserPrompt:
    """Test the user message layout."""

    def test_without_hints(self):
        assert build_user_prompt("list customers") == (
            "\nQUERY: list customers\n\nReturn only T-SQL starting with SELECT."
        )

    def test_blank_hints_omitted(self):
        assert build_user_prompt("q", "   ") == build_user_prompt("q")

    def test_with_hints(self):
        assert build_user_prompt("list customers", "fiscal year starts in July") == (
            "HINTS:\n"
            "fiscal year starts in July\n"
            "\n"
            "\n"
            "QUERY: list customers\n"
            "\n"
            f"{USER_INSTRUCTION}"
        )


class TestGenerate:
    """Test dispatching to the provider."""

    @pytest.mark.asyncio
    async def test_two_messages(self, mock_llm_provider):
        provider = mock_llm_provider(content="SELECT 1")
        dispatcher = BackendDispatcher(provider, timeout=5)

        raw = await dispatcher.generate("count orders", "SYSTEM PROMPT", hints="HINT TEXT")

        assert raw == "SELECT 1"
        request = provider.generate.call_args.args[0]
        assert [m.role for m in request.messages] == ["system", "user"]
        assert request.messages[0].content == "SYSTEM PROMPT"
        assert request.messages[1].content == build_user_prompt("count orders", "HINT TEXT")

    def test_timeout_defaults_to_provider(self, mock_llm_provider):
        assert BackendDispatcher(mock_llm_provider(timeout=42)).timeout == 42

    @pytest.mark.asyncio
    async def test_timeout_cancels_call(self, mock_llm_provider):
        provider = mock_llm_provider()
        cancelled = asyncio.Event()

        async def hang(request):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        provider.generate.side_effect = hang
        dispatcher = BackendDispatcher(provider, timeout=0.05)

        with pytest.raises(BackendTimeoutError) as exc_info:
            await dispatcher.generate("q", "system")

        assert cancelled.is_set()
        assert exc_info.value.context["timeout"] == 0.05

    @pytest.mark.asyncio
    async def test_provider_errors_propagate(self, mock_llm_provider):
        provider = mock_llm_provider()
        provider.generate.side_effect = BackendConnectionError("stub", "down")

        with pytest.raises(BackendConnectionError):
            await BackendDispatcher(provider).generate("q", "system")

        assert provider.generate.await_count == 1

    @pytest.mark.asyncio
    async def test_aclose_releases_provider(self, mock_llm_provider):
        provider = mock_llm_provider()
        await BackendDispatcher(provider).aclose()

        provider.aclose.assert_awaited_once()
