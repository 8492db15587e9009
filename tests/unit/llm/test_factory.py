"""
Tests for LLM Provider Factory.

Tests provider creation from LLMSettings.
"""

import pytest

from datagenie.config import LLMSettings
from datagenie.llm.copilot import CopilotSessionProvider
from datagenie.llm.factory import DEFAULT_MODELS, LLMProviderFactory
from datagenie.llm.local import OllamaProvider
from datagenie.llm.openai import AzureOpenAIProvider, OpenAIProvider


class TestCreateProvider:
    """Test provider selection."""

    def test_openai(self):
        config = LLMSettings(provider="openai", api_key="sk-test", request_timeout_seconds=30)
        provider = LLMProviderFactory.create_provider(config)

        assert isinstance(provider, OpenAIProvider)
        assert provider.model == DEFAULT_MODELS["openai"]
        assert provider.timeout == 30
        assert provider.temperature == 0.15
        assert provider.max_tokens == 1000

    def test_model_override(self):
        config = LLMSettings(provider="openai", api_key="sk-test", model="gpt-4o-mini")
        assert LLMProviderFactory.create_provider(config).model == "gpt-4o-mini"

    def test_azure_openai(self):
        config = LLMSettings(
            provider="azure_openai",
            api_key="azure-key",
            endpoint="https://example.openai.azure.com",
            model="sql-deployment",
        )
        provider = LLMProviderFactory.create_provider(config)

        assert isinstance(provider, AzureOpenAIProvider)
        assert provider.endpoint == "https://example.openai.azure.com"

    def test_ollama_default_endpoint(self):
        config = LLMSettings(provider="ollama")
        provider = LLMProviderFactory.create_provider(config)

        assert isinstance(provider, OllamaProvider)
        assert provider.base_url == "http://localhost:11434"

    def test_copilot_is_lazy(self):
        config = LLMSettings(provider="copilot", cli_path="/usr/local/bin/copilot")
        provider = LLMProviderFactory.create_provider(config)

        assert isinstance(provider, CopilotSessionProvider)
        assert provider.cli_path == "/usr/local/bin/copilot"
        assert not provider.has_session

    def test_anthropic(self):
        pytest.importorskip("anthropic")
        from datagenie.llm.anthropic import AnthropicProvider

        config = LLMSettings(provider="anthropic", api_key="sk-ant-test")
        provider = LLMProviderFactory.create_provider(config)

        assert isinstance(provider, AnthropicProvider)
        assert provider.client is not None

    def test_unknown_provider(self):
        config = LLMSettings.model_construct(provider="google")

        with pytest.raises(ValueError, match="Unknown provider type"):
            LLMProviderFactory.create_provider(config)

    def test_registry_covers_every_provider(self):
        assert set(LLMProviderFactory.PROVIDERS) == set(DEFAULT_MODELS)
