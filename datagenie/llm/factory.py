"""
LLM Provider Factory

Creates the single backend adapter named by `LLMSettings.provider`.
"""

import logging

from datagenie.config import LLMSettings
from datagenie.llm.anthropic import AnthropicProvider
from datagenie.llm.base import BaseLLMProvider
from datagenie.llm.copilot import CopilotSessionProvider
from datagenie.llm.local import OllamaProvider
from datagenie.llm.openai import AzureOpenAIProvider, OpenAIProvider

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "azure_openai": "gpt-4o",
    "ollama": "llama3.1:8b",
    "anthropic": "claude-sonnet-4-5",
    "copilot": "gpt-4.1",
}


class LLMProviderFactory:
    """Factory for creating LLM provider instances from settings."""

    PROVIDERS = {
        "openai": OpenAIProvider,
        "azure_openai": AzureOpenAIProvider,
        "ollama": OllamaProvider,
        "anthropic": AnthropicProvider,
        "copilot": CopilotSessionProvider,
    }

    @staticmethod
    def create_provider(config: LLMSettings) -> BaseLLMProvider:
        """
        Create the configured provider.

        Args:
            config: LLM configuration settings

        Returns:
            Configured provider instance

        Raises:
            ValueError: If the provider is unknown or required config is missing
        """
        provider_type = config.provider
        if provider_type not in LLMProviderFactory.PROVIDERS:
            raise ValueError(
                f"Unknown provider type: {provider_type}. "
                f"Available providers: {list(LLMProviderFactory.PROVIDERS.keys())}"
            )

        model = config.model or DEFAULT_MODELS[provider_type]
        logger.info(
            f"Creating {provider_type} provider",
            extra={"provider": provider_type, "model": model},
        )

        if provider_type == "openai":
            return LLMProviderFactory._create_openai(config, model)
        elif provider_type == "azure_openai":
            return LLMProviderFactory._create_azure_openai(config, model)
        elif provider_type == "ollama":
            return LLMProviderFactory._create_ollama(config, model)
        elif provider_type == "anthropic":
            return LLMProviderFactory._create_anthropic(config, model)
        elif provider_type == "copilot":
            return LLMProviderFactory._create_copilot(config, model)

        raise ValueError(f"Provider {provider_type} not implemented")  # pragma: no cover

    @staticmethod
    def _create_openai(config: LLMSettings, model: str) -> OpenAIProvider:
        if not config.api_key:
            raise ValueError("OpenAI API key is required but not configured")

        return OpenAIProvider(
            api_key=config.api_key,
            model=model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout_seconds,
        )

    @staticmethod
    def _create_azure_openai(config: LLMSettings, model: str) -> AzureOpenAIProvider:
        if not config.api_key or not config.endpoint:
            raise ValueError("Azure OpenAI requires both an API key and an endpoint")

        return AzureOpenAIProvider(
            api_key=config.api_key,
            endpoint=config.endpoint,
            model=model,
            api_version=config.api_version,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout_seconds,
        )

    @staticmethod
    def _create_ollama(config: LLMSettings, model: str) -> OllamaProvider:
        return OllamaProvider(
            base_url=config.endpoint or "http://localhost:11434",
            model=model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout_seconds,
        )

    @staticmethod
    def _create_anthropic(config: LLMSettings, model: str) -> AnthropicProvider:
        if not config.api_key:
            raise ValueError("Anthropic API key is required but not configured")

        return AnthropicProvider(
            api_key=config.api_key,
            model=model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout_seconds,
        )

    @staticmethod
    def _create_copilot(config: LLMSettings, model: str) -> CopilotSessionProvider:
        return CopilotSessionProvider(
            model=model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout_seconds,
            cli_path=config.cli_path,
        )
