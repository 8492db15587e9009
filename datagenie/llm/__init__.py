"""
LLM Provider Module

Backend adapters behind one interface, plus the dispatcher that calls them.

Usage:
    from datagenie.config import get_settings
    from datagenie.llm import BackendDispatcher, LLMProviderFactory

    settings = get_settings()
    provider = LLMProviderFactory.create_provider(settings.llm)
    dispatcher = BackendDispatcher(provider, settings.llm.request_timeout_seconds)

    raw = await dispatcher.generate("top 5 customers by revenue", system_prompt)
    await dispatcher.aclose()
"""

from datagenie.llm.anthropic import AnthropicProvider
from datagenie.llm.base import BaseLLMProvider
from datagenie.llm.copilot import CopilotSessionProvider
from datagenie.llm.dispatcher import BackendDispatcher, build_user_prompt
from datagenie.llm.factory import LLMProviderFactory
from datagenie.llm.local import OllamaProvider
from datagenie.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage
from datagenie.llm.openai import AzureOpenAIProvider, OpenAIProvider

__all__ = [
    # Base classes
    "BaseLLMProvider",
    # Models
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMUsage",
    # Dispatch
    "BackendDispatcher",
    "build_user_prompt",
    # Factory
    "LLMProviderFactory",
    # Providers
    "OpenAIProvider",
    "AzureOpenAIProvider",
    "OllamaProvider",
    "AnthropicProvider",
    "CopilotSessionProvider",
]
