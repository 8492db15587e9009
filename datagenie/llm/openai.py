"""
OpenAI LLM Provider

Synchronous (request/response) adapters for OpenAI chat completions and for
Azure-hosted OpenAI deployments. Both use the official openai SDK with its
built-in retries disabled.
"""

import logging

import openai
from openai import AsyncAzureOpenAI, AsyncOpenAI

from datagenie.llm.base import BaseLLMProvider
from datagenie.llm.models import LLMRequest, LLMResponse, LLMUsage
from datagenie.models.errors import (
    BackendConnectionError,
    BackendError,
    BackendTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_AZURE_API_VERSION = "2024-06-01"


class OpenAIProvider(BaseLLMProvider):
    """
    OpenAI LLM provider implementation.

    Sends the system prompt and the user message as two chat messages and
    returns the first choice.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        temperature: float = 0.15,
        max_tokens: int = 1000,
        timeout: float = 120,
        client: AsyncOpenAI | None = None,
        provider_name: str = "openai",
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Default model to use
            temperature: Default temperature
            max_tokens: Default max tokens
            timeout: Request timeout in seconds
            client: Pre-built SDK client (Azure, tests)
            provider_name: Name reported in logs and errors
        """
        super().__init__(
            provider_name=provider_name,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.client = client or AsyncOpenAI(
            api_key=api_key,
            timeout=float(timeout),
            max_retries=0,
        )

        logger.info(f"OpenAI provider initialized with model: {model}", extra={"model": model})

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Generate completion using the chat completions API.

        Raises:
            BackendTimeoutError: The SDK timed out
            BackendConnectionError: The endpoint could not be reached
            BackendError: Any other API error
        """
        request = self._apply_defaults(request)
        self._log_request(request)

        messages = [{"role": msg.role, "content": msg.content} for msg in request.messages]

        try:
            response = await self.client.chat.completions.create(
                model=request.model or self.model,
                messages=messages,
                temperature=request.temperature,
                max_tokens=request.max_tokens,
            )
        # APITimeoutError subclasses APIConnectionError, so it goes first
        except openai.APITimeoutError as e:
            logger.error(f"{self.provider_name} API timeout: {e}")
            raise BackendTimeoutError(self.provider_name, f"Request timed out: {e}") from e
        except openai.APIConnectionError as e:
            logger.error(f"{self.provider_name} connection error: {e}")
            raise BackendConnectionError(self.provider_name, f"Connection failed: {e}") from e
        except openai.APIError as e:
            logger.error(f"{self.provider_name} API error: {e}")
            raise BackendError(self.provider_name, str(e)) from e

        choice = response.choices[0]
        usage = response.usage
        llm_response = LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            usage=LLMUsage(
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            )
            if usage
            else LLMUsage(),
            finish_reason=self._map_finish_reason(choice.finish_reason),
            provider=self.provider_name,
            metadata={"id": response.id, "created": response.created},
        )

        self._log_response(llm_response)
        return llm_response

    async def aclose(self) -> None:
        await self.client.close()

    def _map_finish_reason(self, reason: str | None) -> str:
        """Map OpenAI finish reason to our standard format."""
        if reason == "length":
            return "length"
        elif reason == "content_filter":
            return "content_filter"
        else:
            return "stop"


class AzureOpenAIProvider(OpenAIProvider):
    """
    Azure OpenAI provider.

    `model` is the Azure deployment name.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        model: str,
        api_version: str = DEFAULT_AZURE_API_VERSION,
        temperature: float = 0.15,
        max_tokens: int = 1000,
        timeout: float = 120,
        client: AsyncAzureOpenAI | None = None,
    ):
        client = client or AsyncAzureOpenAI(
            api_key=api_key,
            azure_endpoint=endpoint,
            api_version=api_version,
            timeout=float(timeout),
            max_retries=0,
        )
        super().__init__(
            api_key=api_key,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            client=client,
            provider_name="azure_openai",
        )
        self.endpoint = endpoint
