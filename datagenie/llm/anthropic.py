"""
Anthropic LLM Provider

Synchronous adapter for the Anthropic messages API. The `anthropic` package
is an optional extra (`pip install datagenie[anthropic]`).
"""

import logging

from datagenie.llm.base import BaseLLMProvider
from datagenie.llm.models import LLMRequest, LLMResponse, LLMUsage
from datagenie.models.errors import (
    BackendConnectionError,
    BackendError,
    BackendTimeoutError,
)

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """
    Anthropic (Claude) LLM provider implementation.

    Anthropic takes the system prompt as a separate parameter, so the system
    message is lifted out of the message list.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-5",
        temperature: float = 0.15,
        max_tokens: int = 1000,
        timeout: float = 120,
    ):
        super().__init__(
            provider_name="anthropic",
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        try:
            from anthropic import AsyncAnthropic

            self.client = AsyncAnthropic(api_key=api_key, timeout=float(timeout), max_retries=0)
        except ImportError:
            logger.warning(
                "anthropic package not installed. Install with: pip install datagenie[anthropic]"
            )
            self.client = None

        logger.info(f"Anthropic provider initialized with model: {model}", extra={"model": model})

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate completion using Anthropic API."""
        if not self.client:
            raise ImportError("anthropic package not installed")

        import anthropic

        request = self._apply_defaults(request)
        self._log_request(request)

        system_message = None
        messages = []
        for msg in request.messages:
            if msg.role == "system":
                system_message = msg.content
            else:
                messages.append({"role": msg.role, "content": msg.content})

        kwargs = {}
        if system_message:
            kwargs["system"] = system_message

        try:
            response = await self.client.messages.create(
                model=request.model or self.model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                messages=messages,
                **kwargs,
            )
        except anthropic.APITimeoutError as e:
            logger.error(f"Anthropic API timeout: {e}")
            raise BackendTimeoutError(self.provider_name, f"Request timed out: {e}") from e
        except anthropic.APIConnectionError as e:
            logger.error(f"Anthropic connection error: {e}")
            raise BackendConnectionError(self.provider_name, f"Connection failed: {e}") from e
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise BackendError(self.provider_name, str(e)) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        llm_response = LLMResponse(
            content=text,
            model=response.model,
            usage=LLMUsage(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            ),
            finish_reason=self._map_finish_reason(response.stop_reason),
            provider="anthropic",
            metadata={"id": response.id},
        )

        self._log_response(llm_response)
        return llm_response

    async def aclose(self) -> None:
        if self.client:
            await self.client.close()

    def _map_finish_reason(self, reason: str | None) -> str:
        """Map Anthropic stop reason to standard format."""
        if reason == "max_tokens":
            return "length"
        else:
            return "stop"
