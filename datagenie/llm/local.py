"""
Local LLM Provider

Synchronous adapter for a local or self-hosted Ollama server, using the
non-streaming /api/chat endpoint over httpx.
"""

import logging

import httpx

from datagenie.llm.base import BaseLLMProvider
from datagenie.llm.models import LLMRequest, LLMResponse, LLMUsage
from datagenie.models.errors import (
    BackendConnectionError,
    BackendError,
    BackendTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"


class OllamaProvider(BaseLLMProvider):
    """
    Ollama LLM provider implementation.

    Attributes:
        base_url: Server root, e.g. http://localhost:11434
        client: Shared httpx.AsyncClient
    """

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        model: str = "llama3.1:8b",
        temperature: float = 0.15,
        max_tokens: int = 1000,
        timeout: float = 120,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize Ollama provider.

        Args:
            base_url: Base URL for the Ollama server
            model: Model name (e.g., "llama3.1:8b")
            temperature: Default temperature
            max_tokens: Default max tokens (sent as num_predict)
            timeout: Request timeout in seconds
            client: Pre-built httpx client (tests)
        """
        super().__init__(
            provider_name="ollama",
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=float(timeout))

        logger.info(
            f"Ollama provider initialized: {base_url} with model: {model}",
            extra={"base_url": base_url, "model": model},
        )

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate completion using the Ollama chat endpoint."""
        request = self._apply_defaults(request)
        self._log_request(request)

        payload = {
            "model": request.model or self.model,
            "messages": [{"role": msg.role, "content": msg.content} for msg in request.messages],
            "stream": False,
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            },
        }

        data = await self._call_ollama(payload)

        prompt_tokens = data.get("prompt_eval_count", 0) or 0
        completion_tokens = data.get("eval_count", 0) or 0
        llm_response = LLMResponse(
            content=(data.get("message") or {}).get("content", "") or "",
            model=data.get("model", self.model),
            usage=LLMUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            finish_reason="length" if data.get("done_reason") == "length" else "stop",
            provider="ollama",
            metadata={"base_url": self.base_url},
        )

        self._log_response(llm_response)
        return llm_response

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _call_ollama(self, payload: dict) -> dict:
        """POST to /api/chat and translate transport failures."""
        url = f"{self.base_url}/api/chat"
        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Ollama request timed out: {e}")
            raise BackendTimeoutError(self.provider_name, f"Request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Ollama returned HTTP {e.response.status_code}")
            raise BackendError(
                self.provider_name,
                f"HTTP {e.response.status_code}: {e.response.text}",
                context={"status_code": e.response.status_code},
            ) from e
        except httpx.TransportError as e:
            logger.error(f"Ollama connection error: {e}")
            raise BackendConnectionError(
                self.provider_name, f"Could not reach {url}: {e}"
            ) from e
        except ValueError as e:
            logger.error(f"Ollama returned invalid JSON: {e}")
            raise BackendError(self.provider_name, f"Invalid JSON response: {e}") from e
