"""
LLM Request and Response Models

Provider-agnostic pydantic models shared by the synchronous adapters
(OpenAI, Azure OpenAI, Ollama, Anthropic) and the Copilot session adapter.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class LLMMessage(BaseModel):
    """Single message in an LLM conversation."""

    role: Literal["system", "user", "assistant"] = Field(
        ...,
        description="Message role"
    )
    content: str = Field(
        ...,
        description="Message content",
        min_length=1
    )


class LLMRequest(BaseModel):
    """Request to an LLM provider."""

    messages: list[LLMMessage] = Field(
        ...,
        description="Conversation messages",
        min_length=1
    )
    temperature: float | None = Field(
        None,
        ge=0.0,
        le=2.0,
        description="Sampling temperature (overrides default)"
    )
    max_tokens: int | None = Field(
        None,
        gt=0,
        description="Maximum tokens to generate (overrides default)"
    )
    model: str | None = Field(
        None,
        description="Specific model to use (overrides default)"
    )

    @property
    def system_prompt(self) -> str | None:
        """Content of the first system message, if any."""
        for message in self.messages:
            if message.role == "system":
                return message.content
        return None

    @property
    def user_prompt(self) -> str:
        """Content of the user messages joined by blank lines."""
        return "\n\n".join(m.content for m in self.messages if m.role == "user")


class LLMUsage(BaseModel):
    """Token usage information."""

    prompt_tokens: int = Field(
        default=0,
        ge=0,
        description="Number of tokens in the prompt"
    )
    completion_tokens: int = Field(
        default=0,
        ge=0,
        description="Number of tokens in the completion"
    )
    total_tokens: int = Field(
        default=0,
        ge=0,
        description="Total tokens used"
    )


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    content: str = Field(
        ...,
        description="Generated text content"
    )
    model: str = Field(
        ...,
        description="Model that generated the response"
    )
    usage: LLMUsage = Field(
        default_factory=LLMUsage,
        description="Token usage information (zeros when the backend does not report it)"
    )
    finish_reason: Literal["stop", "length", "content_filter", "error"] = Field(
        default="stop",
        description="Reason the generation stopped"
    )
    provider: str = Field(
        ...,
        description="Provider that handled the request (openai, ollama, copilot, etc.)"
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional provider-specific response data"
    )
