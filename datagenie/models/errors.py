"""
DataGenie Errors

Exception hierarchy shared by the prompt builder, the backend adapters and
the generation pipeline.
"""

from typing import Any


class DataGenieError(Exception):
    """
    Base exception for all DataGenie errors.

    Attributes:
        message: Error description
        context: Additional context for debugging
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/CLI output."""
        return {
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }


class PromptInputError(DataGenieError, ValueError):
    """A required input is missing or blank."""

    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(message, context={"parameter": parameter})


class MetadataParseError(DataGenieError):
    """Schema or config JSON could not be parsed into its model."""

    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(message, context={"parameter": parameter})


class BackendError(DataGenieError):
    """The LLM backend reported a failure."""

    def __init__(
        self,
        provider: str,
        message: str,
        context: dict[str, Any] | None = None,
    ):
        self.provider = provider
        super().__init__(f"[{provider}] {message}", context={"provider": provider, **(context or {})})


class BackendTimeoutError(BackendError):
    """The request exceeded the configured timeout and was cancelled."""


class BackendConnectionError(BackendError):
    """The backend could not be reached."""


class BackendSessionError(BackendError):
    """The session backend emitted an explicit error event."""

    def __init__(self, provider: str, backend_message: str):
        self.backend_message = backend_message
        super().__init__(
            provider,
            f"Session error: {backend_message}",
            context={"backend_message": backend_message},
        )
