"""
Copilot Session Provider

Session adapter for the GitHub Copilot SDK. Unlike the request/response
adapters, Copilot keeps a long-lived CLI client and a chat session; replies
arrive as events on the session rather than as a return value.

Lifecycle:
    - The client is created (auto-start, auto-restart) and started on first use.
    - A session is created with the system prompt appended to Copilot's own
      system context. It is reused until the system prompt changes.
    - Each call subscribes a fresh _PendingReply to the session, sends the
      user prompt, and waits until the session goes idle or reports an error.
    - aclose() destroys the session and stops the client.

The `github-copilot-sdk` package is an optional extra
(`pip install datagenie[copilot]`).
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from datagenie.llm.base import BaseLLMProvider
from datagenie.llm.models import LLMRequest, LLMResponse
from datagenie.models.errors import (
    BackendConnectionError,
    BackendError,
    BackendSessionError,
)

logger = logging.getLogger(__name__)

PROVIDER_NAME = "copilot"

ClientFactory = Callable[[dict[str, Any]], Any]


def _default_client_factory(options: dict[str, Any]) -> Any:
    try:
        from copilot import CopilotClient
    except ImportError as e:
        raise ImportError(
            "github-copilot-sdk package not installed. "
            "Install with: pip install datagenie[copilot]"
        ) from e
    return CopilotClient(options)


def _event_type(event: Any) -> str:
    event_type = getattr(event, "type", None)
    return getattr(event_type, "value", event_type) or ""


class _PendingReply:
    """
    Buffer and completion future for a single call.

    A whole assistant message replaces the deltas buffered for it, so a
    backend that sends both never duplicates text.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self.future: asyncio.Future[str] = loop.create_future()
        self._messages: list[str] = []
        self._deltas: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self._messages) + "".join(self._deltas)

    def handle_event(self, event: Any) -> None:
        if self.future.done():
            return

        event_type = _event_type(event)
        data = getattr(event, "data", None)

        if event_type == "assistant.message":
            self._deltas.clear()
            self._messages.append(getattr(data, "content", None) or "")
        elif event_type == "assistant.message_delta":
            self._deltas.append(getattr(data, "delta_content", None) or "")
        elif event_type == "session.idle":
            self.future.set_result(self.text)
        elif event_type == "session.error":
            message = getattr(data, "message", None) or "unknown error"
            logger.error(f"Copilot session error: {message}")
            self.future.set_exception(BackendSessionError(PROVIDER_NAME, message))
        elif event_type in ("tool.execution_start", "tool.execution_complete"):
            logger.debug(
                f"Copilot {event_type}",
                extra={"tool_call_id": getattr(data, "tool_call_id", None)},
            )


class CopilotSessionProvider(BaseLLMProvider):
    """
    GitHub Copilot session adapter.

    Calls are serialized on the shared session with an asyncio.Lock.
    Temperature and max_tokens are not supported by the session API and
    are ignored.

    Attributes:
        cli_path: Optional path to the Copilot CLI executable
    """

    def __init__(
        self,
        model: str = "gpt-4.1",
        temperature: float = 0.15,
        max_tokens: int = 1000,
        timeout: float = 120,
        cli_path: str | None = None,
        client_factory: ClientFactory | None = None,
    ):
        super().__init__(
            provider_name=PROVIDER_NAME,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )
        self.cli_path = cli_path
        self._client_factory = client_factory or _default_client_factory
        self._client: Any = None
        self._session: Any = None
        self._session_prompt: str | None = None
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def has_session(self) -> bool:
        return self._session is not None

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Send the user prompt to the session and wait for the reply.

        Raises:
            BackendConnectionError: The client or session could not be started
            BackendSessionError: The session emitted an error event
            BackendError: The prompt could not be sent, or the provider is closed
        """
        self._log_request(request)
        system_prompt = request.system_prompt or ""

        async with self._lock:
            if self._closed:
                raise BackendError(PROVIDER_NAME, "Provider has been closed")

            session = await self._ensure_session(system_prompt)
            pending = _PendingReply(asyncio.get_running_loop())
            unsubscribe = session.on(pending.handle_event)
            try:
                try:
                    await session.send({"prompt": request.user_prompt})
                except Exception as e:
                    logger.error(f"Failed to send prompt to Copilot: {e}")
                    raise BackendError(PROVIDER_NAME, f"Failed to send prompt: {e}") from e
                content = await pending.future
            except asyncio.CancelledError:
                # Late events from the abandoned turn must not reach the next call
                logger.warning("Copilot request cancelled, discarding session")
                await self._discard_session()
                raise
            finally:
                unsubscribe()

        llm_response = LLMResponse(
            content=content,
            model=request.model or self.model,
            provider=PROVIDER_NAME,
        )
        self._log_response(llm_response)
        return llm_response

    async def aclose(self) -> None:
        """Destroy the session and stop the client. Safe to call twice."""
        if self._closed:
            return
        self._closed = True

        await self._discard_session()

        client, self._client = self._client, None
        if client is not None:
            try:
                await client.stop()
                logger.info("Copilot client stopped")
            except Exception as e:
                logger.warning(f"Error stopping Copilot client: {e}")

    async def _ensure_session(self, system_prompt: str) -> Any:
        if self._client is None:
            options: dict[str, Any] = {"auto_start": True, "auto_restart": True}
            if self.cli_path:
                options["cli_path"] = self.cli_path
            client = self._client_factory(options)
            try:
                await client.start()
            except Exception as e:
                logger.error(f"Failed to start Copilot client: {e}")
                raise BackendConnectionError(PROVIDER_NAME, f"Could not start client: {e}") from e
            self._client = client
            logger.info("Copilot client started")

        if self._session is not None and self._session_prompt != system_prompt:
            logger.info("System prompt changed, recreating Copilot session")
            await self._discard_session()

        if self._session is None:
            config: dict[str, Any] = {"model": self.model}
            if system_prompt:
                config["system_message"] = {"mode": "append", "content": system_prompt}
            try:
                self._session = await self._client.create_session(config)
            except Exception as e:
                logger.error(f"Failed to create Copilot session: {e}")
                raise BackendConnectionError(
                    PROVIDER_NAME, f"Could not create session: {e}"
                ) from e
            self._session_prompt = system_prompt
            logger.info("Copilot session created", extra={"model": self.model})

        return self._session

    async def _discard_session(self) -> None:
        session, self._session = self._session, None
        self._session_prompt = None
        if session is None:
            return
        try:
            await session.destroy()
        except Exception as e:
            logger.warning(f"Error destroying Copilot session: {e}")
