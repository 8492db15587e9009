"""
Backend Dispatcher

Single entry point for turning a natural-language query plus the cached
system prompt into raw backend text. Which provider sits behind it is fixed
when the dispatcher is built; every call gets the same timeout budget.
"""

import asyncio
import logging

from datagenie.llm.base import BaseLLMProvider
from datagenie.llm.models import LLMMessage, LLMRequest
from datagenie.models.errors import BackendTimeoutError

logger = logging.getLogger(__name__)

USER_INSTRUCTION = "Return only T-SQL starting with SELECT."


def build_user_prompt(natural_language_query: str, hints: str | None = None) -> str:
    """
    Build the user message.

    Example:
        >>> print(build_user_prompt("top customers", "use Sales schema"))
        HINTS:
        use Sales schema
        <BLANKLINE>
        <BLANKLINE>
        QUERY: top customers
        <BLANKLINE>
        Return only T-SQL starting with SELECT.
    """
    lines = []
    if hints and hints.strip():
        lines.append("HINTS:")
        lines.append(hints)
        lines.append("")
    lines.append("")
    lines.append(f"QUERY: {natural_language_query}")
    lines.append("")
    lines.append(USER_INSTRUCTION)
    return "\n".join(lines)


class BackendDispatcher:
    """
    Sends one query to the configured provider under a timeout.

    Attributes:
        provider: Backend adapter chosen at configuration time
        timeout: Seconds before the call is cancelled
    """

    def __init__(self, provider: BaseLLMProvider, timeout: float | None = None):
        self.provider = provider
        self.timeout = timeout if timeout is not None else provider.timeout

    async def generate(
        self,
        natural_language_query: str,
        system_prompt: str,
        hints: str | None = None,
    ) -> str:
        """
        Generate raw backend text for a query.

        Args:
            natural_language_query: The user's question
            system_prompt: Rendered schema/metadata prompt
            hints: Optional free text placed ahead of the query

        Returns:
            Backend text, not yet cleaned

        Raises:
            BackendTimeoutError: The call exceeded the timeout and was cancelled
            BackendError: The provider reported a failure
        """
        request = LLMRequest(
            messages=[
                LLMMessage(role="system", content=system_prompt),
                LLMMessage(role="user", content=build_user_prompt(natural_language_query, hints)),
            ]
        )

        logger.info(
            f"Dispatching query to {self.provider.provider_name}",
            extra={"provider": self.provider.provider_name, "timeout": self.timeout},
        )

        try:
            response = await asyncio.wait_for(self.provider.generate(request), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(
                f"{self.provider.provider_name} did not answer within {self.timeout}s",
                extra={"provider": self.provider.provider_name},
            )
            raise BackendTimeoutError(
                self.provider.provider_name,
                f"No response within {self.timeout} seconds",
                context={"timeout": self.timeout},
            ) from e

        logger.debug(f"Raw backend response: {response.content}")
        return response.content

    async def aclose(self) -> None:
        await self.provider.aclose()
