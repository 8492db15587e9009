"""
SQL Generator

End-to-end pipeline: validate the query, fetch the memoized system prompt,
ask the backend, clean the answer.

Usage:
    async with SqlGenerator.from_settings(get_settings()) as generator:
        sql = await generator.generate_statement_from_nlq(
            "top 5 customers by revenue", schema_json, config_json
        )
"""

import logging
import time

from datagenie.config import Settings
from datagenie.llm.dispatcher import BackendDispatcher
from datagenie.llm.factory import LLMProviderFactory
from datagenie.models.errors import PromptInputError
from datagenie.prompts.cache import PromptCache
from datagenie.sql.normalizer import clean_and_format_sql

logger = logging.getLogger(__name__)


class SqlGenerator:
    """
    Natural-language-to-SQL pipeline.

    Attributes:
        dispatcher: Sends the query to the configured backend
        prompt_cache: Memoized system prompts keyed by schema/config content
        include_config_as_hints: Send the config JSON as hints when none are given
    """

    def __init__(
        self,
        dispatcher: BackendDispatcher,
        prompt_cache: PromptCache | None = None,
        include_config_as_hints: bool = True,
    ):
        self.dispatcher = dispatcher
        self.prompt_cache = prompt_cache if prompt_cache is not None else PromptCache()
        self.include_config_as_hints = include_config_as_hints

    @classmethod
    def from_settings(cls, settings: Settings) -> "SqlGenerator":
        """Wire provider, dispatcher and prompt cache from configuration."""
        provider = LLMProviderFactory.create_provider(settings.llm)
        dispatcher = BackendDispatcher(provider, timeout=settings.llm.request_timeout_seconds)
        prompt_cache = PromptCache(
            max_tables=settings.prompt.max_tables,
            max_columns_per_table=settings.prompt.max_columns_per_table,
            max_entries=settings.prompt.cache_size,
        )
        return cls(
            dispatcher=dispatcher,
            prompt_cache=prompt_cache,
            include_config_as_hints=settings.prompt.include_config_as_hints,
        )

    async def generate_statement_from_nlq(
        self,
        natural_language_query: str,
        schema_json: str,
        config_json: str,
        hints: str | None = None,
    ) -> str:
        """
        Generate a cleaned SQL statement for a natural-language query.

        Args:
            natural_language_query: The user's question
            schema_json: Schema document
            config_json: Business metadata document
            hints: Extra guidance for the backend (defaults to config_json
                when include_config_as_hints is set)

        Returns:
            One formatted statement terminated by ';'

        Raises:
            PromptInputError: A required input is blank
            MetadataParseError: A JSON document is malformed
            BackendError: The backend failed or timed out
        """
        if natural_language_query is None or not natural_language_query.strip():
            raise PromptInputError(
                "natural_language_query", "Natural language query is required."
            )

        # Validation and parse errors surface here, before any network call
        system_prompt = self.prompt_cache.get_or_build(schema_json, config_json)

        if hints is None and self.include_config_as_hints:
            hints = config_json

        start_time = time.time()
        raw_text = await self.dispatcher.generate(natural_language_query, system_prompt, hints)
        sql = clean_and_format_sql(raw_text)

        logger.info(
            "Generated SQL statement",
            extra={
                "provider": self.dispatcher.provider.provider_name,
                "duration_ms": round((time.time() - start_time) * 1000, 1),
            },
        )
        logger.debug(f"Generated SQL: {sql}")
        return sql

    async def aclose(self) -> None:
        """Release the backend (HTTP clients, or the Copilot session and client)."""
        await self.dispatcher.aclose()

    async def __aenter__(self) -> "SqlGenerator":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
