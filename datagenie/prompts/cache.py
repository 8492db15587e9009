"""
System prompt memoization.

The system prompt is expensive to render for large schemas and is reused
for every query against the same schema/config pair. Entries are keyed by a
content digest of both documents plus the truncation limits, so editing
either document produces a new key and the prompt is rebuilt on next use.
"""

import hashlib
import logging
import threading
from collections import OrderedDict

from datagenie.prompts.builder import (
    DEFAULT_MAX_COLUMNS_PER_TABLE,
    DEFAULT_MAX_TABLES,
    build_system_prompt,
)

logger = logging.getLogger(__name__)


def prompt_cache_key(
    schema_json: str,
    config_json: str,
    max_tables: int,
    max_columns_per_table: int,
) -> str:
    """Build a stable cache key from document content and limits."""
    digest = hashlib.sha256()
    for part in (schema_json, config_json, str(max_tables), str(max_columns_per_table)):
        digest.update(part.encode("utf-8"))
        digest.update(b"\x00")
    return digest.hexdigest()


class PromptCache:
    """
    Bounded, thread-safe memo of rendered system prompts.

    Attributes:
        max_tables: Table limit passed to the builder
        max_columns_per_table: Column limit passed to the builder
        max_entries: Number of distinct schema/config pairs kept (LRU)
    """

    def __init__(
        self,
        max_tables: int = DEFAULT_MAX_TABLES,
        max_columns_per_table: int = DEFAULT_MAX_COLUMNS_PER_TABLE,
        max_entries: int = 8,
    ):
        self.max_tables = max_tables
        self.max_columns_per_table = max_columns_per_table
        self.max_entries = max(1, max_entries)
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._lock = threading.Lock()

    def get_or_build(self, schema_json: str, config_json: str) -> str:
        """
        Return the cached prompt for these documents, rendering it on first use.

        Raises:
            PromptInputError: If either document is blank
            MetadataParseError: If either document is malformed
        """
        # build_system_prompt reports which parameter is missing
        if schema_json is None or config_json is None:
            return build_system_prompt(
                schema_json, config_json, self.max_tables, self.max_columns_per_table
            )

        key = prompt_cache_key(
            schema_json, config_json, self.max_tables, self.max_columns_per_table
        )

        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                return cached

            prompt = build_system_prompt(
                schema_json, config_json, self.max_tables, self.max_columns_per_table
            )
            self._entries[key] = prompt
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

        logger.info(
            "System prompt generated and cached.",
            extra={"prompt_key": key[:12], "chars": len(prompt)},
        )
        logger.debug(f"System prompt: {prompt}")
        return prompt

    def invalidate(self) -> None:
        """Drop every cached prompt."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
