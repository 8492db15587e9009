"""
SQL Normalizer

Turns free-form LLM output into a single formatted T-SQL statement:
markdown fences, conversational preamble, trailing commentary and SQL
comments are removed, then the statement is formatted and terminated.

Every step is best-effort text processing. Unusual input degrades to
pass-through instead of raising.
"""

import logging
import re

from datagenie.sql.formatter import format_sql

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:sql)?\s*([\s\S]*?)```", re.IGNORECASE)
_SELECT_KEYWORD = re.compile(r"SELECT", re.IGNORECASE)
_LINE_COMMENT = re.compile(r"--.*?$", re.MULTILINE)
_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_TRAILING_SEMICOLONS = re.compile(r"\s*;(?:\s*;)*\s*$")


def extract_fenced_block(text: str) -> str:
    """Return the trimmed body of the first ``` fence, or the text unchanged."""
    match = _FENCED_BLOCK.search(text)
    if match:
        return match.group(1).strip()
    return text


def strip_preamble(text: str) -> str:
    """Drop everything before the first SELECT keyword."""
    match = _SELECT_KEYWORD.search(text)
    if match and match.start() > 0:
        return text[match.start():]
    return text


def strip_trailing_commentary(text: str) -> str:
    """
    Cut the text at the last semicolon when what follows is prose.

    Trailing text that itself starts with SELECT is kept, so a second
    statement survives clean-up.
    """
    last = text.rfind(";")
    if last <= 0:
        return text

    trailing = text[last + 1:].strip()
    if trailing and not trailing.upper().startswith("SELECT"):
        return text[: last + 1]
    return text


def strip_comments(text: str) -> str:
    """Remove -- line comments and /* */ block comments."""
    text = _LINE_COMMENT.sub("", text)
    return _BLOCK_COMMENT.sub("", text)


def ensure_terminated(sql: str) -> str:
    """Make the statement end with exactly one semicolon."""
    sql = _TRAILING_SEMICOLONS.sub(";", sql)
    if not sql.endswith(";"):
        sql += ";"
    return sql


def clean_and_format_sql(raw_text: str) -> str:
    """
    Clean raw LLM output into a formatted SQL statement ending in ';'.

    Args:
        raw_text: Text returned by the backend

    Returns:
        Formatted SQL terminated by a single semicolon

    Raises:
        TypeError: If raw_text is None

    Example:
        >>> clean_and_format_sql("Sure!\\n```sql\\nSELECT 1;\\n```\\nThis returns one.")
        'SELECT\\n    1;'
    """
    if raw_text is None:
        raise TypeError("raw_text must be a string, not None")

    sql = raw_text.strip()
    sql = extract_fenced_block(sql)
    sql = strip_preamble(sql)
    sql = strip_trailing_commentary(sql)
    sql = strip_comments(sql)
    sql = format_sql(sql)
    sql = ensure_terminated(sql.strip())

    logger.debug(
        "Cleaned SQL",
        extra={"raw_chars": len(raw_text), "sql_chars": len(sql)},
    )
    return sql
