"""
LLM Config Models

Typed view of the curated business metadata: friendly names, descriptions,
aliases, PII/restricted flags, join hints, required filters and business
terms.
"""

from pydantic import Field

from datagenie.models.base import DocumentModel


def split_aliases(aliases: str | None) -> list[str]:
    """
    Split a comma-delimited alias string.

    Example:
        >>> split_aliases(" record, recording,, entry ")
        ['record', 'recording', 'entry']
    """
    if not aliases or not aliases.strip():
        return []
    return [alias.strip() for alias in aliases.split(",") if alias.strip()]


def merge_aliases(configured: str | None, native: tuple[str, ...] | list[str]) -> list[str]:
    """
    Merge config aliases (comma string) with schema aliases (list).

    Config aliases come first; duplicates are dropped case-insensitively,
    keeping the first spelling seen.
    """
    merged: list[str] = []
    seen: set[str] = set()
    for alias in [*split_aliases(configured), *native]:
        alias = alias.strip()
        if not alias:
            continue
        key = alias.casefold()
        if key in seen:
            continue
        seen.add(key)
        merged.append(alias)
    return merged


class ColumnConfiguration(DocumentModel):
    """Business metadata for one column."""

    column_name: str = ""
    friendly_name: str | None = None
    description: str | None = None
    aliases: str | None = Field(None, description="Comma-delimited aliases")
    is_pii: bool = Field(default=False, description="Personally identifiable information")
    is_restricted: bool = Field(default=False, description="Access restricted")


class TableConfiguration(DocumentModel):
    """Business metadata for one table."""

    schema_name: str = "dbo"
    table_name: str = ""
    friendly_name: str | None = None
    description: str | None = None
    aliases: str | None = Field(None, description="Comma-delimited aliases")
    column_configurations: tuple[ColumnConfiguration, ...] = ()

    @property
    def qualified_name(self) -> str:
        """`schema.table` lookup key."""
        return f"{self.schema_name}.{self.table_name}"

    def column_lookup(self) -> dict[str, ColumnConfiguration]:
        """Column configurations keyed by case-folded column name (first one wins)."""
        lookup: dict[str, ColumnConfiguration] = {}
        for column in self.column_configurations:
            lookup.setdefault(column.column_name.casefold(), column)
        return lookup


class JoinHint(DocumentModel):
    """A relationship that declared foreign keys do not capture."""

    from_table: str = ""
    from_column: str = ""
    to_table: str = ""
    to_column: str = ""
    hint: str | None = None


class LLMConfig(DocumentModel):
    """Root of the config JSON document."""

    table_configurations: tuple[TableConfiguration, ...] = ()
    join_hints: tuple[JoinHint, ...] = ()
    required_filters: tuple[str, ...] = ()
    business_terms: tuple[str, ...] = ()

    def table_lookup(self) -> dict[str, TableConfiguration]:
        """Table configurations keyed by case-folded `schema.table` (first one wins)."""
        lookup: dict[str, TableConfiguration] = {}
        for table in self.table_configurations:
            lookup.setdefault(table.qualified_name.casefold(), table)
        return lookup
