"""
System Prompt Builder

Renders the database schema and curated business metadata into the system
prompt that constrains the LLM to a single T-SQL SELECT statement.

The output is a pure function of its inputs. Sections appear in a fixed
order, each one closed by a blank line:

    1. Instructions and hard rules
    2. Database identity
    3. Join Hints          (only when configured)
    4. Required Filters    (only when configured)
    5. Business Terms      (only when configured)
    6. Schema
    7. Output format
"""

import logging

from datagenie.models.errors import PromptInputError
from datagenie.models.metadata import (
    ColumnConfiguration,
    LLMConfig,
    TableConfiguration,
    merge_aliases,
)
from datagenie.models.schema import ColumnDefinition, DatabaseSchema, TableDefinition

logger = logging.getLogger(__name__)

LINE_END = "\n"

DEFAULT_MAX_TABLES = 200
DEFAULT_MAX_COLUMNS_PER_TABLE = 200

INSTRUCTIONS = (
    "You are a SQL query generator.",
    "Return EXACTLY ONE SQL Server SELECT statement and nothing else.",
)

HARD_RULES = (
    "Output must be a single T-SQL SELECT statement (no INSERT/UPDATE/DELETE/MERGE/DDL).",
    "Use ONLY tables and columns that exist in the provided schema.",
    "Prefer joins based on declared foreign keys; join hints may clarify intent.",
    "Do not invent parameters. Use literal values only if the user provides them.",
    "If the request is ambiguous, choose the safest reasonable interpretation.",
    "If a field is marked PII or RESTRICTED, do NOT select it.",
    "Qualify tables as [schema].[table] and columns as [alias].[column].",
    "Use explicit JOIN ... ON ... clauses (no implicit joins).",
    "Use GROUP BY correctly and TOP (N) with ORDER BY when applicable.",
)

OUTPUT_FORMAT = (
    "Output format:",
    "- SQL only. No markdown. No explanation. No JSON.",
)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class _PromptWriter:
    """Line accumulator with a single line terminator."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def line(self, text: str = "") -> None:
        self._parts.append(text)
        self._parts.append(LINE_END)

    def render(self) -> str:
        return "".join(self._parts)


def build_system_prompt(
    schema_json: str,
    config_json: str,
    max_tables: int = DEFAULT_MAX_TABLES,
    max_columns_per_table: int = DEFAULT_MAX_COLUMNS_PER_TABLE,
) -> str:
    """
    Create the system prompt from schema and config JSON.

    Args:
        schema_json: Schema document (tables, columns, keys)
        config_json: Business metadata document
        max_tables: Keep only the first N tables (0 renders none)
        max_columns_per_table: Keep only the first N columns of each table

    Returns:
        The rendered system prompt

    Raises:
        PromptInputError: If either JSON string is missing or blank
        MetadataParseError: If either document is malformed
    """
    if _is_blank(schema_json):
        raise PromptInputError("schema_json", "Database schema JSON is required.")
    if _is_blank(config_json):
        raise PromptInputError("config_json", "LLM config JSON is required.")

    schema = DatabaseSchema.from_json(schema_json, "schema_json")
    config = LLMConfig.from_json(config_json, "config_json")

    return render_system_prompt(schema, config, max_tables, max_columns_per_table)


def render_system_prompt(
    schema: DatabaseSchema,
    config: LLMConfig,
    max_tables: int = DEFAULT_MAX_TABLES,
    max_columns_per_table: int = DEFAULT_MAX_COLUMNS_PER_TABLE,
) -> str:
    """Render already-parsed documents into the system prompt."""
    writer = _PromptWriter()

    _write_instructions(writer)
    _write_database(writer, schema)
    _write_business_rules(writer, config)
    _write_schema(writer, schema, config, max_tables, max_columns_per_table)

    for line in OUTPUT_FORMAT:
        writer.line(line)

    prompt = writer.render()
    logger.debug(
        "Rendered system prompt",
        extra={
            "tables": min(len(schema.tables), max(0, max_tables)),
            "chars": len(prompt),
        },
    )
    return prompt


def _write_instructions(writer: _PromptWriter) -> None:
    for line in INSTRUCTIONS:
        writer.line(line)
    writer.line()

    writer.line("Hard rules:")
    for number, rule in enumerate(HARD_RULES, start=1):
        writer.line(f"{number}) {rule}")
    writer.line()


def _write_database(writer: _PromptWriter, schema: DatabaseSchema) -> None:
    writer.line("Database:")
    writer.line(f" - Name: {schema.database_name or '(unknown)'}")
    writer.line(f" - Server: {schema.server_name or '(unknown)'}")
    writer.line()


def _write_business_rules(writer: _PromptWriter, config: LLMConfig) -> None:
    if config.join_hints:
        writer.line("Join Hints:")
        for h in config.join_hints:
            comment = "" if _is_blank(h.hint) else f"  // {h.hint}"
            writer.line(f" - {h.from_table}.[{h.from_column}] -> {h.to_table}.[{h.to_column}]{comment}")
        writer.line()

    if config.required_filters:
        writer.line("Required Filters:")
        for required_filter in config.required_filters:
            writer.line(f" - {required_filter}")
        writer.line()

    if config.business_terms:
        writer.line("Business Terms:")
        for term in config.business_terms:
            writer.line(f" - {term}")
        writer.line()


def _write_schema(
    writer: _PromptWriter,
    schema: DatabaseSchema,
    config: LLMConfig,
    max_tables: int,
    max_columns_per_table: int,
) -> None:
    writer.line("Schema:")

    tables = schema.tables[: max(0, max_tables)]
    if not tables:
        writer.line()
        return

    table_configs = config.table_lookup()
    for table in tables:
        table_config = table_configs.get(table.qualified_name.casefold())
        _write_table(writer, table, table_config, max_columns_per_table)


def _write_table(
    writer: _PromptWriter,
    table: TableDefinition,
    table_config: TableConfiguration | None,
    max_columns_per_table: int,
) -> None:
    writer.line(f"- Table: [{table.schema_name}].[{table.table_name}]")

    if table_config and not _is_blank(table_config.friendly_name):
        writer.line(f"  FriendlyName: {table_config.friendly_name}")
    if table_config and not _is_blank(table_config.description):
        writer.line(f"  Description: {table_config.description}")

    aliases = merge_aliases(table_config.aliases if table_config else None, table.aliases)
    if aliases:
        writer.line(f"  Aliases: {', '.join(aliases)}")

    if table.primary_key and table.primary_key.columns:
        key_columns = ", ".join(f"[{c}]" for c in table.primary_key.columns)
        writer.line(f"  PrimaryKey: ({key_columns})")

    if table.foreign_keys:
        writer.line("  ForeignKeys:")
        for fk in table.foreign_keys:
            # Composite keys explode into one line per column pair
            for column, referenced in fk.column_pairs():
                writer.line(
                    f"    - [{table.schema_name}].[{table.table_name}].[{column}] -> "
                    f"[{fk.referenced_schema}].[{fk.referenced_table}].[{referenced}]"
                )

    column_configs = table_config.column_lookup() if table_config else {}

    writer.line("  Columns:")
    for column in table.columns[: max(0, max_columns_per_table)]:
        column_config = column_configs.get(column.column_name.casefold())
        writer.line(format_column_line(column, column_config))

    writer.line()


def format_column_line(
    column: ColumnDefinition,
    column_config: ColumnConfiguration | None = None,
) -> str:
    """
    Render one column entry.

    Example:
        `    - [SSN] : char(11) [PII, RESTRICTED]  Aliases: Social  FriendlyName: Social Security Number`
    """
    flags = []
    if not column.is_nullable:
        flags.append("NOT NULL")
    if column_config and column_config.is_pii:
        flags.append("PII")
    if column_config and column_config.is_restricted:
        flags.append("RESTRICTED")

    data_type = column.data_type or "unknown"
    if column.max_length is not None:
        data_type += f"({column.max_length})"

    aliases = merge_aliases(column_config.aliases if column_config else None, column.aliases)

    line = f"    - [{column.column_name}] : {data_type}"
    if flags:
        line += f" [{', '.join(flags)}]"
    if aliases:
        line += f"  Aliases: {', '.join(aliases)}"
    if column_config and not _is_blank(column_config.friendly_name):
        line += f"  FriendlyName: {column_config.friendly_name}"
    if column_config and not _is_blank(column_config.description):
        line += f"  Description: {column_config.description}"
    return line
