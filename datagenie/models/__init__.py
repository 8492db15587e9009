"""
DataGenie Models Module

Pydantic models for the two input documents and the shared exception types.

Available Models:
    Schema Models:
        - DatabaseSchema: Root of the schema JSON
        - TableDefinition, ColumnDefinition
        - PrimaryKeyDefinition, ForeignKeyDefinition

    Config Models:
        - LLMConfig: Root of the business metadata JSON
        - TableConfiguration, ColumnConfiguration, JoinHint

    Errors:
        - DataGenieError and subclasses
"""

from datagenie.models.errors import (
    BackendConnectionError,
    BackendError,
    BackendSessionError,
    BackendTimeoutError,
    DataGenieError,
    MetadataParseError,
    PromptInputError,
)
from datagenie.models.metadata import (
    ColumnConfiguration,
    JoinHint,
    LLMConfig,
    TableConfiguration,
    merge_aliases,
    split_aliases,
)
from datagenie.models.schema import (
    ColumnDefinition,
    DatabaseSchema,
    ForeignKeyDefinition,
    PrimaryKeyDefinition,
    TableDefinition,
)

__all__ = [
    # Schema
    "DatabaseSchema",
    "TableDefinition",
    "ColumnDefinition",
    "PrimaryKeyDefinition",
    "ForeignKeyDefinition",
    # Config
    "LLMConfig",
    "TableConfiguration",
    "ColumnConfiguration",
    "JoinHint",
    "split_aliases",
    "merge_aliases",
    # Errors
    "DataGenieError",
    "PromptInputError",
    "MetadataParseError",
    "BackendError",
    "BackendTimeoutError",
    "BackendConnectionError",
    "BackendSessionError",
]
