"""
Database Schema Models

Typed view of the schema JSON produced by catalog introspection
(tables, columns, primary and foreign keys).
"""

from pydantic import Field

from datagenie.models.base import DocumentModel


class ColumnDefinition(DocumentModel):
    """A single column of a table."""

    column_name: str = Field(default="", description="Column name")
    data_type: str | None = Field(None, description="Declared SQL data type")
    aliases: tuple[str, ...] = Field(default=(), description="Native alternative names")
    max_length: int | None = Field(None, description="Character/byte length, if any")
    numeric_precision: int | None = Field(None, description="Numeric precision, if any")
    numeric_scale: int | None = Field(None, description="Numeric scale, if any")
    is_nullable: bool = Field(default=False, description="Whether the column accepts NULL")


class PrimaryKeyDefinition(DocumentModel):
    """Primary key constraint; column order matters for composite keys."""

    constraint_name: str | None = None
    columns: tuple[str, ...] = ()


class ForeignKeyDefinition(DocumentModel):
    """
    Foreign key constraint.

    `columns[i]` references `referenced_columns[i]`. When the two sequences
    differ in length only the common prefix is meaningful.
    """

    constraint_name: str | None = None
    referenced_schema: str = "dbo"
    referenced_table: str = ""
    columns: tuple[str, ...] = ()
    referenced_columns: tuple[str, ...] = ()

    def column_pairs(self) -> list[tuple[str, str]]:
        """Pair each column with its referenced column (truncated to the shorter side)."""
        return list(zip(self.columns, self.referenced_columns))


class TableDefinition(DocumentModel):
    """A table with its columns and keys."""

    schema_name: str = Field(default="dbo", description="Owning schema")
    table_name: str = Field(default="", description="Table name")
    aliases: tuple[str, ...] = Field(default=(), description="Native alternative names")
    columns: tuple[ColumnDefinition, ...] = ()
    primary_key: PrimaryKeyDefinition | None = None
    foreign_keys: tuple[ForeignKeyDefinition, ...] = ()

    @property
    def qualified_name(self) -> str:
        """`schema.table` lookup key."""
        return f"{self.schema_name}.{self.table_name}"


class DatabaseSchema(DocumentModel):
    """Root of the schema JSON document."""

    database_name: str | None = None
    server_name: str | None = None
    generated_at: str | None = None
    tables: tuple[TableDefinition, ...] = ()
