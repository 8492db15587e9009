"""Clean-up and pretty-printing of generated SQL."""

from datagenie.sql.formatter import format_select_columns, format_sql
from datagenie.sql.normalizer import clean_and_format_sql

__all__ = [
    "format_sql",
    "format_select_columns",
    "clean_and_format_sql",
]
