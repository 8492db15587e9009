"""Natural-language-to-SQL pipeline."""

from datagenie.pipeline.generator import SqlGenerator

__all__ = ["SqlGenerator"]
