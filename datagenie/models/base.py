"""
Base model for the schema and config JSON documents.

Both documents are produced by other tools (and edited by hand), so property
names are matched case-insensitively ("DatabaseName", "databaseName" and
"database_name" all populate `database_name`), `null` falls back to the
field default, and unknown properties are ignored.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from datagenie.models.errors import MetadataParseError
from datagenie.utils.lenient_json import loads_lenient

logger = logging.getLogger(__name__)


def _fold(key: str) -> str:
    return key.replace("_", "").lower()


class DocumentModel(BaseModel):
    """Immutable value model populated from relaxed, case-insensitive JSON."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Map incoming property names onto field names and drop nulls."""
        if not isinstance(data, dict):
            return data

        lookup = {_fold(name): name for name in cls.model_fields}
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            field_name = lookup.get(_fold(key), key) if isinstance(key, str) else key
            normalized[field_name] = value
        return normalized

    @classmethod
    def from_json(cls, text: str, parameter: str):
        """
        Parse a JSON document into this model.

        Args:
            text: Raw JSON text (comments and trailing commas allowed)
            parameter: Name of the caller's parameter, reported on failure

        Returns:
            Parsed, frozen model instance

        Raises:
            MetadataParseError: If the text is not JSON or has the wrong shape
        """
        try:
            data = loads_lenient(text)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {parameter}: {e}")
            raise MetadataParseError(
                parameter, f"{parameter} is not valid JSON: {e}"
            ) from e

        if data is None:
            raise MetadataParseError(parameter, f"Failed to deserialize {parameter}: document is null")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected document shape in {parameter}: {e}")
            raise MetadataParseError(
                parameter, f"Failed to deserialize {parameter}: {e}"
            ) from e
