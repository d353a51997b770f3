"""Parser for Snowflake semantic layer configurations."""

import logging
from pathlib import Path
from typing import Any

from ..schema.errors import SchemaValidationError
from ..schema.loader import load_yaml, validate_entry
from ..schema.models import (
    SnowflakeDimension,
    SnowflakeMetric,
    SnowflakeSemanticLayer,
    SnowflakeTable,
)

logger = logging.getLogger(__name__)


def _parse_list(model_cls, data: Any, rename: dict[str, str] | None = None) -> list:
    if not isinstance(data, list):
        return []

    parsed = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        entry = dict(entry)
        for old, new in (rename or {}).items():
            if old in entry:
                entry[new] = entry.pop(old)
        try:
            parsed.append(validate_entry(model_cls, entry))
        except SchemaValidationError as e:
            logger.debug("Skipping %s %r: %s", model_cls.__name__, entry.get("name"), e.errors)
    return parsed


class SnowflakeSemanticLayerParser:
    """Reads a Snowflake semantic layer YAML file.

    Entries missing a required key are skipped.
    """

    def parse(self, path: str | Path) -> SnowflakeSemanticLayer:
        """Parse the file at ``path``.

        Raises:
            SchemaLoadError: If the file cannot be read or parsed.
        """
        data = load_yaml(path)
        return self.parse_data(data)

    def parse_data(self, data: dict) -> SnowflakeSemanticLayer:
        return SnowflakeSemanticLayer(
            tables=_parse_list(SnowflakeTable, data.get("tables"), {"table": "table_name"}),
            metrics=_parse_list(SnowflakeMetric, data.get("metrics")),
            dimensions=_parse_list(
                SnowflakeDimension, data.get("dimensions"), {"type": "dimension_type"}
            ),
        )
