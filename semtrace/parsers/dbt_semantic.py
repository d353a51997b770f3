"""Parser for dbt Semantic Layer (MetricFlow) configurations."""

import logging
from pathlib import Path
from typing import Any

from ..schema.errors import SchemaLoadError, SchemaValidationError
from ..schema.loader import load_yaml, load_yaml_string, validate_entry
from ..schema.models import Metric, SemanticModel

logger = logging.getLogger(__name__)

# Directories scanned for semantic_models: and metrics: sections
SEMANTIC_DIRS = ("models", "semantic_models", "metrics")


def parse_semantic_models(data: Any) -> list[SemanticModel]:
    """Parse a ``semantic_models:`` list, skipping invalid entries."""
    return _parse_entries(SemanticModel, data)


def parse_metrics(data: Any) -> list[Metric]:
    """Parse a ``metrics:`` list, skipping invalid entries."""
    return _parse_entries(Metric, data)


def _parse_entries(model_cls, data: Any) -> list:
    if not isinstance(data, list):
        return []

    parsed = []
    for entry in data:
        try:
            parsed.append(validate_entry(model_cls, entry))
        except SchemaValidationError as e:
            name = entry.get("name") if isinstance(entry, dict) else None
            logger.debug("Skipping %s %r: %s", model_cls.__name__, name, e.errors)
    return parsed


def parse_semantic_yaml_string(
    yaml_string: str,
) -> tuple[list[SemanticModel], list[Metric]]:
    """Parse semantic models and metrics from a YAML document.

    Raises:
        SchemaLoadError: If the YAML cannot be parsed.
    """
    data = load_yaml_string(yaml_string)
    return parse_semantic_models(data.get("semantic_models")), parse_metrics(
        data.get("metrics")
    )


class DbtSemanticLayerParser:
    """Reads semantic models and metrics from a dbt project directory."""

    def __init__(self, project_path: str | Path):
        self.project_path = Path(project_path)

    def parse(self) -> tuple[list[SemanticModel], list[Metric]]:
        """Parse all semantic models and metrics in the project.

        Files that are not valid YAML are skipped.

        Returns:
            Semantic models and metrics, in directory then file order.
        """
        semantic_models: list[SemanticModel] = []
        metrics: list[Metric] = []

        for dirname in SEMANTIC_DIRS:
            directory = self.project_path / dirname
            if not directory.exists():
                continue
            self.scan_directory(directory, semantic_models, metrics)

        return semantic_models, metrics

    def scan_directory(
        self,
        directory: Path,
        semantic_models: list[SemanticModel],
        metrics: list[Metric],
    ) -> None:
        for path in sorted(directory.rglob("*")):
            if path.suffix not in (".yml", ".yaml") or not path.is_file():
                continue
            try:
                data = load_yaml(path)
            except SchemaLoadError as e:
                logger.debug("Skipping %s: %s", path, e)
                continue

            semantic_models.extend(parse_semantic_models(data.get("semantic_models")))
            metrics.extend(parse_metrics(data.get("metrics")))
