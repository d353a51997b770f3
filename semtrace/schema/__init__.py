"""Schema layer: entity models and YAML loading."""

from .errors import ProjectLoadError, SchemaLoadError, SchemaValidationError
from .models import (
    Column,
    DbtModel,
    DbtProject,
    DbtSource,
    Dimension,
    Measure,
    MeasureRef,
    Metric,
    MetricRef,
    MetricTypeParams,
    ProjectConfig,
    SemanticEntity,
    SemanticLayerType,
    SemanticModel,
    SnowflakeSemanticLayer,
    SourceRef,
)
from .loader import load_yaml, load_yaml_string, validate_entry

__all__ = [
    "ProjectLoadError",
    "SchemaLoadError",
    "SchemaValidationError",
    "Column",
    "DbtModel",
    "DbtProject",
    "DbtSource",
    "Dimension",
    "Measure",
    "MeasureRef",
    "Metric",
    "MetricRef",
    "MetricTypeParams",
    "ProjectConfig",
    "SemanticEntity",
    "SemanticLayerType",
    "SemanticModel",
    "SnowflakeSemanticLayer",
    "SourceRef",
    "load_yaml",
    "load_yaml_string",
    "validate_entry",
]
