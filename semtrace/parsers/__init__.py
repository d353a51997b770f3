"""Parsers for dbt projects and semantic layer configurations."""

from .dbt_project import (
    DbtProjectParser,
    extract_materialization,
    extract_refs,
    extract_sources,
)
from .dbt_semantic import (
    DbtSemanticLayerParser,
    parse_metrics,
    parse_semantic_models,
    parse_semantic_yaml_string,
)
from .snowflake import SnowflakeSemanticLayerParser

__all__ = [
    "DbtProjectParser",
    "extract_materialization",
    "extract_refs",
    "extract_sources",
    "DbtSemanticLayerParser",
    "parse_metrics",
    "parse_semantic_models",
    "parse_semantic_yaml_string",
    "SnowflakeSemanticLayerParser",
]
