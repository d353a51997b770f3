"""Project pipeline: load, build the lineage graph, audit it."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from .graph.builder import build_graph
from .graph.lineage_graph import LineageGraph
from .parsers.dbt_project import DbtProjectParser
from .parsers.dbt_semantic import DbtSemanticLayerParser
from .parsers.snowflake import SnowflakeSemanticLayerParser
from .schema.errors import ProjectLoadError, SchemaLoadError, SchemaValidationError
from .schema.models import (
    DbtModel,
    DbtProject,
    DbtSource,
    Metric,
    ProjectConfig,
    SemanticLayerType,
    SemanticModel,
)
from .validators.base import AuditResult
from .validators.runner import analyze

logger = logging.getLogger(__name__)


def _empty_audit() -> AuditResult:
    return AuditResult(
        completeness_score=0.0, documentation_coverage=0.0, model_coverage=0.0
    )


class ParseResult(BaseModel):
    """Everything known about a project after one pipeline run.

    ``errors`` holds fatal problems (the graph was not built); ``warnings``
    holds stages that failed without stopping the run.
    """

    success: bool = False
    dbt_project: DbtProject | None = None
    models: list[DbtModel] = Field(default_factory=list)
    sources: list[DbtSource] = Field(default_factory=list)
    semantic_models: list[SemanticModel] = Field(default_factory=list)
    metrics: list[Metric] = Field(default_factory=list)
    lineage: LineageGraph = Field(default_factory=LineageGraph)
    audit: AuditResult = Field(default_factory=_empty_audit)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def parse_project(config: ProjectConfig) -> ParseResult:
    """Load a dbt project and its semantic layer, then build and audit.

    Args:
        config: Where the project lives and which semantic layer to read.

    Returns:
        A ParseResult. If dbt_project.yml cannot be read, it carries one
        error and no graph.

    Raises:
        ProjectLoadError: If the project directory does not exist.
    """
    project_path = Path(config.dbt_project_path)
    if not project_path.exists():
        raise ProjectLoadError(
            f"Project path does not exist: {config.dbt_project_path}",
            config.dbt_project_path,
        )

    result = ParseResult()
    dbt_parser = DbtProjectParser(project_path)

    try:
        project = dbt_parser.parse_project()
    except (SchemaLoadError, SchemaValidationError) as e:
        result.errors.append(f"Failed to parse dbt_project.yml: {e}")
        return result
    result.dbt_project = project

    try:
        result.models = dbt_parser.parse_models(project)
        logger.info("Parsed %d models", len(result.models))
    except OSError as e:
        result.warnings.append(f"Failed to parse some models: {e}")

    try:
        result.sources = dbt_parser.parse_sources(project)
        logger.info("Parsed %d sources", len(result.sources))
    except OSError as e:
        result.warnings.append(f"Failed to parse some sources: {e}")

    _parse_semantic_layer(config, result)

    result.lineage = build_graph(
        result.models, result.sources, result.semantic_models, result.metrics
    )
    logger.info(
        "Built lineage graph with %d nodes and %d edges",
        len(result.lineage.nodes),
        len(result.lineage.edges),
    )

    result.audit = analyze(
        result.lineage,
        result.models,
        result.sources,
        result.semantic_models,
        result.metrics,
    )
    logger.info(
        "Audit complete: %.1f%% completeness, %d issues found",
        result.audit.completeness_score,
        len(result.audit.issues),
    )

    result.success = not result.errors
    return result


def _parse_semantic_layer(config: ProjectConfig, result: ParseResult) -> None:
    if config.semantic_layer_type == SemanticLayerType.DBT_SEMANTIC_LAYER:
        try:
            semantic_models, metrics = DbtSemanticLayerParser(
                config.dbt_project_path
            ).parse()
        except OSError as e:
            result.warnings.append(f"Failed to parse semantic layer: {e}")
            return
        logger.info(
            "Parsed %d semantic models and %d metrics",
            len(semantic_models),
            len(metrics),
        )
        result.semantic_models = semantic_models
        result.metrics = metrics

    elif config.semantic_layer_type == SemanticLayerType.SNOWFLAKE:
        if not config.semantic_layer_path:
            result.warnings.append("Snowflake semantic layer path not provided")
            return
        try:
            layer = SnowflakeSemanticLayerParser().parse(config.semantic_layer_path)
        except SchemaLoadError as e:
            result.warnings.append(f"Failed to parse Snowflake semantic layer: {e}")
            return
        # Snowflake definitions are not mapped onto the graph yet
        logger.info(
            "Parsed Snowflake semantic layer: %d tables, %d metrics",
            len(layer.tables),
            len(layer.metrics),
        )
        result.warnings.append(
            "Snowflake semantic layer parsing is basic - full support coming soon"
        )

    else:
        logger.info("No semantic layer type specified, skipping semantic layer parsing")


def load_project(
    project_dir: str | Path,
    semantic_layer_type: SemanticLayerType = SemanticLayerType.DBT_SEMANTIC_LAYER,
    semantic_layer_path: str | None = None,
) -> ParseResult:
    """Shorthand for :func:`parse_project` with a project directory."""
    return parse_project(
        ProjectConfig(
            dbt_project_path=str(project_dir),
            semantic_layer_type=semantic_layer_type,
            semantic_layer_path=semantic_layer_path,
        )
    )
