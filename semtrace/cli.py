"""Command-line interface for semtrace."""

import json
import logging
import sys

import click

from .graph.errors import NodeNotFoundError
from .graph.lineage_graph import LineageGraph
from .graph.queries import get_impact_analysis, get_metric_lineage, search_nodes
from .output.export import export_audit_json, export_lineage_json, to_mermaid
from .output.formatter import format_audit_result
from .pipeline import ParseResult, load_project
from .schema.errors import ProjectLoadError
from .schema.models import SemanticLayerType

_semantic_layer_option = click.option(
    "--semantic-layer",
    "semantic_layer",
    type=click.Choice([t.value for t in SemanticLayerType]),
    default=SemanticLayerType.DBT_SEMANTIC_LAYER.value,
    help="Semantic layer flavour to read",
)
_semantic_layer_path_option = click.option(
    "--semantic-layer-path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Semantic layer file (Snowflake only)",
)


def _load(
    project_dir: str,
    semantic_layer: str = SemanticLayerType.DBT_SEMANTIC_LAYER.value,
    semantic_layer_path: str | None = None,
) -> ParseResult:
    """Run the pipeline, exiting with status 2 on fatal load errors."""
    try:
        result = load_project(
            project_dir, SemanticLayerType(semantic_layer), semantic_layer_path
        )
    except ProjectLoadError as e:
        click.echo(f"Error loading project: {e}", err=True)
        sys.exit(2)

    if result.errors:
        for error in result.errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(2)

    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)

    return result


def _echo_nodes(graph: LineageGraph) -> None:
    for node in graph.nodes:
        click.echo(f"{node.node_type.value:<10} {node.name}")


@click.group()
@click.version_option()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log progress")
def main(verbose: bool):
    """semtrace: trace semantic layer metrics back to their sources."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors",
)
@_semantic_layer_option
@_semantic_layer_path_option
def audit(
    project_dir: str,
    output_format: str,
    strict: bool,
    semantic_layer: str,
    semantic_layer_path: str | None,
):
    """Audit a dbt project's metric lineage.

    PROJECT_DIR is the directory holding dbt_project.yml.

    Exit codes:
      0 - Audit passed
      1 - Audit found errors (or warnings with --strict)
      2 - Project could not be loaded
    """
    result = _load(project_dir, semantic_layer, semantic_layer_path)

    click.echo(format_audit_result(result.audit, output_format))  # type: ignore

    if result.audit.has_errors:
        sys.exit(1)
    elif strict and result.audit.has_warnings:
        sys.exit(1)
    else:
        sys.exit(0)


@main.command()
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False))
@click.argument("metric_name")
@_semantic_layer_option
@_semantic_layer_path_option
def lineage(
    project_dir: str,
    metric_name: str,
    semantic_layer: str,
    semantic_layer_path: str | None,
):
    """Show everything METRIC_NAME is built from."""
    result = _load(project_dir, semantic_layer, semantic_layer_path)

    try:
        upstream = get_metric_lineage(result, metric_name)
    except NodeNotFoundError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    _echo_nodes(upstream)


@main.command()
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False))
@click.argument("node_name")
@_semantic_layer_option
@_semantic_layer_path_option
def impact(
    project_dir: str,
    node_name: str,
    semantic_layer: str,
    semantic_layer_path: str | None,
):
    """Show everything that depends on NODE_NAME."""
    result = _load(project_dir, semantic_layer, semantic_layer_path)

    try:
        downstream = get_impact_analysis(result, node_name)
    except NodeNotFoundError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    _echo_nodes(downstream)


@main.command()
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False))
@click.argument("query", default="")
@_semantic_layer_option
@_semantic_layer_path_option
def search(
    project_dir: str,
    query: str,
    semantic_layer: str,
    semantic_layer_path: str | None,
):
    """Find nodes whose name or description contains QUERY."""
    result = _load(project_dir, semantic_layer, semantic_layer_path)

    matches = search_nodes(result, query)
    for node in matches:
        description = f"  {node.description}" if node.description else ""
        click.echo(f"{node.node_type.value:<10} {node.name}{description}")

    if not matches:
        click.echo("No matching nodes")


@main.command()
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--kind",
    type=click.Choice(["lineage", "audit", "mermaid"]),
    default="lineage",
    help="What to export",
)
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write to a file instead of stdout",
)
@_semantic_layer_option
@_semantic_layer_path_option
def export(
    project_dir: str,
    kind: str,
    output_file: str | None,
    semantic_layer: str,
    semantic_layer_path: str | None,
):
    """Export a project's lineage graph or audit report."""
    result = _load(project_dir, semantic_layer, semantic_layer_path)

    if kind == "mermaid":
        content = to_mermaid(result.lineage)
    elif kind == "audit":
        content = json.dumps(export_audit_json(result), indent=2)
    else:
        content = json.dumps(export_lineage_json(result), indent=2)

    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(content)
        click.echo(f"Exported {kind} to {output_file}")
    else:
        click.echo(content)


if __name__ == "__main__":
    main()
