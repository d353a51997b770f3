"""Percentage scores reported with every audit."""

from typing import Sequence

from ..graph.lineage_graph import LineageGraph
from ..graph.node_types import NodeType
from ..schema.models import DbtModel, Metric, SemanticModel
from .reachability import has_complete_lineage


def _percent(part: int, whole: int) -> float:
    if whole == 0:
        return 100.0
    return part / whole * 100.0


def calculate_completeness_score(
    graph: LineageGraph, metrics: Sequence[Metric]
) -> float:
    """Percentage of metric nodes whose lineage reaches a source.

    100.0 when there are no metrics.
    """
    if not metrics:
        return 100.0

    metric_nodes = graph.nodes_of_type(NodeType.METRIC)
    complete = sum(1 for node in metric_nodes if has_complete_lineage(graph, node.id))
    return _percent(complete, len(metric_nodes))


def calculate_documentation_coverage(graph: LineageGraph) -> float:
    """Percentage of graph nodes with a non-empty description."""
    documented = sum(1 for node in graph.nodes if node.is_documented)
    return _percent(documented, len(graph.nodes))


def calculate_model_coverage(
    models: Sequence[DbtModel], semantic_models: Sequence[SemanticModel]
) -> float:
    """Percentage of models that some semantic model is built on."""
    referenced = {sm.model for sm in semantic_models}
    used = sum(1 for model in models if model.name in referenced)
    return _percent(used, len(models))
