"""Orphaned model and metric detection."""

from typing import Sequence

from ..graph.lineage_graph import LineageGraph
from ..graph.node_types import EdgeType, NodeType
from ..schema.models import DbtModel
from .base import AuditFindings, IssueType


def check_orphaned_models(
    graph: LineageGraph, models: Sequence[DbtModel]
) -> AuditFindings:
    """Check for models that no semantic model builds on.

    A model is orphaned when no entity edge points at a model node with
    its name. Being referenced by other models does not count.

    Args:
        graph: The lineage graph.
        models: The parsed models.

    Returns:
        AuditFindings with info-level issues for orphaned models.
    """
    result = AuditFindings()

    referenced: set[str] = set()
    for edge in graph.edges_of_type(EdgeType.ENTITY_TO_MODEL):
        target = graph.get_node(edge.target)
        if target is not None and target.node_type == NodeType.MODEL:
            referenced.add(target.name)

    for model in models:
        if model.name in referenced:
            continue

        nodes = graph.find_nodes(name=model.name, node_type=NodeType.MODEL)
        result.add_info(
            IssueType.ORPHANED_MODEL,
            f"Model '{model.name}' is not used by any semantic model",
            node_id=nodes[0].id if nodes else None,
            suggestion="Consider removing unused models or documenting their purpose",
        )

    return result


def check_orphaned_metrics(graph: LineageGraph) -> AuditFindings:
    """Check for metric nodes with no outgoing edges.

    Such a metric resolved neither a measure nor any sub-metric, so it
    cannot be computed.
    """
    result = AuditFindings()
    nx_graph = graph.to_networkx()

    for node in graph.nodes_of_type(NodeType.METRIC):
        if nx_graph.out_degree(node.id) > 0:
            continue

        result.add_error(
            IssueType.ORPHANED_METRIC,
            f"Metric '{node.name}' has no connection to any measure",
            node_id=node.id,
            suggestion="Check the metric definition - it may be missing a measure reference",
        )

    return result
