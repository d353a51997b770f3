"""Ad hoc lineage queries over a built graph."""

from typing import TYPE_CHECKING, Union

import networkx as nx

from .errors import NodeNotFoundError
from .lineage_graph import LineageGraph, LineageNode
from .node_types import NodeType

if TYPE_CHECKING:
    from ..pipeline import ParseResult

GraphLike = Union[LineageGraph, "ParseResult"]


def _as_graph(target: GraphLike) -> LineageGraph:
    if isinstance(target, LineageGraph):
        return target
    return target.lineage


def get_metric_lineage(target: GraphLike, metric_name: str) -> LineageGraph:
    """Get everything a metric is built from.

    Follows edges from the metric towards sources and returns the induced
    subgraph of every node reached, the metric included.

    Args:
        target: A LineageGraph, or a ParseResult holding one.
        metric_name: Exact, case-sensitive metric name. When several metric
            nodes share the name, the first in graph order is used.

    Returns:
        The upstream subgraph, in original node and edge order.

    Raises:
        NodeNotFoundError: If no metric node has that name.
    """
    graph = _as_graph(target)
    matches = graph.find_nodes(name=metric_name, node_type=NodeType.METRIC)
    if not matches:
        raise NodeNotFoundError(f"Metric '{metric_name}' not found", metric_name)

    start = matches[0].id
    reachable = nx.descendants(graph.to_networkx(), start) | {start}
    return graph.subgraph(reachable)


def get_impact_analysis(target: GraphLike, node_name: str) -> LineageGraph:
    """Get everything that depends on a node.

    Follows edges backwards from the named node (of any type) and returns
    the induced subgraph of every dependent node, the start node included.

    Raises:
        NodeNotFoundError: If no node has that name.
    """
    graph = _as_graph(target)
    matches = graph.find_nodes(name=node_name)
    if not matches:
        raise NodeNotFoundError(f"Node '{node_name}' not found", node_name)

    start = matches[0].id
    reachable = nx.ancestors(graph.to_networkx(), start) | {start}
    return graph.subgraph(reachable)


def search_nodes(target: GraphLike, query: str) -> list[LineageNode]:
    """Find nodes whose name or description contains ``query``.

    Matching is case-insensitive and results keep graph order. An empty
    query matches every node.
    """
    graph = _as_graph(target)
    needle = query.lower()

    return [
        node
        for node in graph.nodes
        if needle in node.name.lower()
        or (node.description is not None and needle in node.description.lower())
    ]
