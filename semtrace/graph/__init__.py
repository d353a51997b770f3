"""Graph layer: the lineage graph, its builder and queries."""

from .node_types import NodeType, EdgeType
from .lineage_graph import LineageEdge, LineageGraph, LineageNode
from .builder import build_graph
from .errors import NodeNotFoundError
from .queries import get_impact_analysis, get_metric_lineage, search_nodes

__all__ = [
    "NodeType",
    "EdgeType",
    "LineageEdge",
    "LineageGraph",
    "LineageNode",
    "build_graph",
    "NodeNotFoundError",
    "get_impact_analysis",
    "get_metric_lineage",
    "search_nodes",
]
