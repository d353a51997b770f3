"""Lineage reachability: can a metric be traced back to raw data?"""

from ..graph.lineage_graph import LineageGraph
from ..graph.node_types import NodeType


def has_complete_lineage(graph: LineageGraph, start_id: str) -> bool:
    """Check whether any source node is reachable from a node.

    Depth-first over outgoing edges with an explicit stack; each node is
    visited at most once, so cycles terminate.

    Args:
        graph: The lineage graph.
        start_id: Id of the node to start from.

    Returns:
        True if a source node is reachable (or is the start node).
    """
    nx_graph = graph.to_networkx()
    if not nx_graph.has_node(start_id):
        return False

    stack = [start_id]
    visited: set[str] = set()

    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)

        if nx_graph.nodes[current]["node_type"] == NodeType.SOURCE:
            return True

        for target in nx_graph.successors(current):
            if target not in visited:
                stack.append(target)

    return False
