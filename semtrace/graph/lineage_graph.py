"""LineageGraph: ordered node/edge lists with a networkx view for traversal."""

import uuid
from typing import Any, Iterable

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .node_types import EdgeType, NodeType


def new_id() -> str:
    """Return a fresh synthetic identifier."""
    return str(uuid.uuid4())


class LineageNode(BaseModel):
    """A vertex in the lineage graph."""

    model_config = ConfigDict(frozen=True)

    id: str
    node_type: NodeType
    name: str
    description: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_documented(self) -> bool:
        return bool(self.description)


class LineageEdge(BaseModel):
    """A directed dependency: ``source`` derives from ``target``."""

    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    edge_type: EdgeType
    label: str | None = None


def _add_nx_node(graph: nx.MultiDiGraph, node: LineageNode) -> None:
    graph.add_node(node.id, node=node, node_type=node.node_type, name=node.name)


def _add_nx_edge(graph: nx.MultiDiGraph, edge: LineageEdge) -> None:
    graph.add_edge(
        edge.source,
        edge.target,
        key=edge.id,
        edge_type=edge.edge_type,
        label=edge.label,
    )


class LineageGraph(BaseModel):
    """A lineage graph.

    Nodes and edges are kept in insertion order, which is what callers and
    serializers see. Traversals go through :meth:`to_networkx`, which builds
    a ``networkx.MultiDiGraph`` keyed by node id.
    """

    nodes: list[LineageNode] = Field(default_factory=list)
    edges: list[LineageEdge] = Field(default_factory=list)

    _nx: nx.MultiDiGraph | None = PrivateAttr(default=None)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def add_node(
        self,
        node_type: NodeType,
        name: str,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Append a node and return its new id."""
        node = LineageNode(
            id=new_id(),
            node_type=node_type,
            name=name,
            description=description,
            metadata=metadata or {},
        )
        self.nodes.append(node)
        if self._nx is not None:
            _add_nx_node(self._nx, node)
        return node.id

    def add_edge(
        self,
        source: str,
        target: str,
        edge_type: EdgeType,
        label: str | None = None,
    ) -> str:
        """Append an edge between two existing nodes and return its id.

        Raises:
            ValueError: If either endpoint is not a node of this graph.
        """
        graph = self.to_networkx()
        for endpoint in (source, target):
            if not graph.has_node(endpoint):
                raise ValueError(f"Edge endpoint '{endpoint}' is not in the graph")

        edge = LineageEdge(
            id=new_id(),
            source=source,
            target=target,
            edge_type=edge_type,
            label=label,
        )
        self.edges.append(edge)
        _add_nx_edge(graph, edge)
        return edge.id

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_node(self, node_id: str) -> LineageNode | None:
        """Get a node by id."""
        graph = self.to_networkx()
        if graph.has_node(node_id):
            return graph.nodes[node_id]["node"]
        return None

    def find_nodes(
        self, name: str | None = None, node_type: NodeType | None = None
    ) -> list[LineageNode]:
        """Get nodes matching a name and/or type, in graph order."""
        return [
            node
            for node in self.nodes
            if (name is None or node.name == name)
            and (node_type is None or node.node_type == node_type)
        ]

    def nodes_of_type(self, node_type: NodeType) -> list[LineageNode]:
        return self.find_nodes(node_type=node_type)

    def edges_of_type(self, edge_type: EdgeType) -> list[LineageEdge]:
        return [edge for edge in self.edges if edge.edge_type == edge_type]

    def out_edges(self, node_id: str) -> list[LineageEdge]:
        """Edges leaving a node, in graph order."""
        return [edge for edge in self.edges if edge.source == node_id]

    def successors(self, node_id: str) -> list[str]:
        """Ids of the nodes a node depends on."""
        graph = self.to_networkx()
        if not graph.has_node(node_id):
            return []
        return list(graph.successors(node_id))

    def predecessors(self, node_id: str) -> list[str]:
        """Ids of the nodes that depend on a node."""
        graph = self.to_networkx()
        if not graph.has_node(node_id):
            return []
        return list(graph.predecessors(node_id))

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def to_networkx(self) -> nx.MultiDiGraph:
        """Get a networkx view of the graph.

        Edges whose endpoints are missing are left out, so the view never
        invents nodes.
        """
        if self._nx is None:
            graph = nx.MultiDiGraph()
            for node in self.nodes:
                _add_nx_node(graph, node)
            for edge in self.edges:
                if graph.has_node(edge.source) and graph.has_node(edge.target):
                    _add_nx_edge(graph, edge)
            self._nx = graph
        return self._nx

    def subgraph(self, node_ids: Iterable[str]) -> "LineageGraph":
        """Get the subgraph induced by a set of node ids.

        Nodes and edges keep their original order; an edge is kept only when
        both of its endpoints are kept.
        """
        keep = set(node_ids)
        return LineageGraph(
            nodes=[node for node in self.nodes if node.id in keep],
            edges=[
                edge
                for edge in self.edges
                if edge.source in keep and edge.target in keep
            ],
        )
