"""Export of lineage graphs and audit reports."""

import re
from datetime import datetime, timezone
from typing import Any

from ..graph.lineage_graph import LineageGraph
from ..graph.node_types import NodeType
from ..pipeline import ParseResult
from .formatter import audit_to_dict

_UNSAFE_ID = re.compile(r"[^a-zA-Z0-9]")

# Opening and closing brackets of each node kind's Mermaid shape
_SHAPES: dict[NodeType, tuple[str, str]] = {
    NodeType.SOURCE: ("[(", ")]"),
    NodeType.MODEL: ("[", "]"),
    NodeType.ENTITY: ("([", "])"),
    NodeType.MEASURE: ("{{", "}}"),
    NodeType.DIMENSION: (">", "]"),
    NodeType.METRIC: ("((", "))"),
}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _project_name(parse_result: ParseResult) -> str | None:
    if parse_result.dbt_project is None:
        return None
    return parse_result.dbt_project.name


def export_audit_json(parse_result: ParseResult) -> dict[str, Any]:
    """Build the audit report document for a parsed project."""
    return {
        "project": _project_name(parse_result),
        "timestamp": _timestamp(),
        "audit": audit_to_dict(parse_result.audit),
        "summary": {
            "total_nodes": len(parse_result.lineage.nodes),
            "total_edges": len(parse_result.lineage.edges),
            "metrics": len(parse_result.metrics),
            "models": len(parse_result.models),
            "sources": len(parse_result.sources),
        },
    }


def export_lineage_json(parse_result: ParseResult) -> dict[str, Any]:
    """Build the lineage document (nodes and edges) for a parsed project."""
    graph = parse_result.lineage.model_dump(mode="json")
    return {
        "project": _project_name(parse_result),
        "timestamp": _timestamp(),
        "nodes": graph["nodes"],
        "edges": graph["edges"],
    }


def to_mermaid(graph: LineageGraph) -> str:
    """Render a graph as a Mermaid flowchart."""
    lines = ["graph TD"]

    for node in graph.nodes:
        node_id = _UNSAFE_ID.sub("_", node.id)
        label = node.name.replace('"', '\\"')
        opening, closing = _SHAPES[node.node_type]
        lines.append(f'  {node_id}{opening}"{label}"{closing}')

    lines.append("")

    for edge in graph.edges:
        source = _UNSAFE_ID.sub("_", edge.source)
        target = _UNSAFE_ID.sub("_", edge.target)
        if edge.label:
            lines.append(f"  {source} -->|{edge.label}| {target}")
        else:
            lines.append(f"  {source} --> {target}")

    return "\n".join(lines) + "\n"
