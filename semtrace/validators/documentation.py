"""Documentation checks."""

from typing import Sequence

from ..graph.lineage_graph import LineageGraph
from ..graph.node_types import NodeType
from ..schema.models import DbtModel
from .base import AuditFindings, IssueType, Severity

_WARN_WHEN_UNDOCUMENTED = {NodeType.METRIC, NodeType.MODEL}


def check_missing_descriptions(graph: LineageGraph) -> AuditFindings:
    """Check for graph nodes without a description.

    Undocumented metrics and models are warnings, since those are what
    people browse; every other node kind is reported as info.

    Args:
        graph: The lineage graph to check.

    Returns:
        AuditFindings with one issue per undocumented node.
    """
    result = AuditFindings()

    for node in graph.nodes:
        if node.is_documented:
            continue

        severity = (
            Severity.WARNING
            if node.node_type in _WARN_WHEN_UNDOCUMENTED
            else Severity.INFO
        )
        result.add(
            severity,
            IssueType.MISSING_DESCRIPTION,
            f"{node.node_type.value.capitalize()} '{node.name}' is missing a description",
            node_id=node.id,
            suggestion=(
                f"Add a description to help users understand what '{node.name}' represents"
            ),
        )

    return result


def check_undocumented_columns(models: Sequence[DbtModel]) -> AuditFindings:
    """Check for model columns without a description.

    Columns are not graph nodes, so this works on the parsed models.
    """
    result = AuditFindings()

    for model in models:
        for column in model.columns:
            if not column.description:
                result.add_info(
                    IssueType.UNDOCUMENTED_COLUMN,
                    f"Column '{column.name}' in model '{model.name}' is not documented",
                    suggestion="Add a description to help users understand this column",
                )

    return result
