"""Audit runner that orchestrates all checks and scores."""

from typing import Sequence

from ..graph.lineage_graph import LineageGraph
from ..schema.models import DbtModel, DbtSource, Metric, SemanticModel
from .base import AuditFindings, AuditResult, AuditSummary, IssueType
from .coverage import (
    calculate_completeness_score,
    calculate_documentation_coverage,
    calculate_model_coverage,
)
from .documentation import check_missing_descriptions, check_undocumented_columns
from .orphan_detector import check_orphaned_metrics, check_orphaned_models
from .reference_integrity import check_missing_sources
from .testing import check_models_without_tests


def run_checks(
    graph: LineageGraph,
    models: Sequence[DbtModel],
    sources: Sequence[DbtSource],
) -> AuditFindings:
    """Run every audit check, in reporting order.

    Args:
        graph: The lineage graph.
        models: The parsed models.
        sources: The parsed source tables.

    Returns:
        Combined AuditFindings from all checks.
    """
    result = AuditFindings()

    result.merge(check_missing_descriptions(graph))
    result.merge(check_orphaned_models(graph, models))
    result.merge(check_orphaned_metrics(graph))
    result.merge(check_missing_sources(models, sources))
    result.merge(check_undocumented_columns(models))
    result.merge(check_models_without_tests(models))

    return result


def calculate_summary(
    models: Sequence[DbtModel],
    sources: Sequence[DbtSource],
    semantic_models: Sequence[SemanticModel],
    metrics: Sequence[Metric],
    findings: AuditFindings,
) -> AuditSummary:
    """Count entities and documented/tested ones from the parsed lists."""
    return AuditSummary(
        total_metrics=len(metrics),
        total_measures=sum(len(sm.measures) for sm in semantic_models),
        total_models=len(models),
        total_sources=len(sources),
        documented_metrics=sum(1 for m in metrics if m.description),
        documented_models=sum(1 for m in models if m.description),
        tested_models=sum(1 for m in models if m.is_tested),
        orphaned_models=len(findings.of_type(IssueType.ORPHANED_MODEL)),
    )


def analyze(
    graph: LineageGraph,
    models: Sequence[DbtModel],
    sources: Sequence[DbtSource],
    semantic_models: Sequence[SemanticModel],
    metrics: Sequence[Metric],
) -> AuditResult:
    """Audit a lineage graph.

    Some checks need the parsed entities as well as the graph (columns and
    source declarations are not graph nodes), so both are passed in.

    Returns:
        A fresh AuditResult; issues appear in check order.
    """
    findings = run_checks(graph, models, sources)

    return AuditResult(
        completeness_score=calculate_completeness_score(graph, metrics),
        documentation_coverage=calculate_documentation_coverage(graph),
        model_coverage=calculate_model_coverage(models, semantic_models),
        issues=tuple(findings.issues),
        summary=calculate_summary(models, sources, semantic_models, metrics, findings),
    )
