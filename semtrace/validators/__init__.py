"""Audit checks and scores for lineage graphs."""

from .base import (
    AuditFindings,
    AuditIssue,
    AuditResult,
    AuditSummary,
    IssueType,
    Severity,
)
from .coverage import (
    calculate_completeness_score,
    calculate_documentation_coverage,
    calculate_model_coverage,
)
from .documentation import check_missing_descriptions, check_undocumented_columns
from .orphan_detector import check_orphaned_metrics, check_orphaned_models
from .reachability import has_complete_lineage
from .reference_integrity import check_missing_sources
from .runner import analyze, calculate_summary, run_checks
from .testing import check_models_without_tests

__all__ = [
    "AuditFindings",
    "AuditIssue",
    "AuditResult",
    "AuditSummary",
    "IssueType",
    "Severity",
    "calculate_completeness_score",
    "calculate_documentation_coverage",
    "calculate_model_coverage",
    "check_missing_descriptions",
    "check_undocumented_columns",
    "check_orphaned_metrics",
    "check_orphaned_models",
    "has_complete_lineage",
    "check_missing_sources",
    "analyze",
    "calculate_summary",
    "run_checks",
    "check_models_without_tests",
]
