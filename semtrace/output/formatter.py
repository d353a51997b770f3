"""Output formatting for audit results."""

import json
from dataclasses import asdict
from typing import Any, Literal

from ..validators.base import AuditIssue, AuditResult, Severity


def format_audit_result(
    result: AuditResult,
    format: Literal["text", "json"] = "text",
) -> str:
    """Format an audit result for output.

    Args:
        result: The audit result to format.
        format: Output format ("text" or "json").

    Returns:
        Formatted string representation.
    """
    if format == "json":
        return json.dumps(audit_to_dict(result), indent=2)
    return _format_text(result)


def audit_to_dict(result: AuditResult) -> dict[str, Any]:
    """Convert an audit result to plain JSON-compatible data."""
    data = asdict(result)
    data["issues"] = [
        {
            "severity": issue.severity.value,
            "issue_type": issue.issue_type.value,
            "message": issue.message,
            "node_id": issue.node_id,
            "suggestion": issue.suggestion,
        }
        for issue in result.issues
    ]
    return data


def _format_text(result: AuditResult) -> str:
    """Format result as human-readable text."""
    lines: list[str] = []

    lines.append(f"Completeness:           {result.completeness_score:5.1f}%")
    lines.append(f"Documentation coverage: {result.documentation_coverage:5.1f}%")
    lines.append(f"Model coverage:         {result.model_coverage:5.1f}%")
    lines.append("")

    for title, issues in (
        ("ERRORS", result.errors),
        ("WARNINGS", result.warnings),
        ("INFO", result.infos),
    ):
        lines.append(f"{title}:")
        if issues:
            for issue in issues:
                lines.append(f"  {_format_issue_text(issue)}")
        else:
            lines.append("  (none)")
        lines.append("")

    summary = result.summary
    lines.append(
        f"Metrics: {summary.total_metrics} ({summary.documented_metrics} documented), "
        f"measures: {summary.total_measures}, "
        f"models: {summary.total_models} ({summary.documented_models} documented, "
        f"{summary.tested_models} tested, {summary.orphaned_models} orphaned), "
        f"sources: {summary.total_sources}"
    )

    if result.has_errors:
        lines.append(
            f"Audit failed: {len(result.errors)} error(s), "
            f"{len(result.warnings)} warning(s)"
        )
    elif result.has_warnings:
        lines.append(f"Audit passed with {len(result.warnings)} warning(s)")
    else:
        lines.append("Audit passed")

    return "\n".join(lines)


def _format_issue_text(issue: AuditIssue) -> str:
    """Format a single issue as text."""
    if issue.severity == Severity.ERROR:
        symbol = "✘"
    elif issue.severity == Severity.WARNING:
        symbol = "⚠"
    else:
        symbol = "ℹ"

    text = f"{symbol} {issue.issue_type.value}: {issue.message}"
    if issue.suggestion:
        text += f" ({issue.suggestion})"
    return text
