"""Base classes for audit findings and results."""

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """Severity level of an audit issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueType(str, Enum):
    """Kind of audit issue."""

    MISSING_DESCRIPTION = "missing_description"
    ORPHANED_MODEL = "orphaned_model"
    ORPHANED_METRIC = "orphaned_metric"
    MISSING_SOURCE = "missing_source"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    MISSING_MEASURE = "missing_measure"
    UNDOCUMENTED_COLUMN = "undocumented_column"
    NO_TESTS = "no_tests"


@dataclass(frozen=True)
class AuditIssue:
    """A single audit finding."""

    severity: Severity
    issue_type: IssueType
    message: str
    node_id: str | None = None
    suggestion: str | None = None

    def __str__(self) -> str:
        return f"{self.severity.value.upper()}: {self.issue_type.value} - {self.message}"


@dataclass
class AuditFindings:
    """Issues collected by one or more checks."""

    issues: list[AuditIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[AuditIssue]:
        """Get all error-level issues."""
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[AuditIssue]:
        """Get all warning-level issues."""
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def infos(self) -> list[AuditIssue]:
        """Get all info-level issues."""
        return [i for i in self.issues if i.severity == Severity.INFO]

    def of_type(self, issue_type: IssueType) -> list[AuditIssue]:
        return [i for i in self.issues if i.issue_type == issue_type]

    def add(
        self,
        severity: Severity,
        issue_type: IssueType,
        message: str,
        node_id: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Add an issue."""
        self.issues.append(
            AuditIssue(
                severity=severity,
                issue_type=issue_type,
                message=message,
                node_id=node_id,
                suggestion=suggestion,
            )
        )

    def add_error(self, issue_type: IssueType, message: str, **kwargs) -> None:
        """Add an error issue."""
        self.add(Severity.ERROR, issue_type, message, **kwargs)

    def add_warning(self, issue_type: IssueType, message: str, **kwargs) -> None:
        """Add a warning issue."""
        self.add(Severity.WARNING, issue_type, message, **kwargs)

    def add_info(self, issue_type: IssueType, message: str, **kwargs) -> None:
        """Add an info issue."""
        self.add(Severity.INFO, issue_type, message, **kwargs)

    def merge(self, other: "AuditFindings") -> None:
        """Merge another set of findings into this one."""
        self.issues.extend(other.issues)


@dataclass(frozen=True)
class AuditSummary:
    """Counts over the parsed project."""

    total_metrics: int = 0
    total_measures: int = 0
    total_models: int = 0
    total_sources: int = 0
    documented_metrics: int = 0
    documented_models: int = 0
    tested_models: int = 0
    orphaned_models: int = 0


@dataclass(frozen=True)
class AuditResult:
    """Scores, issues and summary from one audit run."""

    completeness_score: float = 100.0
    documentation_coverage: float = 100.0
    model_coverage: float = 100.0
    issues: tuple[AuditIssue, ...] = ()
    summary: AuditSummary = field(default_factory=AuditSummary)

    @property
    def errors(self) -> list[AuditIssue]:
        """Get all error-level issues."""
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[AuditIssue]:
        """Get all warning-level issues."""
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def infos(self) -> list[AuditIssue]:
        """Get all info-level issues."""
        return [i for i in self.issues if i.severity == Severity.INFO]

    @property
    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        """Check if there are any warnings."""
        return len(self.warnings) > 0

    def of_type(self, issue_type: IssueType) -> list[AuditIssue]:
        return [i for i in self.issues if i.issue_type == issue_type]
