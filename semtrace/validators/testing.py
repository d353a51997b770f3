"""Test coverage check for models."""

from typing import Sequence

from ..schema.models import DbtModel
from .base import AuditFindings, IssueType


def check_models_without_tests(models: Sequence[DbtModel]) -> AuditFindings:
    """Check for models where no column declares a test.

    A model without columns counts as untested.
    """
    result = AuditFindings()

    for model in models:
        if not model.is_tested:
            result.add_warning(
                IssueType.NO_TESTS,
                f"Model '{model.name}' has no tests defined",
                suggestion="Add tests for key columns (unique, not_null, accepted_values)",
            )

    return result
