"""Reference integrity validator."""

from typing import Sequence

from ..schema.models import DbtModel, DbtSource
from .base import AuditFindings, IssueType


def check_missing_sources(
    models: Sequence[DbtModel], sources: Sequence[DbtSource]
) -> AuditFindings:
    """Check that every source a model reads from is declared.

    This runs against the parsed entities rather than the graph: a model
    with no source edge may simply not read from any source.

    Args:
        models: The parsed models.
        sources: The parsed source tables.

    Returns:
        AuditFindings with errors for undeclared sources.
    """
    result = AuditFindings()

    declared = {source.key for source in sources}

    for model in models:
        for source_ref in model.sources:
            key = source_ref.key
            if key not in declared:
                result.add_error(
                    IssueType.MISSING_SOURCE,
                    f"Model '{model.name}' references undefined source '{key}'",
                    suggestion=f"Define source '{key}' in a schema.yml file",
                )

    return result
