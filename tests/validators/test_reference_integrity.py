"""Tests for reference integrity validator."""

from semtrace.schema.models import DbtModel, DbtSource, SourceRef
from semtrace.validators.base import IssueType, Severity
from semtrace.validators.reference_integrity import check_missing_sources


class TestMissingSources:
    def test_declared_source(self, orders_entities):
        result = check_missing_sources(
            orders_entities["models"], orders_entities["sources"]
        )

        assert result.issues == []

    def test_undeclared_source(self):
        models = [
            DbtModel(
                name="stg_payments",
                sources=[SourceRef(source_name="raw", table_name="payments")],
            )
        ]

        result = check_missing_sources(models, [DbtSource(source_name="raw", name="orders")])

        (issue,) = result.issues
        assert issue.severity == Severity.ERROR
        assert issue.issue_type == IssueType.MISSING_SOURCE
        assert issue.message == "Model 'stg_payments' references undefined source 'raw.payments'"
        assert issue.node_id is None

    def test_one_issue_per_reference(self):
        models = [
            DbtModel(
                name="m",
                sources=[
                    SourceRef(source_name="raw", table_name="a"),
                    SourceRef(source_name="raw", table_name="b"),
                ],
            )
        ]

        assert len(check_missing_sources(models, []).errors) == 2

    def test_group_and_table_both_matter(self):
        models = [
            DbtModel(name="m", sources=[SourceRef(source_name="crm", table_name="orders")])
        ]
        sources = [DbtSource(source_name="raw", name="orders")]

        assert len(check_missing_sources(models, sources).errors) == 1
