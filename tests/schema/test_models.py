"""Tests for schema models."""

import pytest
from pydantic import ValidationError

from semtrace.schema.models import (
    Column,
    DbtModel,
    DbtProject,
    DbtSource,
    Metric,
    SemanticModel,
    SourceRef,
)


class TestDbtProject:
    def test_dashed_keys(self):
        project = DbtProject.model_validate(
            {
                "name": "shop",
                "config-version": 2,
                "model-paths": ["transform"],
                "target-path": "build",
            }
        )

        assert project.config_version == 2
        assert project.model_paths == ["transform"]
        assert project.target_path == "build"

    def test_defaults(self):
        project = DbtProject.model_validate({})

        assert project.name == "unknown"
        assert project.model_paths == ["models"]

    def test_legacy_source_paths(self):
        project = DbtProject.model_validate({"name": "old", "source-paths": ["src"]})

        assert project.model_paths == ["src"]


class TestDbtEntities:
    def test_model_unique_id_default(self):
        assert DbtModel(name="stg_orders").unique_id == "model.stg_orders"

    def test_source_key_and_unique_id(self):
        source = DbtSource(source_name="raw", name="orders", schema="raw_data")

        assert source.key == "raw.orders"
        assert source.unique_id == "source.raw.orders"
        assert source.schema_name == "raw_data"

    def test_source_ref_key(self):
        assert SourceRef(source_name="raw", table_name="orders").key == "raw.orders"

    def test_column_tests_normalized(self):
        column = Column(
            name="id",
            tests=["unique", {"relationships": {"to": "ref('x')"}}, {}, 3],
        )

        assert column.tests == ["unique", "relationships"]

    def test_model_requires_name(self):
        with pytest.raises(ValidationError):
            DbtModel.model_validate({})


class TestSemanticModel:
    def test_strips_ref(self):
        sm = SemanticModel(name="orders", model=" ref( 'stg_orders' ) ")

        assert sm.model == "stg_orders"

    def test_plain_model_name(self):
        assert SemanticModel(name="orders", model="stg_orders").model == "stg_orders"

    def test_entity_type_alias_and_primary(self):
        sm = SemanticModel.model_validate(
            {
                "name": "orders",
                "model": "stg_orders",
                "entities": [
                    {"name": "customer", "type": "foreign"},
                    {"name": "order_id", "type": "primary"},
                    {"type": "primary"},
                ],
            }
        )

        assert [e.name for e in sm.entities] == ["customer", "order_id"]
        assert sm.primary_entity.name == "order_id"

    def test_no_primary_entity(self):
        sm = SemanticModel.model_validate(
            {"name": "orders", "model": "m", "entities": [{"name": "c", "type": "foreign"}]}
        )

        assert sm.primary_entity is None


class TestMetric:
    def test_simple_metric_with_string_measure(self):
        metric = Metric.model_validate(
            {"name": "revenue", "type": "simple", "type_params": {"measure": "order_total"}}
        )

        assert metric.metric_type == "simple"
        assert metric.measure_name == "order_total"
        assert metric.metric_refs == []

    def test_type_defaults_to_simple(self):
        metric = Metric.model_validate({"name": "m", "type_params": {"measure": {"name": "x"}}})

        assert metric.metric_type == "simple"
        assert metric.measure_name == "x"

    def test_derived_metric_ignores_measure(self):
        metric = Metric.model_validate(
            {
                "name": "growth",
                "type": "derived",
                "type_params": {
                    "expr": "a - b",
                    "measure": "ignored",
                    "metrics": ["a", {"name": "a", "offset_window": "1 month"}, {"alias": "x"}],
                },
            }
        )

        assert metric.measure_name is None
        assert [(r.name, r.offset_window) for r in metric.metric_refs] == [
            ("a", None),
            ("a", "1 month"),
        ]

    def test_simple_metric_ignores_sub_metrics(self):
        metric = Metric.model_validate(
            {"name": "m", "type": "simple", "type_params": {"metrics": ["a"]}}
        )

        assert metric.metric_refs == []

    def test_missing_type_params(self):
        metric = Metric.model_validate({"name": "m", "type": "ratio"})

        assert metric.measure_name is None
        assert metric.metric_refs == []
