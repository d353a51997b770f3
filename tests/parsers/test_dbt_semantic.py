"""Tests for the dbt Semantic Layer parser."""

from semtrace.graph.builder import build_graph
from semtrace.graph.node_types import EdgeType
from semtrace.parsers.dbt_semantic import (
    DbtSemanticLayerParser,
    parse_metrics,
    parse_semantic_yaml_string,
)


class TestParseSemanticYaml:
    def test_semantic_models_and_metrics(self):
        semantic_models, metrics = parse_semantic_yaml_string(
            """
semantic_models:
  - name: orders
    model: ref('stg_orders')
    entities:
      - name: order_id
        type: primary
    measures:
      - name: total
        agg: sum
metrics:
  - name: revenue
    type_params:
      measure: total
"""
        )

        (sm,) = semantic_models
        assert sm.model == "stg_orders"
        assert sm.measures[0].agg == "sum"
        (metric,) = metrics
        assert metric.metric_type == "simple"
        assert metric.measure_name == "total"

    def test_empty_document(self):
        assert parse_semantic_yaml_string("") == ([], [])

    def test_invalid_entries_are_skipped(self):
        metrics = parse_metrics([{"name": "ok"}, {"type": "simple"}, "not a mapping"])

        assert [m.name for m in metrics] == ["ok"]

    def test_non_list_section(self):
        assert parse_metrics({"name": "revenue"}) == []


class TestDbtSemanticLayerParser:
    def test_parse_fixture_project(self, jaffle_shop_dir):
        semantic_models, metrics = DbtSemanticLayerParser(jaffle_shop_dir).parse()

        (orders,) = semantic_models
        assert orders.name == "orders"
        assert [e.name for e in orders.entities] == ["order_id", "customer"]
        assert [m.name for m in orders.measures] == ["order_total", "order_count"]
        assert orders.dimensions[0].type_params.time_granularity == "day"
        assert orders.defaults.agg_time_dimension == "ordered_at"

        assert [m.name for m in metrics] == [
            "revenue",
            "orders_placed",
            "revenue_growth",
            "phantom_metric",
        ]
        growth = metrics[2]
        assert growth.type_params.expr == "revenue - revenue_last_month"
        assert [r.offset_window for r in growth.metric_refs] == [None, "1 month"]

    def test_directory_order(self, tmp_path):
        for dirname in ["metrics", "semantic_models", "models"]:
            (tmp_path / dirname).mkdir()
            (tmp_path / dirname / "defs.yml").write_text(
                f"metrics:\n  - name: from_{dirname}\n"
            )
        (tmp_path / "other").mkdir()
        (tmp_path / "other" / "defs.yml").write_text("metrics:\n  - name: ignored\n")

        _, metrics = DbtSemanticLayerParser(tmp_path).parse()

        assert [m.name for m in metrics] == [
            "from_models",
            "from_semantic_models",
            "from_metrics",
        ]

    def test_broken_file_is_skipped(self, tmp_path):
        (tmp_path / "models").mkdir()
        (tmp_path / "models" / "a.yml").write_text("metrics: [")
        (tmp_path / "models" / "b.yaml").write_text("metrics:\n  - name: kept\n")

        _, metrics = DbtSemanticLayerParser(tmp_path).parse()

        assert [m.name for m in metrics] == ["kept"]

    def test_no_semantic_directories(self, tmp_path):
        assert DbtSemanticLayerParser(tmp_path).parse() == ([], [])


class TestMalformedKeys:
    def test_numeric_measure_expr_keeps_semantic_model(self):
        semantic_models, metrics = parse_semantic_yaml_string(
            """
semantic_models:
  - name: orders
    model: ref('stg_orders')
    entities:
      - name: order_id
        type: primary
    measures:
      - name: order_count
        agg: sum
        expr: 1
metrics:
  - name: orders_placed
    type: simple
    type_params:
      measure: order_count
"""
        )

        (sm,) = semantic_models
        assert sm.measures[0].name == "order_count"
        assert sm.measures[0].expr is None

        graph = build_graph([], [], semantic_models, metrics)
        assert len(graph.edges_of_type(EdgeType.METRIC_TO_MEASURE)) == 1

    def test_list_filter_keeps_metric(self):
        _, metrics = parse_semantic_yaml_string(
            """
metrics:
  - name: large_orders
    type: simple
    filter:
      - "{{ Dimension('order_id__amount') }} > 100"
    type_params:
      measure: order_total
"""
        )

        (metric,) = metrics
        assert metric.filter is None
        assert metric.measure_name == "order_total"

    def test_wrong_kinds_fall_back_to_defaults(self):
        semantic_models, metrics = parse_semantic_yaml_string(
            """
semantic_models:
  - name: orders
    model: stg_orders
    defaults: day
    entities:
      - name: order_id
        type: 1
        description: [not, text]
      - name: 7
    measures:
      - name: total
        agg: [sum]
        non_additive_dimension: yes
    dimensions:
      - name: ordered_at
        type: 3
        type_params: daily
metrics:
  - name: odd
    type: 5
    label: 10
    type_params:
      measure: 42
  - name: growth
    type: derived
    type_params:
      metrics: revenue
"""
        )

        (sm,) = semantic_models
        assert sm.defaults is None
        assert [e.name for e in sm.entities] == ["order_id"]
        assert sm.primary_entity.description is None
        assert sm.measures[0].agg == "sum"
        assert sm.measures[0].non_additive_dimension is None
        assert sm.dimensions[0].dimension_type == "categorical"
        assert sm.dimensions[0].type_params is None

        odd, growth = metrics
        assert odd.metric_type == "simple"
        assert odd.label is None
        assert odd.measure_name is None
        assert growth.metric_refs == []
