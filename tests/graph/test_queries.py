"""Tests for lineage queries."""

import random

import pytest

from semtrace.graph.builder import build_graph
from semtrace.graph.errors import NodeNotFoundError
from semtrace.graph.lineage_graph import LineageGraph
from semtrace.graph.node_types import EdgeType, NodeType
from semtrace.graph.queries import get_impact_analysis, get_metric_lineage, search_nodes
from semtrace.schema.models import DbtModel


@pytest.fixture
def two_branch_graph(orders_entities):
    """The orders graph plus an unrelated model."""
    entities = dict(orders_entities)
    entities["models"] = entities["models"] + [DbtModel(name="unrelated")]
    return build_graph(**entities)


class TestMetricLineage:
    def test_upstream_of_metric(self, two_branch_graph):
        upstream = get_metric_lineage(two_branch_graph, "revenue")

        assert [n.name for n in upstream.nodes] == [
            "orders",
            "stg_orders",
            "order_id",
            "total_amount",
            "revenue",
        ]
        assert len(upstream.edges) == 4

    def test_unknown_metric(self, orders_graph):
        with pytest.raises(NodeNotFoundError) as exc_info:
            get_metric_lineage(orders_graph, "Revenue")
        assert "Metric 'Revenue' not found" in str(exc_info.value)

    def test_only_metric_nodes_match(self, orders_graph):
        with pytest.raises(NodeNotFoundError):
            get_metric_lineage(orders_graph, "stg_orders")

    def test_first_metric_with_name_wins(self):
        graph = LineageGraph()
        first = graph.add_node(NodeType.METRIC, "revenue")
        graph.add_node(NodeType.METRIC, "revenue")
        measure = graph.add_node(NodeType.MEASURE, "amount")
        graph.add_edge(first, measure, EdgeType.METRIC_TO_MEASURE)

        upstream = get_metric_lineage(graph, "revenue")

        assert [n.id for n in upstream.nodes] == [first, measure]

    def test_stable_under_permutation(self, two_branch_graph):
        expected = {n.id for n in get_metric_lineage(two_branch_graph, "revenue").nodes}

        nodes = list(two_branch_graph.nodes)
        edges = list(two_branch_graph.edges)
        rng = random.Random(7)
        for _ in range(5):
            rng.shuffle(nodes)
            rng.shuffle(edges)
            shuffled = LineageGraph(nodes=list(nodes), edges=list(edges))
            assert {n.id for n in get_metric_lineage(shuffled, "revenue").nodes} == expected

    def test_cycle_terminates(self):
        graph = LineageGraph()
        a = graph.add_node(NodeType.METRIC, "a")
        b = graph.add_node(NodeType.METRIC, "b")
        graph.add_edge(a, b, EdgeType.METRIC_TO_METRIC)
        graph.add_edge(b, a, EdgeType.METRIC_TO_METRIC)

        upstream = get_metric_lineage(graph, "a")

        assert {n.id for n in upstream.nodes} == {a, b}
        assert len(upstream.edges) == 2


class TestImpactAnalysis:
    def test_downstream_of_source(self, two_branch_graph):
        downstream = get_impact_analysis(two_branch_graph, "orders")

        assert [n.name for n in downstream.nodes] == [
            "orders",
            "stg_orders",
            "order_id",
            "total_amount",
            "revenue",
        ]

    def test_downstream_of_metric_is_itself(self, orders_graph):
        downstream = get_impact_analysis(orders_graph, "revenue")

        assert [n.name for n in downstream.nodes] == ["revenue"]
        assert downstream.edges == []

    def test_unknown_node(self, orders_graph):
        with pytest.raises(NodeNotFoundError) as exc_info:
            get_impact_analysis(orders_graph, "nope")
        assert "Node 'nope' not found" in str(exc_info.value)


class TestSearch:
    def test_matches_name_case_insensitively(self, orders_graph):
        assert [n.name for n in search_nodes(orders_graph, "ORDER")] == [
            "orders",
            "stg_orders",
            "order_id",
        ]

    def test_matches_description(self):
        graph = LineageGraph()
        graph.add_node(NodeType.METRIC, "revenue", "Total money IN")
        graph.add_node(NodeType.METRIC, "count")

        assert [n.name for n in search_nodes(graph, "money in")] == ["revenue"]

    def test_empty_query_matches_everything(self, orders_graph):
        assert search_nodes(orders_graph, "") == orders_graph.nodes

    def test_no_match(self, orders_graph):
        assert search_nodes(orders_graph, "zzz") == []
