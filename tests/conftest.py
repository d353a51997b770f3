"""Shared fixtures for tests."""

from pathlib import Path

import pytest

from semtrace.graph.builder import build_graph
from semtrace.schema.models import (
    Column,
    DbtModel,
    DbtSource,
    Measure,
    MeasureRef,
    Metric,
    MetricTypeParams,
    SemanticEntity,
    SemanticModel,
    SourceRef,
)


def make_source(group: str, table: str, description: str | None = None) -> DbtSource:
    return DbtSource(source_name=group, name=table, description=description)


def make_model(
    name: str,
    refs: list[str] | None = None,
    sources: list[tuple[str, str]] | None = None,
    description: str | None = None,
    columns: list[Column] | None = None,
) -> DbtModel:
    return DbtModel(
        name=name,
        refs=refs or [],
        sources=[SourceRef(source_name=g, table_name=t) for g, t in sources or []],
        description=description,
        columns=columns or [],
    )


def make_simple_metric(
    name: str, measure: str, description: str | None = None, metric_type: str = "simple"
) -> Metric:
    return Metric(
        name=name,
        metric_type=metric_type,
        description=description,
        type_params=MetricTypeParams(measure=MeasureRef(name=measure)),
    )


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def jaffle_shop_dir(fixtures_dir) -> Path:
    """Return the path to the sample dbt project."""
    return fixtures_dir / "jaffle_shop"


@pytest.fixture
def orders_entities() -> dict:
    """Entities for a single metric traced from raw.orders.

    raw.orders <- stg_orders <- orders.order_id <- total_amount <- revenue
    """
    return {
        "models": [make_model("stg_orders", sources=[("raw", "orders")])],
        "sources": [make_source("raw", "orders")],
        "semantic_models": [
            SemanticModel(
                name="orders",
                model="stg_orders",
                entities=[SemanticEntity(name="order_id", entity_type="primary")],
                measures=[Measure(name="total_amount", agg="sum")],
            )
        ],
        "metrics": [make_simple_metric("revenue", "total_amount")],
    }


@pytest.fixture
def orders_graph(orders_entities):
    """Return the graph built from the orders entities."""
    return build_graph(**orders_entities)


@pytest.fixture
def clean_project_dir(tmp_path) -> Path:
    """Write a small, fully documented and tested project to disk."""
    (tmp_path / "dbt_project.yml").write_text("name: clean\nconfig-version: 2\n")
    models_dir = tmp_path / "models"
    models_dir.mkdir()
    (models_dir / "stg_orders.sql").write_text(
        "select id as order_id, amount from {{ source('raw', 'orders') }}\n"
    )
    (models_dir / "schema.yml").write_text(
        """
version: 2
sources:
  - name: raw
    tables:
      - name: orders
        description: Raw orders
models:
  - name: stg_orders
    description: Staged orders
    columns:
      - name: order_id
        description: Primary key
        tests: [unique, not_null]
"""
    )
    (models_dir / "semantic.yml").write_text(
        """
semantic_models:
  - name: orders
    model: ref('stg_orders')
    entities:
      - name: order_id
        type: primary
        description: The order
    measures:
      - name: order_total
        description: Sum of amounts
        expr: amount
metrics:
  - name: revenue
    description: Total revenue
    type_params:
      measure: order_total
"""
    )
    return tmp_path
