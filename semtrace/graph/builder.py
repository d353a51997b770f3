"""Builder for converting parsed project entities into a LineageGraph."""

from typing import Any, Sequence

from ..schema.models import DbtModel, DbtSource, Metric, SemanticModel
from .lineage_graph import LineageGraph
from .node_types import EdgeType, NodeType


class _GraphBuilder:
    """State for a single build pass.

    ``keys`` maps resolution keys (``model.<name>``, ``source.<group>.<table>``
    and so on) to node ids. A later entity with the same key replaces the
    mapping; the earlier node stays in the graph.
    """

    def __init__(self):
        self.graph = LineageGraph()
        self.keys: dict[str, str] = {}

    def register(
        self,
        key: str,
        node_type: NodeType,
        name: str,
        description: str | None,
        metadata: dict[str, Any],
    ) -> str:
        node_id = self.graph.add_node(node_type, name, description, metadata)
        self.keys[key] = node_id
        return node_id

    def link(
        self,
        source_id: str | None,
        target_key: str,
        edge_type: EdgeType,
        label: str | None = None,
    ) -> bool:
        """Add an edge to the node registered under ``target_key``.

        Returns False, adding nothing, when either end is unresolved.
        """
        target_id = self.keys.get(target_key)
        if source_id is None or target_id is None:
            return False
        self.graph.add_edge(source_id, target_id, edge_type, label)
        return True

    # -------------------------------------------------------------------------
    # Transformation layer
    # -------------------------------------------------------------------------

    def add_source(self, source: DbtSource) -> None:
        metadata: dict[str, Any] = {}
        if source.schema_name:
            metadata["schema"] = source.schema_name
        if source.database:
            metadata["database"] = source.database
        metadata["source_name"] = source.source_name
        metadata["columns"] = len(source.columns)

        self.register(
            f"source.{source.source_name}.{source.name}",
            NodeType.SOURCE,
            source.name,
            source.description,
            metadata,
        )

    def add_model(self, model: DbtModel) -> None:
        metadata: dict[str, Any] = {}
        if model.materialization:
            metadata["materialization"] = model.materialization
        metadata["file_path"] = model.file_path
        metadata["columns"] = len(model.columns)
        metadata["tags"] = list(model.tags)

        self.register(
            f"model.{model.name}",
            NodeType.MODEL,
            model.name,
            model.description,
            metadata,
        )

    def add_model_edges(self, model: DbtModel) -> None:
        model_id = self.keys.get(f"model.{model.name}")

        for ref_name in model.refs:
            self.link(model_id, f"model.{ref_name}", EdgeType.MODEL_TO_MODEL, "ref")

        for source_ref in model.sources:
            self.link(
                model_id,
                f"source.{source_ref.source_name}.{source_ref.table_name}",
                EdgeType.MODEL_TO_SOURCE,
                "source",
            )

    # -------------------------------------------------------------------------
    # Semantic layer
    # -------------------------------------------------------------------------

    def add_semantic_model(self, sm: SemanticModel) -> None:
        for entity in sm.entities:
            metadata: dict[str, Any] = {
                "entity_type": entity.entity_type,
                "semantic_model": sm.name,
            }
            if entity.expr:
                metadata["expr"] = entity.expr

            entity_id = self.register(
                f"entity.{sm.name}.{entity.name}",
                NodeType.ENTITY,
                entity.name,
                entity.description,
                metadata,
            )
            self.link(entity_id, f"model.{sm.model}", EdgeType.ENTITY_TO_MODEL)

        primary = sm.primary_entity
        primary_key = f"entity.{sm.name}.{primary.name}" if primary else None

        for measure in sm.measures:
            metadata = {"agg": measure.agg, "semantic_model": sm.name}
            if measure.expr:
                metadata["expr"] = measure.expr
            if measure.create_metric is not None:
                metadata["create_metric"] = measure.create_metric

            measure_id = self.register(
                f"measure.{sm.name}.{measure.name}",
                NodeType.MEASURE,
                measure.name,
                measure.description,
                metadata,
            )
            if primary_key:
                self.link(measure_id, primary_key, EdgeType.MEASURE_TO_ENTITY)

        for dim in sm.dimensions:
            metadata = {"dimension_type": dim.dimension_type, "semantic_model": sm.name}
            if dim.expr:
                metadata["expr"] = dim.expr

            dim_id = self.register(
                f"dimension.{sm.name}.{dim.name}",
                NodeType.DIMENSION,
                dim.name,
                dim.description,
                metadata,
            )
            if primary_key:
                self.link(dim_id, primary_key, EdgeType.DIMENSION_TO_ENTITY)

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def add_metric(self, metric: Metric) -> None:
        metadata: dict[str, Any] = {"metric_type": metric.metric_type}
        if metric.filter:
            metadata["filter"] = metric.filter
        if metric.label:
            metadata["label"] = metric.label

        self.register(
            f"metric.{metric.name}",
            NodeType.METRIC,
            metric.name,
            metric.description,
            metadata,
        )

    def add_metric_edges(
        self, metric: Metric, semantic_models: Sequence[SemanticModel]
    ) -> None:
        metric_id = self.keys.get(f"metric.{metric.name}")

        if metric.metric_type in ("simple", "cumulative"):
            measure_name = metric.measure_name
            if measure_name is None:
                return
            # First semantic model declaring the measure wins
            for sm in semantic_models:
                if self.link(
                    metric_id,
                    f"measure.{sm.name}.{measure_name}",
                    EdgeType.METRIC_TO_MEASURE,
                ):
                    break

        elif metric.metric_type == "derived":
            for metric_ref in metric.metric_refs:
                self.link(
                    metric_id,
                    f"metric.{metric_ref.name}",
                    EdgeType.METRIC_TO_METRIC,
                    metric_ref.offset_window,
                )


def build_graph(
    models: Sequence[DbtModel],
    sources: Sequence[DbtSource],
    semantic_models: Sequence[SemanticModel],
    metrics: Sequence[Metric],
) -> LineageGraph:
    """Build a LineageGraph from parsed project entities.

    Layers are added bottom-up so that every reference is looked up after
    the node it points at has been registered. References that do not
    resolve are dropped without error.

    Args:
        models: Parsed dbt models.
        sources: Parsed source tables.
        semantic_models: Parsed semantic models.
        metrics: Parsed metrics.

    Returns:
        A LineageGraph with nodes and edges in construction order.
    """
    builder = _GraphBuilder()

    for source in sources:
        builder.add_source(source)

    for model in models:
        builder.add_model(model)

    # Model edges only after every model exists
    for model in models:
        builder.add_model_edges(model)

    for sm in semantic_models:
        builder.add_semantic_model(sm)

    for metric in metrics:
        builder.add_metric(metric)

    # Derived metrics may reference metrics declared after them
    for metric in metrics:
        builder.add_metric_edges(metric, semantic_models)

    return builder.graph
