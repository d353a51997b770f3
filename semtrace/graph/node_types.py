"""Node and edge type definitions for the lineage graph."""

from enum import Enum


class NodeType(str, Enum):
    """Types of nodes in the lineage graph."""

    SOURCE = "source"
    MODEL = "model"
    ENTITY = "entity"
    MEASURE = "measure"
    DIMENSION = "dimension"
    METRIC = "metric"


class EdgeType(str, Enum):
    """Types of edges in the lineage graph.

    Every edge points from the dependent node to the node it derives from.
    """

    # Transformation layer
    MODEL_TO_MODEL = "model_to_model"
    MODEL_TO_SOURCE = "model_to_source"

    # Semantic layer
    ENTITY_TO_MODEL = "entity_to_model"
    MEASURE_TO_ENTITY = "measure_to_entity"
    DIMENSION_TO_ENTITY = "dimension_to_entity"

    # Metrics
    METRIC_TO_MEASURE = "metric_to_measure"
    METRIC_TO_METRIC = "metric_to_metric"  # derived metrics
