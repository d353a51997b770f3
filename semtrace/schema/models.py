"""Pydantic models for dbt project and semantic layer metadata."""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, field_validator, model_validator


def _strip_ref(value: str) -> str:
    """Strip a ref('...') wrapper from a model reference."""
    value = value.strip()
    if value.startswith("ref(") and value.endswith(")"):
        return value[4:-1].strip().strip("'").strip('"')
    return value


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _str_or(default: str):
    def validate(value: Any) -> str:
        return value if isinstance(value, str) else default

    return validate


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _mapping_or_none(value: Any) -> Any:
    if isinstance(value, (dict, BaseModel)):
        return value
    return None


def _mapping_or_empty(value: Any) -> Any:
    return value if isinstance(value, dict) else {}


def _is_named(item: Any) -> bool:
    if isinstance(item, BaseModel):
        return True
    return isinstance(item, dict) and isinstance(item.get("name"), str) and bool(item["name"])


# YAML values of the wrong kind (numbers, lists, mappings) read as absent,
# so one odd key never rejects the declaration holding it.
OptionalStr = Annotated[str | None, BeforeValidator(_str_or_none)]
OptionalInt = Annotated[int | None, BeforeValidator(_int_or_none)]
StrList = Annotated[list[str], BeforeValidator(_string_list)]


class SemanticLayerType(str, Enum):
    """Kind of semantic layer configuration to read."""

    DBT_SEMANTIC_LAYER = "dbt_semantic_layer"
    SNOWFLAKE = "snowflake"
    NONE = "none"


class ProjectConfig(BaseModel):
    """Where to find a project and which semantic layer it uses."""

    dbt_project_path: str
    semantic_layer_path: str | None = None
    semantic_layer_type: SemanticLayerType = SemanticLayerType.DBT_SEMANTIC_LAYER


# -----------------------------------------------------------------------------
# dbt project
# -----------------------------------------------------------------------------


class DbtProject(BaseModel):
    """Settings read from dbt_project.yml."""

    name: Annotated[str, BeforeValidator(_str_or("unknown"))] = "unknown"
    version: OptionalStr = None
    config_version: OptionalInt = None
    profile: OptionalStr = None
    model_paths: list[str] = Field(default_factory=lambda: ["models"])
    seed_paths: list[str] = Field(default_factory=lambda: ["seeds"])
    test_paths: list[str] = Field(default_factory=lambda: ["tests"])
    analysis_paths: list[str] = Field(default_factory=lambda: ["analyses"])
    macro_paths: list[str] = Field(default_factory=lambda: ["macros"])
    target_path: OptionalStr = None

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Map dbt's dashed keys onto field names.

        Path settings that are not lists keep their defaults, and
        non-string entries inside them are dropped.
        """
        if not isinstance(data, dict):
            return data

        data = dict(data)
        legacy_paths = data.pop("source-paths", None)
        if not isinstance(data.get("model-paths"), list):
            data["model-paths"] = legacy_paths

        for key in ("config-version", "target-path"):
            if key in data:
                data[key.replace("-", "_")] = data.pop(key)

        for key in (
            "model-paths",
            "seed-paths",
            "test-paths",
            "analysis-paths",
            "macro-paths",
        ):
            value = data.pop(key, None)
            if isinstance(value, list):
                data[key.replace("-", "_")] = _string_list(value)

        return data


class Column(BaseModel):
    """A documented column of a model or source table."""

    name: str
    description: OptionalStr = None
    data_type: OptionalStr = None
    meta: Annotated[dict[str, Any], BeforeValidator(_mapping_or_empty)] = Field(
        default_factory=dict
    )
    tests: list[str] = Field(default_factory=list)

    @field_validator("tests", mode="before")
    @classmethod
    def normalize_tests(cls, value: Any) -> list[str]:
        """Keep string tests; configured tests contribute their name."""
        if not isinstance(value, list):
            return []
        tests = []
        for test in value:
            if isinstance(test, str):
                tests.append(test)
            elif isinstance(test, dict) and test:
                tests.append(str(next(iter(test))))
        return tests


class SourceRef(BaseModel):
    """A source('group', 'table') reference made by a model."""

    source_name: str
    table_name: str

    @property
    def key(self) -> str:
        return f"{self.source_name}.{self.table_name}"


class DbtModel(BaseModel):
    """A transformation model (one .sql file)."""

    name: str
    unique_id: str = ""
    schema_name: OptionalStr = Field(default=None, alias="schema")
    database: OptionalStr = None
    description: OptionalStr = None
    columns: list[Column] = Field(default_factory=list)
    depends_on: list[str] = Field(default_factory=list)
    refs: list[str] = Field(default_factory=list)
    sources: list[SourceRef] = Field(default_factory=list)
    file_path: str = ""
    raw_sql: OptionalStr = None
    materialization: OptionalStr = None
    tags: StrList = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def default_unique_id(self) -> "DbtModel":
        if not self.unique_id:
            self.unique_id = f"model.{self.name}"
        return self

    @property
    def is_tested(self) -> bool:
        """True when at least one column declares a test."""
        return any(column.tests for column in self.columns)


class DbtSource(BaseModel):
    """A raw table declared in a sources: block."""

    source_name: str
    name: str
    unique_id: str = ""
    schema_name: OptionalStr = Field(default=None, alias="schema")
    database: OptionalStr = None
    description: OptionalStr = None
    columns: list[Column] = Field(default_factory=list)
    loader: OptionalStr = None
    tags: StrList = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def default_unique_id(self) -> "DbtSource":
        if not self.unique_id:
            self.unique_id = f"source.{self.source_name}.{self.name}"
        return self

    @property
    def key(self) -> str:
        return f"{self.source_name}.{self.name}"


# -----------------------------------------------------------------------------
# Semantic layer (MetricFlow)
# -----------------------------------------------------------------------------


class SemanticModelDefaults(BaseModel):
    agg_time_dimension: OptionalStr = None


class SemanticEntity(BaseModel):
    """An entity (join key) of a semantic model."""

    name: str
    entity_type: Annotated[str, BeforeValidator(_str_or("primary"))] = Field(
        default="primary", alias="type"
    )
    expr: OptionalStr = None
    description: OptionalStr = None

    model_config = {"populate_by_name": True}

    @property
    def is_primary(self) -> bool:
        return self.entity_type == "primary"


class NonAdditiveDimension(BaseModel):
    name: str
    window_choice: OptionalStr = None


class Measure(BaseModel):
    """An aggregation declared on a semantic model."""

    name: str
    agg: Annotated[str, BeforeValidator(_str_or("sum"))] = "sum"
    expr: OptionalStr = None
    description: OptionalStr = None
    create_metric: bool | None = None
    non_additive_dimension: Annotated[
        NonAdditiveDimension | None, BeforeValidator(_mapping_or_none)
    ] = None


class DimensionTypeParams(BaseModel):
    time_granularity: OptionalStr = None
    validity_params: Any = None


class Dimension(BaseModel):
    """A dimension declared on a semantic model."""

    name: str
    dimension_type: Annotated[str, BeforeValidator(_str_or("categorical"))] = Field(
        default="categorical", alias="type"
    )
    expr: OptionalStr = None
    description: OptionalStr = None
    type_params: Annotated[
        DimensionTypeParams | None, BeforeValidator(_mapping_or_none)
    ] = None

    model_config = {"populate_by_name": True}


class SemanticModel(BaseModel):
    """A semantic model layered on top of a dbt model."""

    name: str
    description: OptionalStr = None
    model: str
    defaults: Annotated[
        SemanticModelDefaults | None, BeforeValidator(_mapping_or_none)
    ] = None
    entities: list[SemanticEntity] = Field(default_factory=list)
    measures: list[Measure] = Field(default_factory=list)
    dimensions: list[Dimension] = Field(default_factory=list)

    @field_validator("model", mode="before")
    @classmethod
    def strip_ref(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _strip_ref(value)
        return value

    @field_validator("entities", "measures", "dimensions", mode="before")
    @classmethod
    def drop_unnamed(cls, value: Any) -> Any:
        """Entries without a string name are skipped rather than rejected."""
        if not isinstance(value, list):
            return []
        return [item for item in value if _is_named(item)]

    @property
    def primary_entity(self) -> SemanticEntity | None:
        """The first entity declared as primary, if any."""
        for entity in self.entities:
            if entity.is_primary:
                return entity
        return None


class MeasureRef(BaseModel):
    """Reference from a metric to a measure."""

    name: str
    filter: OptionalStr = None
    alias: OptionalStr = None

    @model_validator(mode="before")
    @classmethod
    def from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data


class MetricRef(BaseModel):
    """Reference from a derived metric to another metric."""

    name: str
    offset_window: OptionalStr = None
    offset_to_grain: OptionalStr = None

    @model_validator(mode="before")
    @classmethod
    def from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data


class MetricTypeParams(BaseModel):
    measure: MeasureRef | None = None
    expr: OptionalStr = None
    metrics: list[MetricRef] | None = None
    window: OptionalStr = None
    grain_to_date: OptionalStr = None

    @field_validator("measure", mode="before")
    @classmethod
    def drop_malformed_measure(cls, value: Any) -> Any:
        if isinstance(value, str) or _is_named(value):
            return value
        return None

    @field_validator("metrics", mode="before")
    @classmethod
    def drop_malformed_metrics(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return None
        return [ref for ref in value if isinstance(ref, str) or _is_named(ref)]


class Metric(BaseModel):
    """A business metric."""

    name: str
    description: OptionalStr = None
    metric_type: Annotated[str, BeforeValidator(_str_or("simple"))] = Field(
        default="simple", alias="type"
    )
    type_params: MetricTypeParams = Field(default_factory=MetricTypeParams)
    filter: OptionalStr = None
    label: OptionalStr = None

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def normalize_type_params(cls, data: Any) -> Any:
        """Keep only the type params that apply to the metric's kind."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        metric_type = data.get("type", data.get("metric_type"))
        if not isinstance(metric_type, str) or not metric_type:
            metric_type = "simple"
        params = data.get("type_params")
        if isinstance(params, BaseModel):
            params = params.model_dump(exclude_none=True)
        elif not isinstance(params, dict):
            params = {}

        if metric_type in ("simple", "cumulative"):
            keep = ("measure", "window", "grain_to_date")
        elif metric_type == "derived":
            keep = ("expr", "metrics")
        else:
            keep = ("measure", "expr", "metrics", "window", "grain_to_date")

        data["type_params"] = {k: v for k, v in params.items() if k in keep}
        return data

    @property
    def measure_name(self) -> str | None:
        if self.type_params.measure is None:
            return None
        return self.type_params.measure.name

    @property
    def metric_refs(self) -> list[MetricRef]:
        return self.type_params.metrics or []


# -----------------------------------------------------------------------------
# Snowflake semantic layer
# -----------------------------------------------------------------------------


class SnowflakeTable(BaseModel):
    name: str
    database: Annotated[str, BeforeValidator(_str_or(""))] = ""
    schema_name: Annotated[str, BeforeValidator(_str_or(""))] = Field(
        default="", alias="schema"
    )
    table_name: str
    description: OptionalStr = None

    model_config = {"populate_by_name": True}


class SnowflakeMetric(BaseModel):
    name: str
    table: str
    expression: str
    description: OptionalStr = None
    label: OptionalStr = None


class SnowflakeDimension(BaseModel):
    name: str
    table: str
    expression: str
    description: OptionalStr = None
    dimension_type: OptionalStr = None


class SnowflakeSemanticLayer(BaseModel):
    tables: list[SnowflakeTable] = Field(default_factory=list)
    metrics: list[SnowflakeMetric] = Field(default_factory=list)
    dimensions: list[SnowflakeDimension] = Field(default_factory=list)
