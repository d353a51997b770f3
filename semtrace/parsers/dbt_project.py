"""Parser for dbt project files, models and sources."""

import logging
import re
from pathlib import Path
from typing import Any, Iterator

from ..schema.errors import SchemaLoadError, SchemaValidationError
from ..schema.loader import load_yaml, validate_entry
from ..schema.models import Column, DbtModel, DbtProject, DbtSource, SourceRef

logger = logging.getLogger(__name__)

_REF_RE = re.compile(r"""\{\{\s*ref\s*\(\s*['"]([^'"]+)['"]\s*\)\s*\}\}""")
_SOURCE_RE = re.compile(
    r"""\{\{\s*source\s*\(\s*['"]([^'"]+)['"]\s*,\s*['"]([^'"]+)['"]\s*\)\s*\}\}"""
)
_MATERIALIZED_RE = re.compile(
    r"""\{\{\s*config\s*\([^)]*materialized\s*=\s*['"]([^'"]+)['"][^)]*\)\s*\}\}"""
)


def extract_refs(sql: str) -> list[str]:
    """Get the model names passed to ``{{ ref('...') }}``, in order."""
    return _REF_RE.findall(sql)


def extract_sources(sql: str) -> list[SourceRef]:
    """Get the ``{{ source('group', 'table') }}`` references, in order."""
    return [
        SourceRef(source_name=group, table_name=table)
        for group, table in _SOURCE_RE.findall(sql)
    ]


def extract_materialization(sql: str) -> str | None:
    """Get the ``materialized`` setting from a ``{{ config(...) }}`` block."""
    match = _MATERIALIZED_RE.search(sql)
    return match.group(1) if match else None


def parse_columns(data: Any) -> list[Column]:
    """Parse a ``columns:`` list, skipping entries without a name."""
    if not isinstance(data, list):
        return []

    columns = []
    for item in data:
        if not isinstance(item, dict) or not item.get("name"):
            continue
        try:
            columns.append(validate_entry(Column, item))
        except SchemaValidationError as e:
            logger.debug("Skipping column %r: %s", item.get("name"), e)
    return columns


def _string_list(data: Any) -> list[str]:
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, str)]


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


class DbtProjectParser:
    """Reads a dbt project directory into models and sources."""

    def __init__(self, project_path: str | Path):
        self.project_path = Path(project_path)

    def parse_project(self) -> DbtProject:
        """Parse dbt_project.yml.

        Raises:
            SchemaLoadError: If the file is missing or is not valid YAML.
            SchemaValidationError: If its settings have the wrong shape.
        """
        data = load_yaml(self.project_path / "dbt_project.yml")
        return validate_entry(DbtProject, data)

    def _model_dirs(self, project: DbtProject) -> Iterator[Path]:
        for model_path in project.model_paths:
            full_path = self.project_path / model_path
            if not full_path.exists():
                logger.warning("Model path does not exist: %s", full_path)
                continue
            yield full_path

    def parse_models(self, project: DbtProject) -> list[DbtModel]:
        """Parse every model under the project's model paths.

        Each ``.sql`` file becomes a model; ``models:`` entries in schema
        YAML files add descriptions, columns and tags by model name.
        """
        models: list[DbtModel] = []

        for model_dir in self._model_dirs(project):
            for sql_file in sorted(model_dir.rglob("*.sql")):
                try:
                    models.append(self.parse_model_file(sql_file))
                except OSError as e:
                    logger.warning("Cannot read model file %s: %s", sql_file, e)

            metadata = self.parse_schema_files(model_dir)
            for i, model in enumerate(models):
                meta = metadata.get(model.name)
                if meta is not None:
                    models[i] = model.model_copy(update=meta)

        return models

    def parse_model_file(self, path: Path) -> DbtModel:
        """Parse one model's SQL file."""
        content = path.read_text(encoding="utf-8")
        name = path.stem

        refs = extract_refs(content)
        sources = extract_sources(content)

        depends_on = [f"model.{ref}" for ref in refs]
        depends_on.extend(
            f"source.{s.source_name}.{s.table_name}" for s in sources
        )

        return DbtModel(
            name=name,
            unique_id=f"model.{name}",
            refs=refs,
            sources=sources,
            depends_on=depends_on,
            file_path=str(path),
            raw_sql=content,
            materialization=extract_materialization(content),
        )

    def _iter_schema_yaml(self, directory: Path) -> Iterator[dict]:
        for path in sorted(directory.rglob("*")):
            if path.suffix not in (".yml", ".yaml") or not path.is_file():
                continue
            if path.name.startswith("dbt_project"):
                continue
            try:
                yield load_yaml(path)
            except SchemaLoadError as e:
                logger.debug("Skipping %s: %s", path, e)

    def parse_schema_files(self, model_dir: Path) -> dict[str, dict[str, Any]]:
        """Collect per-model metadata from schema YAML files.

        Returns:
            Model name to a dict of description, columns and tags.
        """
        metadata: dict[str, dict[str, Any]] = {}

        for data in self._iter_schema_yaml(model_dir):
            entries = data.get("models")
            if not isinstance(entries, list):
                continue
            for entry in entries:
                if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
                    continue
                metadata[entry["name"]] = {
                    "description": _str_or_none(entry.get("description")),
                    "columns": parse_columns(entry.get("columns")),
                    "tags": _string_list(entry.get("tags")),
                }

        return metadata

    def parse_sources(self, project: DbtProject) -> list[DbtSource]:
        """Parse every ``sources:`` block under the model paths."""
        sources: list[DbtSource] = []

        for model_dir in self._model_dirs(project):
            for data in self._iter_schema_yaml(model_dir):
                entries = data.get("sources")
                if not isinstance(entries, list):
                    continue
                for entry in entries:
                    if isinstance(entry, dict):
                        sources.extend(self.parse_source_definition(entry))

        return sources

    def parse_source_definition(self, data: dict) -> list[DbtSource]:
        """Expand one source group into its tables.

        Table-level schema and database override the group's.
        """
        source_name = _str_or_none(data.get("name")) or "unknown"
        database = _str_or_none(data.get("database"))
        schema = _str_or_none(data.get("schema"))

        tables = data.get("tables")
        if not isinstance(tables, list):
            return []

        result = []
        for table in tables:
            if not isinstance(table, dict) or not isinstance(table.get("name"), str):
                continue
            result.append(
                DbtSource(
                    source_name=source_name,
                    name=table["name"],
                    schema=_str_or_none(table.get("schema")) or schema,
                    database=_str_or_none(table.get("database")) or database,
                    description=_str_or_none(table.get("description")),
                    columns=parse_columns(table.get("columns")),
                    loader=_str_or_none(table.get("loader")),
                    tags=_string_list(table.get("tags")),
                )
            )
        return result
