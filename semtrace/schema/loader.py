"""YAML loading helpers shared by the project parsers."""

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .errors import SchemaLoadError, SchemaValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def load_yaml(path: str | Path) -> dict:
    """Load a YAML file and return the raw data.

    Args:
        path: Path to the YAML file.

    Returns:
        The parsed YAML data as a dictionary.

    Raises:
        SchemaLoadError: If the file cannot be read or parsed.
    """
    path = Path(path)

    if not path.exists():
        raise SchemaLoadError(f"File not found: {path}", str(path))

    if not path.is_file():
        raise SchemaLoadError(f"Not a file: {path}", str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML: {e}", str(path)) from e
    except OSError as e:
        raise SchemaLoadError(f"Cannot read file: {e}", str(path)) from e

    return _ensure_mapping(data, str(path))


def load_yaml_string(yaml_string: str) -> dict:
    """Parse a YAML string into a dictionary.

    Raises:
        SchemaLoadError: If the YAML cannot be parsed or is not a mapping.
    """
    try:
        data = yaml.safe_load(yaml_string)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML: {e}") from e

    return _ensure_mapping(data)


def _ensure_mapping(data: Any, path: str | None = None) -> dict:
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise SchemaLoadError(
            f"Expected YAML mapping at root, got {type(data).__name__}", path
        )

    return data


def validate_entry(model_cls: type[ModelT], data: Any) -> ModelT:
    """Validate one raw entry against a schema model.

    Args:
        model_cls: The pydantic model to validate against.
        data: The raw YAML data for one entry.

    Returns:
        The validated model instance.

    Raises:
        SchemaValidationError: If the data fails validation.
    """
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                "loc": ".".join(str(x) for x in err["loc"]),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        raise SchemaValidationError(
            f"{model_cls.__name__} validation failed with {len(errors)} error(s)",
            errors,
        ) from e
