"""YAML schema registry loader.

Lets applications keep their schemas in a YAML file instead of code.
Each entry is either a schema description string or the schema spelled
out field by field.

Example YAML (schemas.yaml):
    schemas:
      people:
        description: "ver:1.0,hdr:false,del:,; LastName:string(50),Age:int"
      readings:
        version: "${READINGS_VERSION:-1.0}"
        header: true
        delimiter: "|"
        columns:
          - {name: sensor, type: string, length: 20}
          - {name: value, type: decimal, precision: 8, scale: 2}
          - {name: taken_at, type: datetime}

Usage:
    from webcsv.lib.config_loader import load_schema_file
    schemas = load_schema_file("./schemas.yaml")
    schema = schemas["people"]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from webcsv.lib.env import expand_config
from webcsv.lib.errors import SchemaSyntaxError, WebCSVError
from webcsv.lib.parser import parse_schema
from webcsv.lib.schema import DEFAULT_DELIMITER, DEFAULT_STRING_LENGTH, ColumnSpec, SchemaSpec

logger = logging.getLogger(__name__)

__all__ = [
    "SchemaConfigError",
    "load_schema_file",
    "schema_from_config",
]


class SchemaConfigError(WebCSVError):
    """Error in a YAML schema file."""

    pass


def _column_from_config(name: str, index: int, config: Any) -> ColumnSpec:
    if isinstance(config, str):
        return ColumnSpec.string(config, DEFAULT_STRING_LENGTH)
    if not isinstance(config, dict):
        raise SchemaConfigError(f"schemas.{name}.columns[{index}] must be a mapping or a name")

    col_type = str(config.get("type", "string")).lower()
    default_length = DEFAULT_STRING_LENGTH if col_type == "string" else 0

    try:
        return ColumnSpec(
            name=str(config.get("name", "")),
            type=col_type,
            length=int(config.get("length", default_length)),
            precision=int(config.get("precision", 0)),
            scale=int(config.get("scale", 0)),
        )
    except (TypeError, ValueError) as e:
        raise SchemaConfigError(
            f"schemas.{name}.columns[{index}] has a non-integer parameter",
            details={"column": config, "cause": str(e)},
        ) from e


def schema_from_config(name: str, config: Dict[str, Any]) -> SchemaSpec:
    """Create a SchemaSpec from one YAML registry entry.

    Args:
        name: Registry key (for error messages)
        config: The entry mapping

    Returns:
        SchemaSpec built from the entry

    Raises:
        SchemaConfigError: If the entry is invalid
    """
    if not isinstance(config, dict):
        raise SchemaConfigError(f"schemas.{name} must be a mapping")

    try:
        config = expand_config(config, strict=True)
    except KeyError as e:
        raise SchemaConfigError(
            f"schemas.{name} references an unset variable",
            details={"cause": e.args[0]},
            suggestion="Set the variable or give a fallback with ${NAME:-value}",
        ) from e

    if "description" in config:
        try:
            return parse_schema(str(config["description"]))
        except SchemaSyntaxError as e:
            raise SchemaConfigError(
                f"schemas.{name}.description is not a valid schema: {e.message}",
                details={"description": config["description"]},
            ) from e

    raw_columns = config.get("columns")
    if not raw_columns or not isinstance(raw_columns, list):
        raise SchemaConfigError(
            f"schemas.{name} requires 'description' or a non-empty 'columns' list",
        )

    columns: List[ColumnSpec] = [
        _column_from_config(name, i, c) for i, c in enumerate(raw_columns)
    ]

    header = config.get("header", False)
    if isinstance(header, str):
        header = header.strip().lower() in ("1", "t", "true", "yes")

    return SchemaSpec(
        version=str(config.get("version", "")),
        with_header=bool(header),
        delimiter=str(config.get("delimiter", DEFAULT_DELIMITER)),
        columns=tuple(columns),
    )


def load_schema_file(path: Union[str, Path]) -> Dict[str, SchemaSpec]:
    """Load every schema from a YAML registry file.

    Args:
        path: Path to the YAML file

    Returns:
        Mapping of schema name to SchemaSpec

    Raises:
        SchemaConfigError: If the file is missing or invalid
    """
    path = Path(path)
    if not path.exists():
        raise SchemaConfigError(f"Schema file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("schemas"), dict):
        raise SchemaConfigError(f"{path} must contain a 'schemas' mapping")

    schemas = {
        str(name): schema_from_config(str(name), entry)
        for name, entry in data["schemas"].items()
    }
    logger.debug("Loaded %d schemas from %s", len(schemas), path)
    return schemas
