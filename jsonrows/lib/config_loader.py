"""Table definitions from YAML files or host table properties.

Example YAML (events.yaml):
    table: events
    on_coercion_error: raise
    columns:
      - name: id
        type: string
        path: $.id
      - name: count
        type: int
        path: $.payload.count

Usage:
    from jsonrows.lib.config_loader import load_table
    definition = load_table("./tables/events.yaml")
    extractor = definition.create_extractor()

Hosts that describe tables as a flat property map (comma-separated
``columns``, colon-separated ``columns.types``, one path entry per column)
use ``bind_table_properties`` instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from jsonrows.lib.errors import JsonRowsError, TableConfigError
from jsonrows.lib.extractor import CoercionPolicy, RowExtractor
from jsonrows.lib.schema import TableSchema, bind

logger = logging.getLogger(__name__)

__all__ = [
    "TableDefinition",
    "load_table",
    "load_table_from_dict",
    "bind_table_properties",
    "validate_table_config",
    "LIST_COLUMNS",
    "LIST_COLUMN_TYPES",
]

# Host table property keys
LIST_COLUMNS = "columns"
LIST_COLUMN_TYPES = "columns.types"


@dataclass(frozen=True)
class TableDefinition:
    """A bound table plus its extraction settings."""

    schema: TableSchema
    on_coercion_error: CoercionPolicy = CoercionPolicy.RAISE

    @property
    def name(self) -> Optional[str]:
        return self.schema.name

    def create_extractor(self, *, reuse_buffer: bool = False) -> RowExtractor:
        """Create an extractor for this table."""
        return RowExtractor(
            self.schema,
            reuse_buffer=reuse_buffer,
            on_coercion_error=self.on_coercion_error,
        )


def _parse_policy(config: Dict[str, Any]) -> CoercionPolicy:
    raw = config.get("on_coercion_error", CoercionPolicy.RAISE.value)
    try:
        return CoercionPolicy.from_string(raw)
    except ValueError as e:
        raise TableConfigError(str(e), field="on_coercion_error", value=raw) from None


def load_table_from_dict(config: Dict[str, Any]) -> TableDefinition:
    """Create a TableDefinition from a parsed YAML mapping.

    Raises:
        TableConfigError: If the mapping is structurally invalid
        BindError: If the columns cannot be bound
    """
    if not isinstance(config, dict):
        raise TableConfigError("Table definition must be a mapping")

    columns = config.get("columns")
    if not columns:
        raise TableConfigError("columns is required", field="columns")
    if not isinstance(columns, list):
        raise TableConfigError(
            "columns must be a list of {name, type, path} entries",
            field="columns",
            value=type(columns).__name__,
        )

    table = config.get("table")
    names: List[str] = []
    types: List[str] = []
    paths: Dict[str, str] = {}

    for i, column in enumerate(columns):
        if not isinstance(column, dict) or not column.get("name"):
            raise TableConfigError(
                f"columns[{i}].name is required", field=f"columns[{i}].name", table=table
            )
        name = str(column["name"])
        names.append(name)
        types.append(str(column.get("type", "string")))
        if column.get("path") is not None:
            paths[name] = str(column["path"])

    policy = _parse_policy(config)
    schema = bind(names, types, paths, table=table)
    logger.info("Loaded table '%s' with %d columns", table or "?", len(schema))
    return TableDefinition(schema=schema, on_coercion_error=policy)


def load_table(path: Union[str, Path]) -> TableDefinition:
    """Load and bind a table definition from a YAML file.

    Raises:
        TableConfigError: If the file is missing or not valid YAML
        BindError: If the columns cannot be bound
    """
    path = Path(path)
    if not path.exists():
        raise TableConfigError(
            f"Table definition not found: {path}",
            field="path",
            suggestion="Check the path to the table YAML file",
        )

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise TableConfigError(f"Invalid YAML in {path}: {e}") from e

    if config is None:
        raise TableConfigError(f"Table definition is empty: {path}")

    return load_table_from_dict(config)


def _split_list(value: str, separator: str) -> List[str]:
    """Split on ``separator`` outside of ``()`` and ``<>`` groups."""
    items: List[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(value):
        if ch in "(<":
            depth += 1
        elif ch in ")>":
            depth -= 1
        elif ch == separator and depth == 0:
            items.append(value[start:i])
            start = i + 1
    items.append(value[start:])
    return [item.strip() for item in items]


def _split_type_names(value: str) -> List[str]:
    # Colon-separated; a comma list is accepted only when no colon is present
    types = _split_list(value, ":")
    if len(types) == 1:
        types = _split_list(value, ",")
    return types


def bind_table_properties(
    properties: Mapping[str, str],
    *,
    table: Optional[str] = None,
) -> TableSchema:
    """Bind a table described as a flat host property map.

    ``columns`` holds comma-separated column names, ``columns.types`` the
    matching type names (colon-separated, or comma-separated when there is
    no colon; separators inside ``()`` and ``<>`` are ignored). Every
    other key is a candidate path entry, matched case-insensitively against
    the column names.

    Raises:
        TableConfigError: If ``columns`` or ``columns.types`` is missing
        BindError: If the columns cannot be bound
    """
    if not properties.get(LIST_COLUMNS):
        raise TableConfigError(f"'{LIST_COLUMNS}' property is required", field=LIST_COLUMNS)
    if not properties.get(LIST_COLUMN_TYPES):
        raise TableConfigError(
            f"'{LIST_COLUMN_TYPES}' property is required", field=LIST_COLUMN_TYPES
        )

    logger.debug("Table properties: %s", dict(properties))

    names = _split_list(properties[LIST_COLUMNS], ",")
    types = _split_type_names(properties[LIST_COLUMN_TYPES])
    paths = {
        key: value
        for key, value in properties.items()
        if key not in (LIST_COLUMNS, LIST_COLUMN_TYPES)
    }
    return bind(names, types, paths, table=table)


def validate_table_config(config: Dict[str, Any]) -> List[str]:
    """Check a table definition without raising.

    Returns:
        List of issue descriptions (empty if the definition binds cleanly)
    """
    if not isinstance(config, dict):
        return ["Table definition must be a mapping"]

    issues: List[str] = []
    columns = config.get("columns")
    if not columns or not isinstance(columns, list):
        issues.append("columns is required and must be a list")
    else:
        for i, column in enumerate(columns):
            if not isinstance(column, dict) or not column.get("name"):
                issues.append(f"columns[{i}]: name is required")
            elif column.get("path") is None:
                issues.append(f"columns[{i}] ({column['name']}): path is required")

    try:
        _parse_policy(config)
    except TableConfigError as e:
        issues.append(e.message)

    if issues:
        return issues

    try:
        load_table_from_dict(config)
    except JsonRowsError as e:
        issues.append(f"{e.column}: {e.message}" if e.column else e.message)
    return issues
