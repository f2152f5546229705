"""Schema binding: declared columns to compiled paths and types.

A table is declared as an ordered list of column names, a parallel list of
type names, and a flat configuration map holding one path expression per
column. Binding validates all of it up front and produces an immutable
TableSchema that can be shared by any number of extractors.

Example:
    >>> schema = bind(
    ...     ["id", "count"],
    ...     ["string", "int"],
    ...     {"ID": "$.id", "count": "$.payload.count"},
    ... )
    >>> schema.column_names
    ['id', 'count']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple

import pyarrow as pa

from jsonrows.lib.errors import (
    AmbiguousPathError,
    ColumnCountMismatchError,
    InvalidColumnError,
    InvalidPathError,
    MissingPathError,
)
from jsonrows.lib.paths import CompiledPath, compile_path
from jsonrows.lib.types import ColumnType

logger = logging.getLogger(__name__)

__all__ = ["ColumnSchema", "TableSchema", "bind", "find_path_entry"]


@dataclass(frozen=True)
class ColumnSchema:
    """One bound output column."""

    name: str
    declared_type: ColumnType
    path: CompiledPath
    type_name: str = ""

    def to_arrow_field(self) -> pa.Field:
        return pa.field(self.name, self.declared_type.to_arrow(), nullable=True)


@dataclass(frozen=True)
class TableSchema:
    """Ordered, immutable set of bound columns.

    Column order is the output row order.
    """

    columns: Tuple[ColumnSchema, ...]
    name: Optional[str] = None

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[ColumnSchema]:
        return iter(self.columns)

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    @property
    def column_types(self) -> List[ColumnType]:
        return [c.declared_type for c in self.columns]

    def column(self, name: str) -> Optional[ColumnSchema]:
        """Get a column by name, case-insensitively."""
        wanted = name.lower()
        for col in self.columns:
            if col.name.lower() == wanted:
                return col
        return None

    def to_arrow_schema(self) -> pa.Schema:
        """Arrow schema for rows extracted with this table schema."""
        return pa.schema([c.to_arrow_field() for c in self.columns])


def find_path_entry(column_name: str, path_config: Mapping[str, str]) -> Optional[str]:
    """Find the path configured for a column, matching keys case-insensitively.

    If several keys match, the first in the mapping's iteration order wins.
    """
    wanted = column_name.lower()
    for key, value in path_config.items():
        if str(key).strip().lower() == wanted:
            return value
    return None


def bind(
    column_names: Sequence[str],
    column_type_names: Sequence[str],
    path_config: Mapping[str, str],
    *,
    table: Optional[str] = None,
) -> TableSchema:
    """Bind declared columns to their path expressions and types.

    Args:
        column_names: Column names in output order
        column_type_names: Host type names, parallel to column_names
        path_config: Configuration map; keys matching a column name
            (case-insensitively) hold that column's path expression
        table: Optional table name used in error context

    Returns:
        Immutable TableSchema

    Raises:
        ColumnCountMismatchError: If names and types differ in length
        InvalidColumnError: If a column name is empty or duplicated
        MissingPathError: If a column has no path entry
        InvalidPathError: If a path expression does not compile
        AmbiguousPathError: If a path may match more than one node
    """
    if len(column_names) != len(column_type_names):
        raise ColumnCountMismatchError(
            len(column_names), len(column_type_names), table=table
        )

    columns: List[ColumnSchema] = []
    seen = set()

    for raw_name, type_name in zip(column_names, column_type_names):
        name = (raw_name or "").strip()
        if not name:
            raise InvalidColumnError("Column names must not be empty", table=table)
        if name.lower() in seen:
            raise InvalidColumnError(
                f"Column '{name}' is declared more than once", table=table, column=name
            )
        seen.add(name.lower())

        raw_path = find_path_entry(name, path_config)
        if raw_path is None:
            raise MissingPathError(
                name, available=[str(k) for k in path_config], table=table
            )

        logger.debug("Binding column '%s' to path %s", name, raw_path)
        try:
            path = compile_path(raw_path)
        except InvalidPathError as e:
            raise InvalidPathError(
                e.raw_path, e.cause, table=table, column=name
            ) from e
        if not path.is_definite:
            raise AmbiguousPathError(path.raw, table=table, column=name)

        declared_type = ColumnType.from_string(type_name)
        columns.append(
            ColumnSchema(
                name=name,
                declared_type=declared_type,
                path=path,
                type_name=(type_name or "").strip(),
            )
        )

    logger.debug("Bound %d columns%s", len(columns), f" for table '{table}'" if table else "")
    return TableSchema(columns=tuple(columns), name=table)
