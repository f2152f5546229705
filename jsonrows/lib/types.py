"""Column type definitions.

Defines the scalar column types a table can declare and how host type names
resolve to them.
"""

from __future__ import annotations

import logging
from enum import Enum

import pyarrow as pa

logger = logging.getLogger(__name__)

__all__ = ["ColumnType"]


class ColumnType(str, Enum):
    """Scalar types a column can be declared with."""

    STRING = "string"
    BOOLEAN = "boolean"
    TINYINT = "tinyint"
    INT = "int"
    BIGINT = "bigint"
    FLOAT = "float"
    DOUBLE = "double"

    @classmethod
    def from_string(cls, value: str) -> "ColumnType":
        """Resolve a host type name, case-insensitively.

        Unrecognized names (including parameterized and complex types such as
        ``varchar(10)`` or ``array<int>``) fall back to STRING.
        """
        normalized = (value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            logger.debug("Unrecognized column type '%s', using string", value)
            return cls.STRING

    @property
    def is_integer(self) -> bool:
        return self in (ColumnType.TINYINT, ColumnType.INT, ColumnType.BIGINT)

    def to_arrow(self) -> pa.DataType:
        """Arrow type used when materializing columns of this type."""
        return _ARROW_TYPES[self]


_ARROW_TYPES = {
    ColumnType.STRING: pa.string(),
    ColumnType.BOOLEAN: pa.bool_(),
    ColumnType.TINYINT: pa.int8(),
    ColumnType.INT: pa.int32(),
    ColumnType.BIGINT: pa.int64(),
    ColumnType.FLOAT: pa.float32(),
    ColumnType.DOUBLE: pa.float64(),
}
