"""Conversion of matched JSON values to declared column types.

Every matched value is first rendered to its text form and then parsed
according to the column type, so a JSON string ``"3.14"`` and a JSON number
``3.14`` coerce identically.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Callable, Dict

import numpy as np

from jsonrows.lib.errors import CoercionError
from jsonrows.lib.types import ColumnType

__all__ = ["to_text", "coerce", "COERCERS"]

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

# Signed integer bounds by type
_INTEGER_BOUNDS = {
    ColumnType.TINYINT: (-(2**7), 2**7 - 1),
    ColumnType.INT: (-(2**31), 2**31 - 1),
    ColumnType.BIGINT: (-(2**63), 2**63 - 1),
}


def to_text(value: Any) -> str:
    """Render a matched JSON value as text.

    Strings pass through unchanged; booleans and numbers use their JSON
    spelling; objects and arrays are serialized as compact JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _parse_integer(text: str, column_type: ColumnType) -> int:
    if not _INTEGER_RE.fullmatch(text):
        raise CoercionError(text, column_type.value, reason="not a base-10 integer")
    number = int(text)
    low, high = _INTEGER_BOUNDS[column_type]
    if not low <= number <= high:
        raise CoercionError(
            text, column_type.value, reason=f"out of range [{low}, {high}]"
        )
    return number


def _parse_double(text: str, column_type: ColumnType = ColumnType.DOUBLE) -> float:
    # float() would also accept digit separators
    if "_" in text:
        raise CoercionError(text, column_type.value, reason="not a base-10 number")
    try:
        return float(text)
    except ValueError:
        raise CoercionError(
            text, column_type.value, reason="not a base-10 number"
        ) from None


def _parse_float(text: str) -> float:
    number = _parse_double(text, ColumnType.FLOAT)
    with np.errstate(over="ignore"):
        return float(np.float32(number))


def _parse_boolean(text: str) -> bool:
    return text.lower() == "true"


COERCERS: Dict[ColumnType, Callable[[str], Any]] = {
    ColumnType.DOUBLE: _parse_double,
    ColumnType.BIGINT: lambda text: _parse_integer(text, ColumnType.BIGINT),
    ColumnType.INT: lambda text: _parse_integer(text, ColumnType.INT),
    ColumnType.TINYINT: lambda text: _parse_integer(text, ColumnType.TINYINT),
    ColumnType.FLOAT: _parse_float,
    ColumnType.BOOLEAN: _parse_boolean,
    ColumnType.STRING: str,
}


def coerce(value: Any, column_type: ColumnType) -> Any:
    """Coerce a matched JSON value to ``column_type``.

    Returns None for a JSON null.

    Raises:
        CoercionError: If the value's text is not a valid literal for a
            numeric column type
    """
    if value is None:
        return None
    text = to_text(value)
    return COERCERS.get(column_type, str)(text)
