"""Columnar materialization of extracted rows.

Converts row lists into Arrow tables typed by the table schema, and from
there into pandas DataFrames or Parquet files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence, Union

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from jsonrows.lib.schema import TableSchema

logger = logging.getLogger(__name__)

__all__ = ["to_arrow_schema", "rows_to_arrow", "rows_to_pandas", "write_parquet"]

# Nullable pandas dtypes so integer and boolean columns keep their nulls
_PANDAS_DTYPES: Dict[Any, Any] = {
    pa.int8(): pd.Int8Dtype(),
    pa.int32(): pd.Int32Dtype(),
    pa.int64(): pd.Int64Dtype(),
    pa.bool_(): pd.BooleanDtype(),
    pa.string(): pd.StringDtype(),
}


def to_arrow_schema(schema: TableSchema) -> pa.Schema:
    """Arrow schema for ``schema``; every field is nullable."""
    return schema.to_arrow_schema()


def rows_to_arrow(schema: TableSchema, rows: Iterable[Sequence[Any]]) -> pa.Table:
    """Build an Arrow table from extracted rows.

    Args:
        schema: The schema the rows were extracted with
        rows: Rows in schema column order

    Raises:
        ValueError: If a row has the wrong number of values
    """
    width = len(schema)
    columns: List[List[Any]] = [[] for _ in range(width)]

    for n, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(f"Row {n} has {len(row)} values, expected {width}")
        for i, value in enumerate(row):
            columns[i].append(value)

    arrays = [
        pa.array(values, type=column.declared_type.to_arrow())
        for values, column in zip(columns, schema.columns)
    ]
    return pa.Table.from_arrays(arrays, schema=schema.to_arrow_schema())


def rows_to_pandas(schema: TableSchema, rows: Iterable[Sequence[Any]]) -> pd.DataFrame:
    """Build a DataFrame from extracted rows, with nullable column dtypes."""
    table = rows_to_arrow(schema, rows)
    return table.to_pandas(types_mapper=_PANDAS_DTYPES.get)


def write_parquet(
    schema: TableSchema,
    rows: Iterable[Sequence[Any]],
    path: Union[str, Path],
    *,
    compression: str = "snappy",
) -> int:
    """Write extracted rows to a Parquet file.

    Returns:
        Number of rows written
    """
    table = rows_to_arrow(schema, rows)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(table, str(path), compression=compression)
    logger.info("Wrote %d rows to %s", table.num_rows, path)
    return table.num_rows

