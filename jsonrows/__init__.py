"""Typed row extraction from JSON records.

Binds a table (ordered column names, declared types, one path expression per
column) once, then turns each JSON record into a fixed-schema row for a
columnar engine.

Usage:
    python -m jsonrows tables/events.yaml data/events.jsonl
    python -m jsonrows tables/events.yaml data/events.jsonl --output events.parquet
"""

from jsonrows.lib.config_loader import TableDefinition, load_table
from jsonrows.lib.extractor import CoercionPolicy, RowExtractor, extract
from jsonrows.lib.schema import TableSchema, bind
from jsonrows.lib.types import ColumnType

__version__ = "1.0.0"

__all__ = [
    "bind",
    "extract",
    "load_table",
    "ColumnType",
    "CoercionPolicy",
    "RowExtractor",
    "TableDefinition",
    "TableSchema",
]
