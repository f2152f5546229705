"""jsonrows library modules.

This package contains the schema binder, the row extractor, and the
supporting path, coercion, configuration and columnar output utilities.
"""

from jsonrows.lib.arrow import rows_to_arrow, rows_to_pandas, to_arrow_schema, write_parquet
from jsonrows.lib.coercion import coerce, to_text
from jsonrows.lib.config_loader import (
    TableDefinition,
    bind_table_properties,
    load_table,
    load_table_from_dict,
    validate_table_config,
)
from jsonrows.lib.document import normalize_keys, parse_document
from jsonrows.lib.errors import (
    AmbiguousPathError,
    BindError,
    CoercionError,
    ColumnCountMismatchError,
    InvalidColumnError,
    InvalidPathError,
    JsonRowsError,
    MissingPathError,
    ParseError,
    PathEvaluationError,
    TableConfigError,
)
from jsonrows.lib.extractor import CoercionPolicy, Row, RowExtractor, extract
from jsonrows.lib.observability import ExtractionStats, JSONFormatter, setup_logging
from jsonrows.lib.paths import CompiledPath, compile_path
from jsonrows.lib.reader import ReadResult, iter_rows, read_rows
from jsonrows.lib.schema import ColumnSchema, TableSchema, bind
from jsonrows.lib.types import ColumnType

__all__ = [
    # Schema binding
    "bind",
    "ColumnSchema",
    "TableSchema",
    "ColumnType",
    "CompiledPath",
    "compile_path",
    # Extraction
    "extract",
    "Row",
    "RowExtractor",
    "CoercionPolicy",
    "coerce",
    "to_text",
    "parse_document",
    "normalize_keys",
    # Configuration
    "TableDefinition",
    "load_table",
    "load_table_from_dict",
    "bind_table_properties",
    "validate_table_config",
    # Input and output
    "ReadResult",
    "iter_rows",
    "read_rows",
    "to_arrow_schema",
    "rows_to_arrow",
    "rows_to_pandas",
    "write_parquet",
    # Observability
    "ExtractionStats",
    "JSONFormatter",
    "setup_logging",
    # Errors
    "JsonRowsError",
    "BindError",
    "MissingPathError",
    "InvalidPathError",
    "AmbiguousPathError",
    "InvalidColumnError",
    "ColumnCountMismatchError",
    "ParseError",
    "PathEvaluationError",
    "CoercionError",
    "TableConfigError",
]
