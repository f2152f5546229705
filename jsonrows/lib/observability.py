"""Observability utilities for jsonrows.

Combines extraction statistics with logging setup so a run can report both
record counts and JSON-friendly logs from the same module.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

# Logger that reports dropped records and nulled values
RECORD_LOGGER = "jsonrows.lib.extractor"

__all__ = [
    "ExtractionStats",
    "JSONFormatter",
    "RECORD_LOGGER",
    "setup_logging",
]


@dataclass
class ExtractionStats:
    """Counters for one extractor (or one pass over an input).

    Attributes:
        records_read: Records handed to the extractor
        rows_emitted: Records that produced a row
        records_dropped: Records that were not a JSON object
        null_values: Column values that came out null
        coercion_errors: Values that could not be converted to their type
        blank_lines: Empty input lines skipped before extraction
    """

    table: Optional[str] = None
    records_read: int = 0
    rows_emitted: int = 0
    records_dropped: int = 0
    null_values: int = 0
    coercion_errors: int = 0
    blank_lines: int = 0
    start_time: float = field(default_factory=time.time)

    @property
    def duration(self) -> float:
        """Seconds since the counters were created."""
        return time.time() - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a serializable dictionary."""
        return {
            "table": self.table,
            "records_read": self.records_read,
            "rows_emitted": self.rows_emitted,
            "records_dropped": self.records_dropped,
            "null_values": self.null_values,
            "coercion_errors": self.coercion_errors,
            "blank_lines": self.blank_lines,
            "duration_seconds": round(self.duration, 3),
        }

    def log_summary(self, log: Optional[logging.Logger] = None) -> None:
        """Log one INFO line with the counters attached as extra fields."""
        data = self.to_dict()
        (log or logger).info(
            "Extracted %d rows from %d records (%d dropped)",
            self.rows_emitted,
            self.records_read,
            self.records_dropped,
            extra={"stats": data},
        )


class JSONFormatter(logging.Formatter):
    """Formatter that outputs log records as JSON.

    Example output:
        {"timestamp": "2025-01-15T10:30:00.123Z", "level": "ERROR",
         "logger": "jsonrows.lib.extractor", "message": "Failed to parse record: ..."}
    """

    _RESERVED = frozenset(
        logging.LogRecord("", 0, "", 0, "", (), None).__dict__
    ) | {"message", "asctime"}

    def __init__(self, exclude_fields: Optional[List[str]] = None):
        super().__init__()
        self.exclude_fields = exclude_fields or []

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Anything passed through extra=
        extra_attrs = {
            k: v
            for k, v in record.__dict__.items()
            if k not in self._RESERVED and k not in self.exclude_fields
        }
        if extra_attrs:
            log_data["extra"] = extra_attrs

        return json.dumps(log_data, default=str)


def setup_logging(
    verbose: bool = False,
    json_format: bool = False,
    log_file: Optional[str] = None,
    record_level: Optional[Union[int, str]] = None,
) -> None:
    """Configure the root logger with optional JSON formatting.

    Args:
        verbose: Enable debug-level logging
        json_format: Use JSON output format (for log aggregation)
        log_file: Optional file path to write logs to
        record_level: Level for per-record messages (dropped records,
            nulled values); defaults to the overall level
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = JSONFormatter() if json_format else logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Rows may be written to stdout, so logs go to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if isinstance(record_level, str):
        record_level = record_level.upper()
    logging.getLogger(RECORD_LOGGER).setLevel(
        record_level if record_level is not None else logging.NOTSET
    )
