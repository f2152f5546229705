"""Record loop over newline-delimited JSON input.

Each non-blank line is one document. Lines that are not JSON objects are
dropped (and counted); every other line produces exactly one row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from jsonrows.lib.document import RawDocument
from jsonrows.lib.extractor import Row, RowExtractor
from jsonrows.lib.observability import ExtractionStats

logger = logging.getLogger(__name__)

__all__ = ["ReadResult", "iter_rows", "read_rows"]


@dataclass
class ReadResult:
    """Rows extracted from one input, with the counters for that pass."""

    rows: List[Row] = field(default_factory=list)
    stats: ExtractionStats = field(default_factory=ExtractionStats)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def _is_blank(line: RawDocument) -> bool:
    return not line.strip()


def iter_rows(
    extractor: RowExtractor,
    lines: Iterable[RawDocument],
    *,
    limit: Optional[int] = None,
) -> Iterator[Row]:
    """Yield one row per parseable line.

    Rows are copied out of the extractor, so this is safe with
    ``reuse_buffer=True``.

    Args:
        extractor: Extractor for the target table
        lines: Text or bytes lines, one JSON document each
        limit: Stop after this many rows
    """
    emitted = 0
    for line in lines:
        if limit is not None and emitted >= limit:
            return
        if _is_blank(line):
            extractor.stats.blank_lines += 1
            continue

        row = extractor.extract(line)
        if row is None:
            continue
        emitted += 1
        yield list(row)


def read_rows(
    extractor: RowExtractor,
    source: Union[str, Path, Iterable[RawDocument]],
    *,
    limit: Optional[int] = None,
) -> ReadResult:
    """Extract all rows from a file path or an iterable of lines.

    Returns:
        ReadResult holding the rows and the extractor's counters
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        logger.info("Reading records from %s", path)
        # Binary so an undecodable line only drops that record
        with open(path, "rb") as f:
            rows = list(iter_rows(extractor, f, limit=limit))
    else:
        rows = list(iter_rows(extractor, source, limit=limit))

    return ReadResult(rows=rows, stats=extractor.stats)
