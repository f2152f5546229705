"""Row extraction from JSON records.

For each record the extractor parses the document, evaluates every column's
path, coerces the matched value to the column's declared type, and assembles
an ordered row.

Failure policy:
- A record that is not a JSON object yields None (the whole record is
  dropped; no partial row is produced).
- A column whose path does not resolve, or resolves to JSON null, is None.
- A value that cannot be coerced raises CoercionError, or becomes None for
  that column under ``CoercionPolicy.NULL``.

Example:
    >>> schema = bind(["id", "count"], ["string", "int"],
    ...               {"id": "$.id", "count": "$.count"})
    >>> RowExtractor(schema).extract('{"id": "a1"}')
    ['a1', None]
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional, Union

from jsonrows.lib.coercion import coerce
from jsonrows.lib.document import RawDocument, parse_document
from jsonrows.lib.errors import CoercionError, ParseError, PathEvaluationError
from jsonrows.lib.observability import ExtractionStats
from jsonrows.lib.schema import TableSchema

logger = logging.getLogger(__name__)

__all__ = ["Row", "CoercionPolicy", "RowExtractor", "extract"]

Row = List[Any]

_PREVIEW_CHARS = 200


class CoercionPolicy(str, Enum):
    """What to do when a matched value cannot be coerced."""

    RAISE = "raise"  # propagate CoercionError; the record is not produced
    NULL = "null"  # null the column and keep the rest of the row

    @classmethod
    def from_string(cls, value: Union[str, "CoercionPolicy"]) -> "CoercionPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ValueError(
                f"Invalid coercion policy '{value}'. Valid options: {valid}"
            ) from None


class RowExtractor:
    """Extracts rows for one table schema.

    The schema is shared read-only; each extractor owns its statistics and,
    with ``reuse_buffer=True``, a single row buffer that every call
    overwrites. Callers using buffer reuse must copy a row before the next
    call if they need to keep it, and must not share the extractor across
    threads.
    """

    def __init__(
        self,
        schema: TableSchema,
        *,
        reuse_buffer: bool = False,
        on_coercion_error: Union[str, CoercionPolicy] = CoercionPolicy.RAISE,
    ) -> None:
        self.schema = schema
        self.reuse_buffer = reuse_buffer
        self.on_coercion_error = CoercionPolicy.from_string(on_coercion_error)
        self.stats = ExtractionStats(table=schema.name)
        self._buffer: Optional[Row] = self.new_row() if reuse_buffer else None

    def new_row(self) -> Row:
        """Allocate a row buffer sized for this schema."""
        return [None] * len(self.schema)

    def extract(self, raw: RawDocument) -> Optional[Row]:
        """Extract one record.

        Returns:
            The row, or None if the record is not a JSON object. With
            ``reuse_buffer=True`` the same list object is returned on every
            successful call.

        Raises:
            CoercionError: Under the RAISE policy, if a value cannot be
                converted to its column type
        """
        buffer = self._buffer if self._buffer is not None else self.new_row()
        return self.extract_into(raw, buffer)

    def extract_into(self, raw: RawDocument, buffer: Row) -> Optional[Row]:
        """Extract one record into a caller-supplied buffer.

        The buffer is left untouched when the record is dropped or a value
        fails to convert under the RAISE policy.
        """
        if len(buffer) != len(self.schema):
            raise ValueError(
                f"Row buffer has {len(buffer)} slots, schema has {len(self.schema)} columns"
            )

        self.stats.records_read += 1
        try:
            document = parse_document(raw)
        except ParseError as e:
            self.stats.records_dropped += 1
            logger.error("Failed to parse record: %s (%s)", _preview(raw), e.message)
            return None

        values: Row = []
        nulls = 0
        for column in self.schema.columns:
            try:
                matched = column.path.read(document)
            except PathEvaluationError:
                matched = None

            if matched is None:
                nulls += 1
                values.append(None)
                continue

            try:
                values.append(coerce(matched, column.declared_type))
            except CoercionError as e:
                self.stats.coercion_errors += 1
                if self.on_coercion_error == CoercionPolicy.RAISE:
                    raise CoercionError(
                        e.text,
                        e.type_name,
                        reason=e.reason,
                        table=self.schema.name,
                        column=column.name,
                    ) from None
                logger.warning(
                    "Column '%s': cannot convert %r to %s, using null",
                    column.name,
                    e.text,
                    e.type_name,
                )
                nulls += 1
                values.append(None)

        # Only a fully converted record reaches the buffer
        buffer[:] = values
        self.stats.null_values += nulls
        self.stats.rows_emitted += 1
        return buffer


def extract(
    schema: TableSchema,
    raw: RawDocument,
    *,
    on_coercion_error: Union[str, CoercionPolicy] = CoercionPolicy.RAISE,
) -> Optional[Row]:
    """Extract one record with ``schema`` into a fresh row."""
    return RowExtractor(schema, on_coercion_error=on_coercion_error).extract(raw)


def _preview(raw: Any) -> str:
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8", errors="replace")
    text = str(raw)
    if len(text) > _PREVIEW_CHARS:
        return text[:_PREVIEW_CHARS] + "..."
    return text
