"""Structured exception hierarchy for jsonrows.

Bind-time errors make a table unusable and surface immediately. Record-level
errors (parse and path evaluation) are normally absorbed by the extractor and
turned into whole-record or per-column nulls. Coercion errors escalate unless
the extractor is configured to null the offending column.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

__all__ = [
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


class JsonRowsError(Exception):
    """Base exception for all jsonrows errors.

    Provides structured error information for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        table: Optional[str] = None,
        column: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.table = table
        self.column = column
        self.details = details or {}
        self.suggestion = suggestion

        parts = [message]

        if table or column:
            context = f"{table or '?'}.{column or '?'}"
            parts.insert(0, f"[{context}]")

        if self.details:
            parts.append("\nDetails:")
            parts.extend(f"  {k}: {v}" for k, v in self.details.items())

        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts) if len(parts) > 1 else message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "table": self.table,
            "column": self.column,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class BindError(JsonRowsError):
    """A table definition could not be bound to a schema."""


class MissingPathError(BindError):
    """No path expression is configured for a declared column."""

    def __init__(self, column: str, *, available: Optional[List[str]] = None, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        if available is not None:
            details["configured_keys"] = ", ".join(sorted(available)) or "(none)"

        suggestion = kwargs.pop("suggestion", None) or (
            f"Add a path entry for '{column}', e.g. {column}: $.{column}"
        )
        super().__init__(
            f"A path expression is required for every column. "
            f"Missing path for column '{column}'.",
            column=column,
            details=details,
            suggestion=suggestion,
            **kwargs,
        )


class InvalidPathError(BindError):
    """A path expression is not syntactically valid."""

    def __init__(
        self,
        raw_path: str,
        cause: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.raw_path = raw_path
        self.cause = cause

        details = kwargs.pop("details", {})
        details["path"] = raw_path
        if cause:
            details["cause"] = cause

        super().__init__(f"Invalid path expression: {raw_path!r}", details=details, **kwargs)


class AmbiguousPathError(BindError):
    """A path expression may match more than one node."""

    def __init__(self, raw_path: str, **kwargs: Any) -> None:
        self.raw_path = raw_path

        suggestion = kwargs.pop("suggestion", None) or (
            "Use only object keys and single array indexes, e.g. $.items[0].id"
        )
        super().__init__(
            f"All paths must point to exactly one item. "
            f"The following path is ambiguous: {raw_path}",
            suggestion=suggestion,
            **kwargs,
        )


class InvalidColumnError(BindError):
    """A declared column name is empty or duplicated."""


class ColumnCountMismatchError(BindError, AssertionError):
    """Column names and column types were declared with different lengths.

    This is a caller contract violation rather than bad input, hence the
    AssertionError base.
    """

    def __init__(self, name_count: int, type_count: int, **kwargs: Any) -> None:
        self.name_count = name_count
        self.type_count = type_count
        super().__init__(
            f"Declared {name_count} column names but {type_count} column types",
            details={"names": name_count, "types": type_count},
            **kwargs,
        )


class ParseError(JsonRowsError):
    """A raw document is not a single JSON object."""

    def __init__(self, message: str, *, cause: Optional[Exception] = None, **kwargs: Any) -> None:
        self.cause = cause

        details = kwargs.pop("details", {})
        if cause:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__

        super().__init__(message, details=details, **kwargs)


class PathEvaluationError(JsonRowsError):
    """A path does not resolve against a document."""

    def __init__(self, raw_path: str, reason: str, **kwargs: Any) -> None:
        self.raw_path = raw_path
        self.reason = reason
        super().__init__(f"Path {raw_path} not found: {reason}", **kwargs)


class CoercionError(JsonRowsError, ValueError):
    """A matched value cannot be converted to its column's declared type."""

    def __init__(
        self,
        text: str,
        type_name: str,
        *,
        reason: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.text = text
        self.type_name = type_name
        self.reason = reason

        details = kwargs.pop("details", {})
        details["value"] = text
        details["type"] = type_name
        if reason:
            details["reason"] = reason

        super().__init__(
            f"Cannot convert {text!r} to {type_name}",
            details=details,
            **kwargs,
        )


class TableConfigError(JsonRowsError):
    """Error in a table definition file or property map."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value

        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(message, details=details, **kwargs)
