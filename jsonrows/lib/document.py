"""Parsing of raw records into JSON documents.

Column names are case-insensitive on the host side, so every object key in a
parsed document is lower-cased by a normalization pass after parsing.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Union

from jsonrows.lib.errors import ParseError

__all__ = ["parse_document", "normalize_keys"]

RawDocument = Union[str, bytes, bytearray]


def parse_document(raw: RawDocument, *, lowercase_keys: bool = True) -> Dict[str, Any]:
    """Parse one raw record as a single JSON object.

    Args:
        raw: Record text, or UTF-8 bytes
        lowercase_keys: Normalize object keys to lower case at every depth

    Returns:
        The parsed object

    Raises:
        ParseError: If the record is not valid UTF-8, not valid JSON, or its
            top-level value is not an object
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            text = bytes(raw).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError("Record is not valid UTF-8", cause=e) from e
    elif isinstance(raw, str):
        text = raw
    else:
        raise ParseError(f"Unsupported record type: {type(raw).__name__}")

    try:
        value = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise ParseError("Record is not valid JSON", cause=e) from e

    if not isinstance(value, dict):
        raise ParseError(
            f"Record is not a JSON object (top-level {type(value).__name__})"
        )

    return normalize_keys(value) if lowercase_keys else value


def normalize_keys(value: Any) -> Any:
    """Return ``value`` with every object key lower-cased.

    When two keys collide after lower-casing, the one appearing later in the
    document wins.
    """
    if isinstance(value, dict):
        return {key.lower(): normalize_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [normalize_keys(item) for item in value]
    return value
