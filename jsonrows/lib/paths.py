"""Path expressions over parsed JSON documents.

Expressions use jsonpath-ng's extended JSONPath syntax:

    $.a.b.c           object keys
    $['a.b']["c"]     bracket-quoted keys (may contain dots)
    $.items[0].id     array indexes (negative counts from the end)
    field1            shorthand for $.field1

Wildcards, recursive descent, slices, unions and filters compile, but only
definite paths (root, single keys and single indexes) can be evaluated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Tuple, Union

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as parse_jsonpath
from jsonpath_ng.jsonpath import Child, Fields, Index, JSONPath, Root

from jsonrows.lib.errors import InvalidPathError, PathEvaluationError

logger = logging.getLogger(__name__)

__all__ = [
    "CompiledPath",
    "compile_path",
]

Segment = Union[str, int]


@dataclass(frozen=True)
class CompiledPath:
    """A parsed path expression.

    Attributes:
        raw: The expression as configured
        segments: Keys and indexes from the document root (empty when the
            path is not definite)
        is_definite: True if the path can match at most one node
        expression: The jsonpath-ng expression
        steps: The key and index nodes of a definite expression, in order
    """

    raw: str
    segments: Tuple[Segment, ...] = ()
    is_definite: bool = True
    expression: Optional[JSONPath] = field(default=None, compare=False, repr=False)
    steps: Tuple[JSONPath, ...] = field(default=(), compare=False, repr=False)

    def read(self, document: Any) -> Any:
        """Return the node this path addresses in ``document``.

        Raises:
            PathEvaluationError: If the node is absent, an intermediate node
                has the wrong shape, or the path is not definite
        """
        if not self.is_definite:
            raise PathEvaluationError(self.raw, "path is not definite")

        current = document
        for depth, (step, segment) in enumerate(zip(self.steps, self.segments)):
            if isinstance(step, Fields) and not isinstance(current, dict):
                raise PathEvaluationError(
                    self.raw, f"expected an object at {self._prefix(depth)}"
                )
            if isinstance(step, Index) and not isinstance(current, list):
                raise PathEvaluationError(
                    self.raw, f"expected an array at {self._prefix(depth)}"
                )

            try:
                matches = step.find(current)
            except IndexError:
                matches = []

            if not matches:
                if isinstance(step, Index):
                    reason = f"index {segment} out of range at {self._prefix(depth)}"
                else:
                    reason = f"no property '{segment}' at {self._prefix(depth)}"
                raise PathEvaluationError(self.raw, reason)
            current = matches[0].value
        return current

    def _prefix(self, depth: int) -> str:
        return "$" + "".join(
            f"[{seg}]" if isinstance(seg, int) else f"['{seg}']"
            for seg in self.segments[:depth]
        )

    def __str__(self) -> str:
        return self.raw


def compile_path(raw: str, *, lowercase_keys: bool = True) -> CompiledPath:
    """Compile a path expression.

    Args:
        raw: Path expression text
        lowercase_keys: Lower-case object keys so the path matches documents
            whose keys were normalized at parse time

    Returns:
        CompiledPath (possibly not definite; callers check ``is_definite``)

    Raises:
        InvalidPathError: If the expression is not syntactically valid

    Example:
        >>> compile_path("$.items[0].id").segments
        ('items', 0, 'id')
        >>> compile_path("$.items[*].id").is_definite
        False
    """
    if raw is None:
        raise InvalidPathError("None", "path is empty")

    stripped = str(raw).strip()
    if not stripped:
        raise InvalidPathError(str(raw), "path is empty")

    text = stripped
    if not text.startswith("$"):
        text = ("$" if text.startswith("[") else "$.") + text

    try:
        expression = parse_jsonpath(text)
    except JSONPathError as e:
        raise InvalidPathError(str(raw), str(e)) from e

    if lowercase_keys:
        for node in _walk(expression):
            if isinstance(node, Fields):
                node.fields = tuple(name.lower() for name in node.fields)

    steps = _definite_steps(expression)
    if steps is None:
        logger.debug("Path %s is not definite", text)
        return CompiledPath(raw=stripped, is_definite=False, expression=expression)

    return CompiledPath(
        raw=stripped,
        segments=tuple(_segment(step) for step in steps),
        expression=expression,
        steps=tuple(steps),
    )


def _walk(node: JSONPath) -> Iterator[JSONPath]:
    yield node
    for attr in ("left", "right"):
        child = getattr(node, attr, None)
        if isinstance(child, JSONPath):
            yield from _walk(child)


def _indices(node: Index) -> Tuple[int, ...]:
    # jsonpath-ng >= 1.6 keeps a tuple; older releases a single index
    if hasattr(node, "indices"):
        return tuple(node.indices)
    return (node.index,)


def _definite_steps(node: JSONPath) -> Optional[List[JSONPath]]:
    """Flatten a definite expression into key/index steps, or None."""
    if isinstance(node, Root):
        return []
    if isinstance(node, Child):
        left = _definite_steps(node.left)
        right = _definite_steps(node.right)
        if left is None or right is None:
            return None
        return left + right
    if isinstance(node, Fields):
        if len(node.fields) == 1 and node.fields[0] != "*":
            return [node]
        return None
    if isinstance(node, Index) and len(_indices(node)) == 1:
        return [node]
    return None


def _segment(step: JSONPath) -> Segment:
    if isinstance(step, Fields):
        return step.fields[0]
    return _indices(step)[0]
