"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from jsonrows.lib.schema import bind  # noqa: E402

EXAMPLES_DIR = project_root / "docs" / "examples"


@pytest.fixture
def examples_dir() -> Path:
    """Directory holding the example table definitions and data."""
    return EXAMPLES_DIR


@pytest.fixture
def id_count_schema():
    """Two-column schema: id string, count int."""
    return bind(["id", "count"], ["string", "int"], {"id": "$.id", "count": "$.count"})


@pytest.fixture
def all_types_schema():
    """One column per supported type, each read from a key of the same name."""
    names = ["s", "b", "t", "i", "g", "f", "d"]
    types = ["string", "boolean", "tinyint", "int", "bigint", "float", "double"]
    return bind(names, types, {name: f"$.{name}" for name in names})


@pytest.fixture
def events_yaml(tmp_path) -> Path:
    """A small table definition written to a temp file."""
    path = tmp_path / "events.yaml"
    path.write_text(
        "\n".join(
            [
                "table: events",
                "columns:",
                "  - name: id",
                "    type: string",
                "    path: $.id",
                "  - name: count",
                "    type: int",
                "    path: $.payload.count",
                "  - name: score",
                "    type: double",
                "    path: $.score",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return path
