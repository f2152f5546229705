"""Tests for schema binding."""

import pyarrow as pa
import pytest

from jsonrows.lib.errors import (
    AmbiguousPathError,
    BindError,
    ColumnCountMismatchError,
    InvalidColumnError,
    InvalidPathError,
    MissingPathError,
)
from jsonrows.lib.schema import TableSchema, bind, find_path_entry
from jsonrows.lib.types import ColumnType


class TestBind:
    """Tests for bind()."""

    def test_binds_in_declared_order(self):
        schema = bind(
            ["b", "a", "c"],
            ["int", "string", "double"],
            {"a": "$.a", "b": "$.b", "c": "$.c"},
        )
        assert isinstance(schema, TableSchema)
        assert schema.column_names == ["b", "a", "c"]
        assert schema.column_types == [ColumnType.INT, ColumnType.STRING, ColumnType.DOUBLE]
        assert [c.path.raw for c in schema] == ["$.b", "$.a", "$.c"]

    def test_binding_twice_gives_equal_schemas(self):
        config = {"id": "$.id", "n": "$.payload['n']"}
        first = bind(["id", "n"], ["string", "bigint"], config)
        second = bind(["id", "n"], ["string", "bigint"], config)
        assert first == second
        assert config == {"id": "$.id", "n": "$.payload['n']"}

    def test_case_insensitive_config_key(self):
        schema = bind(["field1"], ["string"], {"Field1": "$.field1"})
        assert schema.columns[0].path.raw == "$.field1"

    def test_case_insensitive_column_name(self):
        schema = bind(["FIELD1"], ["string"], {"field1": "$.x"})
        assert schema.columns[0].name == "FIELD1"
        assert schema.columns[0].path.raw == "$.x"

    def test_extra_config_keys_ignored(self):
        schema = bind(["id"], ["string"], {"id": "$.id", "serialization.format": "1"})
        assert len(schema) == 1

    def test_binding_is_deterministic(self):
        args = (["id", "n"], ["string", "bigint"], {"id": "$.id", "N": "$.payload.n"})
        first = bind(*args)
        second = bind(*args)
        assert first == second
        assert [c.path for c in first] == [c.path for c in second]
        assert first.column_types == second.column_types

    def test_unknown_type_falls_back_to_string(self):
        schema = bind(["x", "y", "z"], ["varchar(10)", "smallint", "array<int>"],
                      {"x": "$.x", "y": "$.y", "z": "$.z"})
        assert schema.column_types == [ColumnType.STRING] * 3
        assert schema.columns[0].type_name == "varchar(10)"

    def test_type_names_case_insensitive(self):
        schema = bind(["a", "b"], ["BIGINT", " Boolean "], {"a": "$.a", "b": "$.b"})
        assert schema.column_types == [ColumnType.BIGINT, ColumnType.BOOLEAN]

    def test_column_names_are_stripped(self):
        schema = bind([" id "], ["string"], {"id": "$.id"})
        assert schema.column_names == ["id"]

    def test_table_name_kept(self):
        schema = bind(["id"], ["string"], {"id": "$.id"}, table="events")
        assert schema.name == "events"

    def test_empty_table(self):
        schema = bind([], [], {})
        assert len(schema) == 0
        assert schema.column_names == []


class TestBindErrors:
    """Binding failures."""

    def test_missing_path(self):
        with pytest.raises(MissingPathError) as exc_info:
            bind(["id", "count"], ["string", "int"], {"id": "$.id"})
        assert exc_info.value.column == "count"
        assert "count" in str(exc_info.value)
        assert isinstance(exc_info.value, BindError)

    def test_missing_path_lists_configured_keys(self):
        with pytest.raises(MissingPathError) as exc_info:
            bind(["count"], ["int"], {"cnt": "$.count"})
        assert exc_info.value.details["configured_keys"] == "cnt"

    def test_ambiguous_wildcard(self):
        with pytest.raises(AmbiguousPathError) as exc_info:
            bind(["ids"], ["string"], {"ids": "$.items[*].id"})
        assert exc_info.value.raw_path == "$.items[*].id"
        assert exc_info.value.column == "ids"

    def test_ambiguous_recursive_descent(self):
        with pytest.raises(AmbiguousPathError):
            bind(["id"], ["string"], {"id": "$..id"})

    def test_ambiguous_filter(self):
        with pytest.raises(AmbiguousPathError):
            bind(["sku"], ["string"], {"sku": "$.items[?(@.qty > 1)].sku"})

    def test_invalid_path(self):
        with pytest.raises(InvalidPathError) as exc_info:
            bind(["id"], ["string"], {"id": "$.items["})
        assert exc_info.value.column == "id"
        assert exc_info.value.cause

    def test_empty_path(self):
        with pytest.raises(InvalidPathError):
            bind(["id"], ["string"], {"id": ""})

    def test_count_mismatch(self):
        with pytest.raises(ColumnCountMismatchError) as exc_info:
            bind(["a", "b"], ["string"], {"a": "$.a", "b": "$.b"})
        assert isinstance(exc_info.value, AssertionError)
        assert exc_info.value.name_count == 2
        assert exc_info.value.type_count == 1

    def test_empty_column_name(self):
        with pytest.raises(InvalidColumnError):
            bind(["id", ""], ["string", "string"], {"id": "$.id"})

    def test_duplicate_column_name(self):
        with pytest.raises(InvalidColumnError, match="more than once"):
            bind(["id", "ID"], ["string", "string"], {"id": "$.id"})


class TestTableSchema:
    """Tests for TableSchema helpers."""

    def test_column_lookup_case_insensitive(self, id_count_schema):
        assert id_count_schema.column("COUNT").declared_type == ColumnType.INT
        assert id_count_schema.column("missing") is None

    def test_immutable(self, id_count_schema):
        with pytest.raises(AttributeError):
            id_count_schema.columns = ()
        with pytest.raises(AttributeError):
            id_count_schema.columns[0].name = "other"

    def test_arrow_schema(self, all_types_schema):
        arrow_schema = all_types_schema.to_arrow_schema()
        assert arrow_schema.names == ["s", "b", "t", "i", "g", "f", "d"]
        assert arrow_schema.types == [
            pa.string(),
            pa.bool_(),
            pa.int8(),
            pa.int32(),
            pa.int64(),
            pa.float32(),
            pa.float64(),
        ]
        assert all(f.nullable for f in arrow_schema)


class TestFindPathEntry:
    """Tests for find_path_entry()."""

    def test_first_match_wins(self):
        assert find_path_entry("id", {"ID": "$.first", "id": "$.second"}) == "$.first"

    def test_no_match(self):
        assert find_path_entry("id", {"ident": "$.id"}) is None
