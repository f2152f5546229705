"""Tests for path expression compilation and evaluation."""

import pytest
from jsonpath_ng.jsonpath import Fields, Index

from jsonrows.lib.errors import InvalidPathError, PathEvaluationError
from jsonrows.lib.paths import CompiledPath, compile_path


class TestCompileDefinitePaths:
    """Paths that address a single node."""

    def test_dotted_keys(self):
        path = compile_path("$.a.b.c")
        assert path.segments == ("a", "b", "c")
        assert all(isinstance(step, Fields) for step in path.steps)
        assert path.is_definite

    def test_index(self):
        path = compile_path("$.items[0].id")
        assert path.segments == ("items", 0, "id")
        assert isinstance(path.steps[1], Index)
        assert path.is_definite

    def test_negative_index(self):
        path = compile_path("$.items[-1]")
        assert path.segments == ("items", -1)
        assert path.is_definite

    def test_bracket_quoted_keys(self):
        path = compile_path("$['gpt-3.5'][\"x y\"]")
        assert path.segments == ("gpt-3.5", "x y")
        assert path.is_definite

    def test_root_only(self):
        path = compile_path("$")
        assert path.segments == ()
        assert path.is_definite

    def test_shorthand_without_root(self):
        assert compile_path("field1").segments == compile_path("$.field1").segments
        assert compile_path("[0]").segments == compile_path("$[0]").segments

    def test_keys_lower_cased(self):
        path = compile_path("$.User.ID")
        assert path.segments == ("user", "id")
        assert [step.fields for step in path.steps] == [("user",), ("id",)]

    def test_keys_kept_when_lowercase_disabled(self):
        path = compile_path("$.User.ID", lowercase_keys=False)
        assert path.segments == ("User", "ID")

    def test_surrounding_whitespace_ignored(self):
        path = compile_path("  $.id \n")
        assert path.raw == "$.id"
        assert path.segments == ("id",)

    def test_compile_is_deterministic(self):
        assert compile_path("$.a[1].b") == compile_path("$.a[1].b")

    def test_str_is_raw_expression(self):
        assert str(compile_path("$.Payload.count")) == "$.Payload.count"


class TestCompileIndefinitePaths:
    """Multi-match selectors are valid syntax but not definite."""

    @pytest.mark.parametrize(
        "expression",
        [
            "$.*",
            "$.items[*]",
            "$..id",
            "$.items[0:2]",
            "$.items[:1]",
            "$['a','b']",
            "$.a | $.b",
            "$.items[?(@.qty > 1)]",
            "$.items[?(@.qty > 1)].sku",
        ],
    )
    def test_not_definite(self, expression):
        path = compile_path(expression)
        assert not path.is_definite
        assert path.segments == ()
        assert path.expression is not None

    def test_keys_lower_cased_in_indefinite_expression(self):
        path = compile_path("$..ID")
        assert "id" in str(path.expression)
        assert "ID" not in str(path.expression)


class TestCompileInvalidPaths:
    """Syntax errors."""

    @pytest.mark.parametrize(
        "expression",
        [
            "",
            "   ",
            "$.",
            "$.a.",
            "$..",
            "$.a[",
            "$.a]",
        ],
    )
    def test_invalid(self, expression):
        with pytest.raises(InvalidPathError):
            compile_path(expression)

    def test_none(self):
        with pytest.raises(InvalidPathError):
            compile_path(None)

    def test_error_carries_path_and_cause(self):
        with pytest.raises(InvalidPathError) as exc_info:
            compile_path("$.a[")
        assert exc_info.value.raw_path == "$.a["
        assert exc_info.value.cause
        assert "$.a[" in str(exc_info.value)


class TestRead:
    """Evaluation against parsed documents."""

    def test_nested_value(self):
        doc = {"a": {"b": [10, {"c": "x"}]}}
        assert compile_path("$.a.b[1].c").read(doc) == "x"
        assert compile_path("$.a.b[0]").read(doc) == 10
        assert compile_path("$.a.b[-1]").read(doc) == {"c": "x"}

    def test_root(self):
        doc = {"a": 1}
        assert compile_path("$").read(doc) is doc

    def test_json_null_value_is_returned(self):
        assert compile_path("$.a").read({"a": None}) is None

    def test_missing_key(self):
        with pytest.raises(PathEvaluationError, match="no property 'b'"):
            compile_path("$.a.b").read({"a": {}})

    def test_key_on_non_object(self):
        with pytest.raises(PathEvaluationError, match="expected an object"):
            compile_path("$.a.b").read({"a": [1]})

    def test_index_on_non_array(self):
        with pytest.raises(PathEvaluationError, match="expected an array"):
            compile_path("$.a[0]").read({"a": "text"})

    def test_index_out_of_range(self):
        with pytest.raises(PathEvaluationError, match="out of range"):
            compile_path("$.a[3]").read({"a": [1, 2]})

    def test_negative_index_out_of_range(self):
        with pytest.raises(PathEvaluationError, match="out of range"):
            compile_path("$.a[-3]").read({"a": [1, 2]})

    def test_index_on_empty_array(self):
        with pytest.raises(PathEvaluationError, match="out of range"):
            compile_path("$.a[0]").read({"a": []})

    def test_indefinite_path_cannot_be_read(self):
        with pytest.raises(PathEvaluationError, match="not definite"):
            compile_path("$.a[*]").read({"a": [1]})

    def test_compiled_path_is_immutable(self):
        path = compile_path("$.a")
        assert isinstance(path, CompiledPath)
        with pytest.raises(AttributeError):
            path.raw = "$.b"
