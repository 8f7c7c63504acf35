"""Tests for runtime encoding helpers."""

import pytest

from clientgen.runtime.encoding import encode_deep_object, format_value, resolve_template


class TestEncodeDeepObject:

    def test_nested_structure(self):
        fields = encode_deep_object({"a": {"b": 1, "c": [2, 3]}}, "x")
        assert fields == [("x[a][b]", "1"), ("x[a][c][0]", "2"), ("x[a][c][1]", "3")]

    def test_without_prefix(self):
        assert encode_deep_object({"name": "lamp", "meta": {"source": "web"}}) == [
            ("name", "lamp"),
            ("meta[source]", "web"),
        ]

    def test_empty_and_null_leaves_omitted(self):
        fields = encode_deep_object({"a": None, "b": "", "c": {"d": None}, "e": 0}, "x")
        assert fields == [("x[e]", "0")]

    def test_booleans(self):
        assert encode_deep_object({"on": True, "off": False}, "f") == [("f[on]", "true"), ("f[off]", "false")]

    def test_scalar_with_prefix(self):
        assert encode_deep_object(5, "limit") == [("limit", "5")]

    def test_scalar_without_prefix(self):
        with pytest.raises(ValueError):
            encode_deep_object(5)


class TestFormatValue:

    def test_values(self):
        assert format_value(True) == "true"
        assert format_value(None) == ""
        assert format_value(2.5) == "2.5"


class TestResolveTemplate:

    def test_substitutes(self):
        assert resolve_template("hello/{name}", {"name": "world"}) == "hello/world"

    def test_several(self):
        url = resolve_template("https://{env}.example.com/{version}/", {"env": "api", "version": "v1"})
        assert url == "https://api.example.com/v1/"

    def test_no_placeholders(self):
        assert resolve_template("/plain", {}) == "/plain"

    @pytest.mark.parametrize("template", ["a/{b", "a/b}", "a/{{b}}", "{a{b}}"])
    def test_unbalanced(self, template):
        with pytest.raises(ValueError, match="Unbalanced braces"):
            resolve_template(template, {"b": "x", "a": "y"})

    def test_missing_value(self):
        with pytest.raises(ValueError, match="Missing value for parameter 'name'"):
            resolve_template("hello/{name}", {})
