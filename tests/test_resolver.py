"""Tests for schema type resolution."""

import pytest

from clientgen.errors import MissingArrayItemSchema, MissingTypeName, UnknownReference
from clientgen.model import ApiDocument, SchemaNode
from clientgen.registry import build_registry
from clientgen.resolver import (
    FREEFORM,
    UNREPRESENTABLE,
    Array,
    Map,
    NamedReference,
    Primitive,
    PrimitiveKind,
    SchemaTypeResolver,
    optional_annotation,
    render_annotation,
)


def _resolver(schemas: dict) -> SchemaTypeResolver:
    document = ApiDocument(
        title="t",
        version="1",
        schemas={name: SchemaNode.from_dict(raw) for name, raw in schemas.items()},
        operations=(),
    )
    return SchemaTypeResolver(build_registry(document, "shop"))


def _node(raw: dict) -> SchemaNode:
    return SchemaNode.from_dict(raw)


_CYCLIC = {
    "A": {"type": "object", "properties": {"b": {"$ref": "#/components/schemas/B"}}},
    "B": {"type": "object", "properties": {"a": {"$ref": "#/components/schemas/A"}}},
}


class TestPrimitives:
    """Test the fixed numeric format table."""

    @classmethod
    def setup_class(cls):
        cls.resolver = _resolver({})

    @pytest.mark.parametrize(
        ("schema_type", "schema_format", "kind"),
        [
            ("integer", None, PrimitiveKind.INT32),
            ("integer", "int32", PrimitiveKind.INT32),
            ("integer", "int64", PrimitiveKind.INT64),
            ("integer", "unix-time", PrimitiveKind.INT64),
            ("integer", "something", PrimitiveKind.INT32),
            ("number", None, PrimitiveKind.FLOAT32),
            ("number", "float", PrimitiveKind.FLOAT32),
            ("number", "double", PrimitiveKind.FLOAT64),
        ],
    )
    def test_numeric_table(self, schema_type, schema_format, kind):
        node = SchemaNode(type=schema_type, format=schema_format)
        assert self.resolver.resolve(node) == Primitive(kind)

    def test_boolean(self):
        assert self.resolver.resolve(SchemaNode(type="boolean")) == Primitive(PrimitiveKind.BOOL)

    def test_string_with_format(self):
        node = SchemaNode(type="string", format="date-time")
        assert self.resolver.resolve(node) == Primitive(PrimitiveKind.STRING)

    def test_null(self):
        assert self.resolver.resolve(SchemaNode(type="null")) is UNREPRESENTABLE


class TestReferences:

    @classmethod
    def setup_class(cls):
        cls.resolver = _resolver(_CYCLIC)

    def test_ref_becomes_named_reference(self):
        result = self.resolver.resolve(_node({"$ref": "#/components/schemas/A"}))
        assert result == NamedReference("shop.model.a", "A")

    def test_ref_ignores_siblings(self):
        plain = self.resolver.resolve(_node({"$ref": "#/components/schemas/A"}))
        for sibling in ({"type": "string"}, {"type": "array"}, {"type": "integer", "format": "int64"}):
            node = _node({"$ref": "#/components/schemas/A", **sibling})
            assert self.resolver.resolve(node) == plain

    def test_unknown_ref(self):
        with pytest.raises(UnknownReference):
            self.resolver.resolve(_node({"$ref": "#/components/schemas/C"}))

    def test_cycle_is_named_not_expanded(self):
        a = self.resolver.registry.get("A").node
        b = self.resolver.registry.get("B").node
        assert self.resolver.resolve(a.properties["b"]) == NamedReference("shop.model.b", "B")
        assert self.resolver.resolve(b.properties["a"]) == NamedReference("shop.model.a", "A")


class TestObjects:

    @classmethod
    def setup_class(cls):
        cls.resolver = _resolver({})

    def test_properties_use_title(self):
        node = _node({"type": "object", "title": "charge outcome", "properties": {}})
        assert self.resolver.resolve(node, "Other") == NamedReference(None, "ChargeOutcome")

    def test_properties_use_default_name(self):
        node = _node({"type": "object", "properties": {"a": {"type": "string"}}})
        assert self.resolver.resolve(node, "Outcome") == NamedReference(None, "Outcome")

    def test_properties_without_name(self):
        node = _node({"type": "object", "properties": {"a": {"type": "string"}}})
        with pytest.raises(MissingTypeName):
            self.resolver.resolve(node)

    def test_typed_additional_properties(self):
        node = _node({"type": "object", "additionalProperties": {"type": "integer"}})
        assert self.resolver.resolve(node) == Map(Primitive(PrimitiveKind.INT32))

    def test_bare_object_is_freeform(self):
        assert self.resolver.resolve(_node({"type": "object"})) is FREEFORM

    def test_closed_object_without_properties(self):
        node = _node({"type": "object", "additionalProperties": False})
        assert self.resolver.resolve(node) is FREEFORM

    def test_open_object_without_properties(self):
        node = _node({"type": "object", "additionalProperties": True})
        assert self.resolver.resolve(node) is FREEFORM

    def test_idempotent(self):
        raw = {
            "type": "array",
            "items": {"type": "object", "properties": {"x": {"type": "number"}}},
        }
        first = self.resolver.resolve(_node(raw), "Point")
        second = self.resolver.resolve(_node(raw), "Point")
        assert first == second == Array(NamedReference(None, "Point"))


class TestArraysAndUnions:

    @classmethod
    def setup_class(cls):
        cls.resolver = _resolver({})

    def test_array(self):
        node = _node({"type": "array", "items": {"type": "string"}})
        assert self.resolver.resolve(node) == Array(Primitive(PrimitiveKind.STRING))

    def test_array_without_items(self):
        with pytest.raises(MissingArrayItemSchema):
            self.resolver.resolve(_node({"type": "array"}))

    def test_single_any_of(self):
        node = _node({"anyOf": [{"type": "integer", "format": "int64"}]})
        assert self.resolver.resolve(node) == Primitive(PrimitiveKind.INT64)

    def test_single_any_of_passes_default_name(self):
        node = _node({"anyOf": [{"type": "object", "properties": {}}]})
        assert self.resolver.resolve(node, "Wrapped") == NamedReference(None, "Wrapped")

    def test_multi_any_of_is_freeform(self):
        node = _node({"anyOf": [{"type": "string"}, {"type": "integer"}]})
        assert self.resolver.resolve(node) is FREEFORM

    def test_one_of_is_freeform(self):
        node = _node({"oneOf": [{"type": "string"}]})
        assert self.resolver.resolve(node) is FREEFORM

    def test_untyped_is_freeform(self):
        assert self.resolver.resolve(SchemaNode()) is FREEFORM


class TestAnnotations:

    def test_nested(self):
        descriptor = Map(Array(Primitive(PrimitiveKind.FLOAT64)))
        assert render_annotation(descriptor) == "dict[str, list[Float64]]"

    def test_named(self):
        assert render_annotation(NamedReference("shop.model.a", "A")) == "A"

    def test_opaque_named(self):
        descriptor = Array(NamedReference("shop.model.tree", "Tree"))
        assert render_annotation(descriptor, frozenset({"Tree"})) == "list[Any]"
        assert render_annotation(NamedReference(None, "Tree"), frozenset({"Tree"})) == "Tree"

    def test_freeform(self):
        assert render_annotation(FREEFORM) == "Any"
        assert optional_annotation(FREEFORM) == "Any"

    def test_unrepresentable(self):
        assert optional_annotation(UNREPRESENTABLE) == "None"

    def test_optional(self):
        assert optional_annotation(Primitive(PrimitiveKind.BOOL)) == "Optional[bool]"
