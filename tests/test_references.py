"""Tests for reference collection."""

from clientgen.model import ApiDocument, SchemaNode
from clientgen.references import alias_cycle, collect, collect_all, collect_imports
from clientgen.registry import build_registry


def _ref(name: str) -> dict:
    return {"$ref": f"#/components/schemas/{name}"}


class TestCollect:

    def test_direct_ref(self):
        assert collect(SchemaNode.from_dict(_ref("Item"))) == ["Item"]

    def test_nested_and_sorted(self):
        node = SchemaNode.from_dict({
            "type": "object",
            "properties": {
                "owner": _ref("Owner"),
                "tags": {"type": "array", "items": _ref("Tag")},
                "by_id": {"type": "object", "additionalProperties": _ref("Item")},
                "either": {"anyOf": [_ref("Cat"), _ref("Dog")]},
                "both": {"allOf": [_ref("Base"), _ref("Owner")]},
            },
        })
        assert collect(node) == ["Base", "Cat", "Dog", "Item", "Owner", "Tag"]

    def test_primitives_have_none(self):
        assert collect(SchemaNode(type="string")) == []

    def test_collect_all_skips_missing(self):
        nodes = [SchemaNode.from_dict(_ref("B")), None, SchemaNode.from_dict(_ref("A"))]
        assert collect_all(nodes) == ["A", "B"]


class TestCollectImports:

    def test_self_reference_dropped(self, shop_document):
        registry = build_registry(shop_document, "shop")
        item = registry.get("Item")
        imports = collect_imports(registry, collect(item.node), exclude="Item")
        assert [(n.module_name, n.class_name) for n in imports] == [("shop.model.owner", "Owner")]

    def test_mutual_references(self, shop_document):
        registry = build_registry(shop_document, "shop")
        owner = registry.get("Owner")
        assert [n.name for n in collect_imports(registry, collect(owner.node), exclude="Owner")] == ["Item"]


class TestAliasCycle:

    @classmethod
    def setup_class(cls):
        schemas = {
            "Tree": {"type": "array", "items": _ref("Tree")},
            "Left": {"type": "array", "items": _ref("Right")},
            "Right": {"type": "object", "additionalProperties": _ref("Left")},
            "Forest": {"type": "array", "items": _ref("Tree")},
            "Node": {"type": "object", "properties": {"children": _ref("Forest")}},
        }
        document = ApiDocument(
            title="t",
            version="1",
            schemas={name: SchemaNode.from_dict(raw) for name, raw in schemas.items()},
            operations=(),
        )
        cls.registry = build_registry(document, "shop")

    def test_self_reference(self):
        assert alias_cycle(self.registry, "Tree") == {"Tree"}

    def test_mutual_aliases(self):
        assert alias_cycle(self.registry, "Left") == {"Left", "Right"}
        assert alias_cycle(self.registry, "Right") == {"Left", "Right"}

    def test_reaching_a_cycle_is_not_a_cycle(self):
        assert alias_cycle(self.registry, "Forest") == set()

    def test_struct_breaks_cycle(self):
        assert alias_cycle(self.registry, "Node") == set()
