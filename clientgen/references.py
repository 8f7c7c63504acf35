"""Collect the named schemas a schema subtree depends on.

Generated modules import every schema they reference; this walk supplies the
import lists.
"""

from __future__ import annotations

from typing import Iterable

from .model import SchemaNode, Typed
from .registry import NamedSchema, SchemaRegistry, schema_name_from_ref
from .resolver import is_struct


def _walk(node: SchemaNode, names: set[str]) -> None:
    if node.ref is not None:
        names.add(schema_name_from_ref(node.ref))
    elif node.type == "array":
        if node.items is not None:
            _walk(node.items, names)
    elif node.type == "object":
        for prop in (node.properties or {}).values():
            _walk(prop, names)
        if isinstance(node.additional_properties, Typed):
            _walk(node.additional_properties.schema, names)
    elif node.any_of is not None:
        for member in node.any_of:
            _walk(member, names)
    elif node.all_of is not None:
        for member in node.all_of:
            _walk(member, names)


def collect(node: SchemaNode) -> list[str]:
    """Sorted names of every schema referenced from node."""
    names: set[str] = set()
    _walk(node, names)
    return sorted(names)


def collect_all(nodes: Iterable[SchemaNode | None]) -> list[str]:
    """Sorted union of collect() over several nodes; None entries are skipped."""
    names: set[str] = set()
    for node in nodes:
        if node is not None:
            _walk(node, names)
    return sorted(names)


def collect_imports(
    registry: SchemaRegistry,
    names: Iterable[str],
    exclude: str | None = None,
) -> list[NamedSchema]:
    """Registry entries to import for names, dropping a self-reference to `exclude`."""
    return [registry.get(name) for name in sorted(set(names)) if name != exclude]


def _alias_targets(registry: SchemaRegistry, name: str) -> set[str]:
    """Alias schemas the module of `name` imports at runtime."""
    return {
        target for target in collect(registry.get(name).node)
        if not is_struct(registry.get(target).node)
    }


def alias_cycle(registry: SchemaRegistry, name: str) -> set[str]:
    """Alias schemas that reference `name` and are referenced by it, possibly `name` itself.

    Alias modules import their targets at runtime, so these names cannot be
    imported by the module of `name`.
    """
    reachable: dict[str, set[str]] = {}

    def reach(start: str) -> set[str]:
        if start not in reachable:
            seen: set[str] = set()
            pending = [start]
            while pending:
                for target in _alias_targets(registry, pending.pop()):
                    if target not in seen:
                        seen.add(target)
                        pending.append(target)
            reachable[start] = seen
        return reachable[start]

    return {other for other in reach(name) if name in reach(other)}
