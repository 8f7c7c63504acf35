"""Registry of top-level named schemas.

Every schema under components.schemas is registered before any type is
resolved, so references may point forwards, backwards or in a cycle. The
registry only stores names and module paths, never expanded types.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, Iterator

from .errors import UnknownReference, UnsupportedReference
from .model import ApiDocument, SchemaNode
from .naming import class_name_for_schema, module_name_for_schema

logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX: Final = "#/components/schemas/"


def schema_name_from_ref(ref: str) -> str:
    """'#/components/schemas/Thing' -> 'Thing'."""
    if not ref.startswith(SCHEMA_REF_PREFIX) or len(ref) == len(SCHEMA_REF_PREFIX):
        raise UnsupportedReference(ref)
    return ref[len(SCHEMA_REF_PREFIX):]


@dataclass(frozen=True)
class NamedSchema:
    """A registered schema and the Python names that represent it."""
    name: str
    node: SchemaNode
    class_name: str
    module_name: str

    @property
    def ref(self) -> str:
        return SCHEMA_REF_PREFIX + self.name


class SchemaRegistry:
    """Write-once, then read-only, lookup of named schemas by name and by ref."""

    def __init__(self, package_root: str | None = None) -> None:
        self.package_root = package_root
        self._schemas: dict[str, NamedSchema] = {}
        self._sealed = False

    def register(self, name: str, node: SchemaNode) -> NamedSchema:
        """Store a schema exactly once per name."""
        if self._sealed:
            raise RuntimeError(f"Cannot register schema '{name}': registry is sealed")
        if name in self._schemas:
            raise ValueError(f"Schema '{name}' is already registered")
        named = NamedSchema(
            name=name,
            node=node,
            class_name=class_name_for_schema(name),
            module_name=module_name_for_schema(self.package_root, name),
        )
        self._schemas[name] = named
        logger.debug("Added reference: %s", named.ref)
        return named

    def seal(self) -> None:
        """End the registration pass."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def resolve(self, ref: str) -> NamedSchema:
        """Look up the NamedSchema a '#/components/schemas/<name>' ref points at."""
        name = schema_name_from_ref(ref)
        try:
            return self._schemas[name]
        except KeyError:
            raise UnknownReference(ref) from None

    def get(self, name: str) -> NamedSchema:
        try:
            return self._schemas[name]
        except KeyError:
            raise UnknownReference(SCHEMA_REF_PREFIX + name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __iter__(self) -> Iterator[NamedSchema]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)


def build_registry(document: ApiDocument, package_root: str | None = None) -> SchemaRegistry:
    """Register every named schema of the document, then seal the registry."""
    registry = SchemaRegistry(package_root)
    for name, node in document.schemas.items():
        registry.register(name, node)
    registry.seal()
    return registry
