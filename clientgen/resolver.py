"""Map schema nodes onto Python type descriptors.

Handles:
- $ref resolution through the SchemaRegistry (sibling keywords are ignored)
- integer/number width by format (the table below must stay exact)
- arrays, maps (typed additionalProperties) and freeform objects
- named object types from title or a caller-supplied default name
- single-member anyOf, treated as that member

Unions with several members, oneOf and allOf are not modelled; they degrade to
Freeform rather than failing generation.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Final, Union

from .errors import MissingArrayItemSchema, MissingTypeName
from .model import SchemaNode, Typed, Unrestricted
from .naming import to_identifier_camel
from .registry import SchemaRegistry

logger = logging.getLogger(__name__)


class PrimitiveKind(enum.Enum):
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOL = "bool"
    STRING = "string"


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind


@dataclass(frozen=True)
class NamedReference:
    """A named type. module is None for types declared in the current unit."""
    module: str | None
    name: str


@dataclass(frozen=True)
class Array:
    element: TypeDescriptor


@dataclass(frozen=True)
class Map:
    value: TypeDescriptor


@dataclass(frozen=True)
class Freeform:
    """An arbitrary, untyped JSON value."""


@dataclass(frozen=True)
class Unrepresentable:
    """A value that can only ever be null."""


TypeDescriptor = Union[Primitive, NamedReference, Array, Map, Freeform, Unrepresentable]

FREEFORM: Final = Freeform()
UNREPRESENTABLE: Final = Unrepresentable()

# (schema type, format) -> kind; a None format is the default for the type.
FORMAT_TABLE: Final[dict[tuple[str, str | None], PrimitiveKind]] = {
    ("integer", None): PrimitiveKind.INT32,
    ("integer", "int32"): PrimitiveKind.INT32,
    ("integer", "int64"): PrimitiveKind.INT64,
    ("integer", "unix-time"): PrimitiveKind.INT64,
    ("number", None): PrimitiveKind.FLOAT32,
    ("number", "float"): PrimitiveKind.FLOAT32,
    ("number", "double"): PrimitiveKind.FLOAT64,
}

_PRIMITIVE_ANNOTATIONS: Final[dict[PrimitiveKind, str]] = {
    PrimitiveKind.INT32: "Int32",
    PrimitiveKind.INT64: "Int64",
    PrimitiveKind.FLOAT32: "Float32",
    PrimitiveKind.FLOAT64: "Float64",
    PrimitiveKind.BOOL: "bool",
    PrimitiveKind.STRING: "str",
}


def numeric_kind(schema_type: str, schema_format: str | None) -> PrimitiveKind:
    """Width of an integer or number schema; unknown formats use the type default."""
    return FORMAT_TABLE.get((schema_type, schema_format), FORMAT_TABLE[(schema_type, None)])


def object_type_name(node: SchemaNode, default_name: str | None) -> str:
    """Name of the class generated for an object with properties."""
    if node.title:
        return to_identifier_camel(node.title)
    if default_name:
        return default_name
    raise MissingTypeName()


def is_struct(node: SchemaNode) -> bool:
    """True when the node becomes a named class of its own."""
    return node.ref is None and node.type == "object" and node.properties is not None


class SchemaTypeResolver:
    """Resolve a schema node to a TypeDescriptor against a populated registry."""

    def __init__(self, registry: SchemaRegistry) -> None:
        self.registry = registry

    def resolve(self, node: SchemaNode, default_name: str | None = None) -> TypeDescriptor:
        if node.ref is not None:
            named = self.registry.resolve(node.ref)
            return NamedReference(named.module_name, named.class_name)

        if node.type in ("integer", "number"):
            return Primitive(numeric_kind(node.type, node.format))
        if node.type == "boolean":
            return Primitive(PrimitiveKind.BOOL)
        if node.type == "string":
            return Primitive(PrimitiveKind.STRING)
        if node.type == "null":
            return UNREPRESENTABLE
        if node.type == "array":
            if node.items is None:
                raise MissingArrayItemSchema()
            return Array(self.resolve(node.items, default_name))
        if node.type == "object":
            return self._resolve_object(node, default_name)

        if node.any_of is not None:
            if len(node.any_of) == 1:
                return self.resolve(node.any_of[0], default_name)
            logger.debug("anyOf with %d members treated as freeform", len(node.any_of))
        return FREEFORM

    def _resolve_object(self, node: SchemaNode, default_name: str | None) -> TypeDescriptor:
        if node.properties is not None:
            name = object_type_name(node, default_name)
            if isinstance(node.additional_properties, Unrestricted):
                logger.debug("%s may have additional properties", name)
            return NamedReference(None, name)
        if isinstance(node.additional_properties, Typed):
            return Map(self.resolve(node.additional_properties.schema, default_name))
        return FREEFORM


def render_annotation(descriptor: TypeDescriptor, opaque: frozenset[str] = frozenset()) -> str:
    """Python annotation text for a descriptor.

    Named types listed in opaque, imported from another module, render as Any.
    """
    if isinstance(descriptor, Primitive):
        return _PRIMITIVE_ANNOTATIONS[descriptor.kind]
    if isinstance(descriptor, NamedReference):
        if descriptor.module is not None and descriptor.name in opaque:
            return "Any"
        return descriptor.name
    if isinstance(descriptor, Array):
        return f"list[{render_annotation(descriptor.element, opaque)}]"
    if isinstance(descriptor, Map):
        return f"dict[str, {render_annotation(descriptor.value, opaque)}]"
    if isinstance(descriptor, Unrepresentable):
        return "None"
    return "Any"


def optional_annotation(descriptor: TypeDescriptor) -> str:
    """Annotation wrapped in Optional[...] unless it already admits None."""
    rendered = render_annotation(descriptor)
    if rendered in ("Any", "None"):
        return rendered
    return f"Optional[{rendered}]"
