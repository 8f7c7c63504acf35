"""Emit nested class declarations for anonymous object schemas.

Objects with a fixed set of properties become named classes. Each class body
is its own naming scope: two siblings that produce the same class name share a
single declaration, while classes nested under different parents never
collide. Arrays, maps and single-member anyOf do not open a scope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import GeneratorError, MissingArrayItemSchema
from .model import SchemaNode, Typed, Unrestricted
from .naming import deduplicate, to_identifier_camel, variable_name
from .registry import NamedSchema
from .resolver import (
    Array,
    Map,
    NamedReference,
    SchemaTypeResolver,
    TypeDescriptor,
    is_struct,
    object_type_name,
    optional_annotation,
    render_annotation,
)

logger = logging.getLogger(__name__)


@dataclass
class NamingScope:
    """Class names already emitted at one nesting level.

    owner is the qualified name of the class whose body this scope covers,
    or None at module level. reserved holds field names of that class body,
    which a nested class must not shadow.
    """
    owner: str | None = None
    names: set[str] = field(default_factory=set)
    reserved: set[str] = field(default_factory=set)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def add(self, name: str) -> None:
        self.names.add(name)

    def qualify(self, name: str) -> str:
        return f"{self.owner}.{name}" if self.owner else name

    def child(self, name: str) -> NamingScope:
        """A new, empty scope for the body of class `name`."""
        return NamingScope(owner=self.qualify(name))


@dataclass
class FieldDecl:
    """One dataclass field of a generated class."""
    name: str
    json_name: str
    type: TypeDescriptor
    required: bool = False
    nullable: bool = False
    description: str | None = None

    @property
    def annotation(self) -> str:
        if self.required and not self.nullable:
            return render_annotation(self.type)
        return optional_annotation(self.type)

    @property
    def has_default(self) -> bool:
        return not self.required


@dataclass
class ClassDecl:
    """A generated class and the classes nested inside it."""
    name: str
    qualified_name: str
    description: str | None = None
    fields: list[FieldDecl] = field(default_factory=list)
    inner: list[ClassDecl] = field(default_factory=list)
    open_ended: bool = False


def describe(node: SchemaNode, description: str | None = None) -> str | None:
    """Description text with enum values appended, if any."""
    text = description if description is not None else node.description
    if node.enum:
        values = ", ".join(str(v) for v in node.enum)
        text = f"{text} (values: {values})" if text else f"Values: {values}"
    return text


class InnerTypeEmitter:
    """Resolve types while materializing the classes they need."""

    def __init__(self, resolver: SchemaTypeResolver) -> None:
        self.resolver = resolver

    def emit(
        self,
        node: SchemaNode,
        scope: NamingScope,
        default_name: str | None = None,
    ) -> tuple[list[ClassDecl], TypeDescriptor]:
        if node.ref is not None:
            return [], self.resolver.resolve(node)

        if is_struct(node):
            return self._emit_struct(node, scope, default_name)

        if node.type == "object" and isinstance(node.additional_properties, Typed):
            decls, value = self.emit(node.additional_properties.schema, scope, default_name)
            return decls, Map(value)

        if node.type == "array":
            if node.items is None:
                raise MissingArrayItemSchema()
            decls, element = self.emit(node.items, scope, default_name)
            return decls, Array(element)

        if node.type is None and node.any_of is not None and len(node.any_of) == 1:
            return self.emit(node.any_of[0], scope, default_name)

        return [], self.resolver.resolve(node, default_name)

    def _emit_struct(
        self,
        node: SchemaNode,
        scope: NamingScope,
        default_name: str | None,
    ) -> tuple[list[ClassDecl], TypeDescriptor]:
        name = object_type_name(node, default_name)
        if name in scope.reserved:
            name += "_"
        reference = NamedReference(None, scope.qualify(name))
        if name in scope:
            logger.info("Avoiding generating duplicate inner class '%s'", reference.name)
            return [], reference
        # The parent learns the name first; the class body then gets a fresh scope.
        scope.add(name)
        return [self.build_class(node, name, scope.child(name))], reference

    def build_class(
        self,
        node: SchemaNode,
        name: str,
        scope: NamingScope,
        description: str | None = None,
    ) -> ClassDecl:
        """Declare a class for an object node whose body uses `scope`."""
        properties = node.properties or {}
        field_names = deduplicate([variable_name(p) for p in properties])
        scope.reserved.update(field_names)

        decl = ClassDecl(
            name=name,
            qualified_name=scope.owner or name,
            description=describe(node, description),
            open_ended=isinstance(node.additional_properties, Unrestricted),
        )
        if decl.open_ended:
            logger.debug("Warning: %s may have additional properties!", decl.qualified_name)

        for field_name, (prop_name, prop) in zip(field_names, properties.items()):
            try:
                decls, descriptor = self.emit(prop, scope, to_identifier_camel(prop_name))
            except GeneratorError as err:
                if err.location is None:
                    err.within(f"{decl.qualified_name}.{prop_name}")
                raise
            decl.inner.extend(decls)
            decl.fields.append(FieldDecl(
                name=field_name,
                json_name=prop_name,
                type=descriptor,
                required=prop_name in node.required,
                nullable=prop.nullable,
                description=describe(prop),
            ))
        return decl

    def emit_named(self, named: NamedSchema) -> tuple[list[ClassDecl], TypeDescriptor]:
        """Declarations for a top-level named schema.

        Struct schemas become a class named after the schema. Anything else is
        resolved at module level and exposed through a type alias.
        """
        node = named.node
        module_scope = NamingScope()
        if is_struct(node):
            module_scope.add(named.class_name)
            decl = self.build_class(node, named.class_name, module_scope.child(named.class_name))
            return [decl], NamedReference(named.module_name, named.class_name)
        module_scope.reserved.add(named.class_name)
        return self.emit(node, module_scope, named.class_name + "Item")
