"""Plain data model of a parsed OpenAPI document.

These classes are an input contract only: the loader builds them once from
the raw JSON/YAML mapping and nothing mutates them afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Union

# Keywords kept as descriptive metadata; they are never evaluated.
CONSTRAINT_KEYWORDS: Final[frozenset[str]] = frozenset({
    "pattern",
    "minLength",
    "maxLength",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "multipleOf",
    "minItems",
    "maxItems",
    "uniqueItems",
    "minProperties",
    "maxProperties",
    "default",
    "example",
    "readOnly",
    "writeOnly",
    "deprecated",
})

HTTP_METHODS: Final[tuple[str, ...]] = (
    "get", "put", "post", "delete", "options", "head", "patch", "trace",
)


@dataclass(frozen=True)
class Unrestricted:
    """'additionalProperties' absent or literal true."""


@dataclass(frozen=True)
class Forbidden:
    """'additionalProperties' literal false."""


@dataclass(frozen=True)
class Typed:
    """'additionalProperties' given as a schema for the extra values."""
    schema: SchemaNode


AdditionalProperties = Union[Unrestricted, Forbidden, Typed]

UNRESTRICTED: Final = Unrestricted()
FORBIDDEN: Final = Forbidden()


@dataclass(frozen=True)
class SchemaNode:
    """One JSON-Schema-like type definition."""
    ref: str | None = None
    type: str | None = None
    format: str | None = None
    title: str | None = None
    description: str | None = None
    items: SchemaNode | None = None
    properties: dict[str, SchemaNode] | None = None
    additional_properties: AdditionalProperties = UNRESTRICTED
    any_of: tuple[SchemaNode, ...] | None = None
    one_of: tuple[SchemaNode, ...] | None = None
    all_of: tuple[SchemaNode, ...] | None = None
    nullable: bool = False
    required: frozenset[str] = frozenset()
    enum: tuple[Any, ...] | None = None
    constraints: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SchemaNode:
        """Build a node tree from a raw schema mapping."""
        items = data.get("items")
        properties = data.get("properties")
        return cls(
            ref=data.get("$ref"),
            type=data.get("type"),
            format=data.get("format"),
            title=data.get("title"),
            description=data.get("description"),
            items=cls.from_dict(items) if isinstance(items, dict) else None,
            properties=(
                {name: cls.from_dict(prop) for name, prop in properties.items()}
                if isinstance(properties, dict) else None
            ),
            additional_properties=_parse_additional_properties(
                data.get("additionalProperties")
            ),
            any_of=_parse_members(data.get("anyOf")),
            one_of=_parse_members(data.get("oneOf")),
            all_of=_parse_members(data.get("allOf")),
            nullable=bool(data.get("nullable", False)),
            required=frozenset(data.get("required", ())),
            enum=tuple(data["enum"]) if "enum" in data else None,
            constraints={k: v for k, v in data.items() if k in CONSTRAINT_KEYWORDS},
        )


def _parse_members(members: Any) -> tuple[SchemaNode, ...] | None:
    if not isinstance(members, list):
        return None
    return tuple(SchemaNode.from_dict(m) for m in members)


def _parse_additional_properties(value: Any) -> AdditionalProperties:
    if value is None or value is True:
        return UNRESTRICTED
    if value is False:
        return FORBIDDEN
    return Typed(SchemaNode.from_dict(value))


@dataclass(frozen=True)
class ParameterDescriptor:
    """A single operation parameter."""
    name: str
    location: str
    schema: SchemaNode | None = None
    required: bool = False
    description: str | None = None
    style: str | None = None
    explode: bool | None = None


@dataclass(frozen=True)
class RequestBodyDescriptor:
    content: dict[str, SchemaNode | None]
    required: bool = False
    description: str | None = None


@dataclass(frozen=True)
class ResponseDescriptor:
    description: str | None = None
    content: dict[str, SchemaNode | None] = field(default_factory=dict)


@dataclass(frozen=True)
class OperationDescriptor:
    """One HTTP method bound to one templated path."""
    http_method: str
    path: str
    operation_id: str | None = None
    summary: str | None = None
    description: str | None = None
    parameters: tuple[ParameterDescriptor, ...] = ()
    request_body: RequestBodyDescriptor | None = None
    responses: dict[str, ResponseDescriptor] = field(default_factory=dict)
    security_override: tuple[dict[str, list[str]], ...] | None = None
    servers: tuple[Server, ...] = ()


@dataclass(frozen=True)
class SecurityScheme:
    name: str
    type: str
    scheme: str | None = None
    location: str | None = None
    parameter_name: str | None = None
    description: str | None = None
    bearer_format: str | None = None


@dataclass(frozen=True)
class ServerVariable:
    default: str
    description: str | None = None
    enum: tuple[str, ...] = ()


@dataclass(frozen=True)
class Server:
    url: str
    description: str | None = None
    variables: dict[str, ServerVariable] = field(default_factory=dict)


@dataclass(frozen=True)
class ApiDocument:
    """The parts of an OpenAPI document the generator consumes."""
    title: str
    version: str
    schemas: dict[str, SchemaNode]
    operations: tuple[OperationDescriptor, ...]
    security_schemes: dict[str, SecurityScheme] = field(default_factory=dict)
    servers: tuple[Server, ...] = ()
    security: tuple[dict[str, list[str]], ...] = ()
