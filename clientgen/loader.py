"""Load an OpenAPI document and parse it into the plain data model.

Reads JSON or YAML, resolves component pointers for parameters, request bodies
and responses, and produces an ApiDocument. Schema references are left as
names; they are resolved later through the SchemaRegistry.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import GeneratorError, UnknownReference, UnsupportedReference
from .model import (
    HTTP_METHODS,
    ApiDocument,
    OperationDescriptor,
    ParameterDescriptor,
    RequestBodyDescriptor,
    ResponseDescriptor,
    SchemaNode,
    SecurityScheme,
    Server,
    ServerVariable,
)

logger = logging.getLogger(__name__)


def load_spec(path: Path) -> dict[str, Any]:
    """Load the OpenAPI spec from disk.

    Supports both YAML and JSON formats.
    """
    raw = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            spec = yaml.safe_load(raw)
        else:
            spec = json.loads(raw)
    except (yaml.YAMLError, json.JSONDecodeError) as err:
        raise GeneratorError(f"Cannot parse document: {err}", str(path)) from err
    if not isinstance(spec, dict):
        raise GeneratorError("Document is not a mapping", str(path))
    return spec


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """The paths object of an OpenAPI document."""
    return spec.get("paths") or {}


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """components.schemas of an OpenAPI document."""
    return (spec.get("components") or {}).get("schemas") or {}


def resolve_ref(spec: dict[str, Any], ref: str) -> dict[str, Any]:
    """Follow a local JSON pointer ($ref) within the document."""
    if not ref.startswith("#/"):
        raise UnsupportedReference(ref)
    node: Any = spec
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        try:
            node = node[part]
        except (KeyError, TypeError):
            raise UnknownReference(ref) from None
    return node


def _deref(spec: dict[str, Any], node: dict[str, Any]) -> dict[str, Any]:
    """Follow $ref chains on non-schema objects (parameters, bodies, responses)."""
    seen: set[str] = set()
    while "$ref" in node:
        ref = node["$ref"]
        if ref in seen:
            raise GeneratorError(f"Circular component reference '{ref}'")
        seen.add(ref)
        node = resolve_ref(spec, ref)
    return node


def _parse_content(content: dict[str, Any] | None) -> dict[str, SchemaNode | None]:
    result: dict[str, SchemaNode | None] = {}
    for content_type, media in (content or {}).items():
        schema = (media or {}).get("schema")
        result[content_type] = SchemaNode.from_dict(schema) if schema else None
    return result


def _parse_parameter(spec: dict[str, Any], raw: dict[str, Any]) -> ParameterDescriptor:
    param = _deref(spec, raw)
    schema = param.get("schema")
    location = param.get("in", "query")
    return ParameterDescriptor(
        name=param["name"],
        location=location,
        schema=SchemaNode.from_dict(schema) if schema else None,
        required=bool(param.get("required", False)),
        description=param.get("description"),
        style=param.get("style"),
        explode=param.get("explode"),
    )


def _merge_parameters(
    spec: dict[str, Any],
    path_level: list[dict[str, Any]],
    operation_level: list[dict[str, Any]],
) -> tuple[ParameterDescriptor, ...]:
    """Operation parameters override path-item parameters with the same name and location."""
    merged: dict[tuple[str, str], ParameterDescriptor] = {}
    for raw in list(path_level) + list(operation_level):
        param = _parse_parameter(spec, raw)
        merged[(param.name, param.location)] = param
    return tuple(merged.values())


def _parse_servers(raw_servers: list[dict[str, Any]] | None) -> tuple[Server, ...]:
    servers = []
    for raw in raw_servers or []:
        variables = {
            name: ServerVariable(
                default=str(var.get("default", "")),
                description=var.get("description"),
                enum=tuple(str(v) for v in var.get("enum", ())),
            )
            for name, var in (raw.get("variables") or {}).items()
        }
        servers.append(Server(
            url=raw.get("url", "/"),
            description=raw.get("description"),
            variables=variables,
        ))
    return tuple(servers)


def _parse_security(raw: list[dict[str, Any]] | None) -> tuple[dict[str, list[str]], ...]:
    return tuple(dict(requirement) for requirement in raw or [])


def parse_operation(
    spec: dict[str, Any],
    method: str,
    path: str,
    path_item: dict[str, Any],
) -> OperationDescriptor:
    """Build an OperationDescriptor for one method slot of a path item."""
    operation = path_item[method]

    request_body = None
    if "requestBody" in operation:
        body = _deref(spec, operation["requestBody"])
        request_body = RequestBodyDescriptor(
            content=_parse_content(body.get("content")),
            required=bool(body.get("required", False)),
            description=body.get("description"),
        )

    responses = {}
    for status, raw_response in (operation.get("responses") or {}).items():
        response = _deref(spec, raw_response)
        responses[str(status)] = ResponseDescriptor(
            description=response.get("description"),
            content=_parse_content(response.get("content")),
        )

    security_override = None
    if "security" in operation:
        security_override = _parse_security(operation["security"])

    return OperationDescriptor(
        http_method=method.upper(),
        path=path,
        operation_id=operation.get("operationId"),
        summary=operation.get("summary"),
        description=operation.get("description") or path_item.get("description"),
        parameters=_merge_parameters(
            spec, path_item.get("parameters", []), operation.get("parameters", []),
        ),
        request_body=request_body,
        responses=responses,
        security_override=security_override,
        servers=_parse_servers(operation.get("servers") or path_item.get("servers")),
    )


def parse_security_schemes(spec: dict[str, Any]) -> dict[str, SecurityScheme]:
    """Extract components.securitySchemes."""
    raw_schemes = (spec.get("components") or {}).get("securitySchemes") or {}
    schemes = {}
    for name, raw in raw_schemes.items():
        raw = _deref(spec, raw)
        schemes[name] = SecurityScheme(
            name=name,
            type=raw.get("type", ""),
            scheme=(raw.get("scheme") or "").lower() or None,
            location=raw.get("in"),
            parameter_name=raw.get("name"),
            description=raw.get("description"),
            bearer_format=raw.get("bearerFormat"),
        )
    return schemes


def parse_document(spec: dict[str, Any]) -> ApiDocument:
    """Parse a raw spec mapping into an ApiDocument."""
    operations = []
    for path, path_item in get_paths(spec).items():
        if "$ref" in path_item:
            path_item = _deref(spec, path_item)
        for method in HTTP_METHODS:
            if method not in path_item:
                continue
            operations.append(parse_operation(spec, method, path, path_item))

    info = spec.get("info") or {}
    document = ApiDocument(
        title=info.get("title", ""),
        version=str(info.get("version", "")),
        schemas={name: SchemaNode.from_dict(raw) for name, raw in get_schemas(spec).items()},
        operations=tuple(operations),
        security_schemes=parse_security_schemes(spec),
        servers=_parse_servers(spec.get("servers")),
        security=_parse_security(spec.get("security")),
    )
    logger.debug(
        "Parsed %d schemas and %d operations", len(document.schemas), len(document.operations),
    )
    return document
