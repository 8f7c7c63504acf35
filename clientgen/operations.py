"""Compile one HTTP operation into the declarations a service module needs.

Per operation:
- a parameter group class <Op>Params (path parameters are always required)
- the request body type, default name <Op>Body, from the first content type
- a response handler class <Op>ResponseHandler with one callback per status
  pattern; response types default to <Op>Response<pattern>

Only the first content type of a body or response is used. The others are
logged and ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from clientgen.runtime.dispatch import DEFAULT_PATTERN, is_status_pattern

from .inner_types import ClassDecl, InnerTypeEmitter, NamingScope
from .model import FORBIDDEN, OperationDescriptor, SchemaNode
from .naming import (
    build_operation_id,
    method_name,
    to_identifier_camel,
    word_wrap,
)
from .references import collect_all
from .resolver import render_annotation

logger = logging.getLogger(__name__)

_DEFAULT_STYLES: dict[str, str] = {
    "query": "form",
    "cookie": "form",
    "path": "simple",
    "header": "simple",
}

_SETTERS: dict[str, str] = {
    "path": "set_path_param",
    "query": "set_query_param",
    "header": "set_header_param",
    "cookie": "set_cookie_param",
}

STRING_SCHEMA = SchemaNode(type="string")


@dataclass
class ParameterBinding:
    """How one params field travels in the request."""
    field: str
    name: str
    location: str
    style: str
    explode: bool

    @property
    def setter(self) -> str:
        return _SETTERS.get(self.location, "set_query_param")


@dataclass
class BodySpec:
    annotation: str
    content_type: str
    required: bool = False


@dataclass
class ResponseSpec:
    pattern: str
    callback: str
    annotation: str | None = None
    content_type: str | None = None
    description: str | None = None


@dataclass
class CompiledOperation:
    """Everything the service template needs for one operation."""
    operation: OperationDescriptor
    operation_id: str
    method_name: str
    handler_class: str
    declarations: list[ClassDecl] = field(default_factory=list)
    params_class: str | None = None
    params_required: bool = False
    parameters: list[ParameterBinding] = field(default_factory=list)
    body: BodySpec | None = None
    responses: list[ResponseSpec] = field(default_factory=list)
    references: list[str] = field(default_factory=list)
    apply_security: bool = True
    server_url: str | None = None
    doc_lines: list[str] = field(default_factory=list)

    @property
    def http_method(self) -> str:
        return self.operation.http_method

    @property
    def path(self) -> str:
        return self.operation.path


def operation_schemas(operation: OperationDescriptor) -> list[SchemaNode | None]:
    """Every schema an operation mentions: parameters, body and responses."""
    schemas: list[SchemaNode | None] = [p.schema for p in operation.parameters]
    if operation.request_body is not None:
        schemas.extend(operation.request_body.content.values())
    for response in operation.responses.values():
        schemas.extend(response.content.values())
    return schemas


def claim_name(scope: NamingScope, name: str) -> str:
    """Reserve a synthesized class name in scope, suffixing '_' until it is free."""
    while name in scope or name in scope.reserved:
        name += "_"
    scope.add(name)
    return name


def _first_content(
    content: dict[str, SchemaNode | None],
    what: str,
) -> tuple[str, SchemaNode | None]:
    if len(content) > 1:
        logger.info(
            "%s declares %d content types; only the first (%s) is used",
            what, len(content), next(iter(content)),
        )
    return next(iter(content.items()))


def _doc_lines(operation: OperationDescriptor) -> list[str]:
    lines = word_wrap(operation.summary, 80)
    if operation.description and operation.description != operation.summary:
        if lines:
            lines.append("")
        lines.extend(word_wrap(operation.description, 80))
    if not lines:
        lines = [f"{operation.http_method} {operation.path}"]
    return lines


class OperationCompiler:
    """Turn OperationDescriptors into CompiledOperations within one module scope."""

    def __init__(self, emitter: InnerTypeEmitter, secured_by_default: bool = True) -> None:
        self.emitter = emitter
        # False when the document declares no top-level security requirement.
        self.secured_by_default = secured_by_default

    def compile(
        self,
        operation: OperationDescriptor,
        scope: NamingScope,
        operation_id: str | None = None,
    ) -> CompiledOperation:
        op_id = operation_id or operation.operation_id or build_operation_id(
            operation.http_method, operation.path,
        )
        prefix = to_identifier_camel(op_id)
        compiled = CompiledOperation(
            operation=operation,
            operation_id=op_id,
            method_name=method_name(op_id),
            handler_class=claim_name(scope, f"{prefix}ResponseHandler"),
            references=collect_all(operation_schemas(operation)),
            apply_security=self._applies_security(operation),
            server_url=operation.servers[0].url if operation.servers else None,
            doc_lines=_doc_lines(operation),
        )
        self._compile_parameters(compiled, scope, prefix)
        self._compile_body(compiled, scope, prefix)
        self._compile_responses(compiled, scope, prefix)
        return compiled

    def _applies_security(self, operation: OperationDescriptor) -> bool:
        if operation.security_override is None:
            return self.secured_by_default
        return bool(operation.security_override)

    def _compile_parameters(
        self, compiled: CompiledOperation, scope: NamingScope, prefix: str,
    ) -> None:
        operation = compiled.operation
        if not operation.parameters:
            return

        properties: dict[str, SchemaNode] = {}
        required: set[str] = set()
        kept = []
        for param in operation.parameters:
            if param.name in properties:
                logger.warning(
                    "%s %s: parameter '%s' appears in several locations; keeping the %s one",
                    operation.http_method, operation.path, param.name,
                    next(p.location for p in kept if p.name == param.name),
                )
                continue
            schema = param.schema or STRING_SCHEMA
            if param.description:
                schema = replace(schema, description=param.description)
            properties[param.name] = schema
            if param.required or param.location == "path":
                required.add(param.name)
            kept.append(param)

        group = SchemaNode(
            type="object",
            properties=properties,
            required=frozenset(required),
            additional_properties=FORBIDDEN,
        )
        name = claim_name(scope, f"{prefix}Params")
        decl = self.emitter.build_class(
            group, name, scope.child(name), description=f"Parameters of {compiled.method_name}.",
        )
        compiled.declarations.append(decl)
        compiled.params_class = name
        compiled.params_required = bool(required)
        for param, fdecl in zip(kept, decl.fields):
            style = param.style or _DEFAULT_STYLES.get(param.location, "form")
            explode = param.explode if param.explode is not None else style == "form"
            compiled.parameters.append(ParameterBinding(
                field=fdecl.name,
                name=param.name,
                location=param.location,
                style=style,
                explode=explode,
            ))

    def _compile_body(
        self, compiled: CompiledOperation, scope: NamingScope, prefix: str,
    ) -> None:
        request_body = compiled.operation.request_body
        if request_body is None or not request_body.content:
            return
        content_type, schema = _first_content(
            request_body.content, f"Request body of {compiled.operation_id}",
        )
        annotation = "Any"
        if schema is not None:
            decls, descriptor = self.emitter.emit(schema, scope, f"{prefix}Body")
            compiled.declarations.extend(decls)
            annotation = render_annotation(descriptor)
        compiled.body = BodySpec(
            annotation=annotation,
            content_type=content_type,
            required=request_body.required,
        )

    def _compile_responses(
        self, compiled: CompiledOperation, scope: NamingScope, prefix: str,
    ) -> None:
        for pattern, response in compiled.operation.responses.items():
            if not is_status_pattern(pattern):
                logger.warning(
                    "%s: skipping response with invalid status pattern '%s'",
                    compiled.operation_id, pattern,
                )
                continue
            key = pattern.lower()
            suffix = "Default" if key == DEFAULT_PATTERN else key
            spec = ResponseSpec(
                pattern=key,
                callback=f"handle_response_{key}",
                description=response.description,
            )
            if response.content:
                content_type, schema = _first_content(
                    response.content, f"Response {pattern} of {compiled.operation_id}",
                )
                spec.content_type = content_type
                spec.annotation = "Any"
                if schema is not None:
                    decls, descriptor = self.emitter.emit(
                        schema, scope, f"{prefix}Response{suffix}",
                    )
                    compiled.declarations.extend(decls)
                    spec.annotation = render_annotation(descriptor)
            compiled.responses.append(spec)
