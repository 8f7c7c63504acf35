"""Build Jinja2 template contexts from a parsed OpenAPI document.

Generation runs in two passes:
1. every named schema is registered (build_registry) and the registry sealed
2. model, service, security and server contexts are built against it

Any GeneratorError raised while building one unit is tagged with that unit
(schema name or "METHOD /path") before it propagates.
"""

from __future__ import annotations

import logging
from typing import Any

from .errors import GeneratorError
from .inner_types import InnerTypeEmitter, NamingScope
from .model import ApiDocument
from .naming import RESERVED_CLASS_NAMES, build_operation_id, deduplicate, word_wrap
from .operations import OperationCompiler, operation_schemas
from .references import alias_cycle, collect, collect_all, collect_imports
from .registry import NamedSchema, SchemaRegistry, build_registry
from .resolver import SchemaTypeResolver, is_struct, render_annotation
from .security import compile_security
from .servers import compile_servers
from .services import ServiceGroup, group_operations

logger = logging.getLogger(__name__)


def build_model_context(
    emitter: InnerTypeEmitter,
    registry: SchemaRegistry,
    named: NamedSchema,
) -> dict[str, Any]:
    """Context for the module of one named schema."""
    try:
        classes, descriptor = emitter.emit_named(named)
        names = collect(named.node)
        cycle = set() if is_struct(named.node) else alias_cycle(registry, named.name)
        imports = collect_imports(registry, [n for n in names if n not in cycle], exclude=named.name)
    except GeneratorError as err:
        raise err.within(named.name)

    alias = None
    if not is_struct(named.node):
        # Aliases import their targets at runtime; cyclic targets stay untyped.
        if cycle:
            logger.info("Alias %s is part of a reference cycle with %s", named.name, sorted(cycle))
        opaque = frozenset(registry.get(name).class_name for name in cycle)
        alias = render_annotation(descriptor, opaque)

    return {
        "schema_name": named.name,
        "module_name": named.module_name,
        "class_name": named.class_name,
        "description_lines": word_wrap(named.node.description),
        "classes": classes,
        "alias": alias,
        "imports": imports,
    }


def build_service_context(
    compiler: OperationCompiler,
    registry: SchemaRegistry,
    group: ServiceGroup,
) -> dict[str, Any]:
    """Context for one service module: its operations and the models they use."""
    try:
        names = collect_all(
            schema for op in group.operations for schema in operation_schemas(op)
        )
        imports = collect_imports(registry, names)
    except GeneratorError as err:
        raise err.within(group.module_name)

    # Module-level classes must not shadow the service, imports or runtime names.
    scope = NamingScope()
    scope.reserved.update(RESERVED_CLASS_NAMES)
    scope.reserved.add(group.class_name)
    scope.reserved.update(named.class_name for named in imports)

    operation_ids = deduplicate([
        op.operation_id or build_operation_id(op.http_method, op.path)
        for op in group.operations
    ])
    operations = []
    for op, op_id in zip(group.operations, operation_ids):
        try:
            operations.append(compiler.compile(op, scope, op_id))
        except GeneratorError as err:
            raise err.within(f"{op.http_method} {op.path}")

    return {
        "path_root": group.path_root or "/",
        "module_name": group.module_name,
        "class_name": group.class_name,
        "operations": operations,
        "imports": imports,
        "uses_security": any(op.apply_security for op in operations),
    }


def build_context(document: ApiDocument, package: str) -> dict[str, Any]:
    """Build the full template context for every generated module."""
    registry = build_registry(document, package)
    resolver = SchemaTypeResolver(registry)
    emitter = InnerTypeEmitter(resolver)
    compiler = OperationCompiler(emitter, secured_by_default=bool(document.security))

    models = [build_model_context(emitter, registry, named) for named in registry]
    services = [
        build_service_context(compiler, registry, group)
        for group in group_operations(document)
    ]
    modules = [service["module_name"] for service in services]
    if len(set(modules)) != len(modules):
        for service, module in zip(services, deduplicate(modules)):
            service["module_name"] = module

    try:
        security = compile_security(document.security_schemes)
    except GeneratorError as err:
        raise err.within("securitySchemes")

    logger.debug("Built %d model and %d service contexts", len(models), len(services))
    return {
        "package": package,
        "title": document.title,
        "version": document.version,
        "title_lines": word_wrap(document.title),
        "models": models,
        "services": services,
        "security": security,
        "servers": compile_servers(document.servers),
        "model_count": len(models),
        "service_count": len(services),
    }
