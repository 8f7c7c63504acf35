"""Group operations into service modules by the leading literal part of their path.

"/v1/items", "/v1/items/{id}" and "/v1/items/{id}/tags" all share the root
"/v1/items" and end up in the same module, v1_items_service.
"""

from __future__ import annotations

import keyword
import re
from dataclasses import dataclass, field

from .model import ApiDocument, OperationDescriptor
from .naming import sanitize_segment, to_identifier_camel

_PATH_ROOT_RE = re.compile(r"(/\{[^{}]*\}.*)|(/$)")

ROOT_SERVICE = "root_service"


def path_root(path: str) -> str:
    """Path up to (not including) the first templated segment or trailing slash."""
    return _PATH_ROOT_RE.sub("", path)


def service_module_name(root: str) -> str:
    """Module name for a path root, e.g. '/v1/items' -> 'v1_items_service'."""
    stem = sanitize_segment(root.replace("/", "_"))
    if not stem:
        return ROOT_SERVICE
    name = f"{stem}_service"
    if name[0].isdigit() or keyword.iskeyword(name):
        name = "_" + name
    return name


@dataclass
class ServiceGroup:
    """Operations sharing one path root."""
    path_root: str
    operations: list[OperationDescriptor] = field(default_factory=list)

    @property
    def module_name(self) -> str:
        return service_module_name(self.path_root)

    @property
    def class_name(self) -> str:
        return to_identifier_camel(self.module_name)


def group_operations(document: ApiDocument) -> list[ServiceGroup]:
    """ServiceGroups in order of first appearance; operations keep document order."""
    groups: dict[str, ServiceGroup] = {}
    for operation in document.operations:
        root = path_root(operation.path)
        group = groups.setdefault(root, ServiceGroup(root))
        group.operations.append(operation)
    return list(groups.values())
