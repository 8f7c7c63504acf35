"""Convert between generated dataclasses and JSON data.

Generated modules use postponed annotations and import their sibling models
only for type checking. Field types are therefore resolved with
typing.get_type_hints against the module that declares a class plus its
parent package (the generated model package re-exports every model).
"""

from __future__ import annotations

import dataclasses
import logging
import sys
import types
import typing
from typing import Any, Union

logger = logging.getLogger(__name__)


def to_json(value: Any) -> Any:
    """JSON-ready data for a dataclass, list, dict or scalar; None fields are dropped."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result = {}
        for f in dataclasses.fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            result[f.metadata.get("json", f.name)] = to_json(item)
        return result
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def class_namespace(cls: type) -> dict[str, Any]:
    """Names visible to annotations of cls: its parent package, then its module."""
    namespace: dict[str, Any] = {}
    module = sys.modules.get(cls.__module__)
    if module is None:
        return namespace
    package_name = module.__name__.rpartition(".")[0]
    package = sys.modules.get(package_name) if package_name else None
    if package is not None:
        namespace.update(vars(package))
    namespace.update(vars(module))
    return namespace


def field_types(cls: type) -> dict[str, Any]:
    """Resolved annotations of a dataclass, keyed by field name."""
    namespace = class_namespace(cls)
    return typing.get_type_hints(cls, globalns=namespace, localns=namespace)


def from_json(data: Any, annotation: Any) -> Any:
    """Build a value of the annotated type from decoded JSON data.

    annotation is a type object such as Item, list[Item] or Optional[int].
    Unknown object keys are ignored; values that do not fit a container type
    are returned as they are.
    """
    if data is None or annotation is Any or annotation is None or annotation is type(None):
        return data

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)
    if origin is Union or origin is types.UnionType:
        candidates = [a for a in args if a is not type(None)]
        if len(candidates) == 1:
            return from_json(data, candidates[0])
        return data
    if origin is list and isinstance(data, list):
        item_type = args[0] if args else Any
        return [from_json(item, item_type) for item in data]
    if origin is dict and isinstance(data, dict):
        value_type = args[1] if len(args) > 1 else Any
        return {key: from_json(value, value_type) for key, value in data.items()}
    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object for {annotation.__qualname__}, got {type(data).__name__}")
        return _from_json_dataclass(data, annotation)
    if annotation is float and isinstance(data, int) and not isinstance(data, bool):
        return float(data)
    return data


def _from_json_dataclass(data: dict[str, Any], cls: type) -> Any:
    hints = field_types(cls)
    kwargs = {}
    known = set()
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        key = f.metadata.get("json", f.name)
        known.add(key)
        if key in data:
            kwargs[f.name] = from_json(data[key], hints.get(f.name, Any))
    extra = set(data) - known
    if extra:
        logger.debug("Ignoring unknown fields for %s: %s", cls.__qualname__, sorted(extra))
    return cls(**kwargs)
