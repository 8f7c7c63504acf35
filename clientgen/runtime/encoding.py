"""Encoding helpers for URLs, query strings and form bodies."""

from __future__ import annotations

from typing import Any


def format_value(value: Any) -> str:
    """Text form of a scalar parameter value; booleans are lowercase."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def _child_key(prefix: str | None, key: Any) -> str:
    return str(key) if prefix is None else f"{prefix}[{key}]"


def _flatten(value: Any, key: str | None, fields: list[tuple[str, str]]) -> None:
    if value is None or (isinstance(value, str) and value == ""):
        return
    if isinstance(value, dict):
        for sub_key, sub_value in value.items():
            _flatten(sub_value, _child_key(key, sub_key), fields)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten(item, _child_key(key, index), fields)
    else:
        if key is None:
            raise ValueError(f"Cannot encode a bare scalar without a key: {value!r}")
        fields.append((key, format_value(value)))


def encode_deep_object(value: Any, prefix: str | None = None) -> list[tuple[str, str]]:
    """Flatten nested JSON data into bracket-indexed fields.

    {"a": {"b": 1, "c": [2, 3]}} under prefix "x" gives
    x[a][b]=1, x[a][c][0]=2, x[a][c][1]=3. None and empty-string leaves are
    left out entirely.
    """
    fields: list[tuple[str, str]] = []
    _flatten(value, prefix, fields)
    return fields


def resolve_template(url_template: str, params: dict[str, str]) -> str:
    """Substitute {name} placeholders, e.g. "hello/{name}" -> "hello/world"."""
    out: list[str] = []
    param: list[str] = []
    in_param = False
    for char in url_template:
        if not in_param:
            if char == "{":
                in_param = True
                param = []
            elif char == "}":
                raise ValueError(f'"{url_template}": Unbalanced braces!')
            else:
                out.append(char)
        elif char == "{":
            raise ValueError(f'"{url_template}": Unbalanced braces!')
        elif char == "}":
            in_param = False
            name = "".join(param)
            if name not in params:
                raise ValueError(f'"{url_template}": Missing value for parameter \'{name}\'!')
            out.append(params[name])
        else:
            param.append(char)
    if in_param:
        raise ValueError(f'"{url_template}": Unbalanced braces!')
    return "".join(out)
