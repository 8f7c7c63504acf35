"""Naming rules for generated Python identifiers.

Operation names derived from HTTP method + path when operationId is missing:
  - GET collection      -> list_{plural}
  - GET collection/{id} -> get_{singular}
  - POST collection     -> create_{singular}
  - PUT collection/{id} -> update_{singular}
  - DELETE col/{id}     -> delete_{singular}

A leading /api/ and version segment (v1, v2beta, ...) are not part of the name.

Examples:
  GET    /v1/charges                 -> list_charges
  GET    /v1/charges/{charge}        -> get_charge
  POST   /v1/charges                 -> create_charge
  DELETE /v1/charges/{charge}        -> delete_charge
  GET    /v1/charges/{charge}/refunds -> get_charges_refunds
"""

from __future__ import annotations

import builtins
import keyword
import re
import textwrap
from typing import Final

# Standard HTTP method to verb mapping
_METHOD_VERBS: dict[str, str] = {
    "get": "list",
    "post": "create",
    "put": "update",
    "delete": "delete",
    "patch": "update",
}

# Common irregular plurals
_PLURALS: dict[str, str] = {
    "child": "children",
    "person": "people",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "analysis": "analyses",
    "criterion": "criteria",
    "datum": "data",
}

_SINGULARS: dict[str, str] = {v: k for k, v in _PLURALS.items()}

_VERSION_SEGMENT = re.compile(r"^v\d+[a-z0-9]*$")

# Class names that would shadow a builtin or a name imported by every generated module.
RESERVED_CLASS_NAMES: Final[frozenset[str]] = frozenset(
    {name for name in dir(builtins) if name[:1].isupper()}
    | {"Any", "Optional", "Callable", "ClassVar", "TYPE_CHECKING", "Int32", "Int64",
       "Float32", "Float64", "ApiRequest", "ResponseDispatcher", "ResponseCase",
       "Servers", "Security"}
)

# Field names that cannot appear as dataclass fields even though they are identifiers.
# A class-level "field" or "dataclass" would shadow the generated module imports.
_RESERVED_FIELD_NAMES: Final[frozenset[str]] = frozenset({"self", "cls", "field", "dataclass"})


def _pluralize(word: str) -> str:
    """Return the plural form of a resource name."""
    if word in _PLURALS:
        return _PLURALS[word]
    if word in _SINGULARS or word.endswith("s"):
        return word
    if word.endswith("y") and word[-2:-1] not in ("a", "e", "i", "o", "u"):
        return word[:-1] + "ies"
    return word + "s"


def _singularize(word: str) -> str:
    """Return the singular form of a resource name."""
    if word in _SINGULARS:
        return _SINGULARS[word]
    if word in _PLURALS:
        return word
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith(("sses", "shes", "ches", "xes")):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()


def sanitize_segment(segment: str) -> str:
    """Sanitize a path segment or name for use in a snake_case Python identifier."""
    name = camel_to_snake(segment)
    name = re.sub(r"[^a-z0-9_]", "_", name)
    name = re.sub(r"_+", "_", name)
    return name.strip("_")


def to_upper_camel_case(value: str) -> str:
    """Convert "snake_case", "camelCase" or mixed input to "UpperCamelCase".

    Underscores start a new word and are dropped; any other non-letter is kept
    and also starts a new word, so "3bird_ham" becomes "3BirdHam".
    """
    out = []
    new_word = True
    for char in value:
        if char == "_":
            new_word = True
        elif not char.isalpha():
            out.append(char)
            new_word = True
        elif new_word or char.isupper():
            out.append(char.upper())
            new_word = False
        else:
            out.append(char.lower())
    return "".join(out)


def to_identifier_camel(value: str) -> str:
    """UpperCamelCase restricted to identifier characters."""
    name = to_upper_camel_case(re.sub(r"[^A-Za-z0-9_]", "_", value))
    if not name:
        return "Anonymous"
    if name[0].isdigit():
        name = "_" + name
    return name


def class_name_for_schema(schema_name: str) -> str:
    """Class name of a named schema; '.' separates words like '_' does."""
    name = to_identifier_camel(schema_name.replace(".", "_"))
    if name in RESERVED_CLASS_NAMES:
        return name + "_"
    return name


def module_name_for_schema(package_root: str | None, schema_name: str) -> str:
    """Full module name for a schema, e.g. 'stripe.client.model.charge'."""
    module = sanitize_segment(schema_name.replace(".", "_")) or "schema"
    if module[0].isdigit() or keyword.iskeyword(module):
        module = "_" + module
    if not package_root:
        return module
    return f"{package_root}.model.{module}"


def variable_name(property_name: str) -> str:
    """Turn a JSON property or parameter name into a usable field name.

    Keywords such as "from" or "class" get a trailing underscore.
    """
    name = re.sub(r"\W", "_", property_name)
    if not name:
        return "field_"
    if name[0].isdigit():
        name = "_" + name
    if name.startswith("__"):
        name = "_" + name.lstrip("_")
    if keyword.iskeyword(name) or name in _RESERVED_FIELD_NAMES:
        return name + "_"
    return name


def method_name(operation_id: str) -> str:
    """snake_case method name for an operation id."""
    name = sanitize_segment(operation_id) or "operation"
    if name[0].isdigit():
        name = "op_" + name
    if keyword.iskeyword(name):
        name += "_"
    return name


def _extract_path_parts(path: str) -> list[str]:
    """Extract meaningful path segments, dropping /api/, the version and {params}."""
    segments = [p for p in path.split("/") if p]
    if segments and segments[0] == "api":
        segments = segments[1:]
    if segments and _VERSION_SEGMENT.match(segments[0]):
        segments = segments[1:]
    return [p for p in segments if not p.startswith("{")]


def build_operation_id(method: str, path: str) -> str:
    """Build an operation name from HTTP method and path.

    Returns a name like 'list_charges' or 'get_charge'.
    """
    method_lower = method.lower()
    parts = _extract_path_parts(path)
    has_id = any(p.startswith("{") for p in path.split("/") if p)

    if method_lower == "get":
        verb = "get" if has_id else "list"
    else:
        verb = _METHOD_VERBS.get(method_lower, method_lower)

    clean_parts = [p for p in (sanitize_segment(p) for p in parts) if p]
    if not clean_parts:
        return f"{verb}_root"

    # Single-segment paths: standard CRUD
    if len(clean_parts) == 1:
        resource = clean_parts[0]
        if verb == "list":
            resource = _pluralize(resource)
        elif has_id or verb == "create":
            resource = _singularize(resource)
        return f"{verb}_{resource}"

    # Multi-segment paths: join with underscores
    return f"{verb}_{'_'.join(clean_parts)}"


def deduplicate(names: list[str]) -> list[str]:
    """Make names unique by appending _2, _3, ... to repeats, keeping order."""
    seen: dict[str, int] = {}
    result = []
    for name in names:
        if name in seen:
            seen[name] += 1
            candidate = f"{name}_{seen[name]}"
            while candidate in seen:
                seen[name] += 1
                candidate = f"{name}_{seen[name]}"
            seen[candidate] = 1
            result.append(candidate)
        else:
            seen[name] = 1
            result.append(name)
    return result


def word_wrap(text: str | None, width: int = 80) -> list[str]:
    """Split text on newlines, then word-wrap each line to width."""
    if not text:
        return []
    lines: list[str] = []
    for line in text.split("\n"):
        wrapped = textwrap.wrap(line, width=width, break_on_hyphens=False)
        lines.extend(wrapped or [""])
    return lines


def docstring_safe(text: str) -> str:
    """Escape text so it can sit inside a triple-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
