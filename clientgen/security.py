"""Compile components.securitySchemes into Security configurator methods.

Supported:
- http basic  -> configure_<name>(username, password)
- http bearer -> configure_<name>(token)
- apiKey      -> configure_<name>(api_key), sent as header, query or cookie

oauth2, openIdConnect, mutualTLS and other http schemes are skipped with a
warning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import MalformedSecurityScheme
from .model import SecurityScheme
from .naming import method_name, word_wrap

logger = logging.getLogger(__name__)

API_KEY_LOCATIONS = ("header", "query", "cookie")

_ARGUMENTS: dict[str, tuple[str, ...]] = {
    "basic": ("username", "password"),
    "bearer": ("token",),
    "api_key": ("api_key",),
}


@dataclass
class SecurityConfigurator:
    """One configure_<name> classmethod on the generated Security class."""
    scheme_name: str
    method_name: str
    kind: str
    location: str = "header"
    parameter_name: str = "Authorization"
    doc_lines: list[str] = field(default_factory=list)

    @property
    def arguments(self) -> tuple[str, ...]:
        return _ARGUMENTS[self.kind]


def _doc_lines(scheme: SecurityScheme, fallback: str) -> list[str]:
    return word_wrap(scheme.description or fallback, 76)


def compile_security_scheme(scheme: SecurityScheme) -> SecurityConfigurator | None:
    """Configurator for one scheme, or None when the scheme is unsupported."""
    name = "configure_" + method_name(scheme.name)

    if scheme.type == "http" and scheme.scheme in ("basic", "bearer"):
        return SecurityConfigurator(
            scheme_name=scheme.name,
            method_name=name,
            kind=scheme.scheme,
            doc_lines=_doc_lines(scheme, f"HTTP {scheme.scheme} authentication."),
        )

    if scheme.type == "apiKey":
        if not scheme.location:
            raise MalformedSecurityScheme(scheme.name, "is missing required parameter 'in'")
        if not scheme.parameter_name:
            raise MalformedSecurityScheme(scheme.name, "is missing required parameter 'name'")
        if scheme.location not in API_KEY_LOCATIONS:
            raise MalformedSecurityScheme(
                scheme.name, f"has unsupported location '{scheme.location}'",
            )
        return SecurityConfigurator(
            scheme_name=scheme.name,
            method_name=name,
            kind="api_key",
            location=scheme.location,
            parameter_name=scheme.parameter_name,
            doc_lines=_doc_lines(
                scheme, f"API key sent as {scheme.location} '{scheme.parameter_name}'.",
            ),
        )

    logger.warning(
        "Security scheme '%s' of type '%s'%s is not supported; no configurator generated",
        scheme.name, scheme.type, f" ({scheme.scheme})" if scheme.scheme else "",
    )
    return None


def compile_security(schemes: dict[str, SecurityScheme]) -> list[SecurityConfigurator]:
    """Configurators for every supported scheme, in declaration order."""
    configurators = []
    for scheme in schemes.values():
        configurator = compile_security_scheme(scheme)
        if configurator is not None:
            configurators.append(configurator)
    return configurators
