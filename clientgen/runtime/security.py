"""Process-wide authentication state for generated clients.

Exactly one scheme is active at a time: configuring a scheme replaces the
previous one. Applying security before anything is configured does nothing.
"""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Callable, ClassVar, Optional

if TYPE_CHECKING:
    from .request import ApiRequest


def basic_authorization(username: str, password: str) -> str:
    """Authorization header value for HTTP Basic authentication."""
    credentials = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


def bearer_authorization(token: str) -> str:
    """Authorization header value for a bearer token (RFC 6750)."""
    return "Bearer " + token


class SecurityBase:
    """Holder of the currently active security method."""

    _apply_security: ClassVar[Optional[Callable[[ApiRequest], None]]] = None

    @classmethod
    def activate(cls, apply: Callable[[ApiRequest], None]) -> None:
        cls._apply_security = apply

    @classmethod
    def reset(cls) -> None:
        cls._apply_security = None

    @classmethod
    def apply(cls, request: ApiRequest) -> None:
        """Apply the currently selected security method to a request."""
        if cls._apply_security is not None:
            cls._apply_security(request)

    @classmethod
    def use_header(cls, name: str, value: str) -> None:
        cls.activate(lambda request: request.set_header_param(name, value))

    @classmethod
    def use_query(cls, name: str, value: str) -> None:
        cls.activate(lambda request: request.set_query_param(name, value))

    @classmethod
    def use_cookie(cls, name: str, value: str) -> None:
        cls.activate(lambda request: request.set_cookie_param(name, value))
