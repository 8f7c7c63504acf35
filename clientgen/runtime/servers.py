"""Base URL selection for generated clients."""

from __future__ import annotations

import logging
from typing import ClassVar, Optional

from .encoding import resolve_template

logger = logging.getLogger(__name__)


class ServersBase:
    """The server URL template and the values substituted into it.

    The URL may use named parameters within curly braces, e.g.
    "https://example.com/{version}/".
    """

    server_url: ClassVar[str] = "/"
    server_params: ClassVar[dict[str, str]] = {}

    @classmethod
    def set_param(cls, name: str, value: str) -> None:
        cls.server_params[name] = value

    @classmethod
    def get_server_url(cls, server_url: Optional[str] = None) -> str:
        """Resolve a URL template, using the document server unless one is given."""
        url = resolve_template(server_url or cls.server_url, cls.server_params)
        logger.debug("Resolved server URL %s", url)
        return url
