"""Compile the document's servers list into the generated Servers class."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .model import Server
from .naming import method_name, word_wrap

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "/"


@dataclass
class ServerParam:
    name: str
    default: str
    setter: str
    doc_lines: list[str] = field(default_factory=list)


@dataclass
class ServerConfig:
    url: str = DEFAULT_SERVER_URL
    description: str | None = None
    params: list[ServerParam] = field(default_factory=list)


def compile_servers(servers: tuple[Server, ...]) -> ServerConfig:
    """Use the first server; later entries are only logged."""
    if not servers:
        return ServerConfig()
    if len(servers) > 1:
        logger.info(
            "%d servers declared; using %s as the default", len(servers), servers[0].url,
        )
    server = servers[0]
    params = []
    for name, variable in server.variables.items():
        lines = [f"Server URL parameter: {name}"]
        lines.extend(word_wrap(variable.description, 76))
        if variable.enum:
            lines.append("Valid values: " + ", ".join(variable.enum))
        params.append(ServerParam(
            name=name,
            default=variable.default,
            setter="set_param_" + method_name(name),
            doc_lines=lines,
        ))
    return ServerConfig(url=server.url, description=server.description, params=params)
