"""Generator settings from command-line flags with environment fallbacks.

Environment variables:
  CLIENTGEN_SPEC       path of the OpenAPI document (JSON or YAML)
  CLIENTGEN_OUTPUT     directory the client package is written below
  CLIENTGEN_PACKAGE    dotted name of the generated package
  CLIENTGEN_LOG_LEVEL  logging level name, default WARNING
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

DEFAULT_OUTPUT = Path("generated")
DEFAULT_PACKAGE = "client"
DEFAULT_LOG_LEVEL = "WARNING"

_PACKAGE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


@dataclass(frozen=True)
class GeneratorConfig:
    spec: Path
    output: Path = DEFAULT_OUTPUT
    package: str = DEFAULT_PACKAGE
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if not _PACKAGE_RE.match(self.package):
            raise ValueError(f"Invalid package name: {self.package!r}")

    @classmethod
    def from_sources(
        cls,
        spec: Path | str | None = None,
        output: Path | str | None = None,
        package: str | None = None,
        log_level: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> GeneratorConfig:
        """Explicit values win over CLIENTGEN_* variables, which win over defaults."""
        env = os.environ if environ is None else environ
        spec = spec or env.get("CLIENTGEN_SPEC")
        if not spec:
            raise ValueError("No OpenAPI document given (--spec or CLIENTGEN_SPEC)")
        return cls(
            spec=Path(spec),
            output=Path(output or env.get("CLIENTGEN_OUTPUT") or DEFAULT_OUTPUT),
            package=package or env.get("CLIENTGEN_PACKAGE") or DEFAULT_PACKAGE,
            log_level=(log_level or env.get("CLIENTGEN_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        )
