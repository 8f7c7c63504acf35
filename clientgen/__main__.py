"""Entry point: python -m clientgen --spec openapi.yaml --package acme.client

Reads an OpenAPI document and writes a typed client package below --output.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .codegen import generate
from .config import GeneratorConfig
from .context_builder import build_context
from .errors import GeneratorError
from .loader import load_spec, parse_document

logger = logging.getLogger("clientgen")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="clientgen", description=__doc__)
    parser.add_argument("--spec", help="Path to the OpenAPI specification (JSON or YAML)")
    parser.add_argument("--output", help="Directory to write the generated package below")
    parser.add_argument("--package", help="Dotted name of the generated package")
    parser.add_argument("--log-level", help="Logging level, e.g. DEBUG or INFO")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        config = GeneratorConfig.from_sources(
            spec=args.spec, output=args.output, package=args.package, log_level=args.log_level,
        )
    except ValueError as err:
        print(f"clientgen: {err}", file=sys.stderr)
        return 2
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        document = parse_document(load_spec(config.spec))
        context = build_context(document, config.package)
        generate(context, config.output)
    except (GeneratorError, OSError) as err:
        logger.error("Generation failed: %s", err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
