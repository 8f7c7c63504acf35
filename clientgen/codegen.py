"""Render templates and write the generated client package.

Output layout under the output directory, for package "acme.client":

    acme/__init__.py
    acme/client/__init__.py
    acme/client/security.py
    acme/client/servers.py
    acme/client/model/__init__.py          (imports every model)
    acme/client/model/<schema>.py          (one per named schema)
    acme/client/<root>_service.py          (one per path root)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jinja2

from .naming import docstring_safe, word_wrap

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


def create_environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["pyrepr"] = repr
    env.filters["docsafe"] = docstring_safe
    env.filters["wrap"] = word_wrap
    return env


def module_path(output_dir: Path, module_name: str) -> Path:
    """File path of a dotted module name below output_dir."""
    return output_dir.joinpath(*module_name.split(".")).with_suffix(".py")


def render_model(env: jinja2.Environment, model: dict[str, Any], context: dict[str, Any]) -> str:
    return env.get_template("model.py.j2").render(model=model, **context)


def render_service(env: jinja2.Environment, service: dict[str, Any], context: dict[str, Any]) -> str:
    return env.get_template("service.py.j2").render(service=service, **context)


def render_security(env: jinja2.Environment, context: dict[str, Any]) -> str:
    return env.get_template("security.py.j2").render(**context)


def render_servers(env: jinja2.Environment, context: dict[str, Any]) -> str:
    return env.get_template("servers.py.j2").render(**context)


def render_model_package(env: jinja2.Environment, context: dict[str, Any]) -> str:
    return env.get_template("model_init.py.j2").render(**context)


def render_package(env: jinja2.Environment, context: dict[str, Any]) -> str:
    return env.get_template("package_init.py.j2").render(**context)


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    logger.debug("Wrote %s", path)
    return path


def render_all(context: dict[str, Any]) -> dict[str, str]:
    """Render every generated module, keyed by dotted module name."""
    env = create_environment()
    package = context["package"]
    modules: dict[str, str] = {
        package: render_package(env, context),
        f"{package}.security": render_security(env, context),
        f"{package}.servers": render_servers(env, context),
        f"{package}.model": render_model_package(env, context),
    }
    for model in context["models"]:
        modules[model["module_name"]] = render_model(env, model, context)
    for service in context["services"]:
        modules[f"{package}.{service['module_name']}"] = render_service(env, service, context)
    return modules


def generate(context: dict[str, Any], output_dir: Path) -> list[Path]:
    """Render the client package and write it below output_dir."""
    written = []
    for module_name, text in render_all(context).items():
        path = module_path(output_dir, module_name)
        if module_name in (context["package"], f"{context['package']}.model"):
            path = path.with_suffix("") / "__init__.py"
        written.append(_write(path, text))

    # Parent packages of a dotted package name need an __init__.py of their own.
    parts = context["package"].split(".")
    for depth in range(1, len(parts)):
        init = output_dir.joinpath(*parts[:depth]) / "__init__.py"
        if not init.exists():
            written.append(_write(init, ""))

    package_dir = output_dir.joinpath(*parts)
    print(
        f"Generated {package_dir} "
        f"({context['model_count']} models, {context['service_count']} services)"
    )
    return written
