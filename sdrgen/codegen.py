"""Render templates and write generated output.

Takes the context from context_builder and writes one model module and one
service module per entity, plus the package index modules.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any

import jinja2

TEMPLATE_DIR = Path(__file__).parent / "templates"


def _docstring(text: str) -> str:
    """Make text safe to place inside a triple-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"""', "'''")


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["docstring"] = _docstring
    return env


def empty_directory(path: Path) -> None:
    """Create ``path`` if needed and remove everything inside it."""
    path.mkdir(parents=True, exist_ok=True)
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def generate(context: dict[str, Any], output_dir: Path) -> list[Path]:
    """Render every model and service and write them below ``output_dir``."""
    env = _environment()
    model_dir = output_dir / context["model_dir"]
    service_dir = output_dir / context["service_dir"]
    empty_directory(model_dir)
    empty_directory(service_dir)

    package_init = output_dir / "__init__.py"
    if not package_init.exists():
        package_init.write_text("")

    model_template = env.get_template("model.py.j2")
    service_template = env.get_template("service.py.j2")
    written: list[Path] = []

    for model in context["models"]:
        model_path = model_dir / f"{model['module']}.py"
        model_path.write_text(model_template.render(model=model, **context))
        service_path = service_dir / f"{model['module']}_service.py"
        service_path.write_text(service_template.render(model=model, **context))
        written += [model_path, service_path]

    for template_name, path in (
        ("models_index.py.j2", model_dir / "__init__.py"),
        ("services_index.py.j2", service_dir / "__init__.py"),
        ("service_base.py.j2", service_dir / "base.py"),
    ):
        path.write_text(env.get_template(template_name).render(**context))
        written.append(path)

    print(
        f"Generated {context['model_count']} models and"
        f" {context['model_count']} services in {output_dir}"
    )
    return written
