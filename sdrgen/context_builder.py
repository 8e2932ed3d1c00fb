"""Build Jinja2 template context from resolved entities.

Names each entity's model, DTO and service classes, parses wire and
model fields, and collects the imports every model module needs.
"""

from __future__ import annotations

import keyword
from typing import Any

from .errors import EmissionError
from .naming import (
    class_name,
    dto_class_name,
    entity_class_name,
    module_name,
    service_class_name,
)
from .references import ResolvedEntity, is_uri_property
from .schema_parser import parse_definitions, parse_fields, strip_html


def _is_plain_key(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _reference_imports(referenced: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Import lines for the model classes a schema refers to, sorted by module."""
    imports: dict[str, dict[str, str]] = {}
    for schema in referenced:
        name = class_name(schema["title"])
        imports[name] = {"class_name": name, "module": module_name(name)}
    return sorted(imports.values(), key=lambda i: i["module"])


def _resolved_properties(resolved: ResolvedEntity) -> set[str]:
    """Names of the URI properties the resolver turned into entity references."""
    wire = resolved.dto_schema.get("properties") or {}
    properties = resolved.schema.get("properties") or {}
    return {
        name
        for name, prop in wire.items()
        if is_uri_property(prop) and (properties.get(name) or {}).get("type") == "object"
    }


def build_model_context(resolved: ResolvedEntity) -> dict[str, Any]:
    """Build the template context of one entity."""
    entity = resolved.entity
    schema = resolved.schema
    model = entity_class_name(schema.get("title"), entity.name)
    dto_fields = parse_fields(resolved.dto_schema, wire=True)

    return {
        "repository": entity.name,
        "href": entity.href,
        "title": schema.get("title"),
        "description": strip_html(schema.get("description", "")),
        "class_name": model,
        "dto_class_name": dto_class_name(model),
        "service_class_name": service_class_name(model),
        "module": module_name(model),
        "dto_fields": dto_fields,
        "dto_functional": not all(_is_plain_key(f["name"]) for f in dto_fields),
        "fields": parse_fields(schema, references=_resolved_properties(resolved)),
        "definitions": parse_definitions(schema),
        "references": _reference_imports(resolved.referenced),
        "referenced_classes": [s.get("title") for s in resolved.referenced],
    }


def _check_unique_modules(models: list[dict[str, Any]]) -> None:
    """Two entities must not render to the same module."""
    seen: dict[str, str] = {}
    for model in models:
        other = seen.get(model["module"])
        if other is not None:
            raise EmissionError(
                f"Repositories '{other}' and '{model['repository']}' both map to"
                f" model module '{model['module']}'."
            )
        seen[model["module"]] = model["repository"]


def build_context(
    resolved: list[ResolvedEntity],
    model_dir: str = "model",
    service_dir: str = "service",
) -> dict[str, Any]:
    """Build the full template context for a generation run."""
    models = [build_model_context(r) for r in resolved]
    _check_unique_modules(models)

    return {
        "models": models,
        "model_dir": model_dir,
        "service_dir": service_dir,
        "model_count": len(models),
    }
