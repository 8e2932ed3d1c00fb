"""Configuration-driven clean-up of collected schemas before emission."""

from __future__ import annotations

from typing import Any, Iterable


def remove_trivial_titles(properties: dict[str, Any]) -> None:
    """Drop ``title`` from every property that has no ``$ref``.

    Only referenced types need a name; a titled scalar would otherwise get
    its own alias in the generated code. Recurses into nested ``properties``
    maps only.
    """
    for prop in properties.values():
        if not isinstance(prop, dict):
            continue
        if not prop.get("$ref"):
            prop.pop("title", None)
        nested = prop.get("properties")
        if isinstance(nested, dict):
            remove_trivial_titles(nested)


def preprocess_schemas(
    schemas: Iterable[dict[str, Any]],
    suppress_additional_properties: bool = False,
    strip_trivial_titles: bool = False,
) -> None:
    """Mutate every schema in place according to the given flags."""
    for schema in schemas:
        if suppress_additional_properties:
            schema["additionalProperties"] = False
        if strip_trivial_titles:
            remove_trivial_titles(schema.get("properties") or {})
            remove_trivial_titles(schema.get("definitions") or {})
