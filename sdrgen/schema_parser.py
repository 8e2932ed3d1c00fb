"""Map JSON-schema properties to Python type annotations and field lists.

Handles:
- Scalar types (string, integer, number, boolean)
- Arrays, including arrays of $ref items
- Resolved entity references, for the properties the caller names
- $ref into the schema's own ``definitions``
- allOf/oneOf/anyOf composition
- Enum values folded into descriptions
- Attribute name sanitization and collision handling
"""

from __future__ import annotations

import re
from collections.abc import Collection
from typing import Any

from .loader import resolve_ref
from .naming import attribute_name, class_name


def strip_html(text: str) -> str:
    """Strip HTML tags and collapse whitespace."""
    text = re.sub(r"<[^>]+>", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return text


def definition_class_name(ref: str) -> str:
    """Class name for a ``#/definitions/<name>`` pointer."""
    return class_name(ref.rsplit("/", 1)[-1])


def _is_object(schema: dict[str, Any]) -> bool:
    return schema.get("type") == "object" or "properties" in schema


def nested_class(root: dict[str, Any], schema: dict[str, Any]) -> str | None:
    """Definition class a property holds, directly or as list items."""
    if schema.get("type") == "array" and isinstance(schema.get("items"), dict):
        return nested_class(root, schema["items"])
    if "$ref" in schema:
        resolved = resolve_ref(root, schema["$ref"])
        if "enum" not in resolved and _is_object(resolved):
            return definition_class_name(schema["$ref"])
    return None


def resolve_schema_type(
    root: dict[str, Any],
    schema: dict[str, Any],
    wire: bool = False,
) -> str:
    """Resolve a property schema to a Python type annotation string.

    With ``wire`` set, definition objects stay plain dicts, as they arrive
    in a JSON payload.
    """
    if not schema:
        return "Any"

    if "$ref" in schema:
        resolved = resolve_ref(root, schema["$ref"])
        if "enum" in resolved:
            return "str"
        if _is_object(resolved):
            return "dict[str, Any]" if wire else definition_class_name(schema["$ref"])
        return resolve_schema_type(root, resolved, wire)

    if "allOf" in schema:
        for sub in schema["allOf"]:
            t = resolve_schema_type(root, sub, wire)
            if t != "Any":
                return t
        return "dict[str, Any]"

    for key in ("oneOf", "anyOf"):
        if key in schema:
            for sub in schema[key]:
                t = resolve_schema_type(root, sub, wire)
                if t != "Any":
                    return t
            return "Any"

    if "enum" in schema:
        return "str"

    schema_type = schema.get("type")
    if schema_type == "string":
        return "str"
    if schema_type == "integer":
        return "int"
    if schema_type == "number":
        return "float"
    if schema_type == "boolean":
        return "bool"
    if schema_type == "array":
        items = schema.get("items", {})
        item_type = resolve_schema_type(root, items, wire)
        return f"list[{item_type}]"
    if schema_type == "object" or "properties" in schema:
        return "dict[str, Any]"

    return "Any"


def _get_enum_values(root: dict[str, Any], schema: dict[str, Any]) -> list[str] | None:
    """Extract enum values from a schema, resolving $ref if needed."""
    if "$ref" in schema:
        resolved = resolve_ref(root, schema["$ref"])
        return _get_enum_values(root, resolved)
    if "enum" in schema:
        return [str(v) for v in schema["enum"]]
    if schema.get("type") == "array" and isinstance(schema.get("items"), dict):
        return _get_enum_values(root, schema["items"])
    return None


def _deduplicate_attributes(fields: list[dict[str, Any]]) -> None:
    """Ensure attribute names are unique by appending a counter if needed."""
    seen: dict[str, int] = {}
    for field in fields:
        attr = field["attr"]
        if attr in seen:
            seen[attr] += 1
            field["attr"] = f"{attr}_{seen[attr]}"
        else:
            seen[attr] = 1


def parse_fields(
    root: dict[str, Any],
    schema: dict[str, Any] | None = None,
    wire: bool = False,
    references: Collection[str] = (),
) -> list[dict[str, Any]]:
    """Parse the properties of ``schema`` (default: ``root``) into field dicts.

    Properties named in ``references`` were resolved to another entity and
    are typed as that entity's model class. Required fields come first so
    they can be declared without defaults.
    """
    schema = root if schema is None else schema
    properties = schema.get("properties") or {}
    required_fields = set(schema.get("required", []))
    fields = []

    for prop_name, prop_schema in properties.items():
        description = prop_schema.get("description", "")
        if description:
            description = strip_html(description)

        enum_values = _get_enum_values(root, prop_schema)
        if enum_values:
            enum_str = ", ".join(enum_values)
            if description:
                description = f"{description} (values: {enum_str})"
            else:
                description = f"Values: {enum_str}"

        reference = None
        if prop_name in references:
            reference = class_name(prop_schema.get("title") or "")

        fields.append({
            "name": prop_name,
            "attr": attribute_name(prop_name),
            "type": reference or resolve_schema_type(root, prop_schema, wire),
            "required": prop_name in required_fields,
            "description": description,
            "read_only": bool(prop_schema.get("readOnly", False)),
            "reference": reference,
            "nested": None if wire else nested_class(root, prop_schema),
        })

    _deduplicate_attributes(fields)
    fields.sort(key=lambda f: not f["required"])
    return fields


def parse_definitions(root: dict[str, Any]) -> list[dict[str, Any]]:
    """Parse object definitions into nested class descriptions."""
    definitions = []
    for name, definition in (root.get("definitions") or {}).items():
        if not isinstance(definition, dict) or not _is_object(definition):
            continue
        definitions.append({
            "class_name": definition_class_name(name),
            "description": strip_html(definition.get("description", "")),
            "fields": parse_fields(root, definition),
        })
    return definitions
