"""Tests for the schema normalizer."""

from __future__ import annotations

import copy

from sdrgen.normalizer import preprocess_schemas, remove_trivial_titles


def _nested_schema() -> dict:
    return {
        "title": "Order",
        "additionalProperties": True,
        "properties": {
            "number": {"title": "Number", "type": "string"},
            "customer": {"title": "Customer", "$ref": "#/definitions/customer"},
            "shipping": {
                "title": "Shipping",
                "type": "object",
                "properties": {
                    "carrier": {"title": "Carrier", "type": "string"},
                    "box": {"title": "Box", "$ref": "#/definitions/box"},
                },
            },
            "lines": {
                "title": "Lines",
                "type": "array",
                "items": {"title": "Line", "type": "object"},
            },
        },
        "definitions": {
            "customer": {
                "title": "Customer",
                "type": "object",
                "properties": {"name": {"title": "Name", "type": "string"}},
            },
        },
    }


class TestSuppressAdditionalProperties:
    """Test forcing additionalProperties off."""

    def test_sets_false_on_every_schema(self):
        schemas = [{"title": "A"}, {"title": "B", "additionalProperties": True}]
        preprocess_schemas(schemas, suppress_additional_properties=True)
        assert all(s["additionalProperties"] is False for s in schemas)

    def test_disabled_leaves_schema_alone(self):
        schema = _nested_schema()
        original = copy.deepcopy(schema)
        preprocess_schemas([schema])
        assert schema == original


class TestStripTrivialTitles:
    """Test removal of titles from properties without $ref."""

    def test_scalar_titles_removed(self):
        schema = _nested_schema()
        preprocess_schemas([schema], strip_trivial_titles=True)
        assert "title" not in schema["properties"]["number"]
        assert "title" not in schema["properties"]["shipping"]

    def test_ref_titles_kept(self):
        schema = _nested_schema()
        preprocess_schemas([schema], strip_trivial_titles=True)
        assert schema["properties"]["customer"]["title"] == "Customer"
        assert schema["properties"]["shipping"]["properties"]["box"]["title"] == "Box"

    def test_recurses_into_nested_properties(self):
        schema = _nested_schema()
        preprocess_schemas([schema], strip_trivial_titles=True)
        assert "title" not in schema["properties"]["shipping"]["properties"]["carrier"]

    def test_does_not_descend_into_array_items(self):
        schema = _nested_schema()
        preprocess_schemas([schema], strip_trivial_titles=True)
        assert schema["properties"]["lines"]["items"]["title"] == "Line"

    def test_definitions_one_level(self):
        schema = _nested_schema()
        preprocess_schemas([schema], strip_trivial_titles=True)
        customer = schema["definitions"]["customer"]
        assert "title" not in customer
        assert "title" not in customer["properties"]["name"]

    def test_top_level_title_kept(self):
        schema = _nested_schema()
        preprocess_schemas([schema], strip_trivial_titles=True)
        assert schema["title"] == "Order"

    def test_missing_maps_are_skipped(self):
        schema = {"title": "Empty"}
        preprocess_schemas([schema], strip_trivial_titles=True)
        assert schema == {"title": "Empty"}

    def test_remove_trivial_titles_directly(self):
        properties = {"a": {"title": "A", "type": "string"}, "b": {"title": "B", "$ref": "#/x"}}
        remove_trivial_titles(properties)
        assert properties == {"a": {"type": "string"}, "b": {"title": "B", "$ref": "#/x"}}


class TestIdempotence:
    """Applying the normalizer twice equals applying it once."""

    def test_all_flags(self):
        once = _nested_schema()
        twice = _nested_schema()
        flags = {"suppress_additional_properties": True, "strip_trivial_titles": True}
        preprocess_schemas([once], **flags)
        preprocess_schemas([twice], **flags)
        preprocess_schemas([twice], **flags)
        assert once == twice

    def test_order_independent(self):
        first, second = _nested_schema(), {"title": "Other", "properties": {"x": {"title": "X"}}}
        a = [copy.deepcopy(first), copy.deepcopy(second)]
        b = [copy.deepcopy(second), copy.deepcopy(first)]
        preprocess_schemas(a, strip_trivial_titles=True)
        preprocess_schemas(b, strip_trivial_titles=True)
        assert a == list(reversed(b))
