import pytest

from jsonschema_to_mermaid.diagram.model import DiagramContext
from jsonschema_to_mermaid.diagram.preferences import EnumStyle, Preferences, RequiredFieldStyle
from jsonschema_to_mermaid.diagram.property_mapper import PropertyKind, classify, format_field, map_property
from jsonschema_to_mermaid.schema.models import Property


def _fields(raw, name, required=False, owner="Owner", **prefs):
    ctx = DiagramContext(preferences=Preferences(**prefs))
    ctx.ensure_class(owner)
    map_property(ctx, owner, name, Property.from_raw(raw), required)
    return ctx.classes[owner].fields, ctx


@pytest.mark.parametrize(
    "style, required, expected",
    [
        (RequiredFieldStyle.PLUS, True, "+String name"),
        (RequiredFieldStyle.PLUS, False, "String name [0..1]"),
        (RequiredFieldStyle.NONE, True, "String name"),
        (RequiredFieldStyle.NONE, False, "String name [0..1]"),
        (RequiredFieldStyle.SUFFIX_Q, True, "String name"),
        (RequiredFieldStyle.SUFFIX_Q, False, "String name?"),
    ],
)
def test_required_styles(style, required, expected):
    assert format_field("String", "name", required, style) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"type": "integer"}, "Integer count [0..1]"),
        ({"type": "number"}, "Number count [0..1]"),
        ({"type": "boolean"}, "Boolean count [0..1]"),
        ({"type": ["string", "null"]}, "String count [0..1]"),
        ({}, "Object count [0..1]"),
        ({"format": "uuid"}, "Uuid count [0..1]"),
    ],
)
def test_primitive_fields(raw, expected):
    fields, _ = _fields(raw, "count")
    assert fields == [expected]


def test_string_array_uses_singular_name():
    fields, _ = _fields({"type": "array", "items": {"type": "string"}}, "tags", required=True, arrays_as_relation=False)
    assert fields == ["+String[] Tag"]


def test_string_array_without_singularizer():
    fields, _ = _fields(
        {"type": "array", "items": {"type": "string"}}, "tags", arrays_as_relation=False, use_english_singularizer=False
    )
    assert fields == ["String[] Tags [0..1]"]


def test_ref_array_inline_is_typed_by_item_type():
    fields, _ = _fields(
        {"type": "array", "items": {"$ref": "#/definitions/Address"}}, "addresses", arrays_as_relation=False
    )
    assert fields == ["Object[] Address [0..1]"]


def test_object_array_is_left_to_relations():
    prop = Property.from_raw({"type": "array", "items": {"type": "object"}})
    assert classify(prop, Preferences()) == PropertyKind.RELATION
    fields, _ = _fields({"type": "array", "items": {"type": "object"}}, "items")
    assert fields == []


def test_primitive_array_stays_a_field_in_relation_mode():
    fields, _ = _fields({"type": "array", "items": {"type": "integer"}}, "ratings")
    assert fields == ["Integer[] Rating [0..1]"]


def test_ref_and_object_fields():
    ref_fields, _ = _fields({"$ref": "#/definitions/Address"}, "shipment", required=True)
    obj_fields, _ = _fields({"type": "object", "properties": {"x": {"type": "string"}}}, "home_address")
    assert ref_fields == ["+Address shipment"]
    assert obj_fields == ["HomeAddress home_address [0..1]"]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"additionalProperties": {"type": "integer"}}, "Map~String, Integer~ counts [0..1]"),
        ({"additionalProperties": True}, "Map~String, Object~ counts [0..1]"),
        ({"additionalProperties": {"$ref": "#/definitions/Counter"}}, "Map~String, Counter~ counts [0..1]"),
        ({"patternProperties": {"^x-": {"type": "string"}}}, "Map~String, String~ counts [0..1]"),
        ({"type": "string", "additionalProperties": False}, "Map~String, Object~ counts [0..1]"),
        ({"additionalProperties": {"type": ["string", "null"]}}, "Map~String, String~ counts [0..1]"),
    ],
)
def test_map_fields(raw, expected):
    fields, _ = _fields(raw, "counts")
    assert fields == [expected]


def test_enum_inline():
    fields, _ = _fields({"type": "string", "enum": ["A", "B", "C"]}, "status")
    assert fields == ["{A|B|C} status [0..1]"]


def test_enum_note_keeps_base_type():
    fields, ctx = _fields({"type": "string", "enum": ["A", "B", "C"]}, "status", owner="Ticket", enum_style=EnumStyle.NOTE)
    assert fields == ["String status [0..1]"]
    assert [(n.class_name, n.text) for n in ctx.enum_notes] == [("Ticket", "status: A, B, C")]


def test_enum_class():
    fields, ctx = _fields(
        {"type": "string", "enum": ["A", "B", "C"]}, "status", required=True, owner="EnumExample", enum_style=EnumStyle.CLASS
    )
    assert fields == ["+EnumExampleStatusEnum status"]
    assert ctx.enum_classes["EnumExampleStatusEnum"].values == ["A", "B", "C"]


def test_enum_wins_over_ref():
    prop = Property.from_raw({"$ref": "#/definitions/Status", "enum": ["A"]})
    assert classify(prop, Preferences()) == PropertyKind.ENUM


def test_suppressed_inline_enum_falls_through():
    prop = Property.from_raw({"type": "string", "enum": ["A"]})
    assert classify(prop, Preferences(), suppress_inline_enum=True) == PropertyKind.PRIMITIVE
    assert classify(prop, Preferences(enum_style=EnumStyle.NOTE), suppress_inline_enum=True) == PropertyKind.ENUM
