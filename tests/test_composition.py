import json

import pytest

from jsonschema_to_mermaid.diagram.builder import DiagramBuilder
from jsonschema_to_mermaid.diagram.preferences import AllOfMode, Preferences
from jsonschema_to_mermaid.errors import InvalidReferenceError
from jsonschema_to_mermaid.schema.loader import load_schemas
from jsonschema_to_mermaid.schema.models import Schema, SchemaFileInfo


def _info(data, filename="schema.json"):
    return SchemaFileInfo(filename=filename, schema=Schema.from_raw(data), raw=data)


def _relations(ctx):
    return [r.to_mermaid() for r in ctx.relations]


EMPLOYEE = {
    "title": "Employee",
    "definitions": {
        "Person": {"type": "object", "required": ["name"], "properties": {"name": {"type": "string"}}},
    },
    "allOf": [
        {"$ref": "#/definitions/Person"},
        {"type": "object", "properties": {"salary": {"type": "number"}}},
    ],
}


def test_all_of_merge_copies_referenced_properties():
    ctx = DiagramBuilder([_info(EMPLOYEE)]).build()
    assert ctx.classes["Employee"].fields == ["+String name", "Number salary [0..1]"]
    assert _relations(ctx) == []


def test_all_of_inherit_draws_inheritance():
    ctx = DiagramBuilder([_info(EMPLOYEE)], Preferences(all_of_mode=AllOfMode.INHERIT)).build()
    assert ctx.classes["Employee"].fields == ["Number salary [0..1]"]
    assert _relations(ctx) == ["Person <|-- Employee"]


def test_all_of_compose_draws_composition():
    ctx = DiagramBuilder([_info(EMPLOYEE)], Preferences(all_of_mode=AllOfMode.COMPOSE)).build()
    assert ctx.classes["Employee"].fields == ["Number salary [0..1]"]
    assert _relations(ctx) == ["Employee *-- Person"]


def test_property_level_all_of_merges_into_owner():
    data = {
        "title": "Contract",
        "definitions": {"Party": {"required": ["name"], "properties": {"name": {"type": "string"}}}},
        "properties": {"signer": {"allOf": [{"$ref": "#/definitions/Party"}]}},
    }
    ctx = DiagramBuilder([_info(data)]).build()
    assert ctx.classes["Contract"].fields == ["+String name"]


def test_all_of_merge_from_loaded_definition_in_other_file():
    shared = _info({"title": "Shared", "definitions": {"Audit": {"properties": {"created": {"type": "string"}}}}}, "shared.json")
    doc = _info({"title": "Doc", "allOf": [{"$ref": "#/definitions/Audit"}]}, "doc.json")
    ctx = DiagramBuilder([shared, doc]).build()
    assert ctx.classes["Doc"].fields == ["String created [0..1]"]


def test_all_of_merge_from_external_file(tmp_path):
    (tmp_path / "person.json").write_text(
        json.dumps({"title": "Person", "required": ["name"], "properties": {"name": {"type": "string"}}}), encoding="utf-8"
    )
    (tmp_path / "employee.json").write_text(
        json.dumps({"title": "Employee", "allOf": [{"$ref": "person.json"}]}), encoding="utf-8"
    )

    only_employee = DiagramBuilder(load_schemas([tmp_path / "employee.json"])).build()
    both = DiagramBuilder(load_schemas([tmp_path])).build()

    assert only_employee.classes["Employee"].fields == ["+String name"]
    assert both.classes["Employee"].fields == ["+String name"]


def test_all_of_merge_with_unknown_ref():
    data = {"title": "Broken", "allOf": [{"$ref": "#/definitions/Missing"}]}
    with pytest.raises(InvalidReferenceError):
        DiagramBuilder([_info(data)]).build()


def test_one_of_members():
    data = {
        "title": "Order",
        "properties": {
            "payment": {
                "oneOf": [
                    {"$ref": "#/definitions/Card"},
                    {"type": "object", "properties": {"iban": {"type": "string"}}},
                ]
            }
        },
    }
    ctx = DiagramBuilder([_info(data)]).build()
    assert ctx.classes["Payment-option"].fields == ["String iban [0..1]"]
    assert ctx.classes["Order"].fields == []
    assert _relations(ctx) == [
        'Order "1" --> "1" Card : payment (oneOf)',
        'Order "1" --> "1" Payment-option : payment (oneOf)',
    ]


def test_one_of_takes_precedence_over_any_of():
    data = {
        "title": "Order",
        "properties": {
            "contact": {
                "oneOf": [{"$ref": "#/definitions/Email"}],
                "anyOf": [{"$ref": "#/definitions/Phone"}],
            },
            "backup": {"anyOf": [{"$ref": "#/definitions/Phone"}]},
        },
    }
    ctx = DiagramBuilder([_info(data)]).build()
    assert _relations(ctx) == [
        'Order "1" --> "1" Email : contact (oneOf)',
        'Order "1" --> "1" Phone : backup (anyOf)',
    ]


def test_definition_level_all_of():
    data = {
        "title": "Root",
        "definitions": {
            "Base": {"properties": {"id": {"type": "integer"}}},
            "Derived": {"allOf": [{"$ref": "#/definitions/Base"}], "properties": {"extra": {"type": "string"}}},
        },
    }
    ctx = DiagramBuilder([_info(data)]).build()
    assert ctx.classes["Derived"].fields == ["Integer id [0..1]", "String extra [0..1]"]
