import json
from unittest.mock import Mock

import pytest
import requests

from jsonschema_to_mermaid.errors import InheritanceCycleError, InvalidReferenceError
from jsonschema_to_mermaid.schema.inheritance import merge_schemas
from jsonschema_to_mermaid.schema.loader import load_schemas
from jsonschema_to_mermaid.schema.models import Schema
from jsonschema_to_mermaid.schema.ref_resolver import RefResolver


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _base(tmp_path):
    return _write(
        tmp_path / "base.json",
        {
            "title": "Base",
            "required": ["id"],
            "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
            "definitions": {"Tag": {"properties": {"label": {"type": "string"}}}},
        },
    )


@pytest.mark.parametrize("extends", ["base.json", {"$ref": "base.json"}])
def test_extends_merges_base_into_derived(tmp_path, extends):
    _base(tmp_path)
    child = _write(
        tmp_path / "child.json",
        {
            "title": "Child",
            "extends": extends,
            "required": ["email", "id"],
            "properties": {"email": {"type": "string"}, "name": {"type": "integer"}},
        },
    )

    schema = load_schemas([child])[0].schema

    assert list(schema.properties) == ["id", "name", "email"]
    assert schema.properties["name"].type == "integer"
    assert schema.required == ["id", "email"]
    assert schema.inherited_property_names == ["id"]
    assert list(schema.definitions) == ["Tag"]
    assert schema.extends.ref == "base.json"


def test_three_level_chain(tmp_path):
    _write(tmp_path / "c.json", {"title": "C", "properties": {"c1": {"type": "string"}}})
    _write(tmp_path / "b.json", {"title": "B", "extends": "c.json", "properties": {"b1": {"type": "string"}}})
    a = _write(tmp_path / "a.json", {"title": "A", "extends": "b.json", "properties": {"a1": {"type": "string"}}})

    schema = load_schemas([a])[0].schema

    assert list(schema.properties) == ["c1", "b1", "a1"]
    assert schema.inherited_property_names == ["b1", "c1"]
    assert not set(schema.inherited_property_names) & {"a1"}


def test_cycle_is_detected(tmp_path):
    a = _write(tmp_path / "a.json", {"title": "A", "extends": "b.json"})
    b = _write(tmp_path / "b.json", {"title": "B", "extends": "a.json"})

    with pytest.raises(InheritanceCycleError) as excinfo:
        load_schemas([a])

    a_id, b_id = str(a.resolve()), str(b.resolve())
    assert excinfo.value.chain == [a_id, b_id, a_id]
    assert str(excinfo.value) == (
        f"Inheritance cycle detected while resolving extends. Chain: {a_id} -> {b_id} -> {a_id}"
    )


def test_self_extension_is_a_cycle(tmp_path):
    a = _write(tmp_path / "a.json", {"title": "A", "extends": "a.json"})
    with pytest.raises(InheritanceCycleError):
        load_schemas([a])


def test_missing_base(tmp_path):
    child = _write(tmp_path / "child.json", {"title": "Child", "extends": "missing.json"})
    with pytest.raises(InvalidReferenceError):
        load_schemas([child])


def test_remote_base(monkeypatch, tmp_path):
    mock_response = Mock()
    mock_response.status_code = 200
    mock_response.text = json.dumps({"title": "Remote", "properties": {"id": {"type": "string"}}})
    mock_response.headers = {"Content-Type": "application/json"}

    def mock_get(*args, **kwargs):
        return mock_response

    monkeypatch.setattr(requests, "get", mock_get)
    child = _write(
        tmp_path / "child.json",
        {"title": "Child", "extends": "https://example.com/schemas/base.json", "properties": {"x": {"type": "string"}}},
    )

    schema = load_schemas([child], resolver=RefResolver())[0].schema

    assert list(schema.properties) == ["id", "x"]
    assert schema.inherited_property_names == ["id"]


def test_merge_required_is_a_superset_of_both():
    base = Schema.from_raw({"required": ["a", "b"], "properties": {"a": {}, "b": {}}})
    derived = Schema.from_raw({"required": ["c", "a"], "properties": {"c": {}}})
    merged = merge_schemas(base, derived)
    assert merged.required == ["a", "b", "c"]
    assert set(merged.required) >= set(base.required) | set(derived.required)
    assert merged.inherited_property_names == ["a", "b"]
