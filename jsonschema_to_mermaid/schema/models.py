"""Typed view of the JSON-Schema subset the generator understands.

The raw document (a plain ``dict`` from JSON or YAML) is decoded directly into
these models, so every nesting level keeps its own ``required`` list.
Keywords outside the recognized subset are ignored.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


def _literal_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _string_list(value: Any) -> List[str]:
    # draft-03 style `required: true` and other non-list values carry no names
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def concrete_type(value: Any) -> Any:
    """First non-null name of a ``type`` union, or the value itself."""
    if isinstance(value, list):
        concrete = [v for v in value if isinstance(v, str) and v != "null"]
        return concrete[0] if concrete else None
    return value


def _schema_like(value: Any) -> Any:
    # boolean sub-schemas (`true` / `false`) and empty YAML nodes have no keywords
    if value is None or isinstance(value, bool):
        return {}
    return value


class Property(BaseModel):
    type: Optional[str] = None
    format: Optional[str] = None
    items: Optional[Property] = None
    ref: Optional[str] = Field(default=None, alias="$ref")
    properties: Optional[Dict[str, Property]] = None
    enum: List[str] = []
    additional_properties: Union[bool, Dict[str, Any], None] = Field(default=None, alias="additionalProperties")
    pattern_properties: Optional[Dict[str, Property]] = Field(default=None, alias="patternProperties")
    all_of: List[Property] = Field(default_factory=list, alias="allOf")
    one_of: List[Property] = Field(default_factory=list, alias="oneOf")
    any_of: List[Property] = Field(default_factory=list, alias="anyOf")
    required: List[str] = []

    model_config = {
        "populate_by_name": True,
    }

    @model_validator(mode="before")
    @classmethod
    def _coerce_boolean_schema(cls, data: Any) -> Any:
        return _schema_like(data)

    @field_validator("type", mode="before")
    @classmethod
    def _first_concrete_type(cls, value: Any) -> Any:
        return concrete_type(value)

    @field_validator("items", mode="before")
    @classmethod
    def _first_tuple_item(cls, value: Any) -> Any:
        if isinstance(value, list):
            return value[0] if value else None
        return value

    @field_validator("enum", mode="before")
    @classmethod
    def _stringify_enum(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [_literal_text(v) for v in value]

    @field_validator("required", mode="before")
    @classmethod
    def _required_names(cls, value: Any) -> List[str]:
        return _string_list(value)

    @property
    def is_map(self) -> bool:
        """True when ``additionalProperties`` or ``patternProperties`` is present, even as ``false``."""
        return self.additional_properties is not None or self.pattern_properties is not None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "Property":
        return cls.model_validate(raw)


class Extends(BaseModel):
    """Single-parent inheritance target, written as ``"base.json"`` or ``{"$ref": "base.json"}``."""

    ref: str


class Schema(BaseModel):
    id: Optional[str] = Field(default=None, alias="$id")
    schema_uri: Optional[str] = Field(default=None, alias="$schema")
    title: Optional[str] = None
    type: Optional[str] = None
    properties: Dict[str, Property] = {}
    definitions: Dict[str, Schema] = {}
    required: List[str] = []
    extends: Optional[Extends] = None
    all_of: List[Property] = Field(default_factory=list, alias="allOf")
    inherited_property_names: List[str] = []

    model_config = {
        "populate_by_name": True,
    }

    @model_validator(mode="before")
    @classmethod
    def _normalize_keywords(cls, data: Any) -> Any:
        data = _schema_like(data)
        if isinstance(data, dict) and "definitions" not in data and "$defs" in data:
            data = {**data, "definitions": data["$defs"]}
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _first_concrete_type(cls, value: Any) -> Any:
        return concrete_type(value)

    @field_validator("required", mode="before")
    @classmethod
    def _required_names(cls, value: Any) -> List[str]:
        return _string_list(value)

    @field_validator("properties", "definitions", mode="before")
    @classmethod
    def _absent_map(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("extends", mode="before")
    @classmethod
    def _parse_extends(cls, value: Any) -> Any:
        if value is None or isinstance(value, Extends):
            return value
        if isinstance(value, str):
            return {"ref": value}
        if isinstance(value, dict):
            ref = value.get("$ref")
            if not isinstance(ref, str):
                raise ValueError("Missing $ref in extends object")
            return {"ref": ref}
        raise ValueError(f"Invalid extends value: {value!r}")

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "Schema":
        return cls.model_validate(raw)


Property.model_rebuild()
Schema.model_rebuild()


@dataclass
class SchemaFileInfo:
    """One input document: its file name, resolved schema and provenance."""

    filename: Optional[str]
    schema: Schema
    path: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def source_id(self) -> str:
        if self.path is not None:
            return str(self.path)
        if self.filename:
            return self.filename
        return self.schema.title or "<anonymous>"
