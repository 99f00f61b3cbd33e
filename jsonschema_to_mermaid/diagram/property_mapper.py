"""Render a single schema property as a class field.

``classify`` is the one place that decides what a property is; the order
of its checks matters (an enum with a ``$ref`` is still an enum, an array
is never treated as a map, and so on).
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from jsonschema_to_mermaid.diagram.model import DiagramContext
from jsonschema_to_mermaid.diagram.naming import (
    capitalize,
    item_field_name,
    primitive_type_name,
    ref_class_name,
    sanitize,
)
from jsonschema_to_mermaid.diagram.preferences import EnumStyle, Preferences, RequiredFieldStyle
from jsonschema_to_mermaid.schema.models import Property, concrete_type


class PropertyKind(str, Enum):
    ENUM = "enum"
    REF = "ref"
    RELATION = "relation"
    ARRAY = "array"
    OBJECT = "object"
    MAP = "map"
    PRIMITIVE = "primitive"


def has_relation_items(prop: Property) -> bool:
    items = prop.items
    return items is not None and (items.ref is not None or items.type == "object")


def classify(prop: Property, preferences: Preferences, suppress_inline_enum: bool = False) -> PropertyKind:
    if prop.enum and not (suppress_inline_enum and preferences.enum_style == EnumStyle.INLINE):
        return PropertyKind.ENUM
    if prop.ref is not None:
        return PropertyKind.REF
    if prop.type == "array":
        if preferences.arrays_as_relation and has_relation_items(prop):
            return PropertyKind.RELATION
        return PropertyKind.ARRAY
    if prop.type == "object":
        return PropertyKind.OBJECT
    if prop.is_map:
        return PropertyKind.MAP
    return PropertyKind.PRIMITIVE


def format_field(type_name: str, name: str, required: bool, style: RequiredFieldStyle) -> str:
    if required:
        return f"+{type_name} {name}" if style == RequiredFieldStyle.PLUS else f"{type_name} {name}"
    if style == RequiredFieldStyle.SUFFIX_Q:
        return f"{type_name} {name}?"
    return f"{type_name} {name} [0..1]"


def scalar_type_name(prop: Optional[Property]) -> str:
    if prop is None:
        return "Object"
    return primitive_type_name(prop.type or prop.format)


def map_value_type_name(prop: Property) -> str:
    additional = prop.additional_properties
    if isinstance(additional, dict):
        if isinstance(additional.get("$ref"), str):
            return ref_class_name(additional["$ref"])
        value_type = concrete_type(additional.get("type"))
        return primitive_type_name(value_type if isinstance(value_type, str) else None)
    if prop.pattern_properties:
        first = next(iter(prop.pattern_properties.values()))
        return scalar_type_name(first)
    return "Object"


def map_type_name(prop: Property) -> str:
    return f"Map~String, {map_value_type_name(prop)}~"


def enum_class_name(owner: str, name: str) -> str:
    return sanitize(owner) + capitalize(sanitize(name)) + "Enum"


def map_property(
    ctx: DiagramContext,
    class_name: str,
    name: str,
    prop: Property,
    required: bool,
    suppress_inline_enum: bool = False,
) -> PropertyKind:
    """Add the field for ``prop`` to ``class_name`` and return how it was classified.

    ``RELATION`` adds nothing: the caller draws the relationship instead.
    """
    prefs = ctx.preferences
    style = prefs.required_field_style
    kind = classify(prop, prefs, suppress_inline_enum)

    if kind == PropertyKind.ENUM:
        if prefs.enum_style == EnumStyle.INLINE:
            ctx.add_field(class_name, format_field("{" + "|".join(prop.enum) + "}", name, required, style))
        elif prefs.enum_style == EnumStyle.NOTE:
            ctx.add_field(class_name, format_field(scalar_type_name(prop), name, required, style))
            ctx.add_enum_note(class_name, f"{name}: {', '.join(prop.enum)}")
        else:
            enum_name = enum_class_name(class_name, name)
            ctx.add_field(class_name, format_field(enum_name, name, required, style))
            ctx.add_enum_class(enum_name, prop.enum)
    elif kind == PropertyKind.REF:
        ctx.add_field(class_name, format_field(ref_class_name(prop.ref), name, required, style))
    elif kind == PropertyKind.ARRAY:
        field_name = item_field_name(name, prefs.use_english_singularizer)
        ctx.add_field(class_name, format_field(f"{scalar_type_name(prop.items)}[]", field_name, required, style))
    elif kind == PropertyKind.OBJECT:
        ctx.add_field(class_name, format_field(sanitize(name), name, required, style))
    elif kind == PropertyKind.MAP:
        add_map_field(ctx, class_name, name, prop, required)
    elif kind == PropertyKind.PRIMITIVE:
        ctx.add_field(class_name, format_field(scalar_type_name(prop), name, required, style))
    return kind


def add_map_field(ctx: DiagramContext, class_name: str, name: str, prop: Property, required: bool) -> None:
    ctx.add_field(class_name, format_field(map_type_name(prop), name, required, ctx.preferences.required_field_style))
