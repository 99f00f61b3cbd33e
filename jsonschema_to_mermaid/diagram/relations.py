"""Relationship logic for top-level schema properties, definitions and ``extends``."""
from __future__ import annotations

from typing import Optional

from jsonschema_to_mermaid.diagram.composition import handle_all_of, handle_alternatives, map_properties
from jsonschema_to_mermaid.diagram.model import DiagramContext, Relation
from jsonschema_to_mermaid.diagram.naming import item_class_name, ref_class_name, sanitize
from jsonschema_to_mermaid.diagram.property_mapper import add_map_field, map_property
from jsonschema_to_mermaid.schema.models import Property, Schema, SchemaFileInfo
from jsonschema_to_mermaid.schema.ref_resolver import is_http_ref, split_ref


def _one_or_optional(required: bool) -> str:
    return "1" if required else "0..1"


def add_array_item_class(ctx: DiagramContext, class_name: str, name: str, items: Property) -> None:
    """Synthesize a class for inline object items and link it one-to-many."""
    target = item_class_name(class_name, name, ctx.preferences.use_english_singularizer)
    ctx.ensure_class(target)
    map_properties(ctx, target, items.properties or {}, items.required)
    ctx.add_relation(Relation(class_name, target, "-->", name, "1", "*"))


def add_object_class(ctx: DiagramContext, class_name: str, name: str, prop: Property, required: bool) -> None:
    target = sanitize(name)
    ctx.ensure_class(target)
    map_properties(ctx, target, prop.properties or {}, prop.required)
    ctx.add_relation(Relation(class_name, target, "-->", name, _one_or_optional(required), "1"))


def process_top_level_property(
    ctx: DiagramContext,
    info: SchemaFileInfo,
    class_name: str,
    name: str,
    prop: Property,
) -> None:
    schema = info.schema
    if name in schema.inherited_property_names and not ctx.preferences.show_inherited_fields:
        return
    required = name in schema.required

    if handle_all_of(ctx, class_name, prop, info):
        return
    if handle_alternatives(ctx, class_name, name, prop):
        return
    if prop.is_map:
        add_map_field(ctx, class_name, name, prop, required)
        return

    if prop.ref is not None:
        ctx.add_relation(Relation(class_name, ref_class_name(prop.ref), "-->", name, _one_or_optional(required), "1"))
    elif prop.type == "array" and ctx.preferences.arrays_as_relation:
        items = prop.items
        if items is not None and items.ref is not None:
            ctx.add_relation(Relation(class_name, ref_class_name(items.ref), "-->", name, "1", "*"))
        elif items is not None and items.type == "object":
            add_array_item_class(ctx, class_name, name, items)
        else:
            map_property(ctx, class_name, name, prop, required)
    elif prop.type == "object":
        add_object_class(ctx, class_name, name, prop, required)
    else:
        map_property(ctx, class_name, name, prop, required)


def process_definition_property(
    ctx: DiagramContext,
    info: SchemaFileInfo,
    class_name: str,
    name: str,
    prop: Property,
    definition: Schema,
) -> None:
    """Definitions keep ``$ref`` properties as fields and add an aggregation arrow."""
    required = name in definition.required

    if handle_all_of(ctx, class_name, prop, info):
        return
    if handle_alternatives(ctx, class_name, name, prop):
        return

    map_property(ctx, class_name, name, prop, required)
    if prop.ref is not None:
        ctx.add_relation(Relation(class_name, ref_class_name(prop.ref), "o--", name))
    elif prop.type == "array" and ctx.preferences.arrays_as_relation and prop.items is not None:
        if prop.items.ref is not None:
            ctx.add_relation(Relation(class_name, ref_class_name(prop.items.ref), "-->", name, "1", "*"))
        elif prop.items.type == "object":
            add_array_item_class(ctx, class_name, name, prop.items)


def _matches_by_name(candidate: SchemaFileInfo, ref: str) -> bool:
    stem = candidate.filename.split(".", 1)[0] if candidate.filename else ""
    if stem and stem in ref:
        return True
    title = candidate.schema.title
    return bool(title) and title in ref


def find_parent_schema(ctx: DiagramContext, info: SchemaFileInfo, ref: str) -> Optional[SchemaFileInfo]:
    """Find the loaded file an ``extends`` ref points at.

    An exact path match wins; otherwise fall back to a file whose stem or
    title occurs in the ref string.
    """
    location, _ = split_ref(ref)
    if location and not is_http_ref(location) and info.path is not None:
        target = (info.path.parent / location).resolve()
        for candidate in ctx.schema_files:
            if candidate.path is not None and candidate.path == target:
                return candidate
    for candidate in ctx.schema_files:
        if candidate is not info and _matches_by_name(candidate, ref):
            return candidate
    return None


def add_inheritance(ctx: DiagramContext, info: SchemaFileInfo, class_name: str) -> None:
    extends = info.schema.extends
    if extends is None:
        return
    parent = find_parent_schema(ctx, info, extends.ref)
    parent_name = ctx.names.class_name(parent) if parent is not None else ref_class_name(extends.ref)
    ctx.add_relation(Relation(parent_name, class_name, "<|--"))
