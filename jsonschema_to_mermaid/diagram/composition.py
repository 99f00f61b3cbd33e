"""``allOf`` / ``oneOf`` / ``anyOf`` handling.

``allOf`` members that are inline objects are always merged into the owning
class. Members that are ``$ref``s depend on the configured mode: MERGE copies
the referenced schema's own properties (one level, no recursion into its
``allOf``), INHERIT draws ``Target <|-- Owner`` and COMPOSE draws
``Owner *-- Target``.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from jsonschema_to_mermaid.diagram.model import DiagramContext, Relation
from jsonschema_to_mermaid.diagram.naming import ref_class_name, sanitize
from jsonschema_to_mermaid.diagram.preferences import AllOfMode
from jsonschema_to_mermaid.diagram.property_mapper import map_property
from jsonschema_to_mermaid.errors import InvalidReferenceError
from jsonschema_to_mermaid.schema.models import Property, Schema, SchemaFileInfo
from jsonschema_to_mermaid.schema.ref_resolver import is_http_ref, resolve_pointer, split_ref

logger = logging.getLogger(__name__)

ALTERNATIVE_KEYWORDS = ("oneOf", "anyOf")


def map_properties(ctx: DiagramContext, class_name: str, properties: Dict[str, Property], required: List[str]) -> None:
    # Fields only. Arrays of refs or inline objects at this depth classify as
    # RELATION and are left out of the diagram.
    for name, prop in properties.items():
        map_property(ctx, class_name, name, prop, name in required)


def _as_property(schema: Schema) -> Property:
    return Property(type="object", properties=dict(schema.properties), required=list(schema.required))


def _decode(raw: dict, ref: str) -> Property:
    try:
        return Property.from_raw(raw)
    except ValidationError as exc:
        raise InvalidReferenceError(f"Referenced schema {ref} is not usable: {exc}", ref=ref) from exc


def _find_loaded_file(ctx: DiagramContext, path: Path) -> Optional[SchemaFileInfo]:
    return next((info for info in ctx.schema_files if info.path is not None and info.path == path), None)


def _find_loaded_definition(ctx: DiagramContext, ref: str) -> Optional[Schema]:
    wanted = ref_class_name(ref)
    for info in ctx.schema_files:
        for key, definition in info.schema.definitions.items():
            if sanitize(key) == wanted:
                return definition
    return None


def resolve_member(ctx: DiagramContext, ref: str, document: Optional[SchemaFileInfo]) -> Property:
    """Find the schema an ``allOf`` ``$ref`` member points at.

    Looked up in order: the owning document, definitions of loaded schemas,
    loaded files, then the ``RefResolver``.
    """
    location, fragment = split_ref(ref)
    if not location:
        if document is not None and document.raw:
            try:
                return _decode(resolve_pointer(document.raw, fragment, ref=ref), ref)
            except InvalidReferenceError:
                logger.debug("Pointer %s not found in %s, trying loaded definitions", ref, document.source_id)
        definition = _find_loaded_definition(ctx, ref)
        if definition is not None:
            return _as_property(definition)
        raise InvalidReferenceError(f"Unable to resolve allOf reference {ref}", ref=ref)

    if not is_http_ref(location) and document is not None and document.path is not None:
        loaded = _find_loaded_file(ctx, (document.path.parent / location).resolve())
        if loaded is not None:
            if fragment:
                return _decode(resolve_pointer(loaded.raw, fragment, ref=ref), ref)
            return _as_property(loaded.schema)

    if document is not None and document.path is not None:
        _, raw = ctx.resolver.resolve_from(ref, str(document.path))
    else:
        raw = ctx.resolver.resolve(ref, Path.cwd())
    return _decode(raw, ref)


def handle_all_of(
    ctx: DiagramContext,
    class_name: str,
    prop: Property,
    document: Optional[SchemaFileInfo] = None,
) -> bool:
    """Apply ``prop.allOf`` to ``class_name``. Returns False when there is nothing to do."""
    if not prop.all_of:
        return False
    mode = ctx.preferences.all_of_mode
    for member in prop.all_of:
        if member.ref is not None:
            if mode == AllOfMode.MERGE:
                resolved = resolve_member(ctx, member.ref, document)
                map_properties(ctx, class_name, resolved.properties or {}, resolved.required)
            elif mode == AllOfMode.INHERIT:
                ctx.add_relation(Relation(ref_class_name(member.ref), class_name, "<|--"))
            else:
                ctx.add_relation(Relation(class_name, ref_class_name(member.ref), "*--"))
        elif member.properties:
            map_properties(ctx, class_name, member.properties, member.required)
    return True


def handle_alternatives(ctx: DiagramContext, class_name: str, name: str, prop: Property) -> bool:
    """Draw ``oneOf`` (or, failing that, ``anyOf``) members as one-to-one relations."""
    for keyword, members in zip(ALTERNATIVE_KEYWORDS, (prop.one_of, prop.any_of)):
        if not members:
            continue
        label = f"{name} ({keyword})"
        for member in members:
            if member.ref is not None:
                ctx.add_relation(Relation(class_name, ref_class_name(member.ref), "-->", label, "1", "1"))
            elif member.type == "object":
                target = sanitize(name) + "-option"
                ctx.ensure_class(target)
                map_properties(ctx, target, member.properties or {}, member.required)
                ctx.add_relation(Relation(class_name, target, "-->", label, "1", "1"))
        return True
    return False
