"""Build Mermaid class-diagram text from loaded schemas."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from jsonschema_to_mermaid.diagram.composition import handle_all_of
from jsonschema_to_mermaid.diagram.model import DiagramContext
from jsonschema_to_mermaid.diagram.naming import NameResolver, sanitize
from jsonschema_to_mermaid.diagram.preferences import EnumStyle, Preferences
from jsonschema_to_mermaid.diagram.relations import (
    add_inheritance,
    process_definition_property,
    process_top_level_property,
)
from jsonschema_to_mermaid.schema.models import Property, SchemaFileInfo
from jsonschema_to_mermaid.schema.ref_resolver import RefResolver, ref_resolver

logger = logging.getLogger(__name__)


class DiagramBuilder:
    """Turns a list of loaded schema files into a populated ``DiagramContext``.

    Definitions are processed before top-level schemas, and every top-level
    schema gets a class even when it has no properties.
    """

    def __init__(
        self,
        schema_files: Sequence[SchemaFileInfo],
        preferences: Optional[Preferences] = None,
        resolver: Optional[RefResolver] = None,
    ) -> None:
        self.schema_files = list(schema_files)
        self.preferences = preferences or Preferences()
        self.resolver = resolver or ref_resolver
        self.names = NameResolver()

    def build(self) -> DiagramContext:
        self.names.reset()
        ctx = DiagramContext(
            preferences=self.preferences,
            schema_files=self.schema_files,
            names=self.names,
            resolver=self.resolver,
        )
        # claim top-level names in input order before any relation can ask for one
        for info in self.schema_files:
            ctx.names.class_name(info)
        for info in self.schema_files:
            self._process_definitions(ctx, info)
        for info in self.schema_files:
            self._process_top_level(ctx, info)
        logger.debug("Built %d classes and %d relations", len(ctx.classes), len(ctx.relations))
        return ctx

    def _process_definitions(self, ctx: DiagramContext, info: SchemaFileInfo) -> None:
        for key, definition in info.schema.definitions.items():
            class_name = sanitize(key)
            ctx.ensure_class(class_name)
            if definition.all_of:
                handle_all_of(ctx, class_name, Property(all_of=definition.all_of), info)
            for name, prop in definition.properties.items():
                process_definition_property(ctx, info, class_name, name, prop, definition)

    def _process_top_level(self, ctx: DiagramContext, info: SchemaFileInfo) -> None:
        class_name = ctx.names.class_name(info)
        ctx.ensure_class(class_name)
        add_inheritance(ctx, info, class_name)
        if info.schema.all_of:
            handle_all_of(ctx, class_name, Property(all_of=info.schema.all_of), info)
        for name, prop in info.schema.properties.items():
            process_top_level_property(ctx, info, class_name, name, prop)


def render(ctx: DiagramContext, no_class_diagram_header: bool = False) -> str:
    parts: List[str] = []
    if not no_class_diagram_header:
        parts.append("classDiagram")
    for cls in ctx.classes.values():
        parts.append(f"  class {cls.name} {{")
        parts.extend(f"    {f}" for f in cls.fields)
        parts.append("  }")
    if ctx.preferences.enum_style == EnumStyle.NOTE:
        for note in ctx.enum_notes:
            parts.append(f'  note for {note.class_name} "{note.text}"')
    elif ctx.preferences.enum_style == EnumStyle.CLASS:
        for enum in ctx.enum_classes.values():
            parts.append(f"  class {enum.name} {{")
            parts.extend(f"    {value}" for value in enum.values)
            parts.append("  }")
            parts.append(f"  <<enumeration>> {enum.name}")
    if ctx.relations:
        parts.append("")
        parts.extend(f"  {r.to_mermaid()}" for r in ctx.relations)
    return "\n".join(parts).rstrip() + "\n"


def generate(
    schema_files: Sequence[SchemaFileInfo],
    preferences: Optional[Preferences] = None,
    no_class_diagram_header: bool = False,
    resolver: Optional[RefResolver] = None,
) -> str:
    """Generate Mermaid ``classDiagram`` text for ``schema_files``."""
    ctx = DiagramBuilder(schema_files, preferences, resolver).build()
    return render(ctx, no_class_diagram_header)
