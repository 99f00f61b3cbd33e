from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from jsonschema_to_mermaid.diagram.naming import NameResolver
from jsonschema_to_mermaid.diagram.preferences import Preferences
from jsonschema_to_mermaid.schema.models import SchemaFileInfo
from jsonschema_to_mermaid.schema.ref_resolver import RefResolver, ref_resolver


@dataclass
class DiagramClass:
    name: str
    fields: List[str] = field(default_factory=list)


@dataclass
class Relation:
    source: str
    target: str
    arrow: str = "-->"
    label: str = ""
    source_multiplicity: Optional[str] = None
    target_multiplicity: Optional[str] = None

    def to_mermaid(self) -> str:
        parts = [self.source]
        if self.source_multiplicity is not None:
            parts.append(f'"{self.source_multiplicity}"')
        parts.append(self.arrow)
        if self.target_multiplicity is not None:
            parts.append(f'"{self.target_multiplicity}"')
        parts.append(self.target)
        lbl = f" : {self.label}" if self.label else ""
        return " ".join(parts) + lbl


@dataclass
class EnumNote:
    class_name: str
    text: str


@dataclass
class EnumClass:
    name: str
    values: List[str] = field(default_factory=list)


@dataclass
class DiagramContext:
    """Everything one build accumulates. Created fresh for every ``generate`` call."""

    preferences: Preferences
    schema_files: List[SchemaFileInfo] = field(default_factory=list)
    names: NameResolver = field(default_factory=NameResolver)
    resolver: RefResolver = ref_resolver
    classes: Dict[str, DiagramClass] = field(default_factory=dict)
    relations: List[Relation] = field(default_factory=list)
    enum_notes: List[EnumNote] = field(default_factory=list)
    enum_classes: Dict[str, EnumClass] = field(default_factory=dict)

    def ensure_class(self, name: str) -> DiagramClass:
        if name not in self.classes:
            self.classes[name] = DiagramClass(name)
        return self.classes[name]

    def add_field(self, class_name: str, text: str) -> None:
        self.ensure_class(class_name).fields.append(text)

    def add_relation(self, relation: Relation) -> None:
        self.relations.append(relation)

    def add_enum_note(self, class_name: str, text: str) -> None:
        self.enum_notes.append(EnumNote(class_name, text))

    def add_enum_class(self, name: str, values: List[str]) -> None:
        self.enum_classes.setdefault(name, EnumClass(name, list(values)))
