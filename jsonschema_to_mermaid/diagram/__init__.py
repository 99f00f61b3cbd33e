"""Diagram synthesis: naming, property mapping, relations and serialization."""
from jsonschema_to_mermaid.diagram.builder import DiagramBuilder, generate, render
from jsonschema_to_mermaid.diagram.model import DiagramClass, DiagramContext, EnumClass, EnumNote, Relation
from jsonschema_to_mermaid.diagram.naming import NameResolver, ref_class_name, sanitize, singularize
from jsonschema_to_mermaid.diagram.preferences import AllOfMode, EnumStyle, Preferences, RequiredFieldStyle

__all__ = [
    "AllOfMode",
    "DiagramBuilder",
    "DiagramClass",
    "DiagramContext",
    "EnumClass",
    "EnumNote",
    "EnumStyle",
    "NameResolver",
    "Preferences",
    "Relation",
    "RequiredFieldStyle",
    "generate",
    "ref_class_name",
    "render",
    "sanitize",
    "singularize",
]
