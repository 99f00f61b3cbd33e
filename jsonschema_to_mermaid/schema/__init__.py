"""Schema loading: typed models, ``$ref`` resolution and ``extends`` inheritance."""
from jsonschema_to_mermaid.schema.inheritance import InheritanceResolver, merge_schemas
from jsonschema_to_mermaid.schema.loader import load_schemas
from jsonschema_to_mermaid.schema.models import Extends, Property, Schema, SchemaFileInfo
from jsonschema_to_mermaid.schema.ref_resolver import RefResolver, ref_resolver

__all__ = [
    "Extends",
    "InheritanceResolver",
    "Property",
    "RefResolver",
    "Schema",
    "SchemaFileInfo",
    "load_schemas",
    "merge_schemas",
    "ref_resolver",
]
