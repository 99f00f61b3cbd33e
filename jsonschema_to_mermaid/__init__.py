"""Generate Mermaid class diagrams from JSON/YAML schema files."""
from jsonschema_to_mermaid.diagram import Preferences, generate
from jsonschema_to_mermaid.schema import SchemaFileInfo, load_schemas

__all__ = ["Preferences", "SchemaFileInfo", "generate", "load_schemas"]
