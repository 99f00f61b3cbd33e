"""Error taxonomy for schema loading and diagram generation.

Every error here is fatal for a build. Missing input paths surface as the
built-in ``FileNotFoundError``.
"""
from __future__ import annotations

from typing import List, Optional


class JsonSchemaToMermaidError(Exception):
    """Base class for all errors raised by the generator."""


class FileFormatError(JsonSchemaToMermaidError, ValueError):
    """Raised when a schema file is not valid JSON/YAML or not a mapping."""


class InheritanceCycleError(JsonSchemaToMermaidError, ValueError):
    """Raised when an ``extends`` chain loops back on itself."""

    def __init__(self, chain: List[str]):
        self.chain = list(chain)
        super().__init__(
            "Inheritance cycle detected while resolving extends. Chain: " + " -> ".join(self.chain)
        )


class InvalidReferenceError(JsonSchemaToMermaidError, ValueError):
    """Raised when a ``$ref`` or ``extends`` target cannot be loaded."""

    def __init__(self, message: str, ref: Optional[str] = None):
        super().__init__(message)
        self.ref = ref


class InvalidOptionError(JsonSchemaToMermaidError, ValueError):
    pass


class ConfigParseError(JsonSchemaToMermaidError, ValueError):
    pass


class OutputWriteError(JsonSchemaToMermaidError):
    pass
