"""Class and field naming: sanitizing, type names, singular forms and collision handling."""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from jsonschema_to_mermaid.schema.models import SchemaFileInfo

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]+")
_REF_SEPARATORS = re.compile(r"[/#]")

PRIMITIVE_TYPES = {
    "integer": "Integer",
    "number": "Number",
    "boolean": "Boolean",
    "string": "String",
}

IRREGULAR_SINGULARS = {
    "children": "Child",
    "mice": "Mouse",
    "geese": "Goose",
    "men": "Man",
    "women": "Woman",
    "teeth": "Tooth",
    "feet": "Foot",
    "data": "Datum",
    "people": "Person",
}


def capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def sanitize(name: Optional[str]) -> str:
    """PascalCase ``name`` after splitting it on runs of non-alphanumerics."""
    if name is None:
        return ""
    return "".join(capitalize(part) for part in _NON_ALPHANUMERIC.split(name) if part.strip())


def primitive_type_name(type_or_format: Optional[str]) -> str:
    if type_or_format is None:
        return "Object"
    return PRIMITIVE_TYPES.get(type_or_format, capitalize(type_or_format))


def singularize(word: str) -> str:
    """Capitalized English singular of ``word`` (``companies`` -> ``Company``)."""
    lower = word.lower()
    if lower in IRREGULAR_SINGULARS:
        return IRREGULAR_SINGULARS[lower]
    if lower.endswith("ies") and len(lower) > 3:
        return capitalize(word[:-3] + "y")
    if lower.endswith("es") and len(lower) > 2:
        # boxes, statuses, buses, dresses: the stem is everything before "es"
        return capitalize(word[:-2])
    if lower.endswith("s") and len(lower) > 1 and not lower.endswith("ss"):
        return capitalize(word[:-1])
    return capitalize(word)


def item_field_name(name: str, use_singularizer: bool) -> str:
    """Name rendered for an inline array field."""
    return singularize(name) if use_singularizer else capitalize(name)


def item_class_name(owner: str, name: str, use_singularizer: bool) -> str:
    """Class synthesized for the inline object items of array ``name`` on ``owner``."""
    if use_singularizer:
        base = singularize(name)
    else:
        base = name[:-1] if name.endswith("s") else name
    return owner + capitalize(sanitize(base))


def ref_class_name(ref: Optional[str]) -> str:
    if ref is None:
        return "UnknownRef"
    parts = [part for part in _REF_SEPARATORS.split(ref) if part.strip()]
    if not parts:
        return "UnknownRef"
    return sanitize(parts[-1]) or "UnknownRef"


def base_class_name(info: SchemaFileInfo) -> str:
    """Name from the title, else the file name up to its first dot."""
    title = sanitize(info.schema.title) if info.schema.title else ""
    if title:
        return title
    if info.filename:
        from_file = sanitize(info.filename.split(".", 1)[0])
        if from_file:
            return from_file
    return "UnknownSchema"


class NameResolver:
    """Hands out top-level class names, disambiguating clashes between sources.

    The first source to claim a base name keeps it; each further source gets
    ``<base>_<n>`` where ``n`` is its position among the claimants. Asking
    again for the same source always returns the same name.
    """

    def __init__(self) -> None:
        self._registry: Dict[str, List[str]] = {}

    def reset(self) -> None:
        self._registry.clear()

    def register(self, base: str, source: str) -> str:
        owners = self._registry.setdefault(base, [])
        if source in owners:
            position = owners.index(source)
            return base if position == 0 else f"{base}_{position + 1}"
        owners.append(source)
        if len(owners) == 1:
            return base
        name = f"{base}_{len(owners)}"
        logger.warning("Class name '%s' is already used by %s; using '%s' for %s", base, owners[0], name, source)
        return self.register(name, source)

    def class_name(self, info: SchemaFileInfo) -> str:
        return self.register(base_class_name(info), info.source_id)
