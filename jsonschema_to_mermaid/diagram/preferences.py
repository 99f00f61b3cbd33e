"""Rendering preferences for diagram generation."""
from __future__ import annotations

from enum import Enum
from typing import Optional, Type, TypeVar

from pydantic import BaseModel

from jsonschema_to_mermaid.errors import InvalidOptionError


class EnumStyle(str, Enum):
    INLINE = "inline"
    NOTE = "note"
    CLASS = "class"


class RequiredFieldStyle(str, Enum):
    PLUS = "plus"
    NONE = "none"
    SUFFIX_Q = "suffix-q"


class AllOfMode(str, Enum):
    MERGE = "merge"
    INHERIT = "inherit"
    COMPOSE = "compose"


class ArraysStyle(str, Enum):
    INLINE = "inline"
    RELATION = "relation"


class Preferences(BaseModel):
    arrays_as_relation: bool = True
    enum_style: EnumStyle = EnumStyle.INLINE
    use_english_singularizer: bool = True
    show_inherited_fields: bool = False
    required_field_style: RequiredFieldStyle = RequiredFieldStyle.PLUS
    all_of_mode: AllOfMode = AllOfMode.MERGE


E = TypeVar("E", bound=Enum)


def parse_choice(enum_type: Type[E], value: Optional[str], label: str, source: str) -> Optional[E]:
    """Parse ``value`` case-insensitively into ``enum_type``.

    ``suffix_q`` is accepted as a spelling of ``suffix-q``. Returns None for
    a missing value and raises ``InvalidOptionError`` naming ``source`` for
    an unknown one.
    """
    if value is None:
        return None
    normalized = value.strip().lower().replace("_", "-")
    for member in enum_type:
        if member.value == normalized:
            return member
    raise InvalidOptionError(f"Invalid {label} in {source}: {value}")
