"""Resolve the ``extends`` keyword by merging base schemas into derived ones."""
from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import ValidationError

from jsonschema_to_mermaid.errors import FileFormatError, InheritanceCycleError
from jsonschema_to_mermaid.schema.models import Schema
from jsonschema_to_mermaid.schema.ref_resolver import RefResolver, ref_resolver

logger = logging.getLogger(__name__)


def merge_schemas(base: Schema, derived: Schema) -> Schema:
    """Merge an already-resolved base into ``derived``.

    ``properties`` and ``definitions`` are unioned with the derived side
    winning, ``required`` is a de-duplicated union (base first) and the
    inherited names are whatever the base brings that ``derived`` does not
    redeclare. ``derived.extends`` is kept for display.
    """
    own = set(derived.properties)
    inherited = (set(base.properties) | set(base.inherited_property_names)) - own
    return derived.model_copy(
        update={
            "properties": {**base.properties, **derived.properties},
            "definitions": {**base.definitions, **derived.definitions},
            "required": list(dict.fromkeys(base.required + derived.required)),
            "inherited_property_names": sorted(inherited),
        }
    )


class InheritanceResolver:
    """Depth-first ``extends`` resolution with per-chain cycle detection.

    Each chain carries its own list of visited identifiers (absolute paths or
    URLs); no results are memoized across chains.
    """

    def __init__(self, resolver: Optional[RefResolver] = None) -> None:
        self.resolver = resolver or ref_resolver

    def resolve(self, schema: Schema, source: str) -> Schema:
        return self._resolve(schema, source, [])

    def _resolve(self, schema: Schema, source: str, chain: List[str]) -> Schema:
        if source in chain:
            raise InheritanceCycleError(chain + [source])
        if schema.extends is None:
            return schema
        visiting = chain + [source]
        target, raw = self.resolver.resolve_from(schema.extends.ref, source)
        logger.debug("Resolving extends %s -> %s", source, target)
        try:
            base = Schema.from_raw(raw)
        except ValidationError as exc:
            raise FileFormatError(f"Invalid base schema {target}: {exc}") from exc
        base = self._resolve(base, target, visiting)
        return merge_schemas(base, schema)
