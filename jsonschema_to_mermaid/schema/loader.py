"""Load schema files from disk into typed, inheritance-resolved models."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Collection, Dict, Iterable, List, Optional, Union

import yaml
from pydantic import ValidationError

from jsonschema_to_mermaid.errors import FileFormatError
from jsonschema_to_mermaid.schema.inheritance import InheritanceResolver
from jsonschema_to_mermaid.schema.models import Schema, SchemaFileInfo
from jsonschema_to_mermaid.schema.ref_resolver import RefResolver
from jsonschema_to_mermaid.utils.file_utils import collect_schema_files, read_text_file

logger = logging.getLogger(__name__)


def parse_document(path: Path) -> Dict[str, Any]:
    """Parse a JSON or YAML file into a mapping."""
    try:
        text = read_text_file(path)
    except ValueError as exc:
        raise FileFormatError(str(exc)) from exc
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except json.JSONDecodeError as exc:
        raise FileFormatError(f"Invalid JSON in {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise FileFormatError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise FileFormatError(f"Schema root must be a mapping in {path}")
    return data


def load_schema_file(path: Path, inheritance: InheritanceResolver) -> SchemaFileInfo:
    path = Path(path).resolve()
    logger.debug("Loading schema %s", path)
    raw = parse_document(path)
    try:
        schema = Schema.from_raw(raw)
    except ValidationError as exc:
        raise FileFormatError(f"Unsupported schema structure in {path}: {exc}") from exc
    schema = inheritance.resolve(schema, str(path))
    return SchemaFileInfo(filename=path.name, schema=schema, path=path, raw=raw)


def load_schemas(
    paths: Iterable[Union[str, Path]],
    resolver: Optional[RefResolver] = None,
    exclude_names: Collection[str] = (),
) -> List[SchemaFileInfo]:
    """Load every schema file under ``paths``.

    Directories are expanded recursively; only ``.json``/``.yaml``/``.yml``
    files are read. ``extends`` chains are resolved and merged before the
    schemas are returned.
    """
    inheritance = InheritanceResolver(resolver)
    files = collect_schema_files(paths, exclude_names)
    infos = [load_schema_file(path, inheritance) for path in files]
    logger.debug("Loaded %d schema file(s)", len(infos))
    return infos
