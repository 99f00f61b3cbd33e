"""File utilities."""
from __future__ import annotations

from pathlib import Path
from typing import Collection, Iterable, Iterator, List, Union

from jsonschema_to_mermaid.errors import OutputWriteError

SCHEMA_EXTENSIONS = {".json", ".yaml", ".yml"}

PathLike = Union[str, Path]


def ensure_dir(path: PathLike) -> Path:
    """Ensure directory exists and return Path."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def is_schema_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in SCHEMA_EXTENSIONS


def _walk(path: Path, exclude_names: Collection[str]) -> Iterator[Path]:
    if path.is_dir():
        for child in sorted(path.iterdir(), key=lambda p: p.name):
            yield from _walk(child, exclude_names)
    elif is_schema_file(path) and path.name not in exclude_names:
        yield path


def collect_schema_files(paths: Iterable[PathLike], exclude_names: Collection[str] = ()) -> List[Path]:
    """Expand files and directories into schema files, in input order without duplicates.

    Directories are walked recursively with children sorted by name. An explicit
    file argument is kept even when its name is in ``exclude_names``.
    """
    found: List[Path] = []
    seen = set()
    for raw in paths:
        p = Path(raw)
        if not p.exists():
            raise FileNotFoundError(f"Missing file: {raw}")
        candidates = _walk(p, exclude_names) if p.is_dir() else ([p] if is_schema_file(p) else [])
        for candidate in candidates:
            key = candidate.resolve()
            if key in seen:
                continue
            seen.add(key)
            found.append(key)
    return found


def read_text_file(path: PathLike) -> str:
    """Read a file as UTF-8.

    - Missing files raise ``FileNotFoundError``.
    - Files that are not valid UTF-8 raise ``ValueError`` so callers can report them.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Missing file: {path}")
    try:
        return p.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"Unable to read text file: {p.name}") from exc


def write_text_file(path: PathLike, text: str) -> Path:
    """Write UTF-8 text, creating parent directories as needed."""
    p = Path(path)
    try:
        if p.parent != Path("."):
            ensure_dir(p.parent)
        p.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(f"Unable to write output file {p}: {exc}") from exc
    return p
