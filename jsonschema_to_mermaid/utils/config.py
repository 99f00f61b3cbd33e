"""Application configuration.

Runtime settings come from the environment (``JS2M_*``) and ``.env``; a
project config file (``js2m.json`` / ``.js2mrc``) can override the diagram
preferences. CLI options override both.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from jsonschema_to_mermaid.errors import ConfigParseError

PROJECT_CONFIG_NAMES = ("js2m.json", ".js2mrc")
USER_CONFIG_NAMES = (".js2m.json", ".js2mrc")
CONFIG_FILE_NAMES = frozenset(PROJECT_CONFIG_NAMES + USER_CONFIG_NAMES)


class Settings(BaseSettings):
    """Runtime settings loaded from .env and environment variables."""

    model_config = SettingsConfigDict(env_prefix="JS2M_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    http_timeout: float = 5.0
    log_level: str = "WARNING"
    arrays: str = "relation"
    enum_style: str = "inline"
    required_style: str = "plus"
    allof_mode: str = "merge"
    english_singularizer: bool = True
    show_inherited_fields: bool = False
    no_classdiagram_header: bool = False


settings = Settings()


def _is_config_file(path: Path) -> bool:
    return path.exists() and path.is_file()


def _find_in_parent_dirs(start_dir: Path) -> Optional[Path]:
    directory = start_dir.resolve()
    for candidate_dir in (directory, *directory.parents):
        for name in PROJECT_CONFIG_NAMES:
            candidate = candidate_dir / name
            if _is_config_file(candidate):
                return candidate
    return None


def _find_user_config() -> Optional[Path]:
    try:
        home = Path.home()
    except RuntimeError:
        return None
    for name in USER_CONFIG_NAMES:
        candidate = home / name
        if _is_config_file(candidate):
            return candidate
    return None


def resolve_config_path(explicit_path: Optional[Path], source_dir: Path) -> Optional[Path]:
    """Pick the config file: explicit path, then project dirs upwards, then the home directory."""
    if explicit_path is not None:
        return explicit_path
    return _find_in_parent_dirs(source_dir) or _find_user_config()


def parse_config(path: Path) -> Dict[str, Any]:
    """Parse a JSON config file. An empty file yields an empty config."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigParseError(f"Unable to read config file {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigParseError(f"Config file {path} must contain a JSON object")
    return data


def config_value(config: Optional[Dict[str, Any]], key: str) -> Optional[str]:
    """Look up ``key`` case-insensitively; exact matches win."""
    if not config:
        return None
    if key in config:
        value = config[key]
    else:
        value = next((v for k, v in config.items() if k.lower() == key.lower()), None)
    return None if value is None else str(value)
