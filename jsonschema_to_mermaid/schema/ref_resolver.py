"""Fetch and parse ``$ref`` / ``extends`` targets from local files or HTTP."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urljoin

import requests
import yaml

from jsonschema_to_mermaid.errors import InvalidReferenceError
from jsonschema_to_mermaid.utils.config import settings

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


def is_http_ref(ref: str) -> bool:
    return ref.startswith("http://") or ref.startswith("https://")


def split_ref(ref: str) -> Tuple[str, str]:
    """Split ``"a.json#/x/y"`` into ``("a.json", "/x/y")``."""
    if "#" not in ref:
        return ref, ""
    location, fragment = ref.split("#", 1)
    return location, fragment


def _decode_pointer_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def resolve_pointer(doc: Any, pointer: str, *, ref: str) -> Any:
    """Resolve a JSON Pointer fragment ("" means the whole document)."""
    if not pointer:
        return doc
    if not pointer.startswith("/"):
        raise InvalidReferenceError(f"Unsupported JSON pointer '{pointer}' in {ref}", ref=ref)
    current = doc
    for raw_token in pointer.lstrip("/").split("/"):
        token = _decode_pointer_token(raw_token)
        if isinstance(current, dict) and token in current:
            current = current[token]
        elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            raise InvalidReferenceError(f"Pointer token '{token}' not found while resolving {ref}", ref=ref)
    return current


def _require_mapping(doc: Any, ref: str) -> Dict[str, Any]:
    if not isinstance(doc, dict):
        raise InvalidReferenceError(f"Referenced document is not a mapping: {ref}", ref=ref)
    return doc


class RefResolver:
    """Resolves ``$ref`` strings to raw documents.

    HTTP responses are memoized by URL for the lifetime of the resolver; the
    cache is never evicted.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = settings.http_timeout if timeout is None else timeout
        self._http_cache: Dict[str, Tuple[str, str]] = {}

    def resolve(self, ref: str, base_dir: Path) -> Dict[str, Any]:
        location, fragment = split_ref(ref)
        if is_http_ref(location):
            doc = self.fetch_http(location)
        else:
            doc = self.load_file(base_dir / location, ref=ref)
        return _require_mapping(resolve_pointer(doc, fragment, ref=ref), ref)

    def resolve_from(self, ref: str, referrer: str) -> Tuple[str, Dict[str, Any]]:
        """Resolve ``ref`` relative to a referrer (a file path or URL).

        Returns the normalized absolute identifier of the target document and
        the (pointer-selected) raw document.
        """
        location, fragment = split_ref(ref)
        referrer, _ = split_ref(referrer)
        if is_http_ref(location) or is_http_ref(referrer):
            url = location if is_http_ref(location) else urljoin(referrer, location)
            doc = self.fetch_http(url)
            target = url
        else:
            path = (Path(referrer).parent / location).resolve() if location else Path(referrer).resolve()
            doc = self.load_file(path, ref=ref)
            target = str(path)
        if fragment:
            target = f"{target}#{fragment}"
        return target, _require_mapping(resolve_pointer(doc, fragment, ref=ref), ref)

    def load_file(self, path: Path, *, ref: Optional[str] = None) -> Any:
        resolved = Path(path).resolve()
        ref = ref or str(path)
        if not resolved.is_file():
            raise InvalidReferenceError(f"File not found: {resolved} for {ref}", ref=ref)
        suffix = resolved.suffix.lower()
        if suffix not in JSON_SUFFIXES + YAML_SUFFIXES:
            raise InvalidReferenceError(f"Unsupported file extension '{suffix}' for {ref}", ref=ref)
        try:
            text = resolved.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidReferenceError(f"Referenced file is not UTF-8 text: {ref}", ref=ref) from exc
        return self._parse(text, "yaml" if suffix in YAML_SUFFIXES else "json", ref)

    def fetch_http(self, url: str) -> Any:
        if url not in self._http_cache:
            logger.info("Fetching remote schema %s", url)
            try:
                response = requests.get(url, timeout=(self.timeout, self.timeout))
            except requests.RequestException as exc:
                raise InvalidReferenceError(f"Unable to fetch {url}: {exc}", ref=url) from exc
            if not 200 <= response.status_code < 300:
                raise InvalidReferenceError(f"Fetching {url} failed ({response.status_code})", ref=url)
            content_type = response.headers.get("Content-Type", "") if response.headers else ""
            self._http_cache[url] = (response.text, content_type)
        text, content_type = self._http_cache[url]
        return self._parse(text, self._remote_format(url, content_type), url)

    @staticmethod
    def _remote_format(url: str, content_type: str) -> str:
        path = url.split("?", 1)[0].lower()
        if path.endswith(JSON_SUFFIXES):
            return "json"
        if path.endswith(YAML_SUFFIXES):
            return "yaml"
        lowered = (content_type or "").lower()
        if "json" in lowered:
            return "json"
        if "yaml" in lowered:
            return "yaml"
        raise InvalidReferenceError(f"Unsupported remote schema type for {url}", ref=url)

    @staticmethod
    def _parse(text: str, fmt: str, ref: str) -> Any:
        try:
            if fmt == "json":
                return json.loads(text)
            return yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise InvalidReferenceError(f"Could not parse referenced document {ref}: {exc}", ref=ref) from exc


ref_resolver = RefResolver()
