from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Mapping, cast
from urllib.parse import urldefrag, urlparse
from urllib.request import Request, urlopen

import yaml

from .errors import SpecError
from .openapi import OpenAPIDocument

logger = logging.getLogger(__name__)

OpenAPISource = str | PathLike[str] | Mapping[str, object]

SCHEMA_NAME_EXTENSION = "x-dispatchify-schema-name"
_SCHEMA_REF_PREFIX = "#/components/schemas/"


def load_openapi(
    source: OpenAPISource,
    base_path: str | PathLike[str] | None = None,
) -> OpenAPIDocument:
    """Load and resolve an OpenAPI document.

    Args:
        source: A file path, an http(s) URL, or an already parsed mapping
        base_path: Base path for resolving relative ``$ref`` targets

    Returns:
        The document with every resolvable ``$ref`` expanded
    """
    override = Path(base_path) if base_path is not None else None
    document, resolved_base = _read_source(source, override)
    openapi_version = document.get("openapi")
    if not isinstance(openapi_version, str):
        raise SpecError("Missing or invalid 'openapi' field in document")
    logger.debug("Loaded OpenAPI %s document", openapi_version)
    return RefResolver(document, resolved_base).resolve()


def resolve_refs(
    document: OpenAPIDocument,
    base_path: str | PathLike[str] | None,
) -> OpenAPIDocument:
    """Resolve all ``$ref`` references in an already loaded document."""
    resolved_base_path = Path(base_path) if base_path is not None else None
    return RefResolver(document, resolved_base_path).resolve()


@dataclass
class RefResolver:
    """Expands ``$ref`` references in an OpenAPI document.

    Handles local pointers (``#/components/...``), references into other
    files relative to the referring document, and sibling keys merged over a
    ``$ref``. Schemas reached through ``#/components/schemas/<name>`` are
    tagged with their component name so the type emitter can refer to them
    by name. A schema reference that is re-entered while it is still being
    expanded is left as a ``$ref``.
    """

    document: OpenAPIDocument
    base_path: Path | None
    _cache: dict[str, object] = field(default_factory=dict, init=False)
    _doc_cache: dict[Path, OpenAPIDocument] = field(default_factory=dict, init=False)
    _active: set[str] = field(default_factory=set, init=False)

    def resolve(self) -> OpenAPIDocument:
        effective_base = self.base_path or Path.cwd()
        return cast(OpenAPIDocument, self._resolve_object(self.document, effective_base))

    def _resolve_object(self, obj: object, current_base: Path) -> object:
        if isinstance(obj, list):
            return [self._resolve_object(item, current_base) for item in obj]
        if not isinstance(obj, dict):
            return obj
        obj_dict = cast(dict[str, object], obj)
        if "$ref" not in obj_dict:
            return {key: self._resolve_object(value, current_base) for key, value in obj_dict.items()}

        ref = obj_dict["$ref"]
        if not isinstance(ref, str):
            raise SpecError("$ref must be a string")
        if ref in self._active:
            return dict(obj_dict)
        resolved = self._resolve_ref(ref, current_base)
        if len(obj_dict) == 1:
            return resolved
        if not isinstance(resolved, dict):
            raise SpecError(f"$ref target must be an object when merged: {ref}")
        merged = deepcopy(cast(dict[str, object], resolved))
        for key, value in obj_dict.items():
            if key != "$ref":
                merged[key] = self._resolve_object(value, current_base)
        return merged

    def _resolve_ref(self, ref: str, current_base: Path) -> object:
        if ref in self._cache:
            return deepcopy(self._cache[ref])
        path_part, frag = urldefrag(ref)
        if path_part:
            target_path = (current_base / path_part).resolve()
            target_doc = _load_doc(target_path, self._doc_cache)
            base_for_ref = target_path.parent
        else:
            target_doc = self.document
            base_for_ref = current_base
        if frag and not frag.startswith("/"):
            raise SpecError(f"Unsupported $ref fragment: {frag}")
        target = _resolve_pointer(target_doc, frag)
        if ref.startswith(_SCHEMA_REF_PREFIX) and isinstance(target, dict):
            target = dict(target)
            target.setdefault(SCHEMA_NAME_EXTENSION, ref[len(_SCHEMA_REF_PREFIX) :])

        self._active.add(ref)
        try:
            resolved = self._resolve_object(target, base_for_ref)
        finally:
            self._active.discard(ref)
        self._cache[ref] = deepcopy(resolved)
        return resolved


def _is_url(source: str) -> bool:
    return urlparse(source).scheme in {"http", "https"}


def _fetch_url(url: str) -> str:
    try:
        request = Request(url, headers={"User-Agent": "dispatchify"})
        with urlopen(request, timeout=30) as response:  # noqa: S310
            return response.read().decode("utf-8")
    except Exception as exc:
        raise SpecError(f"Failed to fetch URL: {url}") from exc


def _url_suffix(url: str) -> str:
    path = urlparse(url).path
    if "." in path:
        return "." + path.rsplit(".", 1)[-1].lower()
    return ""


def _read_source(
    source: OpenAPISource,
    base_path: Path | None,
) -> tuple[OpenAPIDocument, Path | None]:
    if isinstance(source, Mapping):
        return cast(OpenAPIDocument, dict(source)), base_path

    source_str = str(source) if isinstance(source, PathLike) else source
    if _is_url(source_str):
        # Relative file references are not resolved against URLs.
        data = _parse_text(_fetch_url(source_str), _url_suffix(source_str))
        return _require_object(data, "OpenAPI document must be an object"), base_path

    path = Path(source_str)
    data = _parse_text(path.read_text(encoding="utf-8"), path.suffix)
    document = _require_object(data, "OpenAPI document must be an object")
    return document, base_path if base_path is not None else path.parent


def _parse_text(text: str, suffix: str) -> object:
    """Parse YAML for ``.yaml``/``.yml`` sources, otherwise JSON with a YAML fallback."""
    if suffix in {".yaml", ".yml"}:
        return _load_yaml(text)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return _load_yaml(text)


def _load_yaml(text: str) -> object:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SpecError(f"Invalid YAML document: {exc}") from exc


def _require_object(data: object, message: str) -> OpenAPIDocument:
    if not isinstance(data, dict):
        raise SpecError(message)
    return cast(OpenAPIDocument, data)


def _load_doc(path: Path, cache: dict[Path, OpenAPIDocument]) -> OpenAPIDocument:
    if path not in cache:
        data = _parse_text(path.read_text(encoding="utf-8"), path.suffix)
        cache[path] = _require_object(data, f"Referenced document must be an object: {path}")
    return cache[path]


def _resolve_pointer(document: OpenAPIDocument, fragment: str) -> object:
    """Resolve a JSON pointer fragment such as ``/components/schemas/User``.

    Raises:
        SpecError: If the pointer does not lead anywhere in ``document``
    """
    if fragment in {"", "#"}:
        return document
    pointer = fragment[1:] if fragment.startswith("/") else fragment
    current: object = document
    for part in pointer.split("/"):
        key = part.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            raise SpecError(f"Unresolvable $ref pointer: #{fragment}")
    return current
