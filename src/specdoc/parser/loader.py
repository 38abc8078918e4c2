"""Read API description documents into plain dictionaries.

Documents may come from a local file, an ``http(s)`` URL, or stdin (``-``).
JSON is tried first and YAML second; a file extension or a response
``Content-Type`` narrows that down. Whatever the source, the result must be a
mapping at the top level.

:func:`detect_dialect` then decides which adapter projects the document:
Swagger 2.x (``swagger: "2.0"``) or OpenAPI 3.x (``openapi: "3.0.3"``).
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specdoc.exceptions import SpecParseError
from specdoc.models import Dialect

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30.0


def is_remote(source: str) -> bool:
    """Return ``True`` if *source* is an ``http`` or ``https`` URL."""
    return source.startswith(("http://", "https://"))


def load_spec(source: str) -> dict[str, Any]:
    """Load an API description from a URL, a file path, or stdin (``-``).

    Args:
        source: Where to read the document from.

    Returns:
        The decoded document.

    Raises:
        SpecParseError: If the source cannot be read or decoded, or does not
            hold a mapping.
    """
    logger.debug("Loading API description from %s", source)
    if source == "-":
        return _read_stdin()
    if is_remote(source):
        return _fetch(source)
    return _read_file(source)


def _read_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")
    return decode_document(content)


def _fetch(url: str) -> dict[str, Any]:
    try:
        response = httpx.get(url, timeout=FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching API description from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch API description from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    else:
        hint = ""
    return decode_document(response.text, hint=hint)


def _read_file(path: str) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"API description not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"API description is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}.get(suffix, "")
    return decode_document(content, hint=hint)


def decode_document(content: str, hint: str = "") -> dict[str, Any]:
    """Decode *content* as JSON, falling back to YAML.

    Valid JSON is valid YAML as well, so JSON goes first: it is stricter
    and gives the better error message.

    Args:
        content: Raw document text.
        hint: ``"json"`` to accept JSON only, ``"yaml"`` to skip JSON, or
            ``""`` to try both.

    Returns:
        The decoded mapping.

    Raises:
        SpecParseError: If the content is not a JSON or YAML mapping.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise SpecParseError("Failed to parse API description as JSON or YAML\n  " + "\n  ".join(errors))


def _require_mapping(document: Any) -> dict[str, Any]:
    if isinstance(document, dict):
        return document
    kind = type(document).__name__ if document is not None else "empty document"
    raise SpecParseError(f"API description must be a JSON/YAML object (got {kind})")


def detect_dialect(raw: dict[str, Any]) -> Dialect:
    """Return the dialect declared by *raw*.

    Raises:
        SpecParseError: If the document declares neither ``swagger: 2.x`` nor
            ``openapi: 3.x``.
    """
    if "swagger" in raw:
        version = str(raw["swagger"])
        if version.startswith("2."):
            return Dialect.SWAGGER2
        raise SpecParseError(f"Unsupported Swagger version: {version}. Only 2.x is supported.")

    version = raw.get("openapi")
    if version is None:
        raise SpecParseError(
            "Missing 'swagger' or 'openapi' field. Is this an API description document?"
        )
    if str(version).startswith("3."):
        return Dialect.OPENAPI3
    raise SpecParseError(f"Unsupported OpenAPI version: {version}. Only 3.x is supported.")
