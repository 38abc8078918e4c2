"""API description parser -- load, resolve ``$ref`` pointers, and project.

This sub-package turns a Swagger 2.x or OpenAPI 3.x document (JSON or YAML,
local file or remote URL) into the dialect-neutral
:class:`~specdoc.models.SourceDocument` the normalizer consumes.

Typical usage::

    from specdoc.parser import load_spec, project_document

    raw = load_spec("https://petstore.swagger.io/v2/swagger.json")
    document = project_document(raw)

Sub-modules:

* :mod:`~specdoc.parser.loader` -- I/O layer (URL, file, stdin), format
  detection and dialect detection.
* :mod:`~specdoc.parser.resolver` -- Recursive ``$ref`` resolution with
  circular-reference detection.
* :mod:`~specdoc.parser.schema` -- Projection shared by both dialects.
* :mod:`~specdoc.parser.swagger2` and :mod:`~specdoc.parser.openapi3` --
  The dialect adapters.
"""

from __future__ import annotations

from typing import Any

from specdoc.models import Dialect, SourceDocument
from specdoc.parser.loader import detect_dialect, load_spec
from specdoc.parser.openapi3 import project_openapi3
from specdoc.parser.resolver import resolve_refs
from specdoc.parser.swagger2 import project_swagger2


def project_document(raw: dict[str, Any]) -> SourceDocument:
    """Resolve references in *raw* and project it with the matching adapter.

    Raises:
        SpecParseError: If the dialect is unsupported or a reference does not
            resolve.
    """
    dialect = detect_dialect(raw)
    resolved = resolve_refs(raw)
    if dialect is Dialect.SWAGGER2:
        return project_swagger2(resolved)
    return project_openapi3(resolved)


__all__ = ["detect_dialect", "load_spec", "project_document", "resolve_refs"]
