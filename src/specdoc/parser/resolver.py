"""Resolve internal ``$ref`` pointers in an API description.

The document is deep-copied and every ``{"$ref": "#/..."}`` mapping is
replaced by the object it points to. Only internal references are handled;
anything else raises :class:`~specdoc.exceptions.SpecParseError`.

A resolved mapping remembers where it came from under :data:`REF_KEY`, so
the adapters can name a schema after its ``definitions`` or
``components/schemas`` entry. When references chain, the outermost one
wins.

Circular references are left as the ``$ref`` mapping at the point where the
cycle closes; the adapters turn them into named, property-less schemas.
"""

from __future__ import annotations

import copy
from typing import Any

from specdoc.exceptions import SpecParseError

REF_KEY = "x-specdoc-ref"


def resolve_refs(spec: dict[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *spec* with every internal ``$ref`` inlined.

    Raises:
        SpecParseError: If a reference is external or does not resolve.

    Example::

        resolved = resolve_refs(load_spec("petstore.yaml"))
        schema = resolved["definitions"]["Pet"]
    """
    root = copy.deepcopy(spec)
    return _deep_resolve(root, root, frozenset())


def ref_name(ref: str) -> str:
    """Return the last segment of a reference (``#/definitions/Pet`` -> ``Pet``)."""
    return ref.rsplit("/", 1)[-1].replace("~1", "/").replace("~0", "~")


def _lookup(ref: str, root: dict[str, Any]) -> Any:
    """Follow the RFC 6901 pointer *ref* from *root*."""
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(f"Cannot resolve $ref '{ref}': key '{segment}' not found")
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': cannot navigate into {type(current).__name__}"
            )

    return current


def _deep_resolve(obj: Any, root: dict[str, Any], seen: frozenset[str]) -> Any:
    # ``seen`` holds the references on the current resolution path only, so
    # sibling branches may resolve the same target independently.
    if isinstance(obj, dict):
        if "$ref" in obj:
            ref = obj["$ref"]
            if ref in seen:
                return obj
            resolved = _deep_resolve(_lookup(ref, root), root, seen | {ref})
            if isinstance(resolved, dict) and "$ref" not in resolved:
                resolved = {**resolved, REF_KEY: ref}
            return resolved

        return {key: _deep_resolve(value, root, seen) for key, value in obj.items()}

    if isinstance(obj, list):
        return [_deep_resolve(item, root, seen) for item in obj]

    return obj
