"""Project resolved JSON Schema mappings onto :class:`~specdoc.models.SchemaNode`.

Swagger 2.x and OpenAPI 3.x schema objects are close enough to share one
projection. The differences are switched on by the adapters:

* ``ref_titles`` (3.x) names an untitled schema after the component it was
  referenced from.

Shapes only one dialect produces (an ``items`` list in 2.x, a ``type`` list
or ``oneOf`` in 3.1) are handled unconditionally.

The document-level members both dialects share (``info``, ``tags``, path and
operation parameters) are projected here as well.
"""

from __future__ import annotations

from typing import Any, Optional

from specdoc.models import DocumentInfo, SchemaNode, TagSpec
from specdoc.parser.resolver import REF_KEY, ref_name


def extensions_of(raw: dict[str, Any]) -> dict[str, Any]:
    """Return the ``x-*`` members of *raw*, without the resolver's bookkeeping key."""
    return {k: v for k, v in raw.items() if k.startswith("x-") and k != REF_KEY}


def schema_ref_name(raw: Any) -> Optional[str]:
    """Return the component name *raw* was resolved from, if any."""
    if not isinstance(raw, dict):
        return None
    ref = raw.get(REF_KEY) or raw.get("$ref")
    return ref_name(ref) if isinstance(ref, str) else None


def first_type(declared: Any) -> Optional[str]:
    """Return the first non-null type of a ``type`` member (string or 3.1 list)."""
    if isinstance(declared, list):
        for candidate in declared:
            if candidate != "null":
                return candidate
        return None
    return declared if isinstance(declared, str) else None


def to_schema_node(raw: Any, ref_titles: bool = False) -> Optional[SchemaNode]:
    """Project one schema mapping (and everything below it).

    Args:
        raw: A resolved schema mapping. ``None`` projects to ``None``.
        ref_titles: Use the reference name as title when the schema has none.

    Returns:
        The projected node, or ``None`` when *raw* is not a mapping.
    """
    if not isinstance(raw, dict):
        return None

    name = schema_ref_name(raw)

    # Circular reference left in place by the resolver.
    if "$ref" in raw:
        title = name if ref_titles and name else ""
        return SchemaNode(title=title, ref_name=name)

    declared_type = first_type(raw.get("type"))
    if declared_type is None and not raw.get("properties"):
        for composition in ("oneOf", "anyOf"):
            alternatives = raw.get(composition)
            if isinstance(alternatives, list) and alternatives:
                node = to_schema_node(alternatives[0], ref_titles)
                if node is not None and raw.get("description"):
                    node.description = raw["description"]
                return node

    title = raw.get("title") or ""
    if not title and ref_titles and name:
        title = name

    items = raw.get("items")
    if isinstance(items, list):
        items = items[0] if items else None

    required = raw.get("required")
    enum = raw.get("enum")

    return SchemaNode(
        title=title,
        description=raw.get("description") or "",
        type=declared_type,
        format=raw.get("format") or "",
        items=to_schema_node(items, ref_titles),
        properties=_project_properties(raw.get("properties"), ref_titles),
        required=[r for r in required if isinstance(r, str)] if isinstance(required, list) else [],
        enum=list(enum) if isinstance(enum, list) else [],
        example=raw.get("example"),
        read_only=bool(raw.get("readOnly", False)),
        all_of=[
            node
            for node in (to_schema_node(part, ref_titles) for part in raw.get("allOf") or [])
            if node is not None
        ],
        additional_properties=_additional_properties(raw.get("additionalProperties"), ref_titles),
        extensions=extensions_of(raw),
        ref_name=name,
    )


def _additional_properties(raw: Any, ref_titles: bool) -> Optional[SchemaNode]:
    if raw is True:
        return SchemaNode()
    return to_schema_node(raw, ref_titles)


def _project_properties(raw: Any, ref_titles: bool) -> dict[str, SchemaNode]:
    if not isinstance(raw, dict):
        return {}
    projected = {}
    for name, value in raw.items():
        node = to_schema_node(value, ref_titles)
        if node is not None:
            projected[name] = node
    return projected


# --- Document members shared by both dialects ---

# Canonical order in which the operations of a path item are documented.
VERBS = ("get", "post", "put", "delete", "head", "options", "patch")


def extract_info(spec: dict[str, Any]) -> DocumentInfo:
    info = spec.get("info") or {}
    contact = info.get("contact") or {}
    return DocumentInfo(
        title=info.get("title") or "",
        description=info.get("description") or "",
        version=str(info.get("version") or ""),
        contact_name=contact.get("name") or "",
        contact_url=contact.get("url") or "",
        contact_email=contact.get("email") or "",
    )


def extract_tags(spec: dict[str, Any]) -> list[TagSpec]:
    tags = []
    for tag in spec.get("tags") or []:
        if not isinstance(tag, dict):
            continue
        docs = tag.get("externalDocs") or {}
        tags.append(
            TagSpec(
                name=tag.get("name") or "",
                description=tag.get("description") or "",
                external_docs_description=docs.get("description"),
                external_docs_url=docs.get("url"),
            )
        )
    return tags


def merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    An operation-level parameter replaces a path-level one with the same
    ``name`` and ``in``. Path-level parameters come first.
    """
    path_params = [p for p in path_params if isinstance(p, dict)]
    op_params = [p for p in op_params if isinstance(p, dict)]
    overridden = {(p.get("name", ""), p.get("in", "")) for p in op_params}
    merged = [p for p in path_params if (p.get("name", ""), p.get("in", "")) not in overridden]
    merged.extend(op_params)
    return merged


def string_list(value: Any) -> list[str]:
    """Return *value* if it is a list of strings, else an empty list."""
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]
