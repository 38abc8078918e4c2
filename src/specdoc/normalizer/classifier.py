"""Classify schema nodes into primitive, object, array-of and map-of kinds.

Array schemas can be declared two ways: as a schema that is itself typed
``array`` with an ``items`` member, or as a named model whose ``items``
point at another named model. The classifier aligns both by jumping to the
item schema (the *kind node*) while keeping the outer ``array`` marker, so
the resolver only ever looks at one node for properties and titles.
"""

from __future__ import annotations

import logging

from specdoc.models import SchemaNode

logger = logging.getLogger(__name__)

OBJECT = "object"
ARRAY = "array"
MAP = "map"


def resolve_type(node: SchemaNode, force_map: bool = False) -> tuple[SchemaNode, list[str]]:
    """Return the node whose properties describe *node*, and its type pair.

    The type list has one element for objects and primitives
    (``["object"]``, ``["string"]``) and two for containers
    (``["array", "string"]``, ``["array", "object"]``, ``["map", "integer"]``).
    A declared ``format`` on the kind node replaces the last element, so a
    ``date-time`` string reports as ``["date-time"]``.

    Args:
        node: The schema to classify.
        force_map: Treat *node* as the value schema of an
            ``additionalProperties`` declaration. A value schema that
            declares ``items`` is classified as an array instead.

    Returns:
        A ``(kind_node, type)`` tuple. ``kind_node`` is ``node`` itself
        unless *node* declares ``items``.
    """
    kind_node = node

    if force_map and node.items is None:
        types = [MAP, node.type or OBJECT]
    elif node.items is None:
        types = [node.type or OBJECT]
    else:
        outer = node.type or OBJECT
        kind_node = node.items
        if outer != ARRAY:
            # A non-array declaring items; the items carry the properties.
            types = [outer]
        elif kind_node.type is None:
            types = [ARRAY, OBJECT]
        else:
            types = [ARRAY, kind_node.type]

    if kind_node.format:
        types[-1] = kind_node.format

    logger.debug("Classified schema %r as %s", kind_node.title or kind_node.ref_name, types)
    return kind_node, types


def classify(node: SchemaNode) -> str:
    """Describe *node* in words: ``object``, ``string``, ``array of string`` ..."""
    _, types = resolve_type(node)
    if len(types) == 1:
        return types[0]
    return f"{types[0]} of {types[1]}"
