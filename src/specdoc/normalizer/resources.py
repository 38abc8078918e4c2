"""Resource resolver and property compiler.

Turns a :class:`~specdoc.models.SchemaNode` into a :class:`~specdoc.models.Resource`
tree and, alongside it, a synthesized example fragment in which every leaf is
the *type label* of the property (``{"id": "integer"}``) rather than a sample
value.

Nested anonymous schemas are identified by their fully-qualified namespace
(FQNS): the ordered names of the properties leading to them. Namespaces are
immutable tuples; every recursive call receives its own extended copy.

Usage::

    resolver = ResourceResolver(method)
    resolved = resolver.resolve(schema, is_request=False)
    if resolved is not None:
        print(resolved.resource.id, resolved.example)
"""

from __future__ import annotations

import json
import logging
from typing import Any, NamedTuple, Optional

from specdoc.exceptions import StructuralError
from specdoc.models import Method, Resource, SchemaNode
from specdoc.normalizer.classifier import ARRAY, MAP, OBJECT, resolve_type
from specdoc.normalizer.examples import json_marshal_indent
from specdoc.normalizer.naming import title_to_kebab

logger = logging.getLogger(__name__)

ADDITIONAL_PROPERTIES_KEY = "<key>"
EXCLUDE_EXTENSION = "x-excludeFromOperations"


class Resolved(NamedTuple):
    """Result of resolving one schema node."""

    resource: Resource
    example: dict[str, Any]
    is_array: bool


def prepare_namespace(
    fqns: tuple[str, ...], resource_id: str, name: str, chopped: bool
) -> tuple[str, ...]:
    """Return the namespace a child property called *name* is resolved under.

    When the parent's identifier was chopped off the namespace it is put
    back, so the child is still qualified by its container.
    """
    if chopped and resource_id:
        return (*fqns, resource_id, name)
    return (*fqns, name)


def stringify_enum(values: list[Any]) -> list[str]:
    """Render enum values as strings; non-strings use their JSON spelling."""
    return [v if isinstance(v, str) else json.dumps(v) for v in values]


class ResourceResolver:
    """Resolve the schemas referenced by one method.

    The method supplies the context for diagnostics (verb and path) and the
    operation name checked against ``x-excludeFromOperations``.

    Args:
        method: The method whose body or response is being resolved.
        name_properties: Resolve each property under its own name, so a
            nested schema is titled after the property that holds it
            (OpenAPI 3.x).
    """

    def __init__(self, method: Method, name_properties: bool = False) -> None:
        self.method = method
        self.name_properties = name_properties

    # ------------------------------------------------------------------ #
    # Resolver
    # ------------------------------------------------------------------ #

    def resolve(
        self,
        node: Optional[SchemaNode],
        fqns: tuple[str, ...] = (),
        is_request: bool = False,
        name: str = "",
        force_map: bool = False,
    ) -> Optional[Resolved]:
        """Resolve *node* into a resource and its example fragment.

        Args:
            node: The schema to resolve. ``None`` yields ``None``.
            fqns: Namespace of the property being resolved; empty for a
                top-level request or response body.
            is_request: Whether the schema describes a request body.
                Read-only properties and ``x-excludeFromOperations`` only
                apply in that context.
            name: Externally supplied schema name (the component name of a
                referenced response or request body, or the property name
                when ``name_properties`` is set). Takes precedence over the
                schema's own title.
            force_map: Resolve *node* as the value schema of an
                ``additionalProperties`` declaration.

        Returns:
            A :class:`Resolved` tuple, or ``None`` when *node* is ``None``.

        Raises:
            StructuralError: If a top-level schema has no title to derive an
                identifier from.
        """
        if node is None:
            return None

        kind_node, types = resolve_type(node, force_map=force_map)
        title = name or kind_node.title
        resource_id = title_to_kebab(title)

        if not fqns and not resource_id:
            raise StructuralError(
                f"{self.method.method.upper()} {self.method.path} references a model "
                "definition that does not have a title member."
            )

        # Only objects keep a title-derived ID once nested.
        if fqns and OBJECT not in types:
            resource_id = ""

        is_array = types[0] == ARRAY
        if is_array and fqns:
            fqns = (*fqns[:-1], fqns[-1] + "[]")

        my_fqns = fqns
        chopped = False
        if not resource_id and my_fqns:
            resource_id = my_fqns[-1]
            my_fqns = my_fqns[:-1]
            chopped = True
            logger.debug("Chopped %s from namespace leaving %s", resource_id, my_fqns)

        resource_fqns = my_fqns
        if not chopped and OBJECT in types and resource_fqns:
            resource_id = resource_fqns[-1]
            resource_fqns = resource_fqns[:-1]

        resource = Resource(
            id=resource_id,
            fqns=list(resource_fqns),
            title=title,
            description=node.description or title,
            type=types,
            read_only=node.read_only,
        )
        if kind_node.example is not None:
            resource.example = json_marshal_indent(kind_node.example)
        if kind_node.enum:
            resource.enum = stringify_enum(kind_node.enum)
        if is_request:
            excluded = node.extensions.get(EXCLUDE_EXTENSION)
            if isinstance(excluded, list):
                resource.exclude_from_operations = [op for op in excluded if isinstance(op, str)]

        logger.debug("Create resource %s [%s] type %s", resource_id, title, types)

        required: set[str] = set()
        example: dict[str, Any] = {}
        for source in (kind_node, *kind_node.all_of):
            self._compile_properties(
                source, resource, resource_id, required, example, my_fqns, chopped, is_request
            )

        for prop_name, prop in resource.properties.items():
            if prop_name in required:
                prop.required = True

        return Resolved(resource, example, is_array)

    # ------------------------------------------------------------------ #
    # Property compiler
    # ------------------------------------------------------------------ #

    def _compile_properties(
        self,
        source: SchemaNode,
        resource: Resource,
        resource_id: str,
        required: set[str],
        example: dict[str, Any],
        fqns: tuple[str, ...],
        chopped: bool,
        is_request: bool,
    ) -> None:
        required.update(source.required)

        for prop_name, prop_node in source.properties.items():
            self._process_property(
                prop_node, prop_name, resource, resource_id, example, fqns, chopped, is_request
            )

        if source.additional_properties is not None:
            self._process_property(
                source.additional_properties,
                ADDITIONAL_PROPERTIES_KEY,
                resource,
                resource_id,
                example,
                fqns,
                chopped,
                is_request,
                force_map=True,
            )

    def _process_property(
        self,
        node: SchemaNode,
        prop_name: str,
        parent: Resource,
        parent_id: str,
        example: dict[str, Any],
        fqns: tuple[str, ...],
        chopped: bool,
        is_request: bool,
        force_map: bool = False,
    ) -> None:
        child_fqns = prepare_namespace(fqns, parent_id, prop_name, chopped)
        resolved = self.resolve(
            node,
            child_fqns,
            is_request,
            name=prop_name if self.name_properties else "",
            force_map=force_map,
        )
        prop, fragment = resolved.resource, resolved.example

        if is_request and prop.read_only:
            return
        if self.method.operation_name in prop.exclude_from_operations:
            logger.debug(
                "Property %s excluded from operation %s", prop_name, self.method.operation_name
            )
            return

        parent.properties[prop_name] = prop

        kind = prop.type[0]
        if kind == OBJECT:
            example[prop_name] = fragment
        elif kind == ARRAY:
            if node.items is None:
                example[prop_name] = [fragment]
                return
            prop.description = node.description
            if fragment:
                example[prop_name] = [fragment]
            elif len(prop.type) > 1 and prop.type[1] != OBJECT:
                example[prop_name] = [prop.type[1]]
            else:
                # Every member of the item object was filtered out.
                example[prop_name] = []
        elif kind == MAP:
            example[prop_name] = fragment if prop.type[1] == OBJECT else prop.type[1]
        else:
            example[prop_name] = kind
