"""Per-version resource cache that deduplicates and cross-links resources.

A resource seen in a response body is authoritative; one seen only in a
request body is tentative and is replaced by the first response sighting of
the same ID, which inherits every method the tentative entry collected.
"""

from __future__ import annotations

import logging

from specdoc.models import Method, Resource, ResourceOrigin

logger = logging.getLogger(__name__)


class ResourceCache:
    """Deduplicate resources by ``(version, id)`` and record their methods.

    The cache stores its entries in the mapping it is given, normally
    :attr:`Specification.resource_list <specdoc.models.Specification.resource_list>`,
    so the aggregate owns the result and several specifications can be
    loaded independently.

    Args:
        resource_list: Mapping of version to a mapping of resource ID to
            resource. Mutated in place.
    """

    def __init__(self, resource_list: dict[str, dict[str, Resource]]) -> None:
        self.resource_list = resource_list

    def get(self, version: str, resource_id: str) -> Resource | None:
        """Return the cached resource for *resource_id* in *version*, if any."""
        return self.resource_list.get(version, {}).get(resource_id)

    def link(self, resource: Resource, method: Method, version: str) -> Resource:
        """Cache *resource* for *version* and record that *method* uses it.

        Args:
            resource: A freshly resolved resource with its ``origin`` set.
            method: The method referencing the resource.
            version: The API version the method belongs to.

        Returns:
            The canonical resource now held by the cache. Callers should
            reference this object rather than *resource*.
        """
        by_id = self.resource_list.setdefault(version, {})
        cached = by_id.get(resource.id)

        canonical = cached if cached is not None else resource
        canonical.methods[method.id] = method

        if cached is None:
            logger.debug("Caching %s resource %s (%s)", resource.origin.value, resource.id, version)
            by_id[resource.id] = resource
            return resource

        if (
            resource.origin is ResourceOrigin.METHOD_RESPONSE
            and cached.origin is ResourceOrigin.REQUEST_BODY
        ):
            logger.debug("Response resource %s replaces request resource (%s)", resource.id, version)
            resource.methods = cached.methods
            by_id[resource.id] = resource
            return resource

        return cached
