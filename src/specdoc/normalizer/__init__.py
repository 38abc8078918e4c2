"""Schema normalization and resource resolution engine.

Turns a :class:`~specdoc.models.SourceDocument` into the cross-linked
documentation graph rooted at :class:`~specdoc.models.Specification`.

Sub-modules, leaf first:

* :mod:`~specdoc.normalizer.naming` -- identifiers from titles and names.
* :mod:`~specdoc.normalizer.examples` -- JSON example serialisation.
* :mod:`~specdoc.normalizer.classifier` -- object/array/map/primitive kinds.
* :mod:`~specdoc.normalizer.resources` -- resource resolver and property
  compiler.
* :mod:`~specdoc.normalizer.linker` -- per-version resource cache.
* :mod:`~specdoc.normalizer.builder` -- groups, methods, parameters,
  responses and security.
"""

from specdoc.normalizer.builder import SpecificationBuilder
from specdoc.normalizer.linker import ResourceCache
from specdoc.normalizer.resources import ResourceResolver

__all__ = ["ResourceCache", "ResourceResolver", "SpecificationBuilder"]
