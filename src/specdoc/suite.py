"""Load one or many API descriptions into :class:`~specdoc.models.Specification` objects.

Each load is all-or-nothing: the document is read, its references
resolved, it is projected and normalized, and any failure along the way is
logged and re-raised. No partial specification is returned.

In *collapse* mode every document is loaded, in order, into one shared
aggregate, so later documents add their groups and resources to those of
earlier ones.
"""

from __future__ import annotations

import logging
from typing import Optional

from specdoc.exceptions import SpecdocError
from specdoc.models import Specification
from specdoc.normalizer import SpecificationBuilder
from specdoc.parser import load_spec, project_document

logger = logging.getLogger(__name__)


def load_specification(source: str, into: Optional[Specification] = None) -> Specification:
    """Load the API description at *source*.

    Args:
        source: File path, ``http(s)`` URL, or ``-`` for stdin.
        into: Existing specification to load into (collapse mode).

    Returns:
        The populated specification (*into* itself when given).

    Raises:
        SpecParseError: If the document cannot be loaded or is of an
            unsupported dialect.
        StructuralError: If the document violates an invariant the
            documentation model depends on.
    """
    try:
        raw = load_spec(source)
        document = project_document(raw)
        logger.info("Loaded %s (%s)", source, document.dialect.value)
        return SpecificationBuilder(document, into, url=source).build()
    except SpecdocError as exc:
        logger.error("Failed to load %s: %s", source, exc)
        raise


def load_specifications(sources: list[str], collapse: bool = False) -> dict[str, Specification]:
    """Load every source, keyed by specification ID.

    Args:
        sources: Locations of the documents to load, in order.
        collapse: Merge every document into a single specification.

    Returns:
        Mapping of :attr:`Specification.id` to specification. With
        *collapse*, the single entry is keyed by the ID of the last document.
    """
    suite: dict[str, Specification] = {}
    shared: Optional[Specification] = None

    for source in sources:
        if collapse:
            shared = load_specification(source, into=shared)
            suite = {shared.id: shared}
        else:
            specification = load_specification(source)
            suite[specification.id] = specification

    return suite
