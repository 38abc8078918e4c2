"""Identifier helpers turning human titles and operation names into slugs.

The IDs produced here end up in permalinks, so they must be stable for a
given input and contain only URL-safe characters.
"""

from __future__ import annotations

import re

# Any character that is neither a word character nor whitespace.
_KEBAB_EXCLUDE = re.compile(r"[^\w\s]")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def title_to_kebab(title: str) -> str:
    """Lower-case *title*, drop punctuation, and join words with ``-``.

    Only single spaces are translated, so ``"Pet  Store"`` becomes
    ``"pet--store"``; callers rely on the mapping being one-to-one rather
    than pretty.

    Example::

        title_to_kebab("Swagger Petstore (v2)")  # "swagger-petstore-v2"
    """
    slug = title.lower()
    slug = _KEBAB_EXCLUDE.sub("", slug)
    return slug.replace(" ", "-")


def camel_to_snake(name: str) -> str:
    """Convert ``camelCase``/``PascalCase`` to ``snake_case``.

    Runs of capitals are treated as one word (``"getHTTPStatus"`` becomes
    ``"get_http_status"``). Input that is already snake or kebab case passes
    through unchanged apart from lower-casing.
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def camel_to_kebab(name: str) -> str:
    """Convert a camel-case operation ID to kebab case (``listPets`` -> ``list-pets``)."""
    return camel_to_snake(name).replace("_", "-")
