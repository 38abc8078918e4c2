"""Serialise synthesized and declared examples to JSON text.

The rendering layer embeds these strings in HTML ``<pre>`` blocks, so the
characters ``<``, ``>`` and ``&`` must appear literally rather than as
``\\u003c``-style escapes. :func:`json.dumps` never escapes them, and with
``ensure_ascii=False`` non-ASCII text is kept as-is too. Object keys are
sorted so that the output is stable regardless of declaration order.
"""

from __future__ import annotations

import json
from typing import Any

_INDENT = 4


def json_marshal_indent(value: Any) -> str:
    """Serialise *value* as indented JSON without HTML-escaping.

    Args:
        value: Any JSON-compatible value (dicts, lists, scalars). Values the
            encoder does not know (dates from YAML documents) are stringified.

    Returns:
        The JSON text, indented by four spaces, keys sorted.
    """
    return json.dumps(value, indent=_INDENT, sort_keys=True, ensure_ascii=False, default=str)


def json_resource_to_string(fragment: dict[str, Any] | None, is_array: bool) -> str:
    """Serialise an example fragment, wrapping it in a list when *is_array*.

    Args:
        fragment: The example mapping built by the property compiler.
        is_array: Whether the owning schema denotes an array.

    Returns:
        JSON text for the example payload.
    """
    payload: Any = fragment if fragment is not None else {}
    if is_array:
        payload = [payload]
    return json_marshal_indent(payload)
