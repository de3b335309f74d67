"""Inline internal ``$ref`` pointers of Swagger 2 and OpenAPI 3 documents.

Adapters read parameters, request bodies and schemas through this module so
they never have to follow ``{"$ref": "#/definitions/Pet"}`` themselves.

Only pointers into the same document (``#/...``) are followed. External
references, and internal ones whose target is missing, stay in place: an
import keeps whatever it can recover from a partially broken document.

A reference met again while its own target is being inlined (a tree schema
whose children are of the same type) is kept as a ``$ref`` at that point.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

logger = logging.getLogger(__name__)


class _UnresolvableRef(LookupError):
    """A pointer segment does not exist in the document."""


def resolve_refs(spec: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *spec* with every resolvable internal ``$ref`` inlined.

    The input is never modified and the result shares no container with it.

    Example::

        document, _ = parse_document(text)
        resolved = resolve_refs(document)
        resolved["paths"]["/pets"]["post"]["parameters"][0]["schema"]
        # {"type": "object", ...} instead of {"$ref": "#/definitions/Pet"}
    """
    return _inline(spec, spec, ())


def _lookup_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Follow the JSON Pointer of an internal reference (``#/a/b/0``).

    Segments are unescaped per RFC 6901 (``~1`` is ``/``, ``~0`` is ``~``).

    Raises:
        _UnresolvableRef: If a segment is missing or cannot be navigated.
    """
    node: Any = root
    for raw in ref[2:].split("/"):
        segment = raw.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict):
            if segment not in node:
                raise _UnresolvableRef(f"key '{segment}' not found")
            node = node[segment]
        elif isinstance(node, list):
            if not segment.isdigit() or int(segment) >= len(node):
                raise _UnresolvableRef(f"invalid array index '{segment}'")
            node = node[int(segment)]
        else:
            raise _UnresolvableRef(f"cannot navigate into {type(node).__name__}")
    return node


def _inline(node: Any, root: dict[str, Any], active: tuple[str, ...]) -> Any:
    # ``active`` holds the references being inlined above this node; each
    # branch gets its own, so siblings pointing at one target both resolve.
    if isinstance(node, list):
        return [_inline(item, root, active) for item in node]
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if not isinstance(ref, str):
        return {key: _inline(value, root, active) for key, value in node.items()}

    if ref in active:
        return copy.deepcopy(node)
    if not ref.startswith("#/"):
        logger.debug("Leaving external $ref unresolved: %s", ref)
        return copy.deepcopy(node)
    try:
        target = _lookup_pointer(ref, root)
    except _UnresolvableRef as exc:
        logger.warning("Cannot resolve $ref '%s': %s", ref, exc)
        return copy.deepcopy(node)
    return _inline(target, root, active + (ref,))
