"""Detect the encoding and the spec version of a raw API descriptor.

The content is probed structurally rather than by file extension: JSON is
attempted first (it is stricter and faster), YAML second. Once a mapping is
obtained, the top-level version marker decides which adapter handles it:

======================================  =================================
Marker                                  :class:`~gwimport.models.SpecVersion`
======================================  =================================
``openapi: "3.x"``                      ``OPENAPI_V3``
``swagger: "2.x"``                      ``SWAGGER_V2``
``swagger: "1.x"`` / ``swaggerVersion``  ``SWAGGER_V1``
======================================  =================================

Vendor extensions (``x-*``) are ordinary keys of the parsed mapping and are
never filtered out here.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import yaml

from gwimport.exceptions import MalformedDocumentError, UnsupportedSpecVersionError
from gwimport.models import SpecVersion

logger = logging.getLogger(__name__)


def parse_document(content: str) -> tuple[dict[str, Any], SpecVersion]:
    """Parse *content* and detect its spec version.

    Args:
        content: Raw descriptor text, as returned by
            :func:`~gwimport.parser.loader.load_source`.

    Returns:
        A ``(document, version)`` tuple.

    Raises:
        MalformedDocumentError: If the content is neither JSON nor YAML, or
            is not a mapping.
        UnsupportedSpecVersionError: If no supported version marker is found.
    """
    document = parse_content(content)
    version = detect_version(document)
    logger.debug("Detected %s document", version.value)
    return document, version


def parse_content(content: str) -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first, then falls back to YAML. Valid JSON is also valid YAML,
    but JSON parsing is stricter and faster.

    Raises:
        MalformedDocumentError: If the content cannot be parsed as either
            format, or does not hold a mapping.
    """
    try:
        result = json.loads(content)
    except json.JSONDecodeError as json_error:
        try:
            result = yaml.safe_load(content)
        except yaml.YAMLError as yaml_error:
            raise MalformedDocumentError(
                "Failed to parse descriptor as JSON or YAML"
                f"\n  JSON error: {json_error}"
                f"\n  YAML error: {yaml_error}"
            ) from yaml_error

    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise MalformedDocumentError(f"Descriptor must be a JSON/YAML object (got {kind})")
    return result


def detect_version(document: dict[str, Any]) -> SpecVersion:
    """Return the :class:`~gwimport.models.SpecVersion` declared by *document*.

    Raises:
        UnsupportedSpecVersionError: If the marker is missing or names a
            version outside 1.x, 2.x and 3.x.
    """
    if "openapi" in document:
        marker = str(document["openapi"])
        if marker.startswith("3."):
            return SpecVersion.OPENAPI_V3
        raise UnsupportedSpecVersionError(
            f"Unsupported OpenAPI version: {marker}", location="openapi"
        )

    if "swagger" in document:
        marker = str(document["swagger"])
        if marker.startswith("2."):
            return SpecVersion.SWAGGER_V2
        if marker.startswith("1."):
            return SpecVersion.SWAGGER_V1
        raise UnsupportedSpecVersionError(
            f"Unsupported Swagger version: {marker}", location="swagger"
        )

    if "swaggerVersion" in document:
        marker = str(document["swaggerVersion"])
        if marker.startswith("1."):
            return SpecVersion.SWAGGER_V1
        raise UnsupportedSpecVersionError(
            f"Unsupported Swagger version: {marker}", location="swaggerVersion"
        )

    raise UnsupportedSpecVersionError(
        "Missing version marker: expected 'openapi', 'swagger' or 'swaggerVersion'"
    )
