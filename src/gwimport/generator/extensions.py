"""Map the document-level definition extension onto an API draft fragment.

The extension is a single vendor object, ``x-graviteeio-definition`` by
default::

    x-graviteeio-definition:
      categories: [cat1, cat2]
      groups: [group1, group2]
      labels: [label1, label2]
      tags: [tag1, tag2]
      visibility: PRIVATE
      picture: data:image/png;base64,iVBOR...
      virtualHosts:
        - host: myHost
          path: myPath
          overrideEntrypoint: false
      properties:
        - key: prop1
          value: propValue1
      metadata:
        - name: meta1
          value: 1234
          format: NUMERIC

Mapping is tolerant: an entry of the wrong shape is skipped with a warning
and unknown keys are ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from gwimport.groups import GroupLookup
from gwimport.models import (
    ExtensionFragment,
    Metadata,
    MetadataFormat,
    VirtualHost,
    Visibility,
)

logger = logging.getLogger(__name__)

DEFINITION_EXTENSION = "x-graviteeio-definition"


def map_extensions(
    extensions: dict[str, Any],
    group_lookup: Optional[GroupLookup] = None,
    key: str = DEFINITION_EXTENSION,
) -> ExtensionFragment:
    """Read the definition extension found under *key* in *extensions*.

    Args:
        extensions: Document-level ``x-*`` fields.
        group_lookup: Resolves group names to group ids. Without a lookup,
            groups are ignored.
        key: Name of the vendor extension holding the definition.

    Returns:
        The fragment to merge into the draft. An absent extension yields
        the defaults (public, nothing else set).
    """
    definition = extensions.get(key)
    if definition is None:
        return ExtensionFragment()
    if not isinstance(definition, dict):
        logger.warning("Ignoring '%s': expected an object, got %s", key, type(definition).__name__)
        return ExtensionFragment()

    return ExtensionFragment(
        groups=_resolve_groups(_names(definition, "groups"), group_lookup),
        categories=_names(definition, "categories"),
        tags=_names(definition, "tags"),
        labels=_names(definition, "labels"),
        properties=_properties(definition.get("properties")),
        metadata=_metadata(definition.get("metadata")),
        visibility=_visibility(definition.get("visibility")),
        picture=None if definition.get("picture") is None else str(definition["picture"]),
        virtual_hosts=_virtual_hosts(definition.get("virtualHosts")),
    )


def _names(definition: dict[str, Any], field: str) -> list[str]:
    value = definition.get(field)
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    names: list[str] = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            logger.warning("Ignoring %s entry %r", field, item)
            continue
        item = str(item)
        if item not in names:
            names.append(item)
    return names


def _resolve_groups(names: list[str], group_lookup: Optional[GroupLookup]) -> list[str]:
    if group_lookup is None:
        return []
    group_ids: list[str] = []
    for name in names:
        matches = group_lookup.find_groups_by_name(name)
        if not matches:
            logger.info("No group named '%s', skipping", name)
        for group in matches:
            if group.id not in group_ids:
                group_ids.append(group.id)
    return group_ids


def _properties(value: Any) -> dict[str, str]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return {str(k): str(v) for k, v in value.items() if v is not None}

    properties: dict[str, str] = {}
    for entry in value if isinstance(value, list) else []:
        if not isinstance(entry, dict) or entry.get("key") is None:
            logger.warning("Ignoring property entry %r", entry)
            continue
        properties[str(entry["key"])] = "" if entry.get("value") is None else str(entry["value"])
    return properties


def _metadata(value: Any) -> list[Metadata]:
    # Keyed by name: a repeated name replaces the earlier value in place.
    entries: dict[str, Metadata] = {}
    for entry in value if isinstance(value, list) else []:
        if not isinstance(entry, dict) or entry.get("name") is None:
            logger.warning("Ignoring metadata entry %r", entry)
            continue
        name = str(entry["name"])
        raw_value = entry.get("value")
        entries[name] = Metadata(
            name=name,
            value="" if raw_value is None else _stringify(raw_value),
            format=_metadata_format(entry.get("format"), name),
        )
    return list(entries.values())


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _metadata_format(value: Any, name: str) -> MetadataFormat:
    if value is None:
        return MetadataFormat.STRING
    try:
        return MetadataFormat(str(value).upper())
    except ValueError:
        logger.warning("Unknown format '%s' for metadata '%s', using STRING", value, name)
        return MetadataFormat.STRING


def _visibility(value: Any) -> Visibility:
    if value is None:
        return Visibility.PUBLIC
    try:
        return Visibility(str(value).upper())
    except ValueError:
        logger.warning("Unknown visibility '%s', using PUBLIC", value)
        return Visibility.PUBLIC


def _virtual_hosts(value: Any) -> Optional[list[VirtualHost]]:
    if not isinstance(value, list):
        return None
    virtual_hosts: list[VirtualHost] = []
    for entry in value:
        if not isinstance(entry, dict):
            logger.warning("Ignoring virtual host entry %r", entry)
            continue
        virtual_hosts.append(
            VirtualHost(
                host=None if entry.get("host") is None else str(entry["host"]),
                path=str(entry.get("path") or "/"),
                override_entrypoint=bool(entry.get("overrideEntrypoint", False)),
            )
        )
    return virtual_hosts or None
