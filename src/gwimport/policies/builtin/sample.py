"""Build sample payloads from JSON Schema fragments of imported documents."""

from __future__ import annotations

from typing import Any

_MAX_DEPTH = 6

_STRING_FORMATS = {
    "date": "2020-01-01",
    "date-time": "2020-01-01T00:00:00Z",
    "email": "user@example.com",
    "uuid": "00000000-0000-0000-0000-000000000000",
    "uri": "https://example.com",
    "hostname": "example.com",
    "ipv4": "127.0.0.1",
}


def sample_from_schema(schema: Any, depth: int = 0) -> Any:
    """Return a value matching *schema*.

    ``example``, ``default`` and the first ``enum`` entry win, in that
    order. Objects include every declared property, arrays a single item.
    Unresolved ``$ref`` objects and nesting past a fixed depth yield
    ``None``.
    """
    if not isinstance(schema, dict) or "$ref" in schema or depth > _MAX_DEPTH:
        return None
    for key in ("example", "default"):
        if key in schema:
            return schema[key]
    if isinstance(schema.get("enum"), list) and schema["enum"]:
        return schema["enum"][0]

    if "allOf" in schema:
        merged: dict[str, Any] = {}
        for part in schema["allOf"]:
            value = sample_from_schema(part, depth + 1)
            if isinstance(value, dict):
                merged.update(value)
        return merged
    for key in ("oneOf", "anyOf"):
        if isinstance(schema.get(key), list) and schema[key]:
            return sample_from_schema(schema[key][0], depth + 1)

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        schema_type = next((t for t in schema_type if t != "null"), None)
    if schema_type is None:
        schema_type = "object" if "properties" in schema else "array" if "items" in schema else None

    if schema_type == "object":
        properties = schema.get("properties")
        if not isinstance(properties, dict):
            return {}
        return {
            name: sample_from_schema(prop, depth + 1) for name, prop in properties.items()
        }
    if schema_type == "array":
        item = sample_from_schema(schema.get("items"), depth + 1)
        return [] if item is None else [item]
    if schema_type == "string":
        return _STRING_FORMATS.get(schema.get("format"), "string")
    if schema_type == "integer":
        return 0
    if schema_type == "number":
        return 0.0
    if schema_type == "boolean":
        return True
    return None
