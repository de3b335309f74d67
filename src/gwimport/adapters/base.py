"""Adapter contract and the helpers shared by every version adapter.

A version adapter turns the parsed document of one spec family into an
:class:`~gwimport.models.AdaptedSpec`. The helpers here implement the parts
that do not depend on the family: path normalization, vendor-extension
extraction, parameter merging and parameter conversion.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Optional

from gwimport.exceptions import MalformedDocumentError
from gwimport.models import (
    AdaptedSpec,
    HTTPMethod,
    Parameter,
    ParameterLocation,
    SpecVersion,
)

_TEMPLATE_PARAM = re.compile(r"\{([^/{}]+)\}")
_REPEATED_SLASHES = re.compile(r"/{2,}")

DEFAULT_TITLE = "Untitled API"
DEFAULT_VERSION = "0.0.0"


class SpecAdapter(ABC):
    """Converts one spec family into the common intermediate model."""

    spec_version: SpecVersion

    @abstractmethod
    def adapt(self, document: dict[str, Any]) -> AdaptedSpec:
        """Convert *document* into an :class:`~gwimport.models.AdaptedSpec`.

        Raises:
            MalformedDocumentError: If the document breaks the structure of
                its version in a way that cannot be recovered.
        """

    def _require_mapping(self, container: dict[str, Any], key: str) -> dict[str, Any]:
        """Return ``container[key]`` as a mapping; absent means empty."""
        value = container.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise MalformedDocumentError(
                f"'{key}' must be an object (got {type(value).__name__})",
                spec_version=self.spec_version,
                location=key,
            )
        return value

    def _require_list(self, container: dict[str, Any], key: str) -> list[Any]:
        """Return ``container[key]`` as a list; absent means empty."""
        value = container.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise MalformedDocumentError(
                f"'{key}' must be an array (got {type(value).__name__})",
                spec_version=self.spec_version,
                location=key,
            )
        return value


def normalize_path(raw_path: str) -> str:
    """Normalize a path template to the ``:name`` placeholder syntax.

    ``{name}`` placeholders become ``:name`` (``:name`` is kept as is),
    repeated slashes collapse, a leading slash is ensured and a trailing
    slash is dropped, except for the root path.

    Example::

        normalize_path("/pets/{petId}/")   # "/pets/:petId"
        normalize_path("pets/:petId")      # "/pets/:petId"
    """
    path = _TEMPLATE_PARAM.sub(r":\1", raw_path.strip())
    path = _REPEATED_SLASHES.sub("/", path)
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def http_method(key: Any) -> Optional[HTTPMethod]:
    """Return the :class:`~gwimport.models.HTTPMethod` named by *key*, if any."""
    if not isinstance(key, str):
        return None
    try:
        return HTTPMethod(key.lower())
    except ValueError:
        return None


def extract_extensions(mapping: Any) -> dict[str, Any]:
    """Return the ``x-*`` entries of *mapping*, values untouched."""
    if not isinstance(mapping, dict):
        return {}
    return {
        key: value
        for key, value in mapping.items()
        if isinstance(key, str) and key.startswith("x-")
    }


def as_mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def text(value: Any) -> Optional[str]:
    """Stringify scalar values parsed from YAML, keeping ``None``."""
    return None if value is None else str(value)


def string_list(value: Any) -> list[str]:
    """Coerce a scalar or a list into an order-preserving list of unique strings."""
    if value is None:
        return []
    items = value if isinstance(value, list) else [value]
    result: list[str] = []
    for item in items:
        if item is None:
            continue
        item = str(item)
        if item not in result:
            result.append(item)
    return result


def merge_parameters(
    path_params: list[Any],
    op_params: list[Any],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` or ``paramType`` field).

    Args:
        path_params: Parameters defined at the path level.
        op_params: Parameters defined at the operation level.

    Returns:
        A merged list of parameter dicts.
    """
    path_params = [p for p in path_params if isinstance(p, dict)]
    op_params = [p for p in op_params if isinstance(p, dict)]

    op_keys = {_parameter_key(param) for param in op_params}
    merged = [param for param in path_params if _parameter_key(param) not in op_keys]
    merged.extend(op_params)
    return merged


def _parameter_key(param: dict[str, Any]) -> tuple[str, str]:
    return (str(param.get("name", "")), str(param.get("in", param.get("paramType", ""))))


def extract_parameters(params_list: list[dict[str, Any]]) -> list[Parameter]:
    """Convert raw parameter dicts of any version into :class:`~gwimport.models.Parameter`.

    OpenAPI 3 and Swagger 2 body parameters carry a ``schema`` object;
    Swagger 2 non-body parameters and Swagger 1 parameters carry ``type``,
    ``format``, ``enum`` and ``default``/``defaultValue`` directly. Path
    parameters are always required. Parameters with unrecognised locations
    are skipped.
    """
    parameters: list[Parameter] = []

    for param in params_list:
        location_str = param.get("in", param.get("paramType", "query"))
        if location_str == "form":
            location_str = ParameterLocation.FORM.value
        try:
            location = ParameterLocation(location_str)
        except ValueError:
            continue

        schema = param.get("schema")
        source = schema if isinstance(schema, dict) else param
        default = source.get("default", param.get("defaultValue"))
        enum_values = source.get("enum")

        required = bool(param.get("required", False))
        if location == ParameterLocation.PATH:
            required = True

        parameters.append(
            Parameter(
                name=str(param.get("name", "")),
                location=location,
                required=required,
                description=text(param.get("description")),
                schema_type=_schema_type(source),
                schema_format=text(source.get("format")),
                default=default,
                enum_values=enum_values if isinstance(enum_values, list) else None,
                example=param.get("example", source.get("example")),
                schema=schema if isinstance(schema, dict) else None,
            )
        )

    return parameters


def _schema_type(schema: dict[str, Any]) -> str:
    """Extract the type string from a schema or Swagger parameter object.

    Handles OpenAPI 3.1 type arrays (e.g., ["string", "null"]) by returning
    the first non-null type. Falls back to "string" if type is missing.
    """
    type_value = schema.get("type", "string")

    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else "string"

    return str(type_value)
