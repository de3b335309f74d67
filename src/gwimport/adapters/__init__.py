"""Version adapters -- one per supported :class:`~gwimport.models.SpecVersion`.

Each adapter converts a parsed document into an
:class:`~gwimport.models.AdaptedSpec`, the version-independent input of the
target resolver, the path builder and the extension mapper.
"""

from __future__ import annotations

from gwimport.adapters.base import SpecAdapter, normalize_path
from gwimport.adapters.openapi3 import OpenAPI3Adapter
from gwimport.adapters.swagger1 import Swagger1Adapter
from gwimport.adapters.swagger2 import Swagger2Adapter
from gwimport.models import SpecVersion

_ADAPTERS: dict[SpecVersion, type[SpecAdapter]] = {
    SpecVersion.SWAGGER_V1: Swagger1Adapter,
    SpecVersion.SWAGGER_V2: Swagger2Adapter,
    SpecVersion.OPENAPI_V3: OpenAPI3Adapter,
}


def get_adapter(version: SpecVersion) -> SpecAdapter:
    """Return a fresh adapter for *version*."""
    return _ADAPTERS[version]()


__all__ = [
    "OpenAPI3Adapter",
    "SpecAdapter",
    "Swagger1Adapter",
    "Swagger2Adapter",
    "get_adapter",
    "normalize_path",
]
