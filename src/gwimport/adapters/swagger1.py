"""Swagger 1.x adapter.

Swagger 1.x splits an API into a *resource listing* (``apis[]`` entries with
only a ``path`` and a ``description``) and one *API declaration* per
resource (``apis[]`` entries carrying ``operations[]``). Only API
declarations describe operations, so listing entries are skipped.

Placeholders already use either ``{name}`` or ``:name``; both are normalized
to ``:name``. The declaration's ``basePath`` becomes the single server.
"""

from __future__ import annotations

import logging
from typing import Any

from gwimport.adapters.base import (
    DEFAULT_TITLE,
    DEFAULT_VERSION,
    SpecAdapter,
    as_list,
    as_mapping,
    extract_extensions,
    extract_parameters,
    http_method,
    normalize_path,
    string_list,
    text,
)
from gwimport.models import (
    AdaptedSpec,
    IntermediateOperation,
    Server,
    ServerInfo,
    SpecVersion,
)

logger = logging.getLogger(__name__)


class Swagger1Adapter(SpecAdapter):
    """Adapter for ``swaggerVersion: "1.x"`` documents."""

    spec_version = SpecVersion.SWAGGER_V1

    def adapt(self, document: dict[str, Any]) -> AdaptedSpec:
        info = as_mapping(document.get("info"))
        version = text(document.get("apiVersion")) or text(info.get("version"))
        base_path = text(document.get("basePath"))

        return AdaptedSpec(
            spec_version=self.spec_version,
            title=text(info.get("title")) or DEFAULT_TITLE,
            version=version or DEFAULT_VERSION,
            description=text(info.get("description")),
            operations=self._extract_operations(document),
            server_info=ServerInfo(servers=[Server(url=base_path)] if base_path else []),
            extensions=extract_extensions(document),
        )

    def _extract_operations(self, document: dict[str, Any]) -> list[IntermediateOperation]:
        produces = string_list(document.get("produces"))
        consumes = string_list(document.get("consumes"))
        operations: list[IntermediateOperation] = []

        for api in self._require_list(document, "apis"):
            if not isinstance(api, dict):
                continue
            raw_path = text(api.get("path")) or "/"
            raw_operations = api.get("operations")
            if raw_operations is None:
                logger.info("Skipping resource listing entry '%s': no inline operations", raw_path)
                continue

            path = normalize_path(raw_path)
            api_extensions = extract_extensions(api)

            for operation in as_list(raw_operations):
                if not isinstance(operation, dict):
                    continue
                method = http_method(operation.get("method", operation.get("httpMethod")))
                if method is None:
                    logger.warning("Skipping operation on '%s': unknown HTTP method", raw_path)
                    continue

                operations.append(
                    IntermediateOperation(
                        path=path,
                        raw_path=raw_path,
                        method=method,
                        operation_id=text(operation.get("nickname")),
                        summary=text(operation.get("summary")),
                        description=text(operation.get("notes")),
                        consumes=string_list(operation.get("consumes")) or consumes,
                        produces=string_list(operation.get("produces")) or produces,
                        parameters=extract_parameters(
                            [p for p in as_list(operation.get("parameters")) if isinstance(p, dict)]
                        ),
                        responses=_response_messages(operation),
                        vendor_extensions={**api_extensions, **extract_extensions(operation)},
                        deprecated=str(operation.get("deprecated", "false")).lower() == "true",
                    )
                )

        return operations


def _response_messages(operation: dict[str, Any]) -> dict[str, Any]:
    """Index ``responseMessages`` by status code."""
    responses: dict[str, Any] = {}
    for message in as_list(operation.get("responseMessages")):
        if isinstance(message, dict) and "code" in message:
            responses[str(message["code"])] = message
    return responses
