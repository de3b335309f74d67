"""Swagger 2.0 adapter.

Walks a ``$ref``-resolved Swagger 2.0 document and produces one
:class:`~gwimport.models.IntermediateOperation` per path + HTTP method.

The backend location is assembled from ``schemes``, ``host`` and
``basePath``: the first listed scheme wins and ``https`` is assumed when the
document lists none. Without a ``host`` the base path alone becomes the
target; without either the document declares no server at all.
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
    merge_parameters,
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
from gwimport.parser.resolver import resolve_refs

logger = logging.getLogger(__name__)


class Swagger2Adapter(SpecAdapter):
    """Adapter for ``swagger: "2.0"`` documents."""

    spec_version = SpecVersion.SWAGGER_V2

    def adapt(self, document: dict[str, Any]) -> AdaptedSpec:
        spec = resolve_refs(document)
        info = as_mapping(spec.get("info"))

        return AdaptedSpec(
            spec_version=self.spec_version,
            title=text(info.get("title")) or DEFAULT_TITLE,
            version=text(info.get("version")) or DEFAULT_VERSION,
            description=text(info.get("description")),
            operations=self._extract_operations(spec),
            server_info=ServerInfo(servers=_extract_servers(spec)),
            extensions=extract_extensions(spec),
        )

    def _extract_operations(self, spec: dict[str, Any]) -> list[IntermediateOperation]:
        """Extract every operation, in document order.

        ``consumes`` and ``produces`` fall back to the document-level lists
        when an operation does not declare its own.
        """
        paths = self._require_mapping(spec, "paths")
        doc_consumes = string_list(spec.get("consumes"))
        doc_produces = string_list(spec.get("produces"))
        operations: list[IntermediateOperation] = []

        for raw_path, path_item in paths.items():
            if not isinstance(path_item, dict):
                logger.warning("Skipping path '%s': path item is not an object", raw_path)
                continue

            path = normalize_path(str(raw_path))
            path_params = as_list(path_item.get("parameters"))
            path_extensions = extract_extensions(path_item)

            for key, operation in path_item.items():
                method = http_method(key)
                if method is None or not isinstance(operation, dict):
                    continue

                params = merge_parameters(path_params, as_list(operation.get("parameters")))
                responses = {
                    str(status): response
                    for status, response in as_mapping(operation.get("responses")).items()
                }

                operations.append(
                    IntermediateOperation(
                        path=path,
                        raw_path=str(raw_path),
                        method=method,
                        operation_id=text(operation.get("operationId")),
                        summary=text(operation.get("summary")),
                        description=text(operation.get("description")),
                        tags=string_list(operation.get("tags")),
                        consumes=string_list(operation.get("consumes")) or doc_consumes,
                        produces=string_list(operation.get("produces")) or doc_produces,
                        parameters=extract_parameters(params),
                        responses=responses,
                        examples=_extract_examples(responses),
                        vendor_extensions={**path_extensions, **extract_extensions(operation)},
                        deprecated=bool(operation.get("deprecated", False)),
                    )
                )

        return operations


def _extract_servers(spec: dict[str, Any]) -> list[Server]:
    """Fold ``schemes``/``host``/``basePath`` into at most one server."""
    host = text(spec.get("host"))
    base_path = text(spec.get("basePath")) or ""
    if base_path and not base_path.startswith("/"):
        base_path = "/" + base_path

    if not host:
        return [Server(url=base_path)] if base_path else []

    schemes = string_list(spec.get("schemes"))
    scheme = schemes[0] if schemes else "https"
    return [Server(url=f"{scheme}://{host}{base_path.rstrip('/')}")]


def _extract_examples(responses: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Collect the ``examples`` map (media type -> example) of every response."""
    examples: dict[str, dict[str, Any]] = {}
    for status, response in responses.items():
        response_examples = as_mapping(as_mapping(response).get("examples"))
        if response_examples:
            examples[status] = dict(response_examples)
    return examples
