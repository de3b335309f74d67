"""OpenAPI 3.x adapter.

Walks a ``$ref``-resolved OpenAPI 3.0/3.1 document and produces one
:class:`~gwimport.models.IntermediateOperation` per path + HTTP method.

Document-level ``servers`` (including their URL template variables) feed the
:class:`~gwimport.models.ServerInfo`; path- and operation-level ``servers``
are kept on the operation for reference only. Request and response media
types become ``consumes``/``produces``, and response ``example``/``examples``
become the operation's examples. ``links`` and ``callbacks`` travel
unmodified.
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
    ServerVariable,
    SpecVersion,
)
from gwimport.parser.resolver import resolve_refs

logger = logging.getLogger(__name__)


class OpenAPI3Adapter(SpecAdapter):
    """Adapter for ``openapi: "3.x"`` documents."""

    spec_version = SpecVersion.OPENAPI_V3

    def adapt(self, document: dict[str, Any]) -> AdaptedSpec:
        spec = resolve_refs(document)
        info = as_mapping(spec.get("info"))

        return AdaptedSpec(
            spec_version=self.spec_version,
            title=text(info.get("title")) or DEFAULT_TITLE,
            version=text(info.get("version")) or DEFAULT_VERSION,
            description=text(info.get("description")),
            operations=self._extract_operations(spec),
            server_info=ServerInfo(servers=_to_servers(self._require_list(spec, "servers"))),
            extensions=extract_extensions(spec),
        )

    def _extract_operations(self, spec: dict[str, Any]) -> list[IntermediateOperation]:
        """Extract every operation, in document order.

        Path-level parameters are merged with operation-level parameters;
        operation-level wins for the same ``name`` and ``in``.
        """
        paths = self._require_mapping(spec, "paths")
        operations: list[IntermediateOperation] = []

        for raw_path, path_item in paths.items():
            if not isinstance(path_item, dict):
                logger.warning("Skipping path '%s': path item is not an object", raw_path)
                continue

            path = normalize_path(str(raw_path))
            path_params = as_list(path_item.get("parameters"))
            path_extensions = extract_extensions(path_item)
            path_servers = _to_servers(as_list(path_item.get("servers")))

            for key, operation in path_item.items():
                method = http_method(key)
                if method is None or not isinstance(operation, dict):
                    continue

                params = merge_parameters(path_params, as_list(operation.get("parameters")))
                request_body = operation.get("requestBody")
                request_body = request_body if isinstance(request_body, dict) else None
                responses = {
                    str(status): response
                    for status, response in as_mapping(operation.get("responses")).items()
                }
                callbacks = operation.get("callbacks")

                operations.append(
                    IntermediateOperation(
                        path=path,
                        raw_path=str(raw_path),
                        method=method,
                        operation_id=text(operation.get("operationId")),
                        summary=text(operation.get("summary")),
                        description=text(operation.get("description")),
                        tags=string_list(operation.get("tags")),
                        consumes=list(as_mapping(as_mapping(request_body).get("content"))),
                        produces=_response_media_types(responses),
                        parameters=extract_parameters(params),
                        request_body=request_body,
                        responses=responses,
                        examples=_extract_examples(responses),
                        links=_extract_links(responses),
                        callbacks=callbacks if isinstance(callbacks, dict) else None,
                        vendor_extensions={**path_extensions, **extract_extensions(operation)},
                        deprecated=bool(operation.get("deprecated", False)),
                        servers=_to_servers(as_list(operation.get("servers"))) or path_servers,
                    )
                )

        return operations


def _to_servers(raw_servers: list[Any]) -> list[Server]:
    """Convert raw server objects, stringifying variable values parsed from YAML."""
    servers: list[Server] = []
    for raw in raw_servers:
        if not isinstance(raw, dict):
            continue
        variables: dict[str, ServerVariable] = {}
        for name, variable in as_mapping(raw.get("variables")).items():
            variable = as_mapping(variable)
            variables[str(name)] = ServerVariable(
                default=text(variable.get("default")),
                enum=string_list(variable.get("enum")),
                description=text(variable.get("description")),
            )
        servers.append(
            Server(
                url=text(raw.get("url")) or "/",
                description=text(raw.get("description")),
                variables=variables,
            )
        )
    return servers


def _response_media_types(responses: dict[str, Any]) -> list[str]:
    media_types: list[str] = []
    for response in responses.values():
        for media_type in as_mapping(as_mapping(response).get("content")):
            if media_type not in media_types:
                media_types.append(media_type)
    return media_types


def _extract_examples(responses: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Collect one example per response media type.

    A media type's ``example`` wins over its ``examples`` map, of which the
    first entry's ``value`` is used.
    """
    examples: dict[str, dict[str, Any]] = {}
    for status, response in responses.items():
        for media_type, media in as_mapping(as_mapping(response).get("content")).items():
            media = as_mapping(media)
            if "example" in media:
                examples.setdefault(status, {})[media_type] = media["example"]
                continue
            for example in as_mapping(media.get("examples")).values():
                if isinstance(example, dict) and "value" in example:
                    examples.setdefault(status, {})[media_type] = example["value"]
                    break
    return examples


def _extract_links(responses: dict[str, Any]) -> dict[str, Any] | None:
    links = {
        status: as_mapping(response)["links"]
        for status, response in responses.items()
        if as_mapping(response).get("links")
    }
    return links or None
