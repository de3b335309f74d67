"""The import pipeline: descriptor in, :class:`~gwimport.models.ApiDraft` out.

Stages, in order:

1. :func:`~gwimport.parser.loader.load_source` reads the descriptor content.
2. :func:`~gwimport.parser.detector.parse_document` parses it and detects
   the spec version.
3. The version adapter turns the document into an
   :class:`~gwimport.models.AdaptedSpec`.
4. The generators compute the endpoint targets, the paths and rules (with
   policies from the requested visitors) and the extension fragment.
5. Everything is assembled into a fresh draft.

Any failure aborts the import; no partial draft is ever returned.
"""

from __future__ import annotations

import logging
from typing import Optional

from gwimport.adapters import get_adapter
from gwimport.generator import build_paths, map_extensions, resolve_targets
from gwimport.groups import GroupLookup, StaticGroupLookup
from gwimport.models import (
    AdaptedSpec,
    ApiDraft,
    Endpoint,
    EndpointGroup,
    ImportDescriptor,
    ImportSettings,
    Proxy,
    VirtualHost,
)
from gwimport.parser import load_source, parse_document
from gwimport.policies.manager import load_default_registry
from gwimport.policies.registry import VisitorRegistry
from gwimport.policies.visitors import PolicyOperationVisitorManager

logger = logging.getLogger(__name__)


class ApiImporter:
    """Imports API descriptors with injected collaborators.

    An importer holds no per-import state, so one instance can serve
    concurrent imports.

    Args:
        registry: Visitor registry. Defaults to the process-wide one, filled
            from the installed policy plugins on first use.
        group_lookup: Resolves group names from extensions; built from
            ``settings.groups`` by default.
        settings: Import defaults (timeout, duplicate handling, extension
            key).

    Example::

        importer = ApiImporter(settings=ImportSettings(strict_duplicates=True))
        draft = importer.create_api(descriptor)
    """

    def __init__(
        self,
        registry: Optional[VisitorRegistry] = None,
        group_lookup: Optional[GroupLookup] = None,
        settings: Optional[ImportSettings] = None,
    ) -> None:
        self._settings = settings or ImportSettings()
        self._visitor_manager = PolicyOperationVisitorManager(
            registry if registry is not None else load_default_registry()
        )
        self._group_lookup = group_lookup or StaticGroupLookup(self._settings.groups)

    def create_api(self, descriptor: ImportDescriptor) -> ApiDraft:
        """Import *descriptor* into a new :class:`~gwimport.models.ApiDraft`.

        Raises:
            UnreachableSourceError: If the descriptor location cannot be read.
            EmptyPayloadError: If the content is blank.
            MalformedDocumentError: If the content cannot be parsed or breaks
                the structure of its version.
            UnsupportedSpecVersionError: If the version is not supported.
            DuplicateOperationError: On a repeated (path, method) pair with
                ``strict_duplicates`` set.
        """
        content = load_source(descriptor, timeout=self._settings.fetch_timeout)
        document, version = parse_document(content)
        logger.debug("Detected %s document", version.value)

        spec = get_adapter(version).adapt(document)
        logger.info(
            "Adapted '%s' %s: %d operations, %d servers",
            spec.title,
            spec.version,
            len(spec.operations),
            len(spec.server_info.servers),
        )
        return self._assemble(spec, descriptor)

    def _assemble(self, spec: AdaptedSpec, descriptor: ImportDescriptor) -> ApiDraft:
        targets = resolve_targets(spec.server_info, spec.title, descriptor.include_policy_paths)

        attach_policy = None
        if descriptor.policies:
            attach_policy = self._visitor_manager.attacher(
                descriptor.policies, spec.spec_version, descriptor.include_policy_paths
            )
        paths = build_paths(
            spec.operations,
            attach_policy=attach_policy,
            strict=self._settings.strict_duplicates,
        )

        fragment = map_extensions(
            spec.extensions, self._group_lookup, self._settings.definition_extension
        )
        virtual_hosts = fragment.virtual_hosts or [VirtualHost(path=targets.virtual_host_path)]
        endpoints = [
            Endpoint(name="default" if index == 0 else f"server{index}", target=target)
            for index, target in enumerate(targets.endpoints)
        ]

        return ApiDraft(
            name=spec.title,
            version=spec.version,
            description=spec.description or f"Description of {spec.title}",
            paths=paths,
            proxy=Proxy(
                virtual_hosts=virtual_hosts,
                groups=[EndpointGroup(name="default", endpoints=endpoints)],
            ),
            groups=fragment.groups,
            categories=fragment.categories,
            tags=fragment.tags,
            labels=fragment.labels,
            properties=fragment.properties,
            metadata=fragment.metadata,
            visibility=fragment.visibility,
            picture=fragment.picture,
        )


def create_api(
    descriptor: ImportDescriptor,
    settings: Optional[ImportSettings] = None,
) -> ApiDraft:
    """Import *descriptor* with the process-wide registry of installed policies.

    See :meth:`ApiImporter.create_api` for the raised errors.
    """
    return ApiImporter(settings=settings).create_api(descriptor)
