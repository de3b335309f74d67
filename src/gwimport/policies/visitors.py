"""Dispatch imported operations to the requested policy visitors."""

from __future__ import annotations

import logging
from typing import Callable, Collection, Optional

from gwimport.models import IntermediateOperation, Policy, SpecVersion
from gwimport.policies.registry import VisitorRegistry, get_default_registry

logger = logging.getLogger(__name__)


class PolicyOperationVisitorManager:
    """Attaches at most one generated policy to each operation.

    Visitors are tried in registration order and only when their id was
    requested. For each one, the variant registered for the document's spec
    version is preferred over the generic visitor. The first policy
    returned wins.

    A visitor that raises is logged and counts as having returned nothing:
    policy generation never aborts an import.

    Example::

        manager = PolicyOperationVisitorManager(registry)
        policy = manager.attach_policy(operation, {"mock"}, SpecVersion.OPENAPI_V3)
    """

    def __init__(self, registry: Optional[VisitorRegistry] = None) -> None:
        self._registry = registry if registry is not None else get_default_registry()

    def attach_policy(
        self,
        operation: IntermediateOperation,
        requested_ids: Collection[str],
        spec_version: SpecVersion,
        include_policy_paths: bool = False,
    ) -> Optional[Policy]:
        if not requested_ids:
            return None

        for generic in self._registry.visitors():
            if generic.id not in requested_ids:
                continue
            visitor = self._registry.get_visitor_for_version(generic.id, spec_version) or generic
            try:
                policy = visitor.visit(operation, include_policy_paths)
            except Exception as exc:
                logger.warning(
                    "Visitor '%s' failed on %s %s: %s",
                    visitor.id,
                    operation.method.value.upper(),
                    operation.path,
                    exc,
                )
                continue
            if policy is not None:
                return policy
        return None

    def attacher(
        self,
        requested_ids: Collection[str],
        spec_version: SpecVersion,
        include_policy_paths: bool = False,
    ) -> Callable[[IntermediateOperation], Optional[Policy]]:
        """Bind the import-wide arguments, for :func:`~gwimport.generator.paths.build_paths`."""
        requested = frozenset(requested_ids)
        unknown = sorted(requested.difference(self._registry_ids()))
        if unknown:
            logger.warning("No visitor registered for: %s", ", ".join(unknown))

        def attach(operation: IntermediateOperation) -> Optional[Policy]:
            return self.attach_policy(operation, requested, spec_version, include_policy_paths)

        return attach

    def _registry_ids(self) -> set[str]:
        return {visitor.id for visitor in self._registry.visitors()}
