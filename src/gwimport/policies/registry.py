"""Process-wide registry of policy operation visitors.

The registry is append-only: it is filled once at startup by
:class:`~gwimport.policies.manager.PolicyPluginManager` and only read while
imports run. Registration takes a lock; reads work on snapshots.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from gwimport.exceptions import PluginError
from gwimport.models import SpecVersion
from gwimport.policies.base import PolicyOperationVisitor

logger = logging.getLogger(__name__)


class VisitorRegistry:
    """Visitors keyed by id, in registration order.

    Each id has one generic visitor and, optionally, one variant per
    :class:`~gwimport.models.SpecVersion`.
    """

    def __init__(self) -> None:
        self._visitors: dict[str, PolicyOperationVisitor] = {}
        self._versioned: dict[tuple[str, SpecVersion], PolicyOperationVisitor] = {}
        self._lock = threading.Lock()

    def register(
        self,
        visitor: PolicyOperationVisitor,
        version: Optional[SpecVersion] = None,
    ) -> None:
        """Register *visitor* as the generic visitor of its id, or as its *version* variant.

        Raises:
            PluginError: If the slot is already taken, or if a version
                variant is registered before the generic visitor of its id.
        """
        with self._lock:
            if version is None:
                if visitor.id in self._visitors:
                    raise PluginError(f"Visitor '{visitor.id}' is already registered")
                self._visitors[visitor.id] = visitor
            else:
                if visitor.id not in self._visitors:
                    raise PluginError(
                        f"Visitor '{visitor.id}' has no generic visitor for its {version.value} variant"
                    )
                if (visitor.id, version) in self._versioned:
                    raise PluginError(
                        f"Visitor '{visitor.id}' already has a {version.value} variant"
                    )
                self._versioned[(visitor.id, version)] = visitor
        logger.debug("Registered visitor '%s' (%s)", visitor.id, version.value if version else "generic")

    def visitors(self) -> list[PolicyOperationVisitor]:
        """Return the generic visitors, in registration order."""
        return list(self._visitors.values())

    def get_visitor(self, visitor_id: str) -> Optional[PolicyOperationVisitor]:
        return self._visitors.get(visitor_id)

    def get_visitor_for_version(
        self, visitor_id: str, version: SpecVersion
    ) -> Optional[PolicyOperationVisitor]:
        """Return the *version* variant of *visitor_id*, else its generic visitor."""
        return self._versioned.get((visitor_id, version)) or self._visitors.get(visitor_id)

    def __contains__(self, visitor_id: object) -> bool:
        return visitor_id in self._visitors

    def __len__(self) -> int:
        return len(self._visitors)


_registry: Optional[VisitorRegistry] = None
_registry_lock = threading.Lock()


def get_default_registry() -> VisitorRegistry:
    """Return the process-wide registry, creating an empty one on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = VisitorRegistry()
        return _registry


def reset_default_registry() -> None:
    """Drop the process-wide registry. Used by tests."""
    global _registry
    with _registry_lock:
        _registry = None
