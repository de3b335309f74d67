"""Abstract base classes for policy plugins and their operation visitors.

A *policy plugin* describes one gateway policy: its identity, the JSON Schema
of its configuration and, optionally, the request/response phases it acts
on. A plugin may also contribute a :class:`PolicyOperationVisitor`, which
inspects imported operations and generates a configured policy for them.

Plugins are registered as entry points in the ``gwimport.policies`` group
and discovered at runtime by
:class:`~gwimport.policies.manager.PolicyPluginManager`.

Example:
    Minimal plugin with a visitor::

        class RateLimitVisitor(PolicyOperationVisitor):
            @property
            def id(self) -> str:
                return "rate-limit"

            def visit(self, operation, include_policy_paths):
                if operation.method is HTTPMethod.GET:
                    return None
                return Policy(name="rate-limit", configuration='{"limit": 10}')

        class RateLimitPolicy(PolicyPlugin):
            @property
            def id(self) -> str:
                return "rate-limit"

            def operation_visitor(self):
                return RateLimitVisitor()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from gwimport.models import IntermediateOperation, Policy, SpecVersion


class PolicyOperationVisitor(ABC):
    """Generates at most one policy for an imported operation.

    Visitors are shared by concurrent imports and must not keep state
    between calls to :meth:`visit`.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identifier callers use to request this visitor."""
        ...

    @abstractmethod
    def visit(
        self, operation: IntermediateOperation, include_policy_paths: bool
    ) -> Optional[Policy]:
        """Return the policy to attach to *operation*, or ``None``.

        Args:
            operation: The operation being imported.
            include_policy_paths: Whether the caller generates
                policy-bearing paths.
        """
        ...


class PolicyPlugin(ABC):
    """Base class for all policy plugins.

    Subclasses must implement :attr:`id`. Everything else has a default.
    ``on_request`` and ``on_response`` are the policy's phase hooks; a
    plugin supports a phase by overriding the matching hook, which
    :class:`~gwimport.policies.manager.PolicyPluginManager` detects once
    when the plugin is loaded.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Return the unique policy id (e.g. ``"mock"``)."""
        ...

    @property
    def name(self) -> str:
        """Return the display name. Defaults to :attr:`id`."""
        return self.id

    @property
    def version(self) -> str:
        return "0.1.0"

    @property
    def description(self) -> str:
        return ""

    @property
    def category(self) -> Optional[str]:
        return None

    @property
    def schema(self) -> Optional[str]:
        """Return the JSON Schema of the policy configuration, as text."""
        return None

    def on_request(self, request: dict[str, Any]) -> dict[str, Any]:
        """Request phase hook. Not overridden means the policy has no request phase.

        *request* holds the decoded policy ``configuration`` plus the
        request ``headers`` and ``content``. A hook that answers the request
        itself returns it with a ``response`` entry (``status``,
        ``headers``, ``content``).
        """
        return request

    def on_response(self, response: dict[str, Any]) -> dict[str, Any]:
        """Response phase hook. Not overridden means the policy has no response phase."""
        return response

    def operation_visitor(self) -> Optional[PolicyOperationVisitor]:
        """Return the generic visitor of this policy, if it generates policies."""
        return None

    def versioned_visitors(self) -> dict[SpecVersion, PolicyOperationVisitor]:
        """Return visitors replacing the generic one for specific spec versions.

        Used when an operation's version-native shape (for instance an
        OpenAPI 3 ``requestBody``) needs dedicated handling.
        """
        return {}
