"""Policy plugins -- discovery, visitor registry and policy catalogue.

Third-party packages can register policies by declaring an entry point in
the ``gwimport.policies`` group. At startup, :class:`PolicyPluginManager`
discovers those entry points and registers each policy's operation visitors
into the process-wide :class:`VisitorRegistry`; during an import,
:class:`PolicyOperationVisitorManager` asks the requested visitors for a
policy per operation.

Key classes:

* :class:`PolicyPlugin` -- Abstract base class that all policies extend.
* :class:`PolicyOperationVisitor` -- Generates a policy for an operation.
* :class:`VisitorRegistry` -- Visitors by id and spec version.
* :class:`PolicyPluginManager` -- Discovers and loads policy plugins.
* :class:`PolicyOperationVisitorManager` -- Attaches policies during imports.
* :class:`PolicyService` -- Policy catalogue and configuration validation.

Example:
    Typical usage from the main CLI entry point::

        from gwimport.policies import PolicyPluginManager, PolicyService

        manager = PolicyPluginManager()
        manager.discover(global_config)
        PolicyService(manager).validate_policy_configuration(policy)
"""

from gwimport.policies.base import PolicyOperationVisitor, PolicyPlugin
from gwimport.policies.manager import PolicyPluginManager, load_default_registry
from gwimport.policies.registry import VisitorRegistry, get_default_registry
from gwimport.policies.service import PolicyService, clear_null_values
from gwimport.policies.visitors import PolicyOperationVisitorManager

__all__ = [
    "PolicyOperationVisitor",
    "PolicyOperationVisitorManager",
    "PolicyPlugin",
    "PolicyPluginManager",
    "PolicyService",
    "VisitorRegistry",
    "clear_null_values",
    "get_default_registry",
    "load_default_registry",
]
