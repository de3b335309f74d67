"""Policy plugin manager -- discovery, loading and visitor registration.

This module contains :class:`PolicyPluginManager`, the central coordinator
for policy plugins. It discovers plugins registered as Python entry points,
applies enable/disable filtering from the global configuration, resolves
each plugin's phase capabilities once, and registers its operation visitors
into a :class:`~gwimport.policies.registry.VisitorRegistry`.

The entry-point group used for discovery is ``gwimport.policies``.
Third-party packages register policies by declaring an entry point under
this group in their ``pyproject.toml``::

    [project.entry-points."gwimport.policies"]
    rate-limit = "my_package.policy:RateLimitPolicy"
"""

from __future__ import annotations

import importlib.metadata
import inspect
import logging
import threading
from typing import Optional

from gwimport.config import load_global_config
from gwimport.exceptions import PluginError, PolicyNotFoundError
from gwimport.models import GlobalConfig, PolicyDevelopment
from gwimport.policies.base import PolicyPlugin
from gwimport.policies.registry import VisitorRegistry, get_default_registry

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "gwimport.policies"
"""The entry-point group name used for policy plugin discovery."""

_PHASE_HOOKS = ("on_request", "on_response")


class PolicyPluginManager:
    """Discovers and loads policy plugins, and registers their visitors.

    The *enabled* and *disabled* lists in
    :class:`~gwimport.models.PluginsConfig` act as an explicit
    allowlist/blocklist of entry-point names. When *enabled* is non-empty
    only those plugins are loaded; otherwise all discovered plugins that are
    **not** in *disabled* are loaded.

    Example:
        Typical usage::

            manager = PolicyPluginManager()
            loaded = manager.discover(global_config)
            print(f"Loaded {len(loaded)} policies")
    """

    def __init__(self, registry: Optional[VisitorRegistry] = None) -> None:
        self._registry = registry if registry is not None else get_default_registry()
        self._plugins: dict[str, PolicyPlugin] = {}
        self._sources: dict[str, Optional[str]] = {}
        self._development: dict[str, PolicyDevelopment] = {}

    @property
    def registry(self) -> VisitorRegistry:
        return self._registry

    def discover(self, config: GlobalConfig) -> list[str]:
        """Load every ``gwimport.policies`` entry point selected by *config*.

        A plugin whose entry point cannot be imported or instantiated, or
        whose visitors cannot be registered, is logged and skipped so that
        one broken package does not disable the others.

        Returns:
            The ids of the plugins loaded by this call, in discovery order.
        """
        loaded_ids: list[str] = []
        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            if not _selected(ep.name, config):
                logger.debug("Skipping policy entry point '%s'", ep.name)
                continue
            try:
                plugin: PolicyPlugin = ep.load()()
                self.load_plugin(plugin, source=f"{ep.group}:{ep.name}")
            except Exception as exc:
                logger.warning("Failed to load policy '%s': %s", ep.name, exc)
                continue
            loaded_ids.append(plugin.id)
        return loaded_ids

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_plugin(self, plugin: PolicyPlugin, source: Optional[str] = None) -> None:
        """Load a single policy plugin instance.

        Resolves the plugin's phase capabilities, then registers its generic
        visitor and its version-specific variants.

        Args:
            plugin: The plugin instance to load.
            source: Where the plugin came from, reported in the catalogue.

        Raises:
            PluginError: If a plugin with the same id is already loaded, or
                its visitors cannot be registered.
        """
        if plugin.id in self._plugins:
            raise PluginError(f"Policy '{plugin.id}' is already loaded")

        development = resolve_development(plugin)

        visitor = plugin.operation_visitor()
        versioned = plugin.versioned_visitors()
        if versioned and visitor is None:
            raise PluginError(
                f"Policy '{plugin.id}' declares versioned visitors without a generic visitor"
            )
        if visitor is not None:
            self._registry.register(visitor)
            for version, variant in versioned.items():
                self._registry.register(variant, version)

        self._plugins[plugin.id] = plugin
        self._sources[plugin.id] = source
        self._development[plugin.id] = development
        logger.info("Loaded policy '%s' v%s", plugin.id, plugin.version)

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def get_plugin(self, policy_id: str) -> PolicyPlugin:
        """Retrieve a loaded plugin by id.

        Raises:
            PolicyNotFoundError: If no plugin with the given id is loaded.
        """
        try:
            return self._plugins[policy_id]
        except KeyError:
            raise PolicyNotFoundError(f"Policy '{policy_id}' is not loaded") from None

    def get_development(self, policy_id: str) -> PolicyDevelopment:
        self.get_plugin(policy_id)
        return self._development[policy_id]

    def get_source(self, policy_id: str) -> Optional[str]:
        self.get_plugin(policy_id)
        return self._sources[policy_id]

    def plugins(self) -> list[PolicyPlugin]:
        """Return the loaded plugins, in load order."""
        return list(self._plugins.values())


def resolve_development(plugin: PolicyPlugin) -> PolicyDevelopment:
    """Describe *plugin*'s class and the phase hooks it overrides.

    A hook counts as implemented when the plugin's class defines it rather
    than inheriting the :class:`~gwimport.policies.base.PolicyPlugin`
    default. The hook signature is rendered as ``name(args) -> return``.
    """
    cls = type(plugin)
    methods: dict[str, Optional[str]] = {}
    for hook in _PHASE_HOOKS:
        implementation = getattr(cls, hook)
        if implementation is getattr(PolicyPlugin, hook):
            methods[hook] = None
            continue
        try:
            signature = inspect.signature(getattr(plugin, hook), eval_str=True)
        except NameError:
            signature = inspect.signature(getattr(plugin, hook))
        methods[hook] = f"{hook}{signature}"

    return PolicyDevelopment(
        class_name=f"{cls.__module__}.{cls.__qualname__}",
        on_request_method=methods["on_request"],
        on_response_method=methods["on_response"],
    )


def _selected(name: str, config: GlobalConfig) -> bool:
    # A non-empty ``enabled`` list is an allowlist; ``disabled`` always wins.
    if name in config.plugins.disabled:
        return False
    return not config.plugins.enabled or name in config.plugins.enabled


_discovery_lock = threading.Lock()
_discovered: Optional[VisitorRegistry] = None


def load_default_registry() -> VisitorRegistry:
    """Return the process-wide registry with the installed policies loaded.

    The first call discovers the ``gwimport.policies`` entry points selected
    by the user configuration. A registry that already holds visitors is
    taken as populated by its owner and left as is.

    Raises:
        ConfigError: If the user config file is invalid.
    """
    global _discovered
    registry = get_default_registry()
    with _discovery_lock:
        if _discovered is not registry:
            if not len(registry):
                loaded = PolicyPluginManager(registry).discover(load_global_config())
                logger.debug("Loaded %d policies into the default registry", len(loaded))
            _discovered = registry
    return registry
