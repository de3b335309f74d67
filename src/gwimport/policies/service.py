"""Policy catalogue and policy configuration validation.

:class:`PolicyService` exposes the loaded policy plugins as
:class:`~gwimport.models.PolicyEntity` records and validates policy
configurations against the JSON Schema each plugin declares, using the
``jsonschema`` library.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from gwimport.exceptions import InvalidConfigurationError, PolicyNotFoundError
from gwimport.models import PluginInfo, Policy, PolicyEntity
from gwimport.policies.base import PolicyPlugin
from gwimport.policies.manager import PolicyPluginManager

logger = logging.getLogger(__name__)


class PolicyService:
    """Read access to policy plugins, plus configuration validation.

    Args:
        manager: The plugin manager holding the loaded plugins.
    """

    def __init__(self, manager: PolicyPluginManager) -> None:
        self._manager = manager

    def find_all(self) -> list[PolicyEntity]:
        """Return every loaded policy, in load order."""
        return [self._convert(plugin) for plugin in self._manager.plugins()]

    def find_by_id(self, policy_id: str) -> PolicyEntity:
        """Return the policy *policy_id*.

        Raises:
            PolicyNotFoundError: If no such policy is loaded.
        """
        return self._convert(self._manager.get_plugin(policy_id))

    def get_schema(self, policy_id: str) -> Optional[str]:
        """Return the configuration JSON Schema of *policy_id*, if it declares one.

        Unknown policies have no schema.
        """
        try:
            plugin = self._manager.get_plugin(policy_id)
        except PolicyNotFoundError:
            logger.debug("No policy '%s', no schema to validate against", policy_id)
            return None
        return plugin.schema or None

    def validate_policy_configuration(self, policy: Optional[Policy]) -> None:
        """Normalize and validate the configuration of *policy* in place.

        Null-valued fields are stripped from the configuration first, and
        the compacted JSON is stored back on *policy* whatever the outcome
        of validation. The configuration is then checked against the
        policy's schema, when it declares one.

        Raises:
            InvalidConfigurationError: If the configuration (or the schema)
                is not valid JSON, or the configuration violates the schema.
                The message carries the first validation error.
        """
        if policy is None or policy.configuration is None:
            return

        try:
            configuration = clear_null_values(policy.configuration)
        except ValueError as exc:
            raise InvalidConfigurationError(
                "Unable to validate policy configuration", location=policy.name
            ) from exc
        policy.configuration = configuration

        schema_text = self.get_schema(policy.name)
        if not schema_text:
            return

        try:
            schema = json.loads(schema_text)
            validator_cls = validator_for(schema)
            validator_cls.check_schema(schema)
            error = next(validator_cls(schema).iter_errors(json.loads(configuration)), None)
        except (ValueError, SchemaError) as exc:
            raise InvalidConfigurationError(
                "Unable to validate policy configuration", location=policy.name
            ) from exc

        if error is not None:
            raise InvalidConfigurationError(
                f"Invalid policy configuration : {error.message}", location=policy.name
            )

    def _convert(self, plugin: PolicyPlugin) -> PolicyEntity:
        cls = type(plugin)
        return PolicyEntity(
            id=plugin.id,
            name=plugin.name,
            description=plugin.description,
            version=plugin.version,
            category=plugin.category,
            plugin=PluginInfo(
                plugin=f"{cls.__module__}.{cls.__qualname__}",
                source=self._manager.get_source(plugin.id),
            ),
            development=self._manager.get_development(plugin.id),
        )


def clear_null_values(configuration: str) -> str:
    """Remove every null-valued object member from a JSON document.

    Nulls inside arrays are kept. The result is compact JSON.

    Example::

        clear_null_values('{"a": null, "b": {"c": null, "d": 1}}')  # '{"b":{"d":1}}'

    Raises:
        ValueError: If *configuration* is not valid JSON.
    """
    return json.dumps(_strip_nulls(json.loads(configuration)), separators=(",", ":"))


def _strip_nulls(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _strip_nulls(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [_strip_nulls(item) for item in value]
    return value
