"""Tests for gwimport.policies.service."""

from __future__ import annotations

import json

import pytest

from gwimport.exceptions import InvalidConfigurationError, PolicyNotFoundError
from gwimport.models import Policy
from gwimport.policies.base import PolicyPlugin
from gwimport.policies.manager import PolicyPluginManager
from gwimport.policies.service import PolicyService, clear_null_values


class BrokenSchemaPolicy(PolicyPlugin):
    @property
    def id(self) -> str:
        return "broken-schema"

    @property
    def schema(self) -> str:
        return "{not json"


class InvalidSchemaPolicy(PolicyPlugin):
    @property
    def id(self) -> str:
        return "invalid-schema"

    @property
    def schema(self) -> str:
        return '{"type": 12}'


@pytest.fixture
def service(plugin_manager: PolicyPluginManager) -> PolicyService:
    plugin_manager.load_plugin(BrokenSchemaPolicy())
    plugin_manager.load_plugin(InvalidSchemaPolicy())
    return PolicyService(plugin_manager)


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


class TestCatalogue:
    """Test policy entities exposed by the service."""

    def test_find_all_in_load_order(self, service: PolicyService) -> None:
        assert [p.id for p in service.find_all()] == [
            "mock",
            "json-validation",
            "broken-schema",
            "invalid-schema",
        ]

    def test_find_by_id(self, service: PolicyService) -> None:
        entity = service.find_by_id("mock")
        assert entity.name == "Mock"
        assert entity.category == "others"
        assert entity.plugin.plugin == "gwimport.policies.builtin.mock.MockPolicy"
        assert entity.plugin.source == "gwimport.policies:mock"
        assert entity.plugin.type == "policy"
        assert entity.development.on_request_method is not None
        assert entity.development.on_response_method is None

    def test_find_unknown(self, service: PolicyService) -> None:
        with pytest.raises(PolicyNotFoundError):
            service.find_by_id("nope")

    def test_get_schema(self, service: PolicyService) -> None:
        schema = json.loads(service.get_schema("mock"))
        assert schema["required"] == ["status"]

    def test_unknown_policy_has_no_schema(self, service: PolicyService) -> None:
        assert service.get_schema("nope") is None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidatePolicyConfiguration:
    """Test configuration normalization and schema validation."""

    def test_valid_configuration_compacted(self, service: PolicyService) -> None:
        policy = Policy(name="mock", configuration='{"status": "200", "content": null}')
        service.validate_policy_configuration(policy)
        assert policy.configuration == '{"status":"200"}'

    def test_invalid_configuration(self, service: PolicyService) -> None:
        policy = Policy(name="mock", configuration='{"content": "x", "headers": null}')
        with pytest.raises(InvalidConfigurationError) as exc_info:
            service.validate_policy_configuration(policy)
        assert str(exc_info.value).startswith(
            "Invalid policy configuration : 'status' is a required property"
        )
        # Nulls are stripped even when validation fails.
        assert policy.configuration == '{"content":"x"}'

    def test_wrong_type(self, service: PolicyService) -> None:
        policy = Policy(name="mock", configuration='{"status": 200}')
        with pytest.raises(InvalidConfigurationError, match="is not of type 'string'"):
            service.validate_policy_configuration(policy)

    def test_configuration_not_json(self, service: PolicyService) -> None:
        policy = Policy(name="mock", configuration="{oops")
        with pytest.raises(InvalidConfigurationError, match="Unable to validate policy configuration"):
            service.validate_policy_configuration(policy)
        assert policy.configuration == "{oops"

    def test_schema_not_json(self, service: PolicyService) -> None:
        policy = Policy(name="broken-schema", configuration='{"a": null}')
        with pytest.raises(InvalidConfigurationError, match="Unable to validate"):
            service.validate_policy_configuration(policy)
        assert policy.configuration == "{}"

    def test_schema_invalid(self, service: PolicyService) -> None:
        policy = Policy(name="invalid-schema", configuration="{}")
        with pytest.raises(InvalidConfigurationError, match="Unable to validate"):
            service.validate_policy_configuration(policy)

    def test_policy_without_schema_only_cleaned(self, service: PolicyService) -> None:
        policy = Policy(name="unknown", configuration='{"a": null, "b": 1}')
        service.validate_policy_configuration(policy)
        assert policy.configuration == '{"b":1}'

    def test_none_policy_and_configuration(self, service: PolicyService) -> None:
        service.validate_policy_configuration(None)
        policy = Policy(name="mock")
        service.validate_policy_configuration(policy)
        assert policy.configuration is None

    def test_generated_policies_validate(self, service: PolicyService) -> None:
        configuration = json.dumps({
            "scope": "REQUEST_CONTENT",
            "errorMessage": None,
            "schema": '{"type": "object"}',
        })
        policy = Policy(name="json-validation", configuration=configuration)
        service.validate_policy_configuration(policy)
        assert "errorMessage" not in policy.configuration


class TestClearNullValues:
    """Test null stripping."""

    def test_nested(self) -> None:
        assert clear_null_values('{"a": null, "b": {"c": null, "d": 1}}') == '{"b":{"d":1}}'

    def test_nulls_in_arrays_kept(self) -> None:
        assert clear_null_values('{"a": [null, {"b": null}]}') == '{"a":[null,{}]}'

    def test_non_object_document(self) -> None:
        assert clear_null_values("[1, null]") == "[1,null]"

    def test_invalid_json(self) -> None:
        with pytest.raises(ValueError):
            clear_null_values("{")
