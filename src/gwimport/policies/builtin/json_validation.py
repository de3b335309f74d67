"""JSON validation policy: reject request bodies that do not match their schema.

A policy is generated only for operations declaring a JSON request body
schema: the ``body`` parameter for Swagger 1.x/2.0 documents, the
``requestBody`` JSON media type for OpenAPI 3.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from jsonschema.validators import validator_for

from gwimport.models import IntermediateOperation, ParameterLocation, Policy, SpecVersion
from gwimport.policies.base import PolicyOperationVisitor, PolicyPlugin

JSON_VALIDATION_POLICY = "json-validation"
DEFAULT_ERROR_MESSAGE = '{"error": "Bad request"}'

JSON_VALIDATION_SCHEMA = json.dumps(
    {
        "type": "object",
        "id": "urn:jsonschema:io:gravitee:policy:json:validation:configuration:JsonValidationPolicyConfiguration",
        "properties": {
            "scope": {
                "title": "Scope",
                "type": "string",
                "default": "REQUEST_CONTENT",
                "enum": ["REQUEST_CONTENT", "RESPONSE_CONTENT"],
            },
            "errorMessage": {"title": "Error message", "type": "string"},
            "schema": {"title": "JSON Schema", "type": "string"},
        },
        "required": ["schema"],
    },
    indent=2,
)


class JsonValidationOperationVisitor(PolicyOperationVisitor):
    """Reads the schema of the ``body`` parameter."""

    @property
    def id(self) -> str:
        return JSON_VALIDATION_POLICY

    def visit(
        self, operation: IntermediateOperation, include_policy_paths: bool
    ) -> Optional[Policy]:
        for parameter in operation.parameters:
            if parameter.location is ParameterLocation.BODY and parameter.schema_:
                return _validation_policy(parameter.schema_)
        return None


class OAIJsonValidationOperationVisitor(JsonValidationOperationVisitor):
    """OpenAPI 3 variant: reads the JSON media type of ``requestBody``."""

    def visit(
        self, operation: IntermediateOperation, include_policy_paths: bool
    ) -> Optional[Policy]:
        content = (operation.request_body or {}).get("content")
        if not isinstance(content, dict):
            return None
        for media_type, media in content.items():
            if not _is_json(media_type) or not isinstance(media, dict):
                continue
            if isinstance(media.get("schema"), dict):
                return _validation_policy(media["schema"])
        return None


class JsonValidationPolicy(PolicyPlugin):
    """Validates request content against a JSON Schema."""

    @property
    def id(self) -> str:
        return JSON_VALIDATION_POLICY

    @property
    def name(self) -> str:
        return "JSON Validation"

    @property
    def description(self) -> str:
        return "Validate request content against a JSON Schema"

    @property
    def category(self) -> Optional[str]:
        return "transformation"

    @property
    def schema(self) -> Optional[str]:
        return JSON_VALIDATION_SCHEMA

    def on_request(self, request: dict[str, Any]) -> dict[str, Any]:
        configuration = request.get("configuration") or {}
        schema = json.loads(configuration.get("schema") or "{}")
        try:
            content = json.loads(request.get("content") or "null")
        except ValueError:
            content = None
        if next(validator_for(schema)(schema).iter_errors(content), None) is None:
            return request
        return {
            **request,
            "response": {
                "status": 400,
                "headers": {"Content-Type": "application/json"},
                "content": configuration.get("errorMessage", DEFAULT_ERROR_MESSAGE),
            },
        }

    def operation_visitor(self) -> Optional[PolicyOperationVisitor]:
        return JsonValidationOperationVisitor()

    def versioned_visitors(self) -> dict[SpecVersion, PolicyOperationVisitor]:
        return {SpecVersion.OPENAPI_V3: OAIJsonValidationOperationVisitor()}


def _is_json(media_type: str) -> bool:
    base = media_type.split(";", 1)[0].strip().lower()
    return base == "application/json" or base.endswith("+json")


def _validation_policy(schema: dict[str, Any]) -> Policy:
    configuration = {
        "scope": "REQUEST_CONTENT",
        "errorMessage": DEFAULT_ERROR_MESSAGE,
        "schema": json.dumps(schema),
    }
    return Policy(name=JSON_VALIDATION_POLICY, configuration=json.dumps(configuration))
