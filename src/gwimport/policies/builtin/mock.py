"""Mock policy: answer requests with a canned response taken from the document.

The generated configuration looks like::

    {
      "status": "200",
      "headers": [{"name": "Content-Type", "value": "application/json"}],
      "content": "{\\"id\\": 1}"
    }

The status is the first 2xx response of the operation (``200`` when there is
none). The content is the response example for that status, else a sample
built from the response schema, else empty.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from gwimport.models import IntermediateOperation, Policy, SpecVersion
from gwimport.policies.base import PolicyOperationVisitor, PolicyPlugin
from gwimport.policies.builtin.sample import sample_from_schema

MOCK_POLICY = "mock"
DEFAULT_MEDIA_TYPE = "application/json"

MOCK_SCHEMA = json.dumps(
    {
        "type": "object",
        "id": "urn:jsonschema:io:gravitee:policy:mock:configuration:MockPolicyConfiguration",
        "properties": {
            "status": {"title": "HTTP Status Code", "type": "string"},
            "headers": {
                "type": "array",
                "title": "HTTP Headers",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"title": "Name", "type": "string"},
                        "value": {"title": "Value", "type": "string"},
                    },
                    "required": ["name", "value"],
                },
            },
            "content": {"title": "Content", "type": "string"},
        },
        "required": ["status"],
    },
    indent=2,
)


class MockOperationVisitor(PolicyOperationVisitor):
    """Builds a mock policy from response examples, then Swagger 2 response schemas."""

    @property
    def id(self) -> str:
        return MOCK_POLICY

    def visit(
        self, operation: IntermediateOperation, include_policy_paths: bool
    ) -> Optional[Policy]:
        status = _success_status(operation)
        media_type, content = _example(operation, status)
        if content is None:
            response = operation.responses.get(status)
            schema = response.get("schema") if isinstance(response, dict) else None
            content = sample_from_schema(schema)
        return _mock_policy(status, media_type or _default_media_type(operation), content)


class OAIMockOperationVisitor(MockOperationVisitor):
    """OpenAPI 3 variant: falls back to the ``content`` schema of the response."""

    def visit(
        self, operation: IntermediateOperation, include_policy_paths: bool
    ) -> Optional[Policy]:
        status = _success_status(operation)
        media_type, content = _example(operation, status)
        if content is None:
            response = operation.responses.get(status)
            media = response.get("content") if isinstance(response, dict) else None
            if isinstance(media, dict) and media:
                media_type = next(iter(media))
                entry = media[media_type]
                content = sample_from_schema(entry.get("schema") if isinstance(entry, dict) else None)
        return _mock_policy(status, media_type or _default_media_type(operation), content)


class MockPolicy(PolicyPlugin):
    """Short-circuits requests with a static response."""

    @property
    def id(self) -> str:
        return MOCK_POLICY

    @property
    def name(self) -> str:
        return "Mock"

    @property
    def description(self) -> str:
        return "Return a static response instead of calling the backend"

    @property
    def category(self) -> Optional[str]:
        return "others"

    @property
    def schema(self) -> Optional[str]:
        return MOCK_SCHEMA

    def on_request(self, request: dict[str, Any]) -> dict[str, Any]:
        configuration = request.get("configuration") or {}
        headers = {h["name"]: h["value"] for h in configuration.get("headers", [])}
        return {
            **request,
            "response": {
                "status": int(configuration.get("status", 200)),
                "headers": headers,
                "content": configuration.get("content", ""),
            },
        }

    def operation_visitor(self) -> Optional[PolicyOperationVisitor]:
        return MockOperationVisitor()

    def versioned_visitors(self) -> dict[SpecVersion, PolicyOperationVisitor]:
        return {SpecVersion.OPENAPI_V3: OAIMockOperationVisitor()}


def _success_status(operation: IntermediateOperation) -> str:
    for status in operation.responses:
        if status.isdigit() and status.startswith("2"):
            return status
    return "200"


def _default_media_type(operation: IntermediateOperation) -> str:
    return operation.produces[0] if operation.produces else DEFAULT_MEDIA_TYPE


def _example(operation: IntermediateOperation, status: str) -> tuple[Optional[str], Any]:
    """Pick the example of *status*, preferring the operation's first produced media type."""
    examples = operation.examples.get(status) or {}
    for media_type in [*operation.produces, *examples]:
        if media_type in examples:
            return media_type, examples[media_type]
    return None, None


def _mock_policy(status: str, media_type: str, content: Any) -> Policy:
    if content is None:
        content = ""
    elif not isinstance(content, str):
        content = json.dumps(content)
    configuration = {
        "status": status,
        "headers": [{"name": "Content-Type", "value": media_type}],
        "content": content,
    }
    return Policy(name=MOCK_POLICY, configuration=json.dumps(configuration))
