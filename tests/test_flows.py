"""Tests for gwimport.flows."""

from __future__ import annotations

import json

from gwimport.flows import get_flow_schema, get_flow_schema_object


FLOW_SCHEMA = """\
{
  "type": "object",
  "id": "apim",
  "properties": {
    "name": {
      "title": "Name",
      "description": "The name of flow. If empty, the name will be generated with the path and methods",
      "type": "string"
    },
    "description": {
      "title": "Description",
      "description": "The description of flow",
      "type": "string"
    },
    "path": {
      "title": "Path",
      "description": "The path of flow",
      "type": "string"
    },
    "methods": {
      "title": "Methods",
      "description": "The methods of flow",
      "type": "array",
      "enum": [
        "GET",
        "HEAD",
        "POST",
        "PUT",
        "DELETE",
        "CONNECT",
        "OPTIONS",
        "TRACE",
        "PATCH"
      ]
    },
    "condition": {
      "title": "Condition",
      "description": "The condition of flow",
      "type": "string"
    }
  },
  "required": [],
  "disabled": [
    "condition"
  ]
}
"""


class TestFlowSchema:
    def test_stable_across_calls(self) -> None:
        assert get_flow_schema() == get_flow_schema()

    def test_exact_text(self) -> None:
        assert get_flow_schema() == FLOW_SCHEMA

    def test_declares_flow_fields(self) -> None:
        schema = json.loads(get_flow_schema())
        assert schema["type"] == "object"
        assert list(schema["properties"])[:4] == ["name", "description", "path", "methods"]

    def test_object_is_a_copy(self) -> None:
        schema = get_flow_schema_object()
        schema["properties"].clear()
        assert get_flow_schema_object()["properties"] != {}
