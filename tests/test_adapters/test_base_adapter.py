"""Tests for gwimport.adapters.base helpers."""

from __future__ import annotations

import pytest

from gwimport.adapters.base import (
    extract_extensions,
    extract_parameters,
    http_method,
    merge_parameters,
    normalize_path,
    string_list,
)
from gwimport.models import HTTPMethod, ParameterLocation


class TestNormalizePath:
    """Test path template normalization."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("/pets/{petId}", "/pets/:petId"),
            ("/pets/:petId", "/pets/:petId"),
            ("/pets/{petId}/", "/pets/:petId"),
            ("pets", "/pets"),
            ("//pets///toys", "/pets/toys"),
            ("/", "/"),
            ("", "/"),
            ("/{dataset}/{version}/fields", "/:dataset/:version/fields"),
        ],
    )
    def test_normalizes(self, raw: str, expected: str) -> None:
        assert normalize_path(raw) == expected


class TestHttpMethod:
    def test_case_insensitive(self) -> None:
        assert http_method("GET") is HTTPMethod.GET
        assert http_method("patch") is HTTPMethod.PATCH

    def test_non_method_keys(self) -> None:
        assert http_method("parameters") is None
        assert http_method("x-extra") is None
        assert http_method(200) is None


class TestExtractExtensions:
    def test_only_vendor_keys(self) -> None:
        mapping = {"x-a": 1, "x-b": {"c": None}, "info": {}, "xray": True}
        assert extract_extensions(mapping) == {"x-a": 1, "x-b": {"c": None}}

    def test_non_mapping(self) -> None:
        assert extract_extensions(["x-a"]) == {}


class TestStringList:
    def test_dedupes_preserving_order(self) -> None:
        assert string_list(["b", "a", "b", None, 1]) == ["b", "a", "1"]

    def test_scalar(self) -> None:
        assert string_list("application/json") == ["application/json"]

    def test_none(self) -> None:
        assert string_list(None) == []


class TestMergeParameters:
    """Test path-level and operation-level parameter merging."""

    def test_operation_overrides_same_name_and_location(self) -> None:
        path_params = [
            {"name": "id", "in": "path", "description": "path level"},
            {"name": "trace", "in": "header"},
        ]
        op_params = [{"name": "id", "in": "path", "description": "operation level"}]
        merged = merge_parameters(path_params, op_params)
        assert [p["name"] for p in merged] == ["trace", "id"]
        assert merged[1]["description"] == "operation level"

    def test_same_name_other_location_kept(self) -> None:
        merged = merge_parameters([{"name": "id", "in": "query"}], [{"name": "id", "in": "path"}])
        assert len(merged) == 2

    def test_non_dict_entries_dropped(self) -> None:
        assert merge_parameters(["bad"], [None, {"name": "a", "in": "query"}]) == [
            {"name": "a", "in": "query"}
        ]


class TestExtractParameters:
    """Test conversion of raw parameters of every version."""

    def test_openapi3_schema_parameter(self) -> None:
        [param] = extract_parameters([
            {"name": "limit", "in": "query", "schema": {"type": "integer", "format": "int32", "default": 20}}
        ])
        assert param.location is ParameterLocation.QUERY
        assert param.schema_type == "integer"
        assert param.schema_format == "int32"
        assert param.default == 20
        assert param.schema_ == {"type": "integer", "format": "int32", "default": 20}

    def test_swagger2_inline_type(self) -> None:
        [param] = extract_parameters([
            {"name": "status", "in": "query", "type": "string", "enum": ["a", "b"]}
        ])
        assert param.schema_type == "string"
        assert param.enum_values == ["a", "b"]
        assert param.schema_ is None

    def test_swagger1_param_type_and_default_value(self) -> None:
        [param] = extract_parameters([
            {"name": "limit", "paramType": "query", "type": "integer", "defaultValue": "10"}
        ])
        assert param.location is ParameterLocation.QUERY
        assert param.default == "10"

    def test_swagger1_form_location(self) -> None:
        [param] = extract_parameters([{"name": "file", "paramType": "form"}])
        assert param.location is ParameterLocation.FORM

    def test_path_parameters_always_required(self) -> None:
        [param] = extract_parameters([{"name": "id", "in": "path"}])
        assert param.required is True

    def test_unknown_location_skipped(self) -> None:
        assert extract_parameters([{"name": "x", "in": "matrix"}]) == []

    def test_nullable_type_array(self) -> None:
        [param] = extract_parameters([
            {"name": "q", "in": "query", "schema": {"type": ["null", "string"]}}
        ])
        assert param.schema_type == "string"
