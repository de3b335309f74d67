"""Tests for gwimport.generator.paths."""

from __future__ import annotations

import logging

import pytest

from gwimport.exceptions import DuplicateOperationError
from gwimport.generator.paths import build_paths
from gwimport.models import HTTPMethod, IntermediateOperation, Policy


def _op(path: str, method: HTTPMethod, raw_path: str | None = None, **kwargs) -> IntermediateOperation:
    return IntermediateOperation(path=path, raw_path=raw_path or path, method=method, **kwargs)


class TestBuildPaths:
    """Test grouping of operations into paths and rules."""

    def test_one_rule_per_method(self) -> None:
        paths = build_paths([
            _op("/pets", HTTPMethod.GET, summary="List"),
            _op("/pets", HTTPMethod.POST, summary="Create"),
            _op("/pets/:petId", HTTPMethod.GET),
        ])
        assert list(paths) == ["/pets", "/pets/:petId"]
        rules = paths["/pets"].rules
        assert [rule.methods for rule in rules] == [{HTTPMethod.GET}, {HTTPMethod.POST}]
        assert [rule.description for rule in rules] == ["List", "Create"]
        assert all(rule.enabled for rule in rules)

    def test_description_falls_back(self) -> None:
        paths = build_paths([
            _op("/a", HTTPMethod.GET, description="Long text"),
            _op("/b", HTTPMethod.GET),
        ])
        assert paths["/a"].rules[0].description == "Long text"
        assert paths["/b"].rules[0].description == ""

    def test_trailing_slash_variants_merge(self) -> None:
        paths = build_paths([
            _op("/pets/:id", HTTPMethod.GET, raw_path="/pets/{id}"),
            _op("/pets/:id", HTTPMethod.DELETE, raw_path="/pets/{id}/"),
        ])
        assert len(paths) == 1
        assert len(paths["/pets/:id"].rules) == 2

    def test_duplicate_last_wins_in_place(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="gwimport.generator.paths"):
            paths = build_paths([
                _op("/pets", HTTPMethod.GET, raw_path="/pets", summary="first"),
                _op("/pets", HTTPMethod.POST, summary="create"),
                _op("/pets", HTTPMethod.GET, raw_path="/pets/", summary="second"),
            ])
        rules = paths["/pets"].rules
        assert [rule.description for rule in rules] == ["second", "create"]
        assert "Duplicate operation GET /pets" in caplog.text

    def test_duplicate_strict_raises(self) -> None:
        with pytest.raises(DuplicateOperationError) as exc_info:
            build_paths(
                [
                    _op("/pets", HTTPMethod.GET, raw_path="/pets"),
                    _op("/pets", HTTPMethod.GET, raw_path="/pets/"),
                ],
                strict=True,
            )
        assert exc_info.value.location == "/pets/"

    def test_attacher_called_per_kept_operation(self) -> None:
        seen: list[str] = []

        def attach(operation: IntermediateOperation):
            seen.append(operation.summary or "")
            if operation.method is HTTPMethod.GET:
                return Policy(name="mock", configuration="{}")
            return None

        paths = build_paths(
            [
                _op("/pets", HTTPMethod.GET, summary="dropped"),
                _op("/pets", HTTPMethod.POST, summary="create"),
                _op("/pets", HTTPMethod.GET, summary="kept"),
            ],
            attach_policy=attach,
        )
        assert seen == ["kept", "create"]
        get_rule, post_rule = paths["/pets"].rules
        assert [p.name for p in get_rule.policies] == ["mock"]
        assert post_rule.policies == []

    def test_empty(self) -> None:
        assert build_paths([]) == {}
