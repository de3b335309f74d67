"""Tests for gwimport.generator.extensions."""

from __future__ import annotations

import logging

import pytest

from gwimport.generator.extensions import map_extensions
from gwimport.groups import StaticGroupLookup
from gwimport.models import MetadataFormat, Visibility


DEFINITION = {
    "categories": ["cat1", "cat2", "cat1"],
    "groups": ["group1", "group2"],
    "labels": ["label1", "label2"],
    "tags": ["tag1", "tag2"],
    "visibility": "private",
    "picture": "data:image/png;base64,AAAA",
    "virtualHosts": [{"host": "myHost", "path": "myPath", "overrideEntrypoint": True}],
    "properties": [{"key": "prop1", "value": "propValue1"}, {"key": "prop2", "value": 2}],
    "metadata": [
        {"name": "meta1", "value": 1234, "format": "numeric"},
        {"name": "meta2", "value": "metaValue2"},
    ],
}


class TestMapExtensions:
    """Test reading the definition extension."""

    def test_absent_extension_gives_defaults(self) -> None:
        fragment = map_extensions({"x-other": 1})
        assert fragment.visibility is Visibility.PUBLIC
        assert fragment.tags == []
        assert fragment.virtual_hosts is None
        assert fragment.picture is None

    def test_full_definition(self) -> None:
        lookup = StaticGroupLookup({"group1": ["g-1"], "group2": ["g-2"]})
        fragment = map_extensions({"x-graviteeio-definition": DEFINITION}, lookup)

        assert fragment.categories == ["cat1", "cat2"]
        assert fragment.groups == ["g-1", "g-2"]
        assert fragment.labels == ["label1", "label2"]
        assert fragment.tags == ["tag1", "tag2"]
        assert fragment.visibility is Visibility.PRIVATE
        assert fragment.picture == "data:image/png;base64,AAAA"
        assert fragment.properties == {"prop1": "propValue1", "prop2": "2"}
        assert [(m.name, m.value, m.format) for m in fragment.metadata] == [
            ("meta1", "1234", MetadataFormat.NUMERIC),
            ("meta2", "metaValue2", MetadataFormat.STRING),
        ]
        [vhost] = fragment.virtual_hosts
        assert (vhost.host, vhost.path, vhost.override_entrypoint) == ("myHost", "myPath", True)

    def test_groups_ignored_without_lookup(self) -> None:
        fragment = map_extensions({"x-graviteeio-definition": DEFINITION})
        assert fragment.groups == []

    def test_unknown_group_contributes_nothing(self) -> None:
        lookup = StaticGroupLookup({"group1": ["g-1"]})
        fragment = map_extensions({"x-graviteeio-definition": DEFINITION}, lookup)
        assert fragment.groups == ["g-1"]

    def test_group_with_several_ids(self) -> None:
        lookup = StaticGroupLookup({"group1": ["g-1", "g-1b"]})
        fragment = map_extensions({"x-graviteeio-definition": {"groups": "group1"}}, lookup)
        assert fragment.groups == ["g-1", "g-1b"]

    def test_duplicate_metadata_name_overwrites(self) -> None:
        fragment = map_extensions({"x-graviteeio-definition": {"metadata": [
            {"name": "m", "value": "old"},
            {"name": "other", "value": "x"},
            {"name": "m", "value": True, "format": "boolean"},
        ]}})
        assert [(m.name, m.value) for m in fragment.metadata] == [("m", "true"), ("other", "x")]
        assert fragment.metadata[0].format is MetadataFormat.BOOLEAN

    def test_properties_as_mapping(self) -> None:
        fragment = map_extensions({"x-graviteeio-definition": {"properties": {"a": 1, "b": None}}})
        assert fragment.properties == {"a": "1"}

    def test_unknown_visibility_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="gwimport.generator.extensions"):
            fragment = map_extensions({"x-graviteeio-definition": {"visibility": "INTERNAL"}})
        assert fragment.visibility is Visibility.PUBLIC
        assert "INTERNAL" in caplog.text

    def test_unknown_metadata_format_falls_back(self) -> None:
        fragment = map_extensions({"x-graviteeio-definition": {"metadata": [
            {"name": "m", "value": "v", "format": "BINARY"}
        ]}})
        assert fragment.metadata[0].format is MetadataFormat.STRING

    def test_malformed_entries_skipped(self) -> None:
        fragment = map_extensions({"x-graviteeio-definition": {
            "tags": ["ok", {"nested": True}, None],
            "properties": [{"value": "no key"}, "bad"],
            "metadata": [{"value": "no name"}],
            "virtualHosts": ["bad"],
        }})
        assert fragment.tags == ["ok"]
        assert fragment.properties == {}
        assert fragment.metadata == []
        assert fragment.virtual_hosts is None

    def test_definition_not_an_object(self) -> None:
        fragment = map_extensions({"x-graviteeio-definition": ["tag1"]})
        assert fragment.tags == []

    def test_unknown_keys_ignored(self) -> None:
        fragment = map_extensions({"x-graviteeio-definition": {"flows": [], "tags": ["t"]}})
        assert fragment.tags == ["t"]

    def test_custom_extension_key(self) -> None:
        fragment = map_extensions({"x-acme-gateway": {"labels": ["a"]}}, key="x-acme-gateway")
        assert fragment.labels == ["a"]


class TestStaticGroupLookup:
    def test_lookup(self) -> None:
        lookup = StaticGroupLookup({"ops": ["1", "2"]})
        assert [(g.id, g.name) for g in lookup.find_groups_by_name("ops")] == [
            ("1", "ops"),
            ("2", "ops"),
        ]
        assert lookup.find_groups_by_name("dev") == []

    def test_source_mapping_copied(self) -> None:
        groups = {"ops": ["1"]}
        lookup = StaticGroupLookup(groups)
        groups["ops"].append("2")
        assert len(lookup.find_groups_by_name("ops")) == 1
