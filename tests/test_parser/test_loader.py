"""Tests for gwimport.parser.loader."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from gwimport.exceptions import EmptyPayloadError, UnreachableSourceError
from gwimport.models import ImportDescriptor, SourceKind
from gwimport.parser.loader import _load_from_file, _load_from_url, load_source

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# load_source dispatch
# ---------------------------------------------------------------------------


class TestLoadSource:
    """Test load_source routes to the correct reader."""

    def test_inline_payload_returned_as_is(self) -> None:
        descriptor = ImportDescriptor(kind=SourceKind.INLINE, payload='{"swagger": "2.0"}')
        assert load_source(descriptor) == '{"swagger": "2.0"}'

    def test_loads_from_path(self) -> None:
        descriptor = ImportDescriptor(
            kind=SourceKind.URL, payload=str(FIXTURES_DIR / "petstore.yaml")
        )
        assert "Swagger Petstore" in load_source(descriptor)

    def test_loads_from_file_url(self) -> None:
        descriptor = ImportDescriptor(
            kind=SourceKind.URL, payload=(FIXTURES_DIR / "openapi.json").as_uri()
        )
        assert '"openapi": "3.0.0"' in load_source(descriptor)

    def test_loads_from_http_url(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            text="swagger: '2.0'\n",
            request=httpx.Request("GET", "https://example.com/swagger.yaml"),
        )
        with patch("gwimport.parser.loader.httpx.get", return_value=mock_response) as get:
            content = load_source(
                ImportDescriptor(kind=SourceKind.URL, payload="https://example.com/swagger.yaml"),
                timeout=5.0,
            )
        assert content == "swagger: '2.0'\n"
        assert get.call_args.kwargs["timeout"] == 5.0

    def test_empty_inline_payload_raises(self) -> None:
        with pytest.raises(EmptyPayloadError):
            load_source(ImportDescriptor(kind=SourceKind.INLINE, payload="   \n"))

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.json"
        empty.write_text("", encoding="utf-8")
        with pytest.raises(EmptyPayloadError) as exc_info:
            load_source(ImportDescriptor(kind=SourceKind.URL, payload=str(empty)))
        assert exc_info.value.location == str(empty)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(UnreachableSourceError):
            load_source(
                ImportDescriptor(kind=SourceKind.URL, payload=str(tmp_path / "missing.yaml"))
            )


# ---------------------------------------------------------------------------
# _load_from_file
# ---------------------------------------------------------------------------


class TestLoadFromFile:
    """Test reading descriptors from the filesystem."""

    def test_reads_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "api.yaml"
        path.write_text("info:\n  title: Café\n", encoding="utf-8")
        assert "Café" in _load_from_file(str(path))

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        with pytest.raises(UnreachableSourceError, match="not found"):
            _load_from_file(str(tmp_path))


# ---------------------------------------------------------------------------
# _load_from_url
# ---------------------------------------------------------------------------


class TestLoadFromUrl:
    """Test fetching descriptors over HTTP."""

    def test_http_error_raises(self) -> None:
        mock_response = httpx.Response(
            status_code=404,
            request=httpx.Request("GET", "https://example.com/missing.json"),
        )
        with patch("gwimport.parser.loader.httpx.get", return_value=mock_response):
            with pytest.raises(UnreachableSourceError, match="HTTP 404") as exc_info:
                _load_from_url("https://example.com/missing.json", 30.0)
        assert exc_info.value.location == "https://example.com/missing.json"

    def test_connection_error_raises(self) -> None:
        with patch(
            "gwimport.parser.loader.httpx.get",
            side_effect=httpx.ConnectError("Connection refused"),
        ):
            with pytest.raises(UnreachableSourceError, match="Failed to fetch"):
                _load_from_url("https://unreachable.example.com/spec.json", 30.0)

    def test_timeout_raises(self) -> None:
        with patch(
            "gwimport.parser.loader.httpx.get",
            side_effect=httpx.ReadTimeout("timed out"),
        ):
            with pytest.raises(UnreachableSourceError):
                _load_from_url("https://slow.example.com/spec.json", 0.1)
