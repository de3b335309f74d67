"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline and quiet mode
- format_document in JSON, plain and Rich modes
- print_table in all three modes
- Output file redirection
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from gwimport import output as output_module
from gwimport.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("gwimport.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("gwimport.output._is_tty", lambda: True)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("TERM", raising=False)


# ------------------------------------------------------------------ #
# Format resolution and colour
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_is_plain_when_piped(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_is_rich_on_tty(self, tty):
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_is_plain_on_tty_without_color(self, tty):
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout / stderr discipline
# ------------------------------------------------------------------ #


class TestStreams:
    def test_data_on_stdout(self, capfd, non_tty):
        OutputManager().print_data("payload")
        out, err = capfd.readouterr()
        assert out == "payload\n"
        assert err == ""

    def test_diagnostics_on_stderr(self, capfd, non_tty):
        manager = OutputManager(no_color=True)
        manager.info("info")
        manager.success("done")
        manager.warning("careful")
        manager.error("broken")
        manager.suggest("try again")
        out, err = capfd.readouterr()
        assert out == ""
        assert "info" in err
        assert "Warning: careful" in err
        assert "Error: broken" in err
        assert "→ try again" in err

    def test_quiet_keeps_warnings_and_errors(self, capfd, non_tty):
        manager = OutputManager(no_color=True, quiet=True)
        manager.info("info")
        manager.success("done")
        manager.suggest("hint")
        manager.warning("careful")
        manager.error("broken")
        _, err = capfd.readouterr()
        assert "info" not in err
        assert "done" not in err
        assert "hint" not in err
        assert "careful" in err
        assert "broken" in err


# ------------------------------------------------------------------ #
# Documents and tables
# ------------------------------------------------------------------ #


class TestFormatDocument:
    def test_json_mode(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).format_document({"name": "API", "paths": {}})
        out, _ = capfd.readouterr()
        assert json.loads(out) == {"name": "API", "paths": {}}
        assert out.startswith("{\n  ")

    def test_plain_mode_prints_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).format_document([1, 2])
        out, _ = capfd.readouterr()
        assert json.loads(out) == [1, 2]

    def test_string_passed_through(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).format_document('{"a":1}')
        out, _ = capfd.readouterr()
        assert out == '{"a":1}\n'

    def test_rich_mode_produces_output(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).format_document({"name": "API"})
        out, _ = capfd.readouterr()
        assert "name" in out

    def test_unicode_kept(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).format_document({"title": "Café"})
        out, _ = capfd.readouterr()
        assert "Café" in out


class TestPrintTable:
    HEADERS = ["Path", "Methods"]
    ROWS = [["/pets", "GET, POST"], ["/pets/:petId", "GET"]]

    def test_json_mode(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(self.HEADERS, self.ROWS)
        out, _ = capfd.readouterr()
        assert json.loads(out) == [
            {"Path": "/pets", "Methods": "GET, POST"},
            {"Path": "/pets/:petId", "Methods": "GET"},
        ]

    def test_plain_mode(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_table(self.HEADERS, self.ROWS, title="t")
        out, _ = capfd.readouterr()
        assert out.splitlines() == ["Path\tMethods", "/pets\tGET, POST", "/pets/:petId\tGET"]

    def test_rich_mode(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).print_table(self.HEADERS, self.ROWS)
        out, _ = capfd.readouterr()
        assert "/pets/:petId" in out


class TestOutputFile:
    def test_document_written_to_file(self, tmp_path, capfd, non_tty):
        target = tmp_path / "draft.json"
        OutputManager(format=OutputFormat.JSON, output_file=str(target)).format_document({"a": 1})
        out, _ = capfd.readouterr()
        assert out == ""
        assert json.loads(target.read_text(encoding="utf-8")) == {"a": 1}
        assert target.read_text(encoding="utf-8").endswith("\n")


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_and_reset(self):
        manager = OutputManager(format=OutputFormat.JSON)
        set_output(manager)
        assert get_output() is manager
        reset_output()
        assert get_output() is not manager

    def test_convenience_functions_use_global(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_data("data")
        output_module.warning("w")
        out, err = capfd.readouterr()
        assert out == "data\n"
        assert "Warning: w" in err
