"""Fixtures shared by every gwimport test module.

Fresh visitor registries and plugin managers, a config sandbox under
``tmp_path``, a JSON output manager and a CLI runner. Process-wide state
(output manager, default registry, log handlers) is reset after each test.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from gwimport.output import OutputFormat, OutputManager, reset_output, set_output
from gwimport.policies import PolicyPluginManager, VisitorRegistry
from gwimport.policies.builtin import JsonValidationPolicy, MockPolicy
from gwimport.policies.registry import reset_default_registry


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals_between_tests() -> None:
    """Drop the process-wide OutputManager, default registry and Rich handler.

    Consoles hold the streams CliRunner swapped in, which are closed once
    the invocation returns.
    """
    yield
    reset_output()
    reset_default_registry()
    logger = logging.getLogger("gwimport")
    for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Policy fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> VisitorRegistry:
    """A fresh, empty visitor registry."""
    return VisitorRegistry()


@pytest.fixture
def plugin_manager(registry: VisitorRegistry) -> PolicyPluginManager:
    """A plugin manager with the mock and json-validation policies loaded."""
    manager = PolicyPluginManager(registry)
    manager.load_plugin(MockPolicy(), source="gwimport.policies:mock")
    manager.load_plugin(JsonValidationPolicy(), source="gwimport.policies:json-validation")
    return manager


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the XDG directories into *tmp_path*, unset ``GWIMPORT_*`` and cd there.

    ``./gwimport.json`` written by a test therefore lands in the returned
    directory.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["GWIMPORT_TIMEOUT", "GWIMPORT_POLICIES", "GWIMPORT_STRICT"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
