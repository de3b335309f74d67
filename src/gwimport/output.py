"""Where gwimport writes: drafts and tables to stdout, diagnostics to stderr.

Anything a caller may pipe into another tool (an API draft, a paths table, a
JSON Schema, a cleaned policy configuration) goes to stdout, or to the file
given with ``--output``. Status lines, warnings, errors and hints go to
stderr so they never corrupt that data.

Rendering depends on the resolved :class:`OutputFormat`. ``AUTO`` picks Rich
when stdout is an interactive terminal with colour enabled, and plain text
otherwise. Colour is off with ``--no-color``, ``NO_COLOR`` (any value) or
``TERM=dumb``.

Commands do not pass an :class:`OutputManager` around: the root callback in
:mod:`gwimport.app` installs one with :func:`set_output` and the module-level
helpers (:func:`format_document`, :func:`warning`...) delegate to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """Output formats selectable with ``--json``/``--plain``, or resolved from ``AUTO``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# Diagnostic kind -> (prefix, Rich style, suppressed by --quiet)
_DIAGNOSTICS: dict[str, tuple[str, str, bool]] = {
    "info": ("", "", True),
    "success": ("", "green", True),
    "suggest": ("→ ", "dim", True),
    "warning": ("Warning: ", "yellow", False),
    "error": ("Error: ", "bold red", False),
}


class OutputManager:
    """Routes command output to stdout, stderr or a file.

    Args:
        format: Requested format; ``AUTO`` is resolved at construction.
        no_color: Disable colour and Rich markup on both streams.
        quiet: Drop informational diagnostics. Warnings and errors are kept.
        output_file: Write data to this path instead of stdout. The file is
            truncated by each document written.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._output_file = output_file
        self._format = _resolve_format(format, self._no_color)

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # ------------------------------------------------------------------ #
    # Data (stdout)
    # ------------------------------------------------------------------ #

    def format_document(self, data: Any) -> None:
        """Write a JSON document: a dict or list, or text that already is JSON.

        Rich mode highlights it; every other mode, and ``--output``, gets the
        text indented by two spaces.
        """
        if isinstance(data, str):
            text = data
        else:
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)

        if self._format == OutputFormat.RICH and not self._output_file:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def print_data(self, text: str) -> None:
        if self._output_file:
            with open(self._output_file, "w", encoding="utf-8") as f:
                f.write(text if text.endswith("\n") else text + "\n")
        else:
            print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows as JSON records, tab-separated lines or a Rich table.

        JSON mode keys each record by header; *title* only shows in Rich mode.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return

        if self._format == OutputFormat.PLAIN:
            self.print_data("\n".join("\t".join(cells) for cells in [headers, *rows]))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        self._diagnostic("info", message)

    def success(self, message: str) -> None:
        self._diagnostic("success", message)

    def suggest(self, message: str) -> None:
        """A next-step hint, such as a command to try."""
        self._diagnostic("suggest", message)

    def warning(self, message: str) -> None:
        self._diagnostic("warning", message)

    def error(self, message: str) -> None:
        self._diagnostic("error", message)

    def _diagnostic(self, kind: str, message: str) -> None:
        prefix, style, quiet_drops = _DIAGNOSTICS[kind]
        if quiet_drops and self._quiet:
            return
        if self._no_color or not style:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
            return
        # Only the prefix is styled for warnings and errors.
        if kind in ("warning", "error"):
            line = Text.assemble((prefix, style), message)
        else:
            line = Text(prefix + message, style=style)
        self._stderr.print(line)


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    return OutputFormat.RICH if _is_tty() and not no_color else OutputFormat.PLAIN


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager. Tests call this between CLI invocations."""
    global _output
    _output = None


def format_document(data: Any) -> None:
    get_output().format_document(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)
