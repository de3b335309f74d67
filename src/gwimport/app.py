"""The ``gwimport`` command line.

Sub-commands:

* ``import`` / ``paths`` -- run an import and print the draft or its paths
  (:mod:`gwimport.commands.draft`).
* ``policies`` -- list, show and validate policy plugins
  (:mod:`gwimport.commands.policies`).
* ``schema`` -- print the JSON Schemas gwimport ships
  (:mod:`gwimport.commands.schema`).
* ``config`` -- inspect and edit the user configuration
  (:mod:`gwimport.commands.config`).

Global flags are handled by :func:`main_callback`: they pick the output
format, install the process-wide :class:`~gwimport.output.OutputManager` and
attach a Rich log handler to the ``gwimport`` logger.

:func:`main` is the console script. A :class:`~gwimport.exceptions.GwImportError`
escaping a command exits with its ``exit_code``; anything else is written to
a crash log under :func:`~gwimport.config.get_data_dir`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from gwimport import __version__
from gwimport.commands.config import config_app
from gwimport.commands.draft import import_command, paths_command
from gwimport.commands.policies import policies_app
from gwimport.commands.schema import schema_app
from gwimport.exit_codes import EXIT_GENERIC_FAILURE
from gwimport.output import OutputFormat, OutputManager, set_output

logger = logging.getLogger("gwimport")

app = typer.Typer(
    name="gwimport",
    help="Import Swagger/OpenAPI descriptors as gateway API definitions.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("import")(import_command)
app.command("paths")(paths_command)
app.add_typer(policies_app, name="policies", help="Policy plugins and configuration validation.")
app.add_typer(schema_app, name="schema", help="JSON Schemas shipped with gwimport.")
app.add_typer(config_app, name="config", help="Show or edit the user configuration.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"gwimport {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, quiet: bool, no_color: bool) -> None:
    """Send ``gwimport.*`` records to stderr through one :class:`RichHandler`.

    WARNING by default, DEBUG with ``--verbose``, ERROR with ``--quiet``.
    Calling it again replaces the handler installed by the previous call.
    """
    for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(handler)

    logger.addHandler(
        RichHandler(
            console=Console(file=sys.stderr, stderr=True, no_color=no_color),
            show_time=False,
            show_path=verbose,
            markup=False,
        )
    )
    if verbose:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.ERROR)
    else:
        logger.setLevel(logging.WARNING)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Print the gwimport version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print drafts, tables and policies as JSON."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Print plain text (tab-separated tables)."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable colours on stdout and stderr."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only report warnings and errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every import stage."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the command's data to FILE instead of stdout."
    ),
) -> None:
    """Global flags, applied before any sub-command runs."""
    if json_output and plain_output:
        raise typer.BadParameter("--json and --plain are mutually exclusive")

    requested = OutputFormat.AUTO
    if json_output:
        requested = OutputFormat.JSON
    elif plain_output:
        requested = OutputFormat.PLAIN

    output = OutputManager(
        format=requested, no_color=no_color, quiet=quiet, output_file=output_file
    )
    set_output(output)
    _configure_logging(verbose, quiet, no_color)

    ctx.ensure_object(dict)
    ctx.obj["format"] = output.format
    ctx.obj["verbose"] = verbose


def _exit_on_sigint() -> None:
    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Dump the traceback of *exc* next to earlier crash logs and return its path."""
    from gwimport.config import get_data_dir

    log_path = get_data_dir() / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        encoding="utf-8",
    )
    return str(log_path)


def main() -> None:
    """Console-script entry point; always ends with :class:`SystemExit`."""
    from gwimport.exceptions import GwImportError
    from gwimport.output import error

    _exit_on_sigint()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except GwImportError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        logger.debug("Unhandled error", exc_info=True)
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
