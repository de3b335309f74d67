"""Config commands -- inspect and edit the user configuration.

``gwimport config show`` prints the configuration a run would use;
``gwimport config set`` changes one scalar or list value of the user config
file. Dictionaries such as ``importer.groups`` are edited in the file, or
provided per project through ``./gwimport.json``.
"""

from __future__ import annotations

from typing import Any

import typer

from gwimport.exceptions import GwImportError, InvalidUsageError
from gwimport.output import error, format_document, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    The user config with ``./gwimport.json`` and the ``GWIMPORT_*``
    environment variables applied.

    Example::

        gwimport config show --json
    """
    from gwimport.config import get_config_dir, resolve_config

    try:
        config = resolve_config()
    except GwImportError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_document(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted key, e.g. 'importer.fetch_timeout'."),
    value: str = typer.Argument(help="New value. Lists are comma-separated."),
) -> None:
    """Set one value of the user config file.

    The value is converted to the type of the current value and the whole
    configuration is validated before it is written.

    Example::

        gwimport config set importer.default_policies mock,json-validation
        gwimport config set importer.strict_duplicates true
    """
    from gwimport.config import load_global_config, save_global_config
    from gwimport.models import GlobalConfig

    try:
        data = load_global_config().model_dump(mode="json")
        section, field = _field(data, key)
        section[field] = _convert(section[field], value, key)
        try:
            config = GlobalConfig.model_validate(data)
        except ValueError as exc:
            raise InvalidUsageError(f"Invalid value for {key}: {exc}") from exc
        save_global_config(config)
    except GwImportError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Set {key} = {section[field]}")


def _field(data: dict[str, Any], key: str) -> tuple[dict[str, Any], str]:
    """Return the mapping holding the last segment of *key*, and that segment."""
    *parents, field = key.split(".")
    section = data
    for name in parents:
        section = section.get(name)
        if not isinstance(section, dict):
            raise InvalidUsageError(f"Invalid config key: {key}")
    if field not in section or isinstance(section[field], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")
    return section, field


def _convert(current: Any, value: str, key: str) -> Any:
    if isinstance(current, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(current, (int, float)):
        try:
            return type(current)(value)
        except ValueError:
            raise InvalidUsageError(f"Expected a number for {key}, got: {value}") from None
    if isinstance(current, list):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value
