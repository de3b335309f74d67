"""User and project configuration for gwimport.

Two files may exist:

* the user config, ``config.json`` in :func:`get_config_dir`, a full
  :class:`~gwimport.models.GlobalConfig` written by ``gwimport config set``;
* a project config, ``./gwimport.json``, holding any subset of the same
  layout (typically ``importer.groups`` or ``importer.default_policies``).

:func:`resolve_config` layers them with the ``GWIMPORT_*`` environment
variables and the CLI flags into the effective configuration of a run.
Directories follow the XDG base directory layout on Linux and BSD and fall
back to ``~/.gwimport`` elsewhere.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from gwimport.exceptions import ConfigError
from gwimport.models import GlobalConfig, ImportSettings

_APP_NAME = "gwimport"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "gwimport.json"

ENV_TIMEOUT = "GWIMPORT_TIMEOUT"
ENV_POLICIES = "GWIMPORT_POLICIES"
ENV_STRICT = "GWIMPORT_STRICT"

_TRUE_VALUES = ("1", "true", "yes", "on")


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: str, fallback: str) -> Path:
    """Return (and create) a gwimport directory.

    *xdg_default* is relative to the home directory and used when *xdg_var*
    is unset; *fallback* is relative to ``~/.gwimport`` on non-XDG systems.
    """
    if _is_xdg_platform():
        base = os.environ.get(xdg_var) or str(Path.home() / xdg_default)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/gwimport`` (``~/.config/gwimport``), or ``~/.gwimport``."""
    return _app_dir("XDG_CONFIG_HOME", ".config", "")


def get_data_dir() -> Path:
    """Where crash logs go.

    ``$XDG_DATA_HOME/gwimport`` (``~/.local/share/gwimport``), or
    ``~/.gwimport/logs``.
    """
    return _app_dir("XDG_DATA_HOME", os.path.join(".local", "share"), "logs")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* without ever leaving a half-written file.

    The data goes to a temporary file in the same directory, which is then
    renamed over *path*. The temporary file is removed if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


# --- Config files ---


def load_global_config() -> GlobalConfig:
    """Read the user config; defaults when the file does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or holds invalid values.
    """
    path = get_config_dir() / _CONFIG_FILENAME
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    text = json.dumps(config.model_dump(mode="json"), indent=2) + "\n"
    _atomic_write(get_config_dir() / _CONFIG_FILENAME, text)


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./gwimport.json`` as a raw object, or ``None`` when it is absent.

    Values are validated later, once merged over the user config.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Effective configuration ---


def resolve_config(
    cli_format: Optional[str] = None,
    cli_timeout: Optional[float] = None,
    cli_policies: Optional[list[str]] = None,
    cli_strict: Optional[bool] = None,
    cli_include_policy_paths: Optional[bool] = None,
) -> GlobalConfig:
    """Build the configuration of one run.

    Later sources win: defaults, user config, ``./gwimport.json`` (deep
    merged), the environment (``GWIMPORT_TIMEOUT``, ``GWIMPORT_POLICIES`` as
    a comma-separated list, ``GWIMPORT_STRICT``), then the CLI flags that
    were actually given.

    Raises:
        ConfigError: If a config file or an environment variable is invalid.
    """
    config = load_global_config()

    project = load_project_config()
    if project is not None:
        try:
            config = GlobalConfig.model_validate(
                _deep_merge(config.model_dump(mode="json"), project)
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    settings = config.importer
    _apply_environment(settings)

    if cli_timeout is not None:
        settings.fetch_timeout = cli_timeout
    if cli_policies:
        settings.default_policies = list(cli_policies)
    if cli_strict is not None:
        settings.strict_duplicates = cli_strict
    if cli_include_policy_paths is not None:
        settings.include_policy_paths = cli_include_policy_paths
    if cli_format is not None:
        config.output.format = cli_format

    return config


def _apply_environment(settings: ImportSettings) -> None:
    timeout = os.environ.get(ENV_TIMEOUT)
    if timeout:
        try:
            settings.fetch_timeout = float(timeout)
        except ValueError:
            raise ConfigError(f"{ENV_TIMEOUT} must be a number, got: {timeout}") from None

    policies = os.environ.get(ENV_POLICIES)
    if policies:
        settings.default_policies = [p.strip() for p in policies.split(",") if p.strip()]

    strict = os.environ.get(ENV_STRICT)
    if strict:
        settings.strict_duplicates = strict.strip().lower() in _TRUE_VALUES
