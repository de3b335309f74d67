"""Policy commands -- browse policy plugins and validate configurations.

Provides the ``gwimport policies`` sub-command group. Plugins are discovered
from the ``gwimport.policies`` entry points, filtered by the
``plugins.enabled``/``plugins.disabled`` lists of the configuration.
"""

from __future__ import annotations

from pathlib import Path

import typer

from gwimport.exceptions import GwImportError, InvalidUsageError
from gwimport.models import GlobalConfig, Policy
from gwimport.output import error, format_document, info, print_data, print_table, success
from gwimport.policies import PolicyPluginManager, PolicyService, VisitorRegistry


policies_app = typer.Typer(no_args_is_help=True)


def load_policies(config: GlobalConfig) -> PolicyPluginManager:
    """Discover the policy plugins into a fresh visitor registry."""
    manager = PolicyPluginManager(VisitorRegistry())
    manager.discover(config)
    return manager


def _service() -> PolicyService:
    from gwimport.config import resolve_config

    return PolicyService(load_policies(resolve_config()))


@policies_app.command("list")
def policies_list() -> None:
    """List the available policies.

    Example::

        gwimport policies list
        gwimport policies list --json
    """
    try:
        policies = _service().find_all()
    except GwImportError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not policies:
        info("No policies installed.")
        return

    rows = [
        [p.id, p.name, p.version, p.category or "", p.description]
        for p in policies
    ]
    print_table(["ID", "Name", "Version", "Category", "Description"], rows, title="Policies")


@policies_app.command("show")
def policies_show(
    policy_id: str = typer.Argument(help="Policy id."),
) -> None:
    """Show a policy, its plugin class and the phases it implements."""
    try:
        entity = _service().find_by_id(policy_id)
    except GwImportError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_document(entity.model_dump(mode="json"))


@policies_app.command("validate")
def policies_validate(
    policy_id: str = typer.Argument(help="Policy id."),
    configuration: str = typer.Argument(
        help="Configuration as JSON text, or @FILE to read it from a file."
    ),
) -> None:
    """Validate a policy configuration against the policy's JSON Schema.

    Prints the configuration with null-valued fields removed.

    Example::

        gwimport policies validate mock '{"status": "200", "content": null}'
        gwimport policies validate json-validation @config.json
    """
    try:
        if configuration.startswith("@"):
            path = Path(configuration[1:])
            if not path.is_file():
                raise InvalidUsageError(f"Configuration file not found: {path}")
            configuration = path.read_text(encoding="utf-8")

        service = _service()
        service.find_by_id(policy_id)
        policy = Policy(name=policy_id, configuration=configuration)
        service.validate_policy_configuration(policy)
    except GwImportError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Configuration of '{policy_id}' is valid")
    print_data(policy.configuration or "")
