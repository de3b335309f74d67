"""Import commands -- turn a descriptor into an API draft.

Provides the top-level ``gwimport import`` and ``gwimport paths`` commands.
Both read a descriptor from a URL, a file path, or stdin (``-``), resolve the
effective import settings via :func:`~gwimport.config.resolve_config`, load
the policy plugins, and run :class:`~gwimport.importer.ApiImporter`.
"""

from __future__ import annotations

import sys
from typing import Optional

import typer

from gwimport.exceptions import GwImportError, InvalidUsageError
from gwimport.models import ApiDraft, ImportDescriptor, SourceKind
from gwimport.output import error, format_document, info, print_table, suggest


def _parse_groups(values: list[str]) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {}
    for value in values:
        name, sep, group_id = value.partition("=")
        if not sep or not name or not group_id:
            raise InvalidUsageError(f"Invalid --group '{value}', expected NAME=ID")
        groups.setdefault(name, []).append(group_id)
    return groups


def _descriptor(source: str, policies: list[str], include_policy_paths: bool) -> ImportDescriptor:
    if source == "-":
        return ImportDescriptor(
            kind=SourceKind.INLINE,
            payload=sys.stdin.read(),
            policies=frozenset(policies),
            include_policy_paths=include_policy_paths,
        )
    return ImportDescriptor(
        kind=SourceKind.URL,
        payload=source,
        policies=frozenset(policies),
        include_policy_paths=include_policy_paths,
    )


def run_import(
    source: str,
    policies: Optional[list[str]] = None,
    with_policy_paths: Optional[bool] = None,
    strict: Optional[bool] = None,
    timeout: Optional[float] = None,
    groups: Optional[list[str]] = None,
) -> ApiDraft:
    """Resolve settings, load policies and import *source*.

    Raises:
        GwImportError: Any import, configuration or usage failure.
    """
    from gwimport.commands.policies import load_policies
    from gwimport.config import resolve_config
    from gwimport.importer import ApiImporter

    config = resolve_config(
        cli_timeout=timeout,
        cli_policies=policies,
        cli_strict=strict,
        cli_include_policy_paths=with_policy_paths,
    )
    settings = config.importer
    for name, ids in _parse_groups(groups or []).items():
        settings.groups.setdefault(name, []).extend(ids)

    manager = load_policies(config)
    importer = ApiImporter(registry=manager.registry, settings=settings)
    descriptor = _descriptor(source, settings.default_policies, settings.include_policy_paths)
    return importer.create_api(descriptor)


def import_command(
    source: str = typer.Argument(help="Descriptor URL or file path, or '-' for stdin."),
    policy: Optional[list[str]] = typer.Option(
        None, "--policy", "-P", help="Policy visitor to apply (repeatable)."
    ),
    with_policy_paths: Optional[bool] = typer.Option(
        None, "--with-policy-paths/--without-policy-paths", help="Generate policy-bearing paths."
    ),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--lenient", help="Fail on duplicate operations."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Fetch timeout in seconds."
    ),
    group: Optional[list[str]] = typer.Option(
        None, "--group", help="Group id for a group name, as NAME=ID (repeatable)."
    ),
) -> None:
    """Import an API descriptor and print the resulting API draft.

    Example::

        gwimport import petstore.yaml
        gwimport import https://example.com/openapi.json -P mock --with-policy-paths
        cat swagger.json | gwimport import - --json
    """
    try:
        draft = run_import(source, policy, with_policy_paths, strict, timeout, group)
    except GwImportError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Imported '{draft.name}' {draft.version}: {len(draft.paths)} paths")
    format_document(draft.model_dump(mode="json", by_alias=True))


def paths_command(
    source: str = typer.Argument(help="Descriptor URL or file path, or '-' for stdin."),
    policy: Optional[list[str]] = typer.Option(
        None, "--policy", "-P", help="Policy visitor to apply (repeatable)."
    ),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--lenient", help="Fail on duplicate operations."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Fetch timeout in seconds."
    ),
) -> None:
    """List the paths and rules an import would produce.

    Example::

        gwimport paths petstore.yaml
        gwimport paths petstore.yaml -P mock --plain
    """
    try:
        draft = run_import(source, policy, None, strict, timeout)
    except GwImportError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not draft.paths:
        info("No paths found.")
        suggest("Check that the descriptor declares 'paths' (or 'apis' for Swagger 1.x)")
        return

    rows = [
        [
            path.path,
            ", ".join(sorted(method.value.upper() for method in rule.methods)),
            rule.description,
            ", ".join(p.name for p in rule.policies),
        ]
        for path in draft.paths.values()
        for rule in path.rules
    ]
    print_table(["Path", "Methods", "Description", "Policies"], rows, title=draft.name)
