"""Derive endpoint targets and the virtual host path from declared servers.

Server URLs may be templates (``https://{env}.example.com:{port}/v2``). Each
declared variable contributes either every value of its ``enum`` or its
``default``; a template expands to the cartesian product of those values, in
variable declaration order. Placeholders naming an undeclared variable, or a
variable with neither ``enum`` nor ``default``, are kept literally.

Example::

    server = Server(
        url="https://demo.example.com:{port}/v2",
        variables={"port": ServerVariable(default="443", enum=["443", "8443"])},
    )
    expand_server_url(server)
    # ["https://demo.example.com:443/v2", "https://demo.example.com:8443/v2"]
"""

from __future__ import annotations

import itertools
import re
from urllib.parse import urlsplit

from gwimport.models import ResolvedTargets, Server, ServerInfo

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")

DEFAULT_TARGET = "/"


def expand_server_url(server: Server) -> list[str]:
    """Expand the URL template of *server* into concrete URLs, without duplicates."""
    names: list[str] = []
    choices: list[list[str]] = []
    for name, variable in server.variables.items():
        if variable.enum:
            values = variable.enum
        elif variable.default is not None:
            values = [variable.default]
        else:
            continue
        names.append(name)
        choices.append(values)

    urls: list[str] = []
    for combination in itertools.product(*choices):
        values = dict(zip(names, combination))
        url = _PLACEHOLDER.sub(lambda match: values.get(match.group(1), match.group(0)), server.url)
        if url not in urls:
            urls.append(url)
    return urls


def resolve_targets(
    server_info: ServerInfo,
    title: str,
    include_policy_paths: bool = False,
) -> ResolvedTargets:
    """Compute the endpoint targets and the virtual host path of an import.

    Args:
        server_info: Servers declared by the document, in declaration order.
        title: Document title, used for the virtual host when no server is
            declared.
        include_policy_paths: Whether the caller generates policy-bearing
            paths; only then is the title turned into a virtual host path.

    Returns:
        The virtual host path and the ordered, de-duplicated targets.
    """
    endpoints: list[str] = []
    for server in server_info.servers:
        for url in expand_server_url(server):
            if url not in endpoints:
                endpoints.append(url)

    if not endpoints:
        virtual_host_path = _title_slug(title) if include_policy_paths else "/"
        return ResolvedTargets(virtual_host_path=virtual_host_path, endpoints=[DEFAULT_TARGET])

    return ResolvedTargets(
        virtual_host_path=_virtual_host_path(endpoints[0]),
        endpoints=endpoints,
    )


def _virtual_host_path(target: str) -> str:
    # Relative targets such as "/api" have no scheme and are their own path.
    path = urlsplit(target).path
    return path.rstrip("/") or "/"


def _title_slug(title: str) -> str:
    return _NON_ALPHANUMERIC.sub("", title.lower()) or "/"
