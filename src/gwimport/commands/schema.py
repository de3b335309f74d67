"""Schema commands -- print the JSON Schemas gwimport ships."""

from __future__ import annotations

import typer

from gwimport.output import print_data


schema_app = typer.Typer(no_args_is_help=True)


@schema_app.command("flow")
def schema_flow() -> None:
    """Print the JSON Schema of a flow configuration.

    The output is identical on every call.

    Example::

        gwimport schema flow > flow.schema.json
    """
    from gwimport.flows import get_flow_schema

    print_data(get_flow_schema().rstrip("\n"))
