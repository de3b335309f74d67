"""Built-in CLI sub-commands for gwimport.

* :mod:`~gwimport.commands.draft` -- ``import`` and ``paths``: run an
  import and print the draft or its paths.
* :mod:`~gwimport.commands.policies` -- list, show and validate policies.
* :mod:`~gwimport.commands.schema` -- print shipped JSON Schemas.
* :mod:`~gwimport.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``policies`` and ``config``) or plain callback
functions registered directly on the root app (``import`` and ``paths``).
"""
