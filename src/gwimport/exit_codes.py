"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~gwimport.exceptions.GwImportError` subclass.
External tooling (CI scripts, shell wrappers) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ gwimport import ./missing.yaml
    $ echo $?
    6   # EXIT_SOURCE_UNREACHABLE -- the descriptor could not be read
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""The requested policy (or other named resource) does not exist."""

EXIT_SOURCE_UNREACHABLE = 6
"""The API descriptor could not be fetched (missing file, HTTP error, timeout)."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API descriptor is empty, malformed, or of an unsupported version."""

EXIT_INVALID_CONFIGURATION = 8
"""A policy configuration failed JSON Schema validation."""

EXIT_PLUGIN_ERROR = 10
"""A policy plugin failed to load or register."""
