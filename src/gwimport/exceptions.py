"""Exception hierarchy for gwimport.

All exceptions inherit from :class:`GwImportError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`gwimport.exit_codes`
plus optional diagnostic context: the detected ``spec_version`` and the
``location`` (path, field or URL) that triggered the failure.
The top-level error handler in :func:`gwimport.app.main` catches
``GwImportError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    GwImportError                     (exit 1)
    +-- InvalidUsageError             (exit 2)
    +-- PolicyNotFoundError           (exit 4)
    +-- UnreachableSourceError        (exit 6)
    +-- EmptyPayloadError             (exit 7)
    +-- UnsupportedSpecVersionError   (exit 7)
    +-- MalformedDocumentError        (exit 7)
    +-- DuplicateOperationError       (exit 7)
    +-- InvalidConfigurationError     (exit 8)
    +-- PluginError                   (exit 10)
    +-- ConfigError                   (exit 1)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from gwimport.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_CONFIGURATION,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_PLUGIN_ERROR,
    EXIT_SOURCE_UNREACHABLE,
    EXIT_SPEC_PARSE_ERROR,
)

if TYPE_CHECKING:
    from gwimport.models import SpecVersion


class GwImportError(Exception):
    """Base exception for all gwimport errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`gwimport.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        spec_version: The source spec version, when it was already detected.
        location: The offending path, field or source location, if known.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        message: str,
        spec_version: Optional["SpecVersion"] = None,
        location: Optional[str] = None,
        exit_code: int | None = None,
    ):
        super().__init__(message)
        self.spec_version = spec_version
        self.location = location
        if exit_code is not None:
            self.exit_code = exit_code

    def __str__(self) -> str:
        message = super().__str__()
        context = []
        if self.spec_version is not None:
            context.append(f"spec version: {self.spec_version.value}")
        if self.location:
            context.append(f"at: {self.location}")
        if context:
            return f"{message} ({', '.join(context)})"
        return message


class InvalidUsageError(GwImportError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class PolicyNotFoundError(GwImportError):
    """Raised when a policy id is not registered."""

    exit_code = EXIT_NOT_FOUND


class UnreachableSourceError(GwImportError):
    """Raised when the descriptor location cannot be read (file, HTTP or network failure)."""

    exit_code = EXIT_SOURCE_UNREACHABLE


class EmptyPayloadError(GwImportError):
    """Raised when the descriptor content is blank."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class UnsupportedSpecVersionError(GwImportError):
    """Raised when the document is neither Swagger 1.x, Swagger 2.x nor OpenAPI 3.x."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class MalformedDocumentError(GwImportError):
    """Raised when the content cannot be parsed, or breaks the structure of its version."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class DuplicateOperationError(GwImportError):
    """Raised when a (path, method) pair is declared twice and duplicates are strict."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class InvalidConfigurationError(GwImportError):
    """Raised when a policy configuration is not valid JSON or fails its JSON Schema."""

    exit_code = EXIT_INVALID_CONFIGURATION


class PluginError(GwImportError):
    """Raised when a policy plugin fails to load or register."""

    exit_code = EXIT_PLUGIN_ERROR


class ConfigError(GwImportError):
    """Raised for configuration problems (invalid JSON, unknown settings)."""

    exit_code = EXIT_GENERIC_FAILURE
