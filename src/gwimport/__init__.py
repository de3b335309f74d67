"""gwimport -- Turn Swagger/OpenAPI descriptions into gateway API definitions.

This package imports an API description (Swagger 1.x, Swagger 2.0 or OpenAPI
3.x, in JSON or YAML, inline or from a URL/file) and converts it into a
normalized :class:`~gwimport.models.ApiDraft`: paths with per-method rules,
backend endpoint targets, virtual hosts and the vendor extensions (groups,
tags, labels, categories, properties, metadata, visibility, picture) a
gateway needs to expose the API.

Typical usage::

    from gwimport import create_api
    from gwimport.models import ImportDescriptor, SourceKind

    draft = create_api(ImportDescriptor(kind=SourceKind.URL, payload="petstore.yaml"))
    print(draft.name, list(draft.paths))

Modules:
    app: Typer application and CLI entry point.
    importer: The import pipeline (:func:`create_api`).
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"

from gwimport.importer import ApiImporter, create_api  # noqa: E402

__all__ = ["ApiImporter", "create_api", "__version__"]
