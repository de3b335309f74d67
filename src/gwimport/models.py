"""Canonical Pydantic models shared across all gwimport modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`PluginsConfig`, :class:`ImportSettings`
    and :class:`GlobalConfig`.

**Import input and intermediate models** -- produced by the loader and the
version adapters:
    :class:`SourceKind`, :class:`ImportDescriptor`, :class:`SpecVersion`,
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`IntermediateOperation`, :class:`ServerVariable`, :class:`Server`,
    :class:`ServerInfo` and :class:`AdaptedSpec`.

**Output models** -- the gateway-ready API definition:
    :class:`Policy`, :class:`Rule`, :class:`Path`, :class:`VirtualHost`,
    :class:`Endpoint`, :class:`EndpointGroup`, :class:`Proxy`,
    :class:`Visibility`, :class:`Metadata` and :class:`ApiDraft`, plus the
    partial results :class:`ResolvedTargets` and :class:`ExtensionFragment`.

**Policy catalogue models** -- describing registered policy plugins:
    :class:`GroupRef`, :class:`PluginInfo`, :class:`PolicyDevelopment` and
    :class:`PolicyEntity`.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class PluginsConfig(BaseModel):
    """Explicit policy plugin allow/deny lists stored in :class:`GlobalConfig`."""

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class ImportSettings(BaseModel):
    """Defaults applied to every import run from the CLI.

    Each field can be overridden per invocation by an environment variable
    or a CLI flag; see :func:`~gwimport.config.resolve_config`.
    """

    fetch_timeout: float = Field(
        default=30.0, description="Timeout in seconds when fetching a descriptor URL"
    )
    default_policies: list[str] = Field(
        default_factory=list, description="Visitor ids requested when none are given"
    )
    include_policy_paths: bool = Field(
        default=False, description="Generate policy-bearing paths by default"
    )
    strict_duplicates: bool = Field(
        default=False, description="Fail on repeated (path, method) pairs instead of last-wins"
    )
    definition_extension: str = Field(
        default="x-graviteeio-definition",
        description="Vendor extension holding the gateway definition overrides",
    )
    groups: dict[str, list[str]] = Field(
        default_factory=dict, description="Group name to group ids, used to resolve group extensions"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/gwimport/config.json``.

    Loaded and saved by :func:`~gwimport.config.load_global_config` and
    :func:`~gwimport.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~gwimport.config.resolve_config`
    for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    importer: ImportSettings = Field(default_factory=ImportSettings)


# --- Import input ---


class SourceKind(str, enum.Enum):
    """How the :attr:`ImportDescriptor.payload` must be interpreted."""

    URL = "url"
    INLINE = "inline"


class ImportDescriptor(BaseModel):
    """Immutable input of a single import call.

    For :attr:`SourceKind.URL` the payload is a location (``http(s)://`` URL,
    ``file://`` URL or filesystem path); for :attr:`SourceKind.INLINE` it is
    the document content itself.

    Example::

        ImportDescriptor(
            kind=SourceKind.INLINE,
            payload=Path("petstore.yaml").read_text(),
            policies={"mock"},
            include_policy_paths=True,
        )
    """

    model_config = ConfigDict(frozen=True)

    kind: SourceKind = SourceKind.INLINE
    payload: str
    policies: frozenset[str] = Field(
        default_factory=frozenset, description="Ids of the visitors allowed to attach policies"
    )
    include_policy_paths: bool = False


class SpecVersion(str, enum.Enum):
    """Families of API description documents the importer understands."""

    SWAGGER_V1 = "swagger-1"
    SWAGGER_V2 = "swagger-2"
    OPENAPI_V3 = "openapi-3"


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised in Swagger/OpenAPI path items."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per the ``in``/``paramType`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"
    BODY = "body"
    FORM = "formData"


class Parameter(BaseModel):
    """A single parameter of an :class:`IntermediateOperation`."""

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_type: str = Field(default="string", description="JSON Schema type")
    schema_format: Optional[str] = None
    default: Any = None
    enum_values: Optional[list[Any]] = None
    example: Any = None
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")

    model_config = {"populate_by_name": True}


class IntermediateOperation(BaseModel):
    """One HTTP method of one raw path entry, in a version-independent shape.

    Produced by the version adapters before paths are merged. ``path`` is
    already normalized (``:name`` placeholders); ``raw_path`` keeps the
    document's spelling for diagnostics. ``responses`` and ``request_body``
    stay in the source version's native shape, which is why policy visitors
    may need a version-specific variant.
    """

    path: str
    raw_path: str
    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[dict[str, Any]] = None
    responses: dict[str, Any] = Field(default_factory=dict)
    examples: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Response examples keyed by status code then media type"
    )
    links: Optional[dict[str, Any]] = None
    callbacks: Optional[dict[str, Any]] = None
    vendor_extensions: dict[str, Any] = Field(default_factory=dict)
    deprecated: bool = False
    servers: list["Server"] = Field(default_factory=list)


class ServerVariable(BaseModel):
    """A variable of a server URL template (``{port}``, ``{scheme}``...)."""

    default: Optional[str] = None
    enum: list[str] = Field(default_factory=list)
    description: Optional[str] = None


class Server(BaseModel):
    """A backend location declared by the document.

    OpenAPI 3 servers map one to one; Swagger 2 ``schemes``/``host``/
    ``basePath`` and Swagger 1 ``basePath`` are folded into a single server
    without variables.
    """

    url: str
    description: Optional[str] = None
    variables: dict[str, ServerVariable] = Field(default_factory=dict)


class ServerInfo(BaseModel):
    """Every server the document declares, in declaration order."""

    servers: list[Server] = Field(default_factory=list)


class AdaptedSpec(BaseModel):
    """Output of a version adapter, consumed by the rest of the pipeline."""

    spec_version: SpecVersion
    title: str
    version: str
    description: Optional[str] = None
    operations: list[IntermediateOperation] = Field(default_factory=list)
    server_info: ServerInfo = Field(default_factory=ServerInfo)
    extensions: dict[str, Any] = Field(
        default_factory=dict, description="Document-level x-* fields, unmodified"
    )


# --- Output ---


class Policy(BaseModel):
    """A policy attached to a rule; ``configuration`` is JSON text."""

    name: str
    configuration: Optional[str] = None


class Rule(BaseModel):
    """Behaviour of a :class:`Path` for a set of HTTP methods."""

    methods: set[HTTPMethod] = Field(default_factory=set)
    description: str = ""
    enabled: bool = True
    policies: list[Policy] = Field(default_factory=list)


class Path(BaseModel):
    """A normalized path template and its ordered rules."""

    path: str
    rules: list[Rule] = Field(default_factory=list)


class VirtualHost(BaseModel):
    """An externally reachable host + path prefix for the imported API."""

    host: Optional[str] = None
    path: str = "/"
    override_entrypoint: bool = Field(default=False, alias="overrideEntrypoint")

    model_config = {"populate_by_name": True}


class Endpoint(BaseModel):
    """A concrete backend URL the gateway proxies to."""

    name: str
    target: str


class EndpointGroup(BaseModel):
    """A named set of endpoints, load-balanced together."""

    name: str = "default"
    endpoints: list[Endpoint] = Field(default_factory=list)

    @property
    def targets(self) -> list[str]:
        """The endpoint targets in declaration order."""
        return [endpoint.target for endpoint in self.endpoints]


class Proxy(BaseModel):
    """Entrypoints and backends of the imported API."""

    virtual_hosts: list[VirtualHost] = Field(default_factory=list)
    groups: list[EndpointGroup] = Field(default_factory=list)


class Visibility(str, enum.Enum):
    """Portal visibility of an API."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class MetadataFormat(str, enum.Enum):
    """Value formats a metadata entry may declare."""

    STRING = "STRING"
    NUMERIC = "NUMERIC"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    MAIL = "MAIL"
    URL = "URL"


class Metadata(BaseModel):
    """A named metadata value attached to the API."""

    name: str
    value: str
    format: MetadataFormat = MetadataFormat.STRING


class ResolvedTargets(BaseModel):
    """Virtual host path and endpoint targets derived from the servers."""

    virtual_host_path: str = "/"
    endpoints: list[str] = Field(default_factory=list)


class ExtensionFragment(BaseModel):
    """The part of an :class:`ApiDraft` read from vendor extensions.

    ``virtual_hosts`` is ``None`` when the extension does not override the
    computed virtual host.
    """

    groups: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    properties: dict[str, str] = Field(default_factory=dict)
    metadata: list[Metadata] = Field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    picture: Optional[str] = None
    virtual_hosts: Optional[list[VirtualHost]] = None


class ApiDraft(BaseModel):
    """The gateway-ready API definition produced by an import.

    Exclusively owned by the caller: nothing inside it is shared with the
    importer or with other imports.

    See Also:
        :func:`~gwimport.importer.create_api`: Produces instances.
    """

    name: str
    version: str
    description: str = ""
    paths: dict[str, Path] = Field(default_factory=dict)
    proxy: Proxy = Field(default_factory=Proxy)
    groups: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    properties: dict[str, str] = Field(default_factory=dict)
    metadata: list[Metadata] = Field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    picture: Optional[str] = None


# --- Policy catalogue ---


class GroupRef(BaseModel):
    """A reference to a user group, as returned by the group lookup."""

    id: str
    name: str


class PluginInfo(BaseModel):
    """Where a policy plugin comes from."""

    plugin: str = Field(description="Dotted path of the plugin class")
    type: str = "policy"
    source: Optional[str] = Field(
        default=None, description="Entry point or distribution that provided the plugin"
    )


class PolicyDevelopment(BaseModel):
    """Development details of a policy: its class and implemented phases."""

    class_name: str
    on_request_method: Optional[str] = None
    on_response_method: Optional[str] = None


class PolicyEntity(BaseModel):
    """Public description of a registered policy plugin."""

    id: str
    name: str
    description: str = ""
    version: str = "0.1.0"
    category: Optional[str] = None
    plugin: Optional[PluginInfo] = None
    development: Optional[PolicyDevelopment] = None


IntermediateOperation.model_rebuild()
