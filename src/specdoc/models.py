"""Canonical Pydantic models shared across all specdoc modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig` and :class:`GlobalConfig`.

**Source document models** -- the dialect-neutral projection of a Swagger 2.x
or OpenAPI 3.x document, produced by :mod:`specdoc.parser` and consumed by the
normalizer:
    :class:`Dialect`, :class:`SchemaNode`, :class:`ParameterSpec`,
    :class:`HeaderSpec`, :class:`ResponseSpec`, :class:`OperationSpec`,
    :class:`PathSpec`, :class:`TagSpec`, :class:`DocumentInfo`, and
    :class:`SourceDocument`.

**Documentation graph models** -- the normalized output handed to a renderer:
    :class:`ResourceOrigin`, :class:`Resource`, :class:`Parameter`,
    :class:`Header`, :class:`Response`, :class:`SecurityScheme`,
    :class:`Security`, :class:`Method`, :class:`APIGroup`,
    :class:`APIInfo`, :class:`ExternalDocs`, and :class:`Specification`.

The graph is cyclic: a :class:`Method` points back at its :class:`APIGroup`
and a cross-linked :class:`Resource` knows every :class:`Method` that uses it.
Those back-references are excluded from serialisation and ``repr`` so that
``model_dump()`` stays finite. Pydantic keeps model instances by identity when
they are passed into another model, so a resource shared by several methods
is the same Python object everywhere.
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


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specdoc/config.json``.

    Loaded and saved by :func:`~specdoc.config.load_global_config` and
    :func:`~specdoc.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specdoc.config.resolve_config`
    for the full precedence chain.
    """

    specs: list[str] = Field(
        default_factory=list, description="API description paths or URLs"
    )
    spec_dir: Optional[str] = Field(
        default=None, description="Base directory for relative spec paths"
    )
    collapse: bool = Field(
        default=False, description="Merge every document into one specification"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Source document (dialect-neutral input) ---


class Dialect(str, enum.Enum):
    """The two API description dialects the parser understands."""

    SWAGGER2 = "2.0"
    OPENAPI3 = "3.x"


class SchemaNode(BaseModel):
    """Dialect-neutral view of a single JSON Schema node.

    Both :mod:`~specdoc.parser.swagger2` and :mod:`~specdoc.parser.openapi3`
    project their native schema objects into this shape so that the resource
    resolver walks one representation only.

    ``type`` holds the first non-null declared type, or ``None`` when the
    schema does not declare one. ``ref_name`` is set when the node was
    reached through a ``$ref`` (for circular references it is the only
    information left).
    """

    title: str = ""
    description: str = ""
    type: Optional[str] = None
    format: str = ""
    items: Optional[SchemaNode] = None
    properties: dict[str, SchemaNode] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    enum: list[Any] = Field(default_factory=list)
    example: Any = None
    read_only: bool = False
    all_of: list[SchemaNode] = Field(default_factory=list)
    additional_properties: Optional[SchemaNode] = None
    extensions: dict[str, Any] = Field(default_factory=dict)
    ref_name: Optional[str] = None


class ParameterSpec(BaseModel):
    """A parameter as declared by the source document.

    For Swagger 2.x non-body parameters the type information sits on the
    parameter itself; for OpenAPI 3.x the adapter lifts it out of the
    parameter's ``schema``. Body parameters (``location == "body"``) carry a
    :class:`SchemaNode` instead.
    """

    name: str
    location: str
    description: str = ""
    required: bool = False
    type: Optional[str] = None
    format: str = ""
    collection_format: str = ""
    items_type: Optional[str] = None
    items_format: str = ""
    items_enum: list[Any] = Field(default_factory=list)
    enum: list[Any] = Field(default_factory=list)
    schema_: Optional[SchemaNode] = Field(default=None, alias="schema")
    schema_name: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class HeaderSpec(BaseModel):
    """A response header as declared by the source document."""

    name: str
    description: str = ""
    type: Optional[str] = None
    format: str = ""
    collection_format: str = ""
    items_type: Optional[str] = None
    items_format: str = ""
    items_enum: list[Any] = Field(default_factory=list)
    enum: list[Any] = Field(default_factory=list)
    default: Any = None
    required: bool = False


class ResponseSpec(BaseModel):
    """One entry of an operation's ``responses`` map."""

    status: str
    description: str = ""
    schema_: Optional[SchemaNode] = Field(default=None, alias="schema")
    schema_name: Optional[str] = None
    headers: list[HeaderSpec] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class OperationSpec(BaseModel):
    """A single operation (path + HTTP verb) as declared by the source document.

    ``responses`` is ``None`` when the document omits the ``responses``
    member entirely, which the builder treats as a structural error.
    ``security`` is ``None`` when the operation does not declare its own
    requirements.
    """

    method: str
    operation_id: str = ""
    summary: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    deprecated: bool = False
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)
    parameters: list[ParameterSpec] = Field(default_factory=list)
    responses: Optional[list[ResponseSpec]] = None
    security: Optional[list[dict[str, list[str]]]] = None
    extensions: dict[str, Any] = Field(default_factory=dict)


class PathSpec(BaseModel):
    """A path item with its operations in canonical verb order."""

    path: str
    extensions: dict[str, Any] = Field(default_factory=dict)
    operations: list[OperationSpec] = Field(default_factory=list)


class TagSpec(BaseModel):
    """A document-level tag. The implicit untagged pass uses ``name == ""``."""

    name: str = ""
    description: str = ""
    external_docs_description: Optional[str] = None
    external_docs_url: Optional[str] = None


class DocumentInfo(BaseModel):
    """The ``info`` object of the source document."""

    title: str = ""
    description: str = ""
    version: str = ""
    contact_name: str = ""
    contact_url: str = ""
    contact_email: str = ""


class SourceDocument(BaseModel):
    """Complete dialect-neutral projection of one API description document.

    Produced by :func:`~specdoc.parser.project_document` and consumed by
    :class:`~specdoc.normalizer.builder.SpecificationBuilder`.
    """

    dialect: Dialect
    info: DocumentInfo = Field(default_factory=DocumentInfo)
    base_url: str = "http://localhost"
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)
    tags: list[TagSpec] = Field(default_factory=list)
    paths: list[PathSpec] = Field(default_factory=list)
    security_schemes: dict[str, SecurityScheme] = Field(default_factory=dict)
    security: list[dict[str, list[str]]] = Field(default_factory=list)
    extensions: dict[str, Any] = Field(default_factory=dict)


# --- Documentation graph (normalized output) ---


class ResourceOrigin(str, enum.Enum):
    """Where a resource was first observed; responses take precedence."""

    REQUEST_BODY = "request-body"
    METHOD_RESPONSE = "method-response"


class Resource(BaseModel):
    """The normalized representation of one schema type.

    ``type`` has one element for objects and primitives, and two for arrays
    and maps (``["array", "string"]``, ``["map", "object"]``). ``fqns`` is the
    ordered list of ancestor names locating a nested resource inside its
    containing structure. ``example`` is the schema's declared example,
    serialised verbatim; ``example_json`` is the synthesized example payload
    built from the properties.

    ``methods`` maps method IDs to the methods that reference this resource.
    It is filled in by :class:`~specdoc.normalizer.linker.ResourceCache`.
    """

    id: str
    fqns: list[str] = Field(default_factory=list)
    title: str = ""
    description: str = ""
    example: Optional[str] = None
    example_json: str = ""
    type: list[str] = Field(default_factory=list)
    properties: dict[str, Resource] = Field(default_factory=dict)
    required: bool = False
    read_only: bool = False
    exclude_from_operations: list[str] = Field(default_factory=list)
    enum: list[str] = Field(default_factory=list)
    origin: ResourceOrigin = ResourceOrigin.REQUEST_BODY
    methods: dict[str, Method] = Field(default_factory=dict, exclude=True, repr=False)


class Parameter(BaseModel):
    """A method parameter. Body parameters own a :class:`Resource`."""

    name: str
    description: str = ""
    location: str
    collection_format: str = ""
    collection_format_description: str = ""
    required: bool = False
    type: list[str] = Field(default_factory=list)
    enum: list[str] = Field(default_factory=list)
    resource: Optional[Resource] = None
    is_array: bool = False


class Header(BaseModel):
    """A response header."""

    name: str
    description: str = ""
    type: list[str] = Field(default_factory=list)
    collection_format: str = ""
    collection_format_description: str = ""
    default: str = ""
    required: bool = False
    enum: list[str] = Field(default_factory=list)


class Response(BaseModel):
    """A method response. ``resource`` is the canonical cross-linked resource."""

    description: str = ""
    status_description: str = ""
    resource: Optional[Resource] = None
    headers: list[Header] = Field(default_factory=list)
    is_array: bool = False


class SecurityScheme(BaseModel):
    """An authentication mechanism declared by the document.

    ``type`` is one of ``basic``, ``apiKey``, ``oauth2`` (3.x ``http`` basic
    schemes are reported as ``basic``; other 3.x types are kept verbatim).
    """

    type: str
    description: str = ""
    is_api_key: bool = False
    is_basic: bool = False
    is_oauth2: bool = False
    param_name: str = ""
    param_location: str = ""
    oauth2_flow: str = ""
    authorization_url: str = ""
    token_url: str = ""
    scopes: dict[str, str] = Field(default_factory=dict)


class Security(BaseModel):
    """A security requirement resolved against the scheme table."""

    scheme: SecurityScheme
    scopes: dict[str, str] = Field(default_factory=dict)


class ExternalDocs(BaseModel):
    """External documentation link attached to a tag."""

    description: str = ""
    url: str = ""


class APIInfo(BaseModel):
    """API metadata taken from the document's ``info`` object."""

    title: str = ""
    description: str = ""
    contact_name: str = ""
    contact_url: str = ""
    contact_email: str = ""


class Method(BaseModel):
    """One documented HTTP operation.

    ``resources`` lists the canonical resources of the method's responses.
    ``api_group`` is a back-reference to the owning group and is excluded
    from serialisation.
    """

    id: str
    name: str = ""
    description: str = ""
    method: str
    operation_name: str = ""
    navigation_name: str = ""
    path: str
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)
    path_params: list[Parameter] = Field(default_factory=list)
    query_params: list[Parameter] = Field(default_factory=list)
    header_params: list[Parameter] = Field(default_factory=list)
    body_param: Optional[Parameter] = None
    form_params: list[Parameter] = Field(default_factory=list)
    responses: dict[int, Response] = Field(default_factory=dict)
    default_response: Optional[Response] = None
    resources: list[Resource] = Field(default_factory=list)
    security: dict[str, Security] = Field(default_factory=dict)
    api_group: Optional[APIGroup] = Field(default=None, exclude=True, repr=False)
    sort_key: str = ""
    deprecated: bool = False


class APIGroup(BaseModel):
    """A named collection of methods sharing a tag (or, untagged, a path)."""

    id: str = ""
    name: str = ""
    description: str = ""
    url: str = ""
    method_navigation_by_name: bool = True
    method_sort_by: list[str] = Field(default_factory=list)
    versions: dict[str, list[Method]] = Field(default_factory=dict)
    methods: list[Method] = Field(default_factory=list)
    current_version: str = ""
    info: Optional[APIInfo] = None
    external_docs: Optional[ExternalDocs] = None
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)


class Specification(BaseModel):
    """Root aggregate of one loaded API description.

    ``resource_list`` is keyed by version and then by resource ID; the
    :class:`~specdoc.normalizer.linker.ResourceCache` built over it keeps the
    IDs unique per version.
    """

    id: str = ""
    url: str = ""
    apis: list[APIGroup] = Field(default_factory=list)
    api_info: APIInfo = Field(default_factory=APIInfo)
    security_definitions: dict[str, SecurityScheme] = Field(default_factory=dict)
    default_security: dict[str, Security] = Field(default_factory=dict)
    resource_list: dict[str, dict[str, Resource]] = Field(default_factory=dict)
    api_versions: dict[str, list[APIGroup]] = Field(default_factory=dict)

    def get_by_name(self, name: str) -> Optional[APIGroup]:
        """Return the first group called *name*, or ``None``."""
        for api in self.apis:
            if api.name == name:
                return api
        return None

    def get_by_id(self, group_id: str) -> Optional[APIGroup]:
        """Return the first group whose ID is *group_id*, or ``None``."""
        for api in self.apis:
            if api.id == group_id:
                return api
        return None


SchemaNode.model_rebuild()
SourceDocument.model_rebuild()
Resource.model_rebuild()
Method.model_rebuild()
APIGroup.model_rebuild()
Specification.model_rebuild()
