"""Build a :class:`~specdoc.models.Specification` from a projected document.

This is the top of the normalization engine. It walks the document's tags
and paths, groups operations into :class:`~specdoc.models.APIGroup`\\ s,
builds each :class:`~specdoc.models.Method` (parameters, responses, headers,
security) and feeds request and response schemas through the
:class:`~specdoc.normalizer.resources.ResourceResolver` and the
:class:`~specdoc.normalizer.linker.ResourceCache`.

Grouping:

* With document-level tags, one group is built per tag and holds every
  operation carrying that tag.
* Without tags, one group is built per path and named after ``x-pathName``
  or the summary of its first operation.

Any violation of the invariants the documentation relies on raises
:class:`~specdoc.exceptions.StructuralError`; nothing is returned for a
partially built specification.
"""

from __future__ import annotations

import http
import json
import logging
from typing import Any, Optional

from specdoc.exceptions import StructuralError
from specdoc.models import (
    APIGroup,
    APIInfo,
    Dialect,
    ExternalDocs,
    Header,
    HeaderSpec,
    Method,
    OperationSpec,
    Parameter,
    ParameterSpec,
    PathSpec,
    Response,
    ResourceOrigin,
    ResponseSpec,
    Security,
    SourceDocument,
    Specification,
    TagSpec,
)
from specdoc.normalizer.examples import json_resource_to_string
from specdoc.normalizer.linker import ResourceCache
from specdoc.normalizer.naming import camel_to_kebab, title_to_kebab
from specdoc.normalizer.resources import ResourceResolver, stringify_enum

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "latest"
DEFAULT_SORT_BY = ["path", "operation"]
SORT_FIELDS = frozenset({"path", "method", "operation", "navigation", "summary"})

COLLECTION_FORMATS = {
    "csv": "comma separated",
    "ssv": "space separated",
    "tsv": "tab separated",
    "pipes": "pipe separated",
    "multi": "multiple occurances",
}


def collection_format_description(collection_format: str) -> str:
    """Return the human description of a collection format, or ``""``."""
    return COLLECTION_FORMATS.get(collection_format, "")


def status_description(status: int) -> str:
    """Return the HTTP reason phrase for *status*, or ``""`` if unknown."""
    try:
        return http.HTTPStatus(status).phrase
    except ValueError:
        return ""


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else json.dumps(value)


class SpecificationBuilder:
    """Normalize one :class:`~specdoc.models.SourceDocument`.

    Args:
        document: The projected source document.
        specification: An existing aggregate to load into (collapse mode).
            A new one is created when omitted.
        url: Where the document was loaded from; used in diagnostics and
            recorded on the specification.
    """

    def __init__(
        self,
        document: SourceDocument,
        specification: Optional[Specification] = None,
        url: str = "",
    ) -> None:
        self.document = document
        self.specification = specification if specification is not None else Specification()
        self.url = url
        self.cache = ResourceCache(self.specification.resource_list)
        self.navigate_by_name = True
        self.sort_by: list[str] = list(DEFAULT_SORT_BY)

    # ------------------------------------------------------------------ #
    # Top level
    # ------------------------------------------------------------------ #

    def build(self) -> Specification:
        """Populate and return the specification.

        Raises:
            StructuralError: If the document violates an invariant the
                documentation model depends on.
        """
        doc = self.document
        spec = self.specification
        if self.url:
            spec.url = self.url

        info = doc.info
        if not info.title:
            raise StructuralError(f"Specification {self.url} does not have an info.title member.")

        spec.api_info = APIInfo(
            title=info.title,
            description=info.description,
            contact_name=info.contact_name,
            contact_url=info.contact_url,
            contact_email=info.contact_email,
        )
        spec.id = title_to_kebab(info.title)
        logger.debug("Building specification %r (%s)", info.title, doc.dialect.value)

        spec.security_definitions.update(doc.security_schemes)
        spec.default_security = self._process_security(doc.security)

        self._read_document_extensions()

        for tag in doc.tags or [TagSpec()]:
            self._build_tag(tag)

        self._group_versions()
        return spec

    def _read_document_extensions(self) -> None:
        extensions = self.document.extensions

        by_name = extensions.get("x-navigateMethodsByName")
        if isinstance(by_name, bool):
            self.navigate_by_name = by_name

        requested = extensions.get("x-sortMethodsBy")
        if isinstance(requested, list):
            sort_by = []
            for field in requested:
                if field in SORT_FIELDS:
                    sort_by.append(field)
                else:
                    logger.warning("Ignoring invalid x-sortMethodsBy value %r", field)
            if sort_by:
                self.sort_by = sort_by

    # ------------------------------------------------------------------ #
    # Groups
    # ------------------------------------------------------------------ #

    def _new_group(self, tag: TagSpec) -> APIGroup:
        doc = self.document
        external_docs = None
        if tag.external_docs_url or tag.external_docs_description:
            external_docs = ExternalDocs(
                description=tag.external_docs_description or "",
                url=tag.external_docs_url or "",
            )
        group = APIGroup(
            id=title_to_kebab(tag.name),
            name=tag.name,
            description=tag.description,
            url=doc.base_url,
            method_navigation_by_name=self.navigate_by_name,
            method_sort_by=list(self.sort_by),
            external_docs=external_docs,
            consumes=doc.consumes,
            produces=doc.produces,
        )
        group.info = self.specification.api_info
        return group

    def _build_tag(self, tag: TagSpec) -> None:
        grouping_by_tag = bool(tag.name)
        group = self._new_group(tag) if grouping_by_tag else None

        for path in self.document.paths:
            if not grouping_by_tag:
                group = self._new_group(tag)

            version = path.extensions.get("x-version")
            if not isinstance(version, str):
                version = DEFAULT_VERSION
            group.current_version = version

            for operation in path.operations:
                for _ in range(self._match_count(tag, operation)):
                    method = self._build_method(group, path, operation, version)
                    group.methods.append(method)
                    group.versions.setdefault(version, []).append(method)

            if not grouping_by_tag:
                self._add_group(group)

        if grouping_by_tag:
            self._add_group(group)

    @staticmethod
    def _match_count(tag: TagSpec, operation: OperationSpec) -> int:
        """Return how many times *operation* is listed under *tag*.

        A tagged operation is listed once per matching tag, and every tag
        matches the untagged pass.
        """
        if not operation.tags:
            if tag.name:
                logger.debug(
                    "Skipping %s %r: no tags while grouping by tag",
                    operation.method,
                    operation.summary,
                )
                return 0
            return 1
        return sum(1 for name in operation.tags if not tag.name or name == tag.name)

    def _add_group(self, group: APIGroup) -> None:
        if not group.methods:
            return
        group.methods.sort(key=lambda m: m.sort_key)
        for methods in group.versions.values():
            methods.sort(key=lambda m: m.sort_key)
        logger.debug("Adding group %s with %d methods", group.name, len(group.methods))
        self.specification.apis.append(group)

    def _group_versions(self) -> None:
        spec = self.specification
        spec.api_versions = {}
        for group in spec.apis:
            for version, methods in group.versions.items():
                copy = group.model_copy(update={"methods": methods, "versions": {}})
                spec.api_versions.setdefault(version, []).append(copy)

    # ------------------------------------------------------------------ #
    # Methods
    # ------------------------------------------------------------------ #

    def _sort_key(self, values: dict[str, str]) -> str:
        key = "".join(values[field] + "~" for field in self.sort_by)
        return key or values["summary"]

    def _build_method(
        self, group: APIGroup, path: PathSpec, op: OperationSpec, version: str
    ) -> Method:
        verb = op.method
        op_name = op.extensions.get("x-operationName")
        has_op_name = isinstance(op_name, str)
        operation_name = op_name if has_op_name else verb

        method_id = op.operation_id
        if not method_id:
            if has_op_name:
                method_id = title_to_kebab(op_name)
            else:
                method_id = title_to_kebab(op.summary) or verb

        navigation_name = op.summary if group.method_navigation_by_name else operation_name

        method = Method(
            id=camel_to_kebab(method_id),
            name=op.summary,
            description=op.description,
            method=verb,
            operation_name=operation_name,
            navigation_name=navigation_name,
            path=path.path,
            consumes=op.consumes or group.consumes,
            produces=op.produces or group.produces,
            sort_key=self._sort_key(
                {
                    "path": path.path,
                    "method": verb,
                    "operation": operation_name,
                    "navigation": navigation_name,
                    "summary": op.summary,
                }
            ),
            deprecated=op.deprecated,
        )
        method.api_group = group

        path_name = path.extensions.get("x-pathName")
        if isinstance(path_name, str):
            group.name = path_name
            group.id = title_to_kebab(path_name)
        if not group.name:
            if not op.summary:
                raise StructuralError(
                    f"Operation '{method_id}' ({verb.upper()} {path.path}) does not have "
                    "an operationId or summary member."
                )
            group.name = op.summary
            group.description = op.description
            group.id = title_to_kebab(op.summary)

        logger.debug("Building method %s %s (%s)", verb.upper(), path.path, method.id)

        resolver = ResourceResolver(
            method, name_properties=self.document.dialect == Dialect.OPENAPI3
        )
        for param_spec in op.parameters:
            self._add_parameter(method, resolver, param_spec, version)

        if op.responses is None:
            raise StructuralError(
                f"Operation {verb} {path.path} is missing a responses declaration."
            )
        for response_spec in op.responses:
            self._add_response(method, resolver, response_spec, version)

        security = self._process_security(op.security or [])
        if security:
            method.security = security
        else:
            method.security = self.specification.default_security

        return method

    # ------------------------------------------------------------------ #
    # Parameters
    # ------------------------------------------------------------------ #

    def _add_parameter(
        self,
        method: Method,
        resolver: ResourceResolver,
        spec: ParameterSpec,
        version: str,
    ) -> None:
        location = spec.location.lower()
        param = Parameter(
            name=spec.name,
            location=spec.location,
            description=spec.description,
            required=spec.required,
        )

        if location == "body":
            if spec.schema_ is None:
                raise StructuralError(
                    f"{method.method.upper()} {method.path}: 'in body' parameter "
                    f"{spec.name} is missing a schema declaration."
                )
            resolved = resolver.resolve(spec.schema_, is_request=True, name=spec.schema_name or "")
            resource = resolved.resource
            resource.example_json = json_resource_to_string(resolved.example, resolved.is_array)
            resource.origin = ResourceOrigin.REQUEST_BODY
            param.resource = resource
            param.is_array = resolved.is_array
            param.type = list(resource.type)
            method.body_param = param
            self.cache.link(resource, method, version)
            return

        self._set_type(param, spec, method, "Request parameter")

        if location == "formdata":
            method.form_params.append(param)
        elif location == "path":
            method.path_params.append(param)
        elif location == "header":
            method.header_params.append(param)
        elif location == "query":
            method.query_params.append(param)
        else:
            logger.debug("Skipping parameter %s in unsupported location %s", spec.name, spec.location)

    @staticmethod
    def _set_type(
        target: Parameter | Header,
        spec: ParameterSpec | HeaderSpec,
        method: Method,
        kind: str,
    ) -> None:
        types: list[str] = []
        if spec.type == "array":
            if not spec.collection_format:
                raise StructuralError(
                    f"{method.method.upper()} {method.path}: {kind} {spec.name} is an array "
                    "without declaring the collectionFormat."
                )
            if not spec.items_type:
                raise StructuralError(
                    f"{method.method.upper()} {method.path}: {kind} {spec.name} is an array "
                    "without declaring the type of its items."
                )
            types.append("array")
            target.collection_format = spec.collection_format
            target.collection_format_description = collection_format_description(
                spec.collection_format
            )
            types.append(spec.items_format or spec.items_type)
            target.enum = stringify_enum(spec.items_enum)
        else:
            types.append(spec.format or spec.type or "")
            target.enum = stringify_enum(spec.enum)
        target.type = types

    # ------------------------------------------------------------------ #
    # Responses
    # ------------------------------------------------------------------ #

    def _add_response(
        self,
        method: Method,
        resolver: ResourceResolver,
        spec: ResponseSpec,
        version: str,
    ) -> None:
        if spec.status == "default":
            method.default_response = self._build_response(method, resolver, spec, version)
            return
        try:
            status = int(spec.status)
        except ValueError:
            logger.warning(
                "Ignoring response %r of %s %s: not a numeric status",
                spec.status,
                method.method.upper(),
                method.path,
            )
            return
        response = self._build_response(method, resolver, spec, version)
        response.status_description = status_description(status)
        method.responses[status] = response

    def _build_response(
        self,
        method: Method,
        resolver: ResourceResolver,
        spec: ResponseSpec,
        version: str,
    ) -> Response:
        response = Response(description=spec.description)

        resolved = resolver.resolve(spec.schema_, is_request=False, name=spec.schema_name or "")
        if resolved is not None:
            resource = resolved.resource
            resource.example_json = json_resource_to_string(resolved.example, False)
            resource.origin = ResourceOrigin.METHOD_RESPONSE
            canonical = self.cache.link(resource, method, version)
            response.resource = canonical
            response.is_array = resolved.is_array
            method.resources.append(canonical)

        for header_spec in spec.headers:
            header = Header(
                name=header_spec.name,
                description=header_spec.description,
                default=_stringify(header_spec.default),
                required=header_spec.required,
            )
            self._set_type(header, header_spec, method, "Response header")
            response.headers.append(header)

        return response

    # ------------------------------------------------------------------ #
    # Security
    # ------------------------------------------------------------------ #

    def _process_security(self, requirements: list[dict[str, list[str]]]) -> dict[str, Security]:
        """Resolve security requirements against the scheme table.

        Entries are keyed by scheme *type*, so two API-key schemes on one
        operation collapse into one entry. OAuth2 scopes are kept only when
        the scheme declares them.
        """
        definitions = self.specification.security_definitions
        security: dict[str, Security] = {}
        for requirement in requirements:
            for name, scopes in requirement.items():
                scheme = definitions.get(name)
                if scheme is None:
                    logger.debug("Security requirement %s has no matching scheme", name)
                    continue
                entry = Security(scheme=scheme)
                if scheme.is_oauth2:
                    entry.scopes = {s: scheme.scopes[s] for s in scopes if s in scheme.scopes}
                security[scheme.type] = entry
        return security
