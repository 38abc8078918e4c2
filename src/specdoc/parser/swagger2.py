"""Project a resolved Swagger 2.x document onto :class:`~specdoc.models.SourceDocument`.

Swagger 2.x already looks much like the neutral model: parameters carry
their own type information, request bodies are ``in: body`` parameters, and
each response declares at most one schema.
"""

from __future__ import annotations

from typing import Any

from specdoc.models import (
    Dialect,
    HeaderSpec,
    OperationSpec,
    ParameterSpec,
    PathSpec,
    ResponseSpec,
    SecurityScheme,
    SourceDocument,
)
from specdoc.parser.schema import (
    VERBS,
    extensions_of,
    extract_info,
    extract_tags,
    merge_parameters,
    string_list,
    to_schema_node,
)


def project_swagger2(spec: dict[str, Any]) -> SourceDocument:
    """Build the neutral document from a ``$ref``-resolved Swagger 2.x mapping."""
    base_path = spec.get("basePath") or ""
    if base_path == "/":
        base_path = ""

    schemes = string_list(spec.get("schemes"))
    scheme = schemes[0] if schemes else "http"

    return SourceDocument(
        dialect=Dialect.SWAGGER2,
        info=extract_info(spec),
        base_url=f"{scheme}://{spec.get('host') or ''}",
        consumes=string_list(spec.get("consumes")),
        produces=string_list(spec.get("produces")),
        tags=extract_tags(spec),
        paths=[
            _project_path(base_path + path, item)
            for path, item in (spec.get("paths") or {}).items()
            if isinstance(item, dict)
        ],
        security_schemes=_security_definitions(spec.get("securityDefinitions") or {}),
        security=spec.get("security") or [],
        extensions=extensions_of(spec),
    )


def _project_path(path: str, item: dict[str, Any]) -> PathSpec:
    path_params = item.get("parameters") or []
    operations = []
    for verb in VERBS:
        operation = item.get(verb)
        if isinstance(operation, dict):
            operations.append(_project_operation(verb, operation, path_params))
    return PathSpec(path=path, extensions=extensions_of(item), operations=operations)


def _project_operation(
    verb: str, operation: dict[str, Any], path_params: list[dict[str, Any]]
) -> OperationSpec:
    params = merge_parameters(path_params, operation.get("parameters") or [])
    responses = operation.get("responses")

    return OperationSpec(
        method=verb,
        operation_id=operation.get("operationId") or "",
        summary=operation.get("summary") or "",
        description=operation.get("description") or "",
        tags=string_list(operation.get("tags")),
        deprecated=bool(operation.get("deprecated", False)),
        consumes=string_list(operation.get("consumes")),
        produces=string_list(operation.get("produces")),
        parameters=[_project_parameter(p) for p in params],
        responses=(
            [
                _project_response(str(status), response)
                for status, response in responses.items()
                if isinstance(response, dict)
            ]
            if isinstance(responses, dict)
            else None
        ),
        security=operation.get("security"),
        extensions=extensions_of(operation),
    )


def _project_parameter(param: dict[str, Any]) -> ParameterSpec:
    items = param.get("items") or {}
    return ParameterSpec(
        name=param.get("name") or "",
        location=param.get("in") or "",
        description=param.get("description") or "",
        required=bool(param.get("required", False)),
        type=param.get("type"),
        format=param.get("format") or "",
        collection_format=param.get("collectionFormat") or "",
        items_type=items.get("type"),
        items_format=items.get("format") or "",
        items_enum=items.get("enum") or [],
        enum=param.get("enum") or [],
        schema=to_schema_node(param.get("schema")),
    )


def _project_response(status: str, response: dict[str, Any]) -> ResponseSpec:
    headers = []
    for name, header in (response.get("headers") or {}).items():
        if not isinstance(header, dict):
            continue
        items = header.get("items") or {}
        headers.append(
            HeaderSpec(
                name=name,
                description=header.get("description") or "",
                type=header.get("type"),
                format=header.get("format") or "",
                collection_format=header.get("collectionFormat") or "",
                items_type=items.get("type"),
                items_format=items.get("format") or "",
                items_enum=items.get("enum") or [],
                enum=header.get("enum") or [],
                default=header.get("default"),
            )
        )

    return ResponseSpec(
        status=status,
        description=response.get("description") or "",
        schema=to_schema_node(response.get("schema")),
        headers=headers,
    )


def _security_definitions(definitions: dict[str, Any]) -> dict[str, SecurityScheme]:
    schemes: dict[str, SecurityScheme] = {}
    for name, definition in definitions.items():
        if not isinstance(definition, dict):
            continue
        scheme_type = definition.get("type") or ""
        scheme = SecurityScheme(
            type=scheme_type,
            description=definition.get("description") or "",
            is_api_key=scheme_type == "apiKey",
            is_basic=scheme_type == "basic",
            is_oauth2=scheme_type == "oauth2",
            param_name=definition.get("name") or "",
            param_location=definition.get("in") or "",
        )
        if scheme.is_oauth2:
            scheme.oauth2_flow = definition.get("flow") or ""
            scheme.authorization_url = definition.get("authorizationUrl") or ""
            scheme.token_url = definition.get("tokenUrl") or ""
            scheme.scopes = dict(definition.get("scopes") or {})
        schemes[name] = scheme
    return schemes
