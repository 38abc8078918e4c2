"""Project a resolved OpenAPI 3.x document onto :class:`~specdoc.models.SourceDocument`.

The 3.x layout differs from the neutral model in a few places, all handled
here:

* Parameter types live in the parameter's ``schema``; ``style`` and
  ``explode`` stand in for 2.x collection formats.
* A ``requestBody`` becomes an ``in: body`` parameter named ``body``.
* Request and response bodies are keyed by media type; the first media type
  supplies the schema.
* Schemas referenced from ``components/schemas`` are named after their key
  when they carry no title of their own.
* Security schemes use ``http`` for basic auth and describe OAuth2 flows
  under ``flows``.
"""

from __future__ import annotations

from typing import Any, Optional

from specdoc.models import (
    Dialect,
    HeaderSpec,
    OperationSpec,
    ParameterSpec,
    PathSpec,
    ResponseSpec,
    SchemaNode,
    SecurityScheme,
    SourceDocument,
)
from specdoc.parser.schema import (
    VERBS,
    extensions_of,
    extract_info,
    extract_tags,
    first_type,
    merge_parameters,
    schema_ref_name,
    string_list,
    to_schema_node,
)

DEFAULT_SERVER = "http://localhost"

# 3.x flow names mapped onto their 2.x equivalents.
OAUTH2_FLOWS = {
    "implicit": "implicit",
    "password": "password",
    "clientCredentials": "application",
    "authorizationCode": "accessCode",
}


def project_openapi3(spec: dict[str, Any]) -> SourceDocument:
    """Build the neutral document from a ``$ref``-resolved OpenAPI 3.x mapping."""
    servers = spec.get("servers") or []
    base_url = DEFAULT_SERVER
    if servers and isinstance(servers[0], dict) and servers[0].get("url"):
        base_url = servers[0]["url"]

    components = spec.get("components") or {}

    return SourceDocument(
        dialect=Dialect.OPENAPI3,
        info=extract_info(spec),
        base_url=base_url,
        tags=extract_tags(spec),
        paths=[
            _project_path(path, item)
            for path, item in (spec.get("paths") or {}).items()
            if isinstance(item, dict)
        ],
        security_schemes=_security_schemes(components.get("securitySchemes") or {}),
        security=spec.get("security") or [],
        extensions=extensions_of(spec),
    )


def _schema(raw: Any) -> Optional[SchemaNode]:
    return to_schema_node(raw, ref_titles=True)


def _first_media(content: Any) -> tuple[Any, Optional[str]]:
    """Return the schema of the first media type and its component name."""
    if not isinstance(content, dict):
        return None, None
    for media in content.values():
        if isinstance(media, dict) and "schema" in media:
            raw = media["schema"]
            return raw, schema_ref_name(raw)
    return None, None


def _media_schema(content: Any) -> tuple[Optional[SchemaNode], Optional[str]]:
    """Project the first media type's schema together with the name it is known by.

    A referenced schema keeps its component name. An inline schema that
    leaves the resolver no title to work with is named after its own title
    or declared type (``object`` when untyped).
    """
    raw, name = _first_media(content)
    node = _schema(raw)
    if node is not None and not name:
        kind = node.items if node.items is not None else node
        if not kind.title:
            name = node.title or node.type or "object"
    return node, name


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
    params = [
        _project_parameter(p)
        for p in merge_parameters(path_params, operation.get("parameters") or [])
    ]

    consumes: list[str] = []
    body = operation.get("requestBody")
    if isinstance(body, dict):
        content = body.get("content") or {}
        consumes = list(content)
        schema, name = _media_schema(content)
        params.append(
            ParameterSpec(
                name="body",
                location="body",
                description=body.get("description") or "",
                required=bool(body.get("required", False)),
                schema=schema,
                schema_name=name,
            )
        )

    responses = operation.get("responses")
    projected: Optional[list[ResponseSpec]] = None
    produces: list[str] = []
    if isinstance(responses, dict):
        projected = []
        for status, response in responses.items():
            if not isinstance(response, dict):
                continue
            projected.append(_project_response(str(status), response))
            for media_type in response.get("content") or {}:
                if media_type not in produces:
                    produces.append(media_type)

    return OperationSpec(
        method=verb,
        operation_id=operation.get("operationId") or "",
        summary=operation.get("summary") or "",
        description=operation.get("description") or "",
        tags=string_list(operation.get("tags")),
        deprecated=bool(operation.get("deprecated", False)),
        consumes=consumes,
        produces=produces,
        parameters=params,
        responses=projected,
        security=operation.get("security"),
        extensions=extensions_of(operation),
    )


def collection_format(location: str, style: Optional[str], explode: Optional[bool]) -> str:
    """Map a 3.x ``style``/``explode`` pair onto a 2.x collection format."""
    if style is None:
        style = "form" if location in ("query", "cookie") else "simple"
    if explode is None:
        explode = style == "form"

    if style == "form":
        return "multi" if explode else "csv"
    if style == "spaceDelimited":
        return "ssv"
    if style == "pipeDelimited":
        return "pipes"
    if style == "simple":
        return "csv"
    return ""


def _type_fields(raw_schema: Any) -> dict[str, Any]:
    """Lift type, format, enum and item details out of a parameter schema."""
    schema = raw_schema if isinstance(raw_schema, dict) else {}
    items = schema.get("items") if isinstance(schema.get("items"), dict) else {}
    return {
        "type": first_type(schema.get("type")),
        "format": schema.get("format") or "",
        "enum": schema.get("enum") or [],
        "items_type": first_type(items.get("type")),
        "items_format": items.get("format") or "",
        "items_enum": items.get("enum") or [],
    }


def _project_parameter(param: dict[str, Any]) -> ParameterSpec:
    location = param.get("in") or ""
    raw_schema = param.get("schema")
    if raw_schema is None:
        raw_schema, _ = _first_media(param.get("content"))

    fields = _type_fields(raw_schema)
    if fields["type"] == "array":
        fields["collection_format"] = collection_format(
            location, param.get("style"), param.get("explode")
        )

    return ParameterSpec(
        name=param.get("name") or "",
        location=location,
        description=param.get("description") or "",
        required=bool(param.get("required", False)),
        **fields,
    )


def _project_response(status: str, response: dict[str, Any]) -> ResponseSpec:
    body, name = _media_schema(response.get("content"))

    headers = []
    for header_name, header in (response.get("headers") or {}).items():
        if not isinstance(header, dict):
            continue
        fields = _type_fields(header.get("schema"))
        if fields["type"] == "array":
            fields["collection_format"] = collection_format(
                "header", header.get("style"), header.get("explode")
            )
        schema = header.get("schema") if isinstance(header.get("schema"), dict) else {}
        headers.append(
            HeaderSpec(
                name=header_name,
                description=header.get("description") or "",
                required=bool(header.get("required", False)),
                default=schema.get("default"),
                **fields,
            )
        )

    return ResponseSpec(
        status=status,
        description=response.get("description") or "",
        schema=body,
        schema_name=name,
        headers=headers,
    )


def _security_schemes(definitions: dict[str, Any]) -> dict[str, SecurityScheme]:
    schemes: dict[str, SecurityScheme] = {}
    for name, definition in definitions.items():
        if not isinstance(definition, dict):
            continue

        scheme_type = definition.get("type") or ""
        if scheme_type == "http" and str(definition.get("scheme", "")).lower() == "basic":
            scheme_type = "basic"

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
            flows = definition.get("flows") or {}
            for flow_name, flow in flows.items():
                if not isinstance(flow, dict):
                    continue
                scheme.oauth2_flow = OAUTH2_FLOWS.get(flow_name, flow_name)
                scheme.authorization_url = flow.get("authorizationUrl") or ""
                scheme.token_url = flow.get("tokenUrl") or ""
                scheme.scopes = dict(flow.get("scopes") or {})
                break

        schemes[name] = scheme
    return schemes
