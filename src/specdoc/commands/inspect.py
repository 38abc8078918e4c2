"""Inspect commands -- examine the normalized documentation model.

Provides the ``specdoc inspect`` sub-command group. Every command loads the
API descriptions named by ``--spec`` (or the resolved configuration), runs
them through the normalizer, and presents part of the result as a table or
as JSON.
"""

from __future__ import annotations

from typing import Optional

import typer

from specdoc.exceptions import SpecdocError
from specdoc.exit_codes import EXIT_INVALID_USAGE
from specdoc.models import Resource, Specification
from specdoc.output import OutputFormat, error, format_response, get_output, info, suggest


inspect_app = typer.Typer(no_args_is_help=True)

_SPEC_OPTION_HELP = "API description path or URL (repeatable)."
_COLLAPSE_OPTION_HELP = "Merge every description into one specification."


def _load_suite(
    specs: Optional[list[str]], collapse: Optional[bool]
) -> dict[str, Specification]:
    """Resolve the spec locations and load them.

    Raises:
        typer.Exit: With code 2 when nothing is configured, or with the
            error's own exit code when loading fails.
    """
    from specdoc.config import resolve_config, resolve_spec_locations
    from specdoc.suite import load_specifications

    try:
        config = resolve_config(cli_specs=specs, cli_collapse=collapse)
    except SpecdocError as exc:
        error(f"Config error: {exc}")
        raise typer.Exit(code=exc.exit_code) from None

    locations = resolve_spec_locations(config)
    if not locations:
        error("No API descriptions configured.")
        suggest("Pass --spec <path-or-url>, or run: specdoc config set specs <path-or-url>")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    try:
        return load_specifications(locations, collapse=config.collapse)
    except SpecdocError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _type_label(types: list[str]) -> str:
    if len(types) > 1:
        return f"{types[0]} of {types[1]}"
    return types[0] if types else ""


@inspect_app.command("groups")
def inspect_groups(
    spec: Optional[list[str]] = typer.Option(None, "--spec", "-s", help=_SPEC_OPTION_HELP),
    collapse: Optional[bool] = typer.Option(None, "--collapse/--no-collapse", help=_COLLAPSE_OPTION_HELP),
) -> None:
    """List the API groups of every loaded specification.

    Example::

        specdoc inspect groups --spec petstore.yaml
    """
    suite = _load_suite(spec, collapse)

    headers = ["Specification", "Group", "Name", "Methods", "Version"]
    rows: list[list[str]] = []
    for spec_id, specification in suite.items():
        for group in specification.apis:
            rows.append([
                spec_id,
                group.id,
                group.name,
                str(len(group.methods)),
                group.current_version,
            ])

    get_output().print_table(headers, rows, title=f"Groups ({len(rows)})")


@inspect_app.command("methods")
def inspect_methods(
    spec: Optional[list[str]] = typer.Option(None, "--spec", "-s", help=_SPEC_OPTION_HELP),
    collapse: Optional[bool] = typer.Option(None, "--collapse/--no-collapse", help=_COLLAPSE_OPTION_HELP),
) -> None:
    """List every method in documentation order.

    Example::

        specdoc inspect methods --spec petstore.yaml --plain
    """
    suite = _load_suite(spec, collapse)

    headers = ["Group", "Method", "Path", "ID", "Sort key"]
    rows: list[list[str]] = []
    for specification in suite.values():
        for group in specification.apis:
            for method in group.methods:
                rows.append([
                    group.name,
                    method.method.upper(),
                    method.path,
                    method.id,
                    method.sort_key,
                ])

    get_output().print_table(headers, rows, title=f"Methods ({len(rows)})")


@inspect_app.command("resources")
def inspect_resources(
    spec: Optional[list[str]] = typer.Option(None, "--spec", "-s", help=_SPEC_OPTION_HELP),
    collapse: Optional[bool] = typer.Option(None, "--collapse/--no-collapse", help=_COLLAPSE_OPTION_HELP),
) -> None:
    """List the deduplicated resources and the methods that use them.

    Example::

        specdoc inspect resources --spec petstore.yaml
    """
    suite = _load_suite(spec, collapse)

    headers = ["Version", "Resource", "Type", "Origin", "Methods"]
    rows: list[list[str]] = []
    for specification in suite.values():
        for version, resources in sorted(specification.resource_list.items()):
            for resource_id, resource in sorted(resources.items()):
                rows.append([
                    version,
                    resource_id,
                    _type_label(resource.type),
                    resource.origin.value,
                    ", ".join(sorted(resource.methods)),
                ])

    if not rows:
        info("No resources found.")
        return

    get_output().print_table(headers, rows, title=f"Resources ({len(rows)})")


def _find_resource(suite: dict[str, Specification], resource_id: str, version: str) -> Optional[Resource]:
    for specification in suite.values():
        resource = specification.resource_list.get(version, {}).get(resource_id)
        if resource is not None:
            return resource
    return None


@inspect_app.command("resource")
def inspect_resource(
    resource_id: str = typer.Argument(help="Resource ID (e.g. 'pet')."),
    version: str = typer.Option("latest", "--version", help="API version of the resource."),
    spec: Optional[list[str]] = typer.Option(None, "--spec", "-s", help=_SPEC_OPTION_HELP),
    collapse: Optional[bool] = typer.Option(None, "--collapse/--no-collapse", help=_COLLAPSE_OPTION_HELP),
) -> None:
    """Show one resource: its properties and synthesized JSON example.

    Example::

        specdoc inspect resource pet --spec petstore.yaml
    """
    suite = _load_suite(spec, collapse)

    resource = _find_resource(suite, resource_id, version)
    if resource is None:
        error(f"Resource '{resource_id}' not found in version '{version}'.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    output = get_output()
    if output.format == OutputFormat.JSON:
        format_response(resource.model_dump(mode="json"))
        return

    headers = ["Property", "Type", "Required", "Read-only", "Description"]
    rows = [
        [
            name,
            _type_label(prop.type),
            "yes" if prop.required else "",
            "yes" if prop.read_only else "",
            prop.description,
        ]
        for name, prop in sorted(resource.properties.items())
    ]
    output.print_table(headers, rows, title=f"{resource.title or resource.id} ({_type_label(resource.type)})")
    output.print_example(resource.example_json)
