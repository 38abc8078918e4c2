"""``specdoc config`` -- read and change the saved :class:`~specdoc.models.GlobalConfig`.

The saved settings name the API descriptions ``specdoc inspect`` loads when
no ``--spec`` is passed, whether they are collapsed into one specification,
and the default output format.
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from specdoc.config import get_config_dir, load_global_config, save_global_config
from specdoc.exit_codes import EXIT_INVALID_USAGE
from specdoc.models import GlobalConfig
from specdoc.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)

# Keys whose value is given on the command line as a comma-separated list.
_LIST_KEYS = ("specs",)
_TRUTHY = ("true", "1", "yes", "on")


def _fail(message: str) -> None:
    error(message)
    raise typer.Exit(code=EXIT_INVALID_USAGE)


@config_app.command("show")
def config_show() -> None:
    """Print the saved configuration.

    Example::

        specdoc --json config show
    """
    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


def _coerce(key: str, current: Any, value: str) -> Any:
    if key in _LIST_KEYS:
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(current, bool):
        return value.lower() in _TRUTHY
    return value


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted key, e.g. 'collapse' or 'output.format'."),
    value: str = typer.Argument(help="New value; 'specs' takes a comma-separated list."),
) -> None:
    """Change one setting and save it.

    Only keys that already exist can be set, and nested sections must be
    addressed leaf by leaf. The new configuration is validated before it is
    written.

    Example::

        specdoc config set specs petstore.yaml,https://example.com/api.json
        specdoc config set collapse true
    """
    data = load_global_config().model_dump(mode="json")

    *parents, leaf = key.split(".")
    section = data
    for part in parents:
        section = section.get(part)
        if not isinstance(section, dict):
            _fail(f"Invalid config key: {key}")

    if leaf not in section or isinstance(section[leaf], dict):
        _fail(f"Unknown config key: {key}")

    section[leaf] = _coerce(key, section[leaf], value)
    try:
        config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        _fail(f"Validation error: {exc}")

    save_global_config(config)
    success(f"Set {key} = {section[leaf]}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask for confirmation."),
) -> None:
    """Replace the saved configuration with the defaults."""
    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
