"""The ``specdoc`` command line.

The root Typer app carries the global output flags and mounts two
sub-apps: ``inspect`` (:mod:`specdoc.commands.inspect`) and ``config``
(:mod:`specdoc.commands.config`).

:func:`main` is the console-script entry point. Commands turn expected
failures into ``typer.Exit`` themselves; a :class:`~specdoc.exceptions.SpecdocError`
that escapes still exits with its own code, and anything else leaves a
traceback in ``<data dir>/logs/crash-<timestamp>.log``.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from specdoc import __version__
from specdoc.commands.config import config_app
from specdoc.commands.inspect import inspect_app
from specdoc.exceptions import SpecdocError
from specdoc.exit_codes import EXIT_GENERIC_FAILURE
from specdoc.output import OutputFormat, OutputManager, configure_logging, error, set_output

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="specdoc",
    help="Normalize Swagger 2.x and OpenAPI 3.x descriptions into documentation models.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
app.add_typer(inspect_app, name="inspect", help="Inspect the normalized documentation model.")
app.add_typer(config_app, name="config", help="View or change the saved configuration.")


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"specdoc {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="Write data as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Write data as tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only report warnings and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace the normalizer on stderr."),
) -> None:
    """Set up output and logging before any sub-command runs."""
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    configure_logging(output)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _interrupted(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log(exc: Exception) -> str:
    """Save the active traceback under the data directory and return the file path."""
    from specdoc.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}")
    return str(log_path)


def main() -> None:
    """Run the CLI; always ends in ``SystemExit``."""
    signal.signal(signal.SIGINT, _interrupted)
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _interrupted(signal.SIGINT, None)
    except SpecdocError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
