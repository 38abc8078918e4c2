"""Console output for the specdoc CLI.

Data (tables, resource dumps, JSON examples) is written to **stdout** and
everything else (status lines, warnings, errors, log records) to
**stderr**, so ``specdoc --json inspect resources | jq`` always sees clean
JSON. The data format is chosen once per invocation:

* ``json`` -- machine-readable records.
* ``plain`` -- tab-separated rows, the default when stdout is not a TTY.
* ``rich`` -- styled tables and highlighted JSON on an interactive terminal.

Colour is disabled by ``--no-color``, ``NO_COLOR`` (any value) or
``TERM=dumb``.

:class:`OutputManager` holds the per-invocation state. The root Typer
callback installs one with :func:`set_output`, and commands reach it through
the module-level shortcuts (:func:`info`, :func:`error`, ...).
:func:`configure_logging` points the ``specdoc`` logger at the same stderr
console.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Data formats for stdout. ``AUTO`` picks ``RICH`` or ``PLAIN`` from the terminal."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Per-invocation output settings and the two Rich consoles.

    Args:
        format: Requested data format; ``AUTO`` is resolved immediately.
        no_color: Force plain, uncoloured diagnostics.
        quiet: Hide informational diagnostics (errors and warnings still show).
        verbose: Show debug diagnostics.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self.no_color = no_color or _should_disable_color()
        self.quiet = quiet
        self.verbose = verbose

        if format != OutputFormat.AUTO:
            self.format = format
        elif _is_tty() and not self.no_color:
            self.format = OutputFormat.RICH
        else:
            self.format = OutputFormat.PLAIN

        self.stdout = Console(
            file=sys.stdout,
            no_color=self.no_color,
            force_terminal=self.format == OutputFormat.RICH,
        )
        self.stderr = Console(file=sys.stderr, no_color=self.no_color, stderr=True)

    # --- stdout ---

    def print_data(self, text: str) -> None:
        """Write *text* to stdout as-is."""
        print(text, file=sys.stdout, flush=True)

    def _print_json(self, text: str) -> None:
        if self.format == OutputFormat.RICH:
            self.stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def format_response(self, data: Any) -> None:
        """Print a mapping or list: JSON, highlighted JSON, or ``key<TAB>value`` lines."""
        if self.format != OutputFormat.PLAIN:
            self._print_json(json.dumps(data, indent=2, ensure_ascii=False, default=str))
            return

        if isinstance(data, dict):
            lines = [f"{key}\t{value}" for key, value in data.items()]
        elif isinstance(data, list):
            lines = [
                "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
                for item in data
            ]
        else:
            lines = [str(data)]
        for line in lines:
            self.print_data(line)

    def print_example(self, text: str) -> None:
        """Print an already serialised JSON example; only Rich mode restyles it."""
        self._print_json(text)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as JSON records, TSV lines, or a Rich table.

        The title is only shown by the Rich table.
        """
        if self.format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return

        if self.format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self.stdout.print(table)

    # --- stderr ---

    def _diagnose(self, message: str, prefix: str = "", style: str = "") -> None:
        if self.no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        elif style:
            self.stderr.print(f"[{style}]{escape(prefix + message)}[/{style}]")
        else:
            self.stderr.print(escape(prefix + message))

    def info(self, message: str) -> None:
        if not self.quiet:
            self._diagnose(message)

    def success(self, message: str) -> None:
        if not self.quiet:
            self._diagnose(message, style="green")

    def suggest(self, message: str) -> None:
        """Point at a follow-up command. Hidden by ``--quiet``."""
        if not self.quiet:
            self._diagnose(message, prefix="→ ", style="dim")

    def debug(self, message: str) -> None:
        if self.verbose:
            self._diagnose(message, prefix="[debug] ", style="dim")

    def warning(self, message: str) -> None:
        self._diagnose(message, prefix="Warning: ", style="yellow")

    def error(self, message: str) -> None:
        self._diagnose(message, prefix="Error: ", style="bold red")


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# --- Logging ---

_LOGGER_NAME = "specdoc"


def configure_logging(output: OutputManager) -> logging.Handler:
    """Attach a :class:`~rich.logging.RichHandler` on stderr to the ``specdoc`` logger.

    The level follows the output flags: DEBUG with ``--verbose``, ERROR with
    ``--quiet``, WARNING otherwise. Calling it again swaps the handler.

    Returns:
        The installed handler.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    level = logging.WARNING
    if output.verbose:
        level = logging.DEBUG
    elif output.quiet:
        level = logging.ERROR

    handler = RichHandler(
        console=output.stderr,
        show_time=False,
        show_path=output.verbose,
        markup=False,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


# --- Global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (between tests)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def error(message: str) -> None:
    get_output().error(message)
