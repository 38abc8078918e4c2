"""Built-in CLI sub-commands for specdoc.

* :mod:`~specdoc.commands.inspect` -- load API descriptions and show the
  normalized groups, methods, and resources.
* :mod:`~specdoc.commands.config` -- view and modify global settings.

Each module exports a :class:`typer.Typer` sub-application registered on the
root app in :mod:`specdoc.app`.
"""
