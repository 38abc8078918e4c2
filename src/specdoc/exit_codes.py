"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specdoc.exceptions.SpecdocError` subclass.
External tooling (CI scripts, documentation pipelines) can inspect the exit
code to tell a malformed document from a usage problem without parsing stderr.

Example::

    $ specdoc inspect groups --spec broken.json
    $ echo $?
    8   # EXIT_STRUCTURAL_ERROR -- the document violates a required invariant
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unknown name."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API description could not be loaded, decoded, or resolved."""

EXIT_STRUCTURAL_ERROR = 8
"""The API description is missing a member the normalizer depends on."""
