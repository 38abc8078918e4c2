"""Exception hierarchy for specdoc.

All exceptions inherit from :class:`SpecdocError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specdoc.exit_codes`.
The normalizer never terminates the process itself: it raises, and the
top-level error handler in :func:`specdoc.app.main` catches ``SpecdocError``
and exits with the appropriate code.

Subclass hierarchy::

    SpecdocError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- SpecParseError      (exit 7)
    +-- StructuralError     (exit 8)
    +-- ConfigError         (exit 1)
"""

from specdoc.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_STRUCTURAL_ERROR,
)


class SpecdocError(Exception):
    """Base exception for all specdoc errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specdoc.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecdocError):
    """Raised for invalid CLI arguments or lookups of unknown groups/resources."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(SpecdocError):
    """Raised when an API description cannot be loaded, decoded, or resolved."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class StructuralError(SpecdocError):
    """Raised when a document violates an invariant the normalizer depends on.

    Examples are a missing ``info.title``, an operation without a summary or
    identifier, an array parameter without a ``collectionFormat``, an
    operation without a ``responses`` declaration, an ``in: body`` parameter
    without a schema, and a referenced top-level model without a title.
    A structural error aborts the whole specification load; there is no
    best-effort output.
    """

    exit_code = EXIT_STRUCTURAL_ERROR


class ConfigError(SpecdocError):
    """Raised for configuration problems (invalid JSON, unreadable files)."""

    exit_code = EXIT_GENERIC_FAILURE
