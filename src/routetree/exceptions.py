"""Exception hierarchy for routetree.

All exceptions inherit from :class:`RouteTreeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`routetree.exit_codes`.
The top-level error handler in :func:`routetree.app.main` catches
``RouteTreeError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    RouteTreeError (exit 1)
    +-- InvalidArgumentError   (exit 2)
    +-- SchemaError            (exit 7)
    |   +-- SchemaParseError   (exit 7)
    +-- ConfigError            (exit 1)
"""

from routetree.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SCHEMA_ERROR,
)


class RouteTreeError(Exception):
    """Base exception for all routetree errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`routetree.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidArgumentError(RouteTreeError):
    """Raised when a required argument (schema model, type, node) is missing or invalid.

    This is the only error the route-tree core raises on its own. It is
    always fatal to the current call.
    """

    exit_code = EXIT_INVALID_USAGE


class SchemaError(RouteTreeError):
    """Raised when the schema model is inconsistent (unknown type, missing container)."""

    exit_code = EXIT_SCHEMA_ERROR


class SchemaParseError(SchemaError):
    """Raised when a CSDL document cannot be loaded, parsed, or converted."""

    exit_code = EXIT_SCHEMA_ERROR


class ConfigError(RouteTreeError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE
