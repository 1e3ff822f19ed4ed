"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~routetree.exceptions.RouteTreeError` subclass.
Shell wrappers can inspect the exit code to tell a bad schema apart from a
bad invocation without parsing stderr.

Example::

    $ routetree routes broken.json
    $ echo $?
    7   # EXIT_SCHEMA_ERROR -- the CSDL document could not be read
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command or API was invoked with invalid arguments."""

EXIT_SCHEMA_ERROR = 7
"""The schema document could not be loaded, parsed, or resolved."""
