"""Built-in CLI sub-commands for routetree.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~routetree.commands.routes` -- build and list the route tree of a
  schema.
* :mod:`~routetree.commands.inspect` -- examine the types of a schema and
  the route segments each type contributes.
* :mod:`~routetree.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for single commands like
``routes``).
"""
