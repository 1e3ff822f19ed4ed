"""Config commands -- view and modify global configuration.

``routetree config`` reads and writes the user's
:class:`~routetree.models.GlobalConfig`. Three settings exist:

* ``default_schema`` -- the CSDL document loaded when no ``SCHEMA`` argument
  is given (``none`` clears it).
* ``traversal.max_depth`` -- the route-length cap, a non-negative integer.
* ``output.format`` -- ``auto``, ``json``, ``plain``, or ``rich``.

Environment variables and ``./routetree.json`` still take precedence over
these values; see :func:`~routetree.config.resolve_max_depth`.
"""

from __future__ import annotations

from typing import Callable, Optional

import typer

from routetree.exceptions import InvalidArgumentError, RouteTreeError
from routetree.models import GlobalConfig, OutputConfig, TraversalConfig
from routetree.output import OutputFormat, error, info, print_settings, success


config_app = typer.Typer(no_args_is_help=True)


def _set_default_schema(config: GlobalConfig, value: str) -> GlobalConfig:
    schema: Optional[str] = None if value.strip().lower() in ("", "none") else value
    return config.model_copy(update={"default_schema": schema})


def _set_max_depth(config: GlobalConfig, value: str) -> GlobalConfig:
    try:
        depth = int(value)
    except ValueError:
        raise InvalidArgumentError(
            f"traversal.max_depth must be an integer, got {value!r}"
        ) from None
    if depth < 0:
        raise InvalidArgumentError(f"traversal.max_depth must be >= 0, got {depth}")
    return config.model_copy(update={"traversal": TraversalConfig(max_depth=depth)})


def _set_output_format(config: GlobalConfig, value: str) -> GlobalConfig:
    choices = [f.value for f in OutputFormat]
    if value not in choices:
        raise InvalidArgumentError(
            f"output.format must be one of {', '.join(choices)}, got {value!r}"
        )
    return config.model_copy(update={"output": OutputConfig(format=value)})


_SETTERS: dict[str, Callable[[GlobalConfig, str], GlobalConfig]] = {
    "default_schema": _set_default_schema,
    "traversal.max_depth": _set_max_depth,
    "output.format": _set_output_format,
}


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        routetree config show
        routetree --json config show
    """
    from routetree.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    print_settings(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="One of: default_schema, traversal.max_depth, output.format."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Raises:
        typer.Exit: With code 2 for an unknown key or an invalid value.

    Example::

        routetree config set traversal.max_depth 3
        routetree config set default_schema ./graph.json
    """
    from routetree.config import load_global_config, save_global_config

    setter = _SETTERS.get(key)
    if setter is None:
        error(f"Unknown config key: {key} (expected one of: {', '.join(_SETTERS)})")
        raise typer.Exit(code=2)

    try:
        config = setter(load_global_config(), value)
    except RouteTreeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    save_global_config(config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmation."
    ),
) -> None:
    """Reset configuration to defaults.

    Example::

        routetree config reset --force
    """
    from routetree.config import save_global_config

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
