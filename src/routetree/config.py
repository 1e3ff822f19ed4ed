"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for routetree:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.routetree/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~routetree.models.GlobalConfig`
  JSON file storing defaults (traversal depth, output format, schema).
* **Project config** -- An optional ``./routetree.json`` pinning settings
  for one repository.
* **Precedence resolution** -- :func:`resolve_max_depth` and
  :func:`resolve_schema_source` merge CLI flags, environment variables,
  project-local config, and global config.

The route-tree core never reads configuration itself; the CLI resolves the
maximum depth here and passes it in.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from routetree.exceptions import ConfigError
from routetree.models import GlobalConfig

_APP_NAME = "routetree"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "routetree.json"

ENV_MAX_DEPTH = "ROUTETREE_MAX_DEPTH"
ENV_SCHEMA = "ROUTETREE_SCHEMA"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/routetree/`` (default ``~/.config/routetree/``).
    On macOS/Windows: ``~/.routetree/``.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/routetree/`` (default ``~/.local/share/routetree/``).
    On macOS/Windows: ``~/.routetree/logs/``.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~routetree.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./routetree.json``.

    Recognised keys are ``default_schema`` and ``max_depth``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but does not contain a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


# --- Precedence resolution ---


def resolve_max_depth(cli_max_depth: Optional[int] = None) -> int:
    """Resolve the maximum traversal depth.

    Precedence (high to low):
        1. CLI flag (``--max-depth``)
        2. Environment variable ``ROUTETREE_MAX_DEPTH``
        3. Project config (``./routetree.json`` key ``max_depth``)
        4. User config (``traversal.max_depth``)
        5. Default (5)

    Raises:
        ConfigError: If a configured value is not a non-negative integer.
    """
    if cli_max_depth is not None:
        return _check_depth(cli_max_depth, "--max-depth")

    env_value = os.environ.get(ENV_MAX_DEPTH)
    if env_value:
        try:
            depth = int(env_value)
        except ValueError:
            raise ConfigError(
                f"{ENV_MAX_DEPTH} must be an integer, got {env_value!r}"
            ) from None
        return _check_depth(depth, ENV_MAX_DEPTH)

    project = load_project_config()
    if project is not None and project.get("max_depth") is not None:
        depth = project["max_depth"]
        if isinstance(depth, bool) or not isinstance(depth, int):
            raise ConfigError(f"max_depth in {_PROJECT_CONFIG_FILENAME} must be an integer")
        return _check_depth(depth, _PROJECT_CONFIG_FILENAME)

    return load_global_config().traversal.max_depth


def resolve_schema_source(cli_schema: Optional[str] = None) -> str:
    """Resolve which CSDL document to load.

    Precedence: CLI argument, ``ROUTETREE_SCHEMA``, project
    ``default_schema``, global ``default_schema``.

    Raises:
        ConfigError: If no source is configured anywhere.
    """
    if cli_schema:
        return cli_schema

    env_schema = os.environ.get(ENV_SCHEMA)
    if env_schema:
        return env_schema

    project = load_project_config()
    if project is not None and project.get("default_schema"):
        return str(project["default_schema"])

    global_schema = load_global_config().default_schema
    if global_schema:
        return global_schema

    raise ConfigError(
        "No schema given. Pass a path or URL, set ROUTETREE_SCHEMA, "
        "or run: routetree config set default_schema <path>"
    )


def _check_depth(depth: int, source: str) -> int:
    if depth < 0:
        raise ConfigError(f"Maximum depth from {source} must be >= 0, got {depth}")
    return depth
