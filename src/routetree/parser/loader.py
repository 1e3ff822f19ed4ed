"""Load OData CSDL documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw CSDL JSON documents and
converting them into Python dictionaries. Both JSON and YAML encodings are
accepted with automatic format detection, and the document must declare a
supported CSDL version (4.0 or 4.01).

The two public functions are:

* :func:`load_schema` -- Load and parse a document from any supported source.
* :func:`validate_csdl_version` -- Check and return the ``$Version`` string,
  rejecting OpenAPI/Swagger documents and unsupported versions.

After loading, the raw dict should be passed to
:func:`~routetree.parser.extractor.extract_schema` which builds the
:class:`~routetree.models.SchemaModel`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from routetree.exceptions import SchemaParseError


def load_schema(source: str) -> dict[str, Any]:
    """Load a CSDL document from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SchemaParseError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin and parse it as JSON, then YAML."""
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SchemaParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SchemaParseError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document from URL. Supports JSON and YAML responses.

    Args:
        url: The HTTP(S) URL to fetch.

    Returns:
        The parsed document dictionary.

    Raises:
        SchemaParseError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SchemaParseError(
            f"HTTP {exc.response.status_code} fetching schema from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SchemaParseError(f"Failed to fetch schema from {url}: {exc}") from exc

    content = response.text
    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    Supports .json, .yaml, and .yml extensions. Falls back to content-based
    detection if the extension is not recognized.

    Raises:
        SchemaParseError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SchemaParseError(f"Schema file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaParseError(f"Failed to read schema file {path}: {exc}") from exc

    if not content.strip():
        raise SchemaParseError(f"Schema file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        SchemaParseError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
            if not isinstance(result, dict):
                raise SchemaParseError(
                    "Schema must be a JSON/YAML object (got "
                    f"{type(result).__name__})"
                )
            return result
        except json.JSONDecodeError as exc:
            json_error = exc
            # An explicit JSON hint means YAML is not worth trying
            if hint == "json":
                raise SchemaParseError(f"Invalid JSON: {exc}") from exc

    try:
        result = yaml.safe_load(content)
        if not isinstance(result, dict):
            raise SchemaParseError(
                "Schema must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = "Failed to parse schema as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SchemaParseError(msg)


def validate_csdl_version(document: dict[str, Any]) -> str:
    """Validate and return the CSDL ``$Version`` string.

    Supports CSDL 4.0 and 4.01. OpenAPI and Swagger documents are rejected
    with a hint, since they describe operations rather than a type graph.

    Args:
        document: The parsed document dictionary.

    Returns:
        The version string (e.g. ``'4.01'``).

    Raises:
        SchemaParseError: If the version is missing or unsupported.
    """
    if "openapi" in document or "swagger" in document:
        raise SchemaParseError(
            "This looks like an OpenAPI/Swagger document. "
            "routetree expects an OData CSDL JSON document ($metadata?$format=json)."
        )

    version = document.get("$Version")
    if version is None:
        raise SchemaParseError(
            "Missing '$Version' field. Is this an OData CSDL JSON document?"
        )

    version_str = str(version)
    if version_str in ("4.0", "4.01") or version_str.startswith("4."):
        return version_str

    raise SchemaParseError(
        f"Unsupported CSDL version: {version_str}. "
        "Only CSDL 4.0 and 4.01 are supported."
    )
