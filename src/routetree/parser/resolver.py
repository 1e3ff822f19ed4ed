"""Resolve qualified type names in CSDL documents.

CSDL refers to types by *qualified name* (``microsoft.graph.user``). A schema
may declare an ``$Alias`` so that references can use a shorter prefix
(``graph.user``), and documents may pull in other namespaces through
``$Reference`` / ``$Include``. This module builds the alias table for a
document and normalises every type reference to its namespace-qualified form
so that the rest of the pipeline compares names with plain string equality.

Primitive types live in the reserved ``Edm`` namespace and are passed
through unchanged.
"""

from __future__ import annotations

from typing import Any

from routetree.exceptions import SchemaParseError

EDM_NAMESPACE = "Edm"


def split_qualified_name(name: str) -> tuple[str, str]:
    """Split ``namespace.Name`` into ``(namespace, Name)``.

    Raises:
        SchemaParseError: If *name* is not qualified.
    """
    namespace, sep, short_name = name.rpartition(".")
    if not sep or not namespace or not short_name:
        raise SchemaParseError(f"Type name '{name}' is not namespace-qualified")
    return namespace, short_name


def is_primitive(name: str) -> bool:
    """Return ``True`` for ``Edm.*`` primitive type names."""
    return name.startswith(EDM_NAMESPACE + ".")


def schema_namespaces(document: dict[str, Any]) -> list[str]:
    """Return the namespaces of the schemas declared in *document*.

    Schema objects are the top-level members whose name does not start with
    ``$`` and whose value is an object.
    """
    return [
        key
        for key, value in document.items()
        if not key.startswith("$") and isinstance(value, dict)
    ]


def build_alias_table(document: dict[str, Any]) -> dict[str, str]:
    """Map every usable prefix (namespace or alias) to its namespace.

    Covers the document's own schemas and anything brought in through
    ``$Reference``. Each namespace maps to itself.
    """
    table: dict[str, str] = {EDM_NAMESPACE: EDM_NAMESPACE}

    for namespace in schema_namespaces(document):
        table[namespace] = namespace
        alias = document[namespace].get("$Alias")
        if alias:
            table[alias] = namespace

    for reference in document.get("$Reference", {}).values():
        for include in reference.get("$Include", []):
            namespace = include.get("$Namespace")
            if not namespace:
                continue
            table[namespace] = namespace
            alias = include.get("$Alias")
            if alias:
                table[alias] = namespace

    return table


def resolve_type_name(name: str, aliases: dict[str, str]) -> str:
    """Expand an alias-qualified type name to its namespace-qualified form.

    Args:
        name: A qualified type name, possibly using an alias prefix
            (``graph.user``).
        aliases: Table from :func:`build_alias_table`.

    Returns:
        The namespace-qualified name (``microsoft.graph.user``).

    Raises:
        SchemaParseError: If the prefix is neither a known namespace nor a
            known alias.

    Example::

        >>> resolve_type_name("graph.user", {"graph": "microsoft.graph"})
        'microsoft.graph.user'
    """
    prefix, short_name = split_qualified_name(name)
    namespace = aliases.get(prefix)
    if namespace is None:
        raise SchemaParseError(
            f"Cannot resolve type '{name}': unknown namespace or alias '{prefix}'"
        )
    return f"{namespace}.{short_name}"
