"""Extract a :class:`~routetree.models.SchemaModel` from a CSDL JSON document.

This module walks an OData CSDL JSON document (the ``$metadata?$format=json``
representation) and builds the immutable type graph consumed by the
route-tree generator.

The single public entry point is :func:`extract_schema`. Internally it
delegates to private helpers that each handle one kind of schema element:

* ``_extract_structured_type`` -- ``EntityType`` and ``ComplexType``
  members, including ``$BaseType``, ``$Abstract``, ``$Key`` and their
  structural and navigation properties.
* ``_extract_container`` -- the ``EntityContainer``; entity sets become
  collection-valued properties, singletons single-valued ones. Both are
  containment edges.
* ``_validate_references`` -- every base type and property type must be
  declared in the document or be an ``Edm`` primitive.

Actions, functions, terms, and annotations are not part of the route graph
and are skipped.
"""

from __future__ import annotations

import logging
from typing import Any

from routetree.exceptions import SchemaParseError
from routetree.models import SchemaModel, SchemaProperty, SchemaType, TypeKind
from routetree.parser.resolver import (
    build_alias_table,
    is_primitive,
    resolve_type_name,
    schema_namespaces,
    split_qualified_name,
)

logger = logging.getLogger(__name__)

_DEFAULT_PROPERTY_TYPE = "Edm.String"

_KIND_MAP: dict[str, TypeKind] = {
    "EntityType": TypeKind.ENTITY,
    "ComplexType": TypeKind.COMPLEX,
    "EnumType": TypeKind.ENUM,
    "TypeDefinition": TypeKind.PRIMITIVE,
    "EntityContainer": TypeKind.CONTAINER,
}


def extract_schema(document: dict[str, Any], csdl_version: str) -> SchemaModel:
    """Build a :class:`~routetree.models.SchemaModel` from a raw CSDL document.

    Args:
        document: The CSDL JSON document as returned by
            :func:`~routetree.parser.loader.load_schema`.
        csdl_version: The validated version string, as returned by
            :func:`~routetree.parser.loader.validate_csdl_version`.

    Returns:
        A fully populated, frozen :class:`~routetree.models.SchemaModel`.

    Raises:
        SchemaParseError: If the entity container is missing, or a base
            type or property type refers to a type that is not declared.

    Example::

        raw = load_schema("graph.json")
        version = validate_csdl_version(raw)
        model = extract_schema(raw, version)
        for prop in model.root_container.properties:
            print(prop.name, prop.type_name)
    """
    aliases = build_alias_table(document)

    container_ref = document.get("$EntityContainer")
    if not container_ref:
        raise SchemaParseError("Missing '$EntityContainer' in CSDL document")
    container_name = resolve_type_name(str(container_ref), aliases)

    types: dict[str, SchemaType] = {}
    for namespace in schema_namespaces(document):
        for member_name, member in document[namespace].items():
            if member_name.startswith("$") or "@" in member_name:
                continue
            qualified = f"{namespace}.{member_name}"
            if not isinstance(member, dict):
                # Actions and functions are overload arrays.
                logger.debug("Skipping non-type schema element %s", qualified)
                continue

            kind_name = member.get("$Kind")
            kind = _KIND_MAP.get(kind_name or "")
            if kind is None:
                logger.debug("Skipping %s of kind %r", qualified, kind_name)
                continue

            if kind == TypeKind.CONTAINER:
                types[qualified] = _extract_container(qualified, member, aliases)
            elif kind in (TypeKind.ENTITY, TypeKind.COMPLEX):
                types[qualified] = _extract_structured_type(
                    qualified, kind, member, aliases,
                )
            else:
                types[qualified] = SchemaType(name=qualified, kind=kind)

    container = types.get(container_name)
    if container is None or container.kind != TypeKind.CONTAINER:
        raise SchemaParseError(
            f"Entity container '{container_name}' is not declared in the document"
        )

    _validate_references(types)

    namespace, _ = split_qualified_name(container_name)
    logger.debug(
        "Extracted %d types from CSDL %s (container %s)",
        len(types), csdl_version, container_name,
    )
    return SchemaModel(
        version=csdl_version,
        namespace=namespace,
        types=types,
        entity_container=container_name,
    )


def _member_items(member: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
    """Return the ``(name, object)`` pairs of a type's property members."""
    return [
        (name, value)
        for name, value in member.items()
        if not name.startswith("$") and "@" not in name and isinstance(value, dict)
    ]


def _extract_structured_type(
    qualified: str,
    kind: TypeKind,
    member: dict[str, Any],
    aliases: dict[str, str],
) -> SchemaType:
    """Convert an ``EntityType`` or ``ComplexType`` member."""
    base_type = member.get("$BaseType")
    properties: list[SchemaProperty] = []

    for prop_name, prop in _member_items(member):
        prop_kind = prop.get("$Kind", "Property")
        if prop_kind == "NavigationProperty":
            type_ref = prop.get("$Type")
            if not type_ref:
                raise SchemaParseError(
                    f"Navigation property '{qualified}/{prop_name}' has no $Type"
                )
            properties.append(SchemaProperty(
                name=prop_name,
                declaring_type=qualified,
                type_name=resolve_type_name(type_ref, aliases),
                is_collection=bool(prop.get("$Collection", False)),
                is_navigation=True,
                contains_target=bool(prop.get("$ContainsTarget", False)),
            ))
        elif prop_kind == "Property":
            type_ref = prop.get("$Type", _DEFAULT_PROPERTY_TYPE)
            properties.append(SchemaProperty(
                name=prop_name,
                declaring_type=qualified,
                type_name=(
                    type_ref if is_primitive(type_ref)
                    else resolve_type_name(type_ref, aliases)
                ),
                is_collection=bool(prop.get("$Collection", False)),
            ))
        else:
            logger.debug("Skipping %s/%s of kind %r", qualified, prop_name, prop_kind)

    return SchemaType(
        name=qualified,
        kind=kind,
        base_type=resolve_type_name(base_type, aliases) if base_type else None,
        abstract=bool(member.get("$Abstract", False)),
        key=list(member.get("$Key", [])) if kind == TypeKind.ENTITY else [],
        properties=properties,
    )


def _extract_container(
    qualified: str,
    member: dict[str, Any],
    aliases: dict[str, str],
) -> SchemaType:
    """Convert an ``EntityContainer``; entity sets and singletons become properties."""
    properties: list[SchemaProperty] = []

    for name, element in _member_items(member):
        if "$Action" in element or "$Function" in element:
            logger.debug("Skipping operation import %s/%s", qualified, name)
            continue
        type_ref = element.get("$Type")
        if not type_ref:
            raise SchemaParseError(
                f"Container member '{qualified}/{name}' has no $Type"
            )
        properties.append(SchemaProperty(
            name=name,
            declaring_type=qualified,
            type_name=resolve_type_name(type_ref, aliases),
            is_collection=bool(element.get("$Collection", False)),
            is_navigation=True,
            contains_target=True,
        ))

    return SchemaType(name=qualified, kind=TypeKind.CONTAINER, properties=properties)


def _validate_references(types: dict[str, SchemaType]) -> None:
    """Ensure every base type and property type resolves within the document.

    Raises:
        SchemaParseError: On the first dangling reference.
    """
    for schema_type in types.values():
        if schema_type.base_type is not None and schema_type.base_type not in types:
            raise SchemaParseError(
                f"Base type '{schema_type.base_type}' of '{schema_type.name}' "
                "is not declared"
            )
        for prop in schema_type.properties:
            if prop.type_name not in types and not is_primitive(prop.type_name):
                raise SchemaParseError(
                    f"Type '{prop.type_name}' of property '{prop.canonical_name}' "
                    "is not declared"
                )
