"""Resolve which properties of a type are route segments.

A *route segment* is a property that leads to another addressable resource:
an entity set or singleton on the entity container, or a navigation to an
entity type anywhere else. Structural properties (primitive, enum, complex
values) never continue a route.

Resolution is polymorphic. A navigation typed as ``directoryObject`` may at
runtime point at a ``user`` or a ``group``, so the candidates for a type are
the union of its own properties (including those inherited from its base
types) and the properties declared on every direct and transitive subtype.
Candidates reached through several inheritance paths are collapsed by
canonical name.
"""

from __future__ import annotations

from typing import Optional

from routetree.exceptions import InvalidArgumentError
from routetree.models import SchemaModel, SchemaProperty, SchemaType, TypeKind


def canonical_name(prop: SchemaProperty) -> str:
    """Return the canonical identity of *prop* (``<declaring type>/<name>``)."""
    return prop.canonical_name


def is_route_segment(
    prop: SchemaProperty,
    model: SchemaModel,
    is_root_container: bool,
) -> bool:
    """Return ``True`` if *prop* can appear as a segment of a route.

    Every member of the entity container qualifies. Any other property
    qualifies only if it points at an entity type.
    """
    if is_root_container:
        return True
    return model.target_type(prop).kind == TypeKind.ENTITY


def resolve_route_segments(
    schema_type: Optional[SchemaType],
    model: Optional[SchemaModel],
    is_root_container: Optional[bool] = None,
) -> list[SchemaProperty]:
    """Return the distinct route-segment properties reachable from *schema_type*.

    Args:
        schema_type: The type to expand, typically the target type of the
            property a route node represents.
        model: The schema model *schema_type* belongs to.
        is_root_container: Whether *schema_type* is the entity container.
            ``None`` asks the model.

    Returns:
        Route-segment properties deduplicated by canonical name. Own and
        inherited properties come first, followed by subtype properties in
        breadth-first order. For the container this is its declaration order.

    Raises:
        InvalidArgumentError: If *schema_type* or *model* is ``None``.
        SchemaError: If a property points at a type the model does not know.
    """
    if schema_type is None:
        raise InvalidArgumentError("schema_type must not be None")
    if model is None:
        raise InvalidArgumentError("model must not be None")
    if is_root_container is None:
        is_root_container = model.is_root_container(schema_type)

    contributors = [schema_type, *model.base_types(schema_type)]
    contributors.extend(model.derived_types(schema_type))

    segments: dict[str, SchemaProperty] = {}
    for contributor in contributors:
        for prop in contributor.properties:
            key = canonical_name(prop)
            if key in segments:
                continue
            if is_route_segment(prop, model, is_root_container):
                segments[key] = prop
    return list(segments.values())
