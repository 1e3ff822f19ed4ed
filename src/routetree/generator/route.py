"""Render the route of a node as an OData URL template and command words.

A :class:`Route` is the ordered list of properties from an entity set or
singleton down to one node of the route tree. Downstream generators use it
to name commands and to build request URLs:

* Every collection-valued segment that is followed by another segment is
  addressed by key, so it contributes a ``{<type>Id}`` placeholder
  (``/users/{userId}/devices``).
* A segment declared on a subtype of the previous target is preceded by a
  type-cast segment naming that subtype (``/configs/{configId}/t.WinConfig/controls``).
* A route ending in a reference edge addresses the relationship itself and
  ends in ``/$ref`` (``/groups/{groupId}/members/$ref``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

from routetree.models import SchemaModel, SchemaProperty

if TYPE_CHECKING:
    from routetree.generator.route_tree import RouteNode

REF_SEGMENT = "$ref"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


@dataclass(frozen=True)
class RouteParameter:
    """A key placeholder in a route's URL template."""

    name: str
    position: int
    segment: SchemaProperty
    type_name: str


class Route:
    """The ordered segments of one route, with URL and naming helpers.

    Args:
        segments: Properties from the root-level node to the route's node.
        model: The schema model the segments belong to.
    """

    def __init__(self, segments: Sequence[SchemaProperty], model: SchemaModel) -> None:
        self.segments: tuple[SchemaProperty, ...] = tuple(segments)
        self._model = model

    @classmethod
    def from_node(cls, node: RouteNode, model: SchemaModel) -> Route:
        """Build the route of a :class:`~routetree.generator.route_tree.RouteNode`."""
        return cls(node.route, model)

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def is_reference(self) -> bool:
        """Whether the last segment is a relationship-management edge."""
        return bool(self.segments) and self._model.is_reference(self.segments[-1])

    @property
    def key_parameters(self) -> list[RouteParameter]:
        """Key placeholders, one per collection segment that is not last."""
        params: list[RouteParameter] = []
        used: dict[str, int] = {}
        for position, segment in enumerate(self.segments[:-1]):
            if not segment.is_collection:
                continue
            target = self._model.target_type(segment)
            base = _lower_first(target.short_name) + "Id"
            used[base] = used.get(base, 0) + 1
            name = base if used[base] == 1 else f"{base}{used[base]}"
            params.append(RouteParameter(
                name=name, position=position, segment=segment, type_name=target.name,
            ))
        return params

    def type_cast(self, position: int) -> Optional[str]:
        """Return the type-cast segment needed before the segment at *position*.

        A segment declared on a subtype of the previous segment's target is
        only addressable after casting to that subtype
        (``/configs/{configId}/t.WinConfig/controls``). Returns ``None`` when
        the segment is declared on the target itself or on one of its bases.
        """
        if position == 0:
            return None
        segment = self.segments[position]
        if segment.declaring_type == self._model.entity_container:
            return None
        target = self._model.target_type(self.segments[position - 1])
        if segment.declaring_type == target.name:
            return None
        if any(base.name == segment.declaring_type for base in self._model.base_types(target)):
            return None
        return segment.declaring_type

    def to_path(self, include_keys: bool = True) -> str:
        """Return the URL template of this route.

        Example::

            >>> route.to_path()
            '/users/{userId}/calendar/events'
            >>> route.to_path(include_keys=False)
            '/users/calendar/events'
        """
        keys = {p.position: p.name for p in self.key_parameters} if include_keys else {}
        parts: list[str] = []
        for position, segment in enumerate(self.segments):
            cast = self.type_cast(position)
            if cast is not None:
                parts.append(cast)
            parts.append(segment.name)
            if position in keys:
                parts.append("{" + keys[position] + "}")
        if self.is_reference:
            parts.append(REF_SEGMENT)
        return "/" + "/".join(parts)

    def command_parts(self) -> list[str]:
        """Return the kebab-case command words for this route.

        ``directReports`` becomes ``direct-reports``.
        """
        return [_to_kebab(segment.name) for segment in self.segments]

    def __str__(self) -> str:
        return self.to_path()

    def __repr__(self) -> str:
        return f"Route({self.to_path()!r})"


def _lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]


def _to_kebab(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("-", name).replace("_", "-").lower()
