"""Flatten a schema model's type graph into a tree of route nodes.

This is the core algorithm of routetree. The type graph of an OData service
is full of cycles (``user.manager`` is a ``user``, ``group.members`` contain
groups), yet every route a generated tool exposes must be finite. The builder
turns the graph into a tree by walking it from the entity container with an
explicit stack and refusing, per path, to revisit an edge already on that
path.

**Algorithm summary**

1. Seed the frontier with one root-level node per entity set / singleton of
   the container, pushed in declaration order.
2. Pop a node and yield it. The consumer sees the node before any of its
   descendants are computed.
3. If the node's depth is below the cap and its property is not a reference
   (``$ref``) edge, resolve the route segments of its target type, drop every
   candidate whose canonical name already appears between the node and the
   root, and push the rest as children.
4. Stop when the frontier is empty.

Cycle checks are local to each path. The same property may appear in many
branches of the tree as long as no branch contains it twice.

The frontier is last-in-first-out, so root-level nodes come out in *reverse*
declaration order. Consumers that need declaration order must sort.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional

from routetree.exceptions import InvalidArgumentError, SchemaError
from routetree.generator.segments import canonical_name, resolve_route_segments
from routetree.models import DEFAULT_MAX_DEPTH, SchemaModel, SchemaProperty

if TYPE_CHECKING:
    from routetree.generator.route import Route

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False, repr=False)
class RouteNode:
    """One addressable path through the API.

    A node wraps the property it represents and a link to its parent node
    (``None`` for entity sets and singletons). Nodes are immutable; the
    route and depth are derived on demand by walking parent links.
    """

    schema_property: SchemaProperty
    parent: Optional[RouteNode] = None

    def ancestors(self) -> Iterator[RouteNode]:
        """Yield this node, then its parent, up to the root-level node."""
        node: Optional[RouteNode] = self
        while node is not None:
            yield node
            node = node.parent

    @property
    def route(self) -> list[SchemaProperty]:
        """Properties from the root-level node down to this node."""
        segments = [node.schema_property for node in self.ancestors()]
        segments.reverse()
        return segments

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.ancestors())

    def is_reference(self, model: SchemaModel) -> bool:
        """Whether this node addresses a relationship rather than a resource."""
        return model.is_reference(self.schema_property)

    def create_child(self, prop: SchemaProperty) -> RouteNode:
        return RouteNode(prop, parent=self)

    def to_route(self, model: SchemaModel) -> Route:
        from routetree.generator.route import Route

        return Route.from_node(self, model)

    def __repr__(self) -> str:
        path = "/".join(prop.name for prop in self.route)
        return f"RouteNode({path!r})"


def build_route_tree(
    model: Optional[SchemaModel],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[RouteNode]:
    """Return a lazy iterator over every route node of *model*.

    Arguments are validated immediately; nodes are produced one at a time as
    the iterator is consumed. The iterator is single-pass. Call again for a
    fresh traversal.

    Args:
        model: The schema model to traverse.
        max_depth: Maximum number of segments in a route. Nodes are expanded
            only while their depth is below the cap; with ``0`` only the
            entity sets and singletons themselves are produced.

    Returns:
        An iterator of :class:`RouteNode` in pre-order. The first node is
        the *last*-declared container member.

    Raises:
        InvalidArgumentError: If *model* is ``None``, has no resolvable
            entity container, or *max_depth* is not a non-negative integer.

    Example::

        for node in build_route_tree(model, max_depth=3):
            print(node.to_route(model).to_path())
    """
    if model is None:
        raise InvalidArgumentError("model must not be None")
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
        raise InvalidArgumentError(
            f"max_depth must be a non-negative integer, got {max_depth!r}"
        )
    try:
        container = model.root_container
    except SchemaError as exc:
        raise InvalidArgumentError(str(exc)) from exc

    frontier = [
        RouteNode(prop)
        for prop in resolve_route_segments(container, model, is_root_container=True)
    ]
    return _traverse(model, frontier, max_depth)


def _traverse(
    model: SchemaModel,
    frontier: list[RouteNode],
    max_depth: int,
) -> Iterator[RouteNode]:
    emitted = 0
    while frontier:
        node = frontier.pop()
        yield node
        emitted += 1

        if node.depth < max_depth and not node.is_reference(model):
            frontier.extend(_create_child_nodes(node, model))

    logger.debug("Route tree complete: %d nodes, max depth %d", emitted, max_depth)


def _create_child_nodes(
    node: Optional[RouteNode],
    model: Optional[SchemaModel],
) -> list[RouteNode]:
    """Expand *node* into child nodes, skipping edges already on its path."""
    if node is None:
        raise InvalidArgumentError("node must not be None")
    if model is None:
        raise InvalidArgumentError("model must not be None")

    on_path = {canonical_name(ancestor.schema_property) for ancestor in node.ancestors()}
    candidates = resolve_route_segments(model.target_type(node.schema_property), model)
    return [
        node.create_child(prop)
        for prop in candidates
        if canonical_name(prop) not in on_path
    ]
