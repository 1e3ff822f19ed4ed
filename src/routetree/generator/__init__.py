"""Route-tree generator -- flatten a schema model into addressable routes.

This sub-package is responsible for the second half of the routetree
pipeline: taking a :class:`~routetree.models.SchemaModel` (produced by the
parser) and producing the tree of route nodes a downstream generator turns
into commands.

Typical usage::

    from routetree.generator import build_route_tree

    for node in build_route_tree(model, max_depth=3):
        route = node.to_route(model)
        print(route.to_path(), route.command_parts())

Sub-modules:

* :mod:`~routetree.generator.segments` -- Decide which properties of a type
  are route segments, with polymorphic fan-out over subtypes.
* :mod:`~routetree.generator.route_tree` -- The depth-bounded, cycle-safe
  traversal producing :class:`~routetree.generator.route_tree.RouteNode`
  objects lazily.
* :mod:`~routetree.generator.route` -- URL templates and command words for
  a node's route.
"""

from routetree.generator.route import Route, RouteParameter
from routetree.generator.route_tree import RouteNode, build_route_tree
from routetree.generator.segments import resolve_route_segments

__all__ = [
    "Route",
    "RouteNode",
    "RouteParameter",
    "build_route_tree",
    "resolve_route_segments",
]
