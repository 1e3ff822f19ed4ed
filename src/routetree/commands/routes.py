"""Routes command -- build and list the route tree of a schema.

``routetree routes`` loads a CSDL document, runs
:func:`~routetree.generator.build_route_tree` over it, and prints one row
per route node: its URL template, depth, target type, and edge kind. Nodes
are printed in traversal order unless ``--sorted`` is given.
"""

from __future__ import annotations

from typing import Optional

import typer

from routetree.commands.inspect import load_model
from routetree.exceptions import RouteTreeError
from routetree.generator import RouteNode, build_route_tree
from routetree.models import SchemaModel
from routetree.output import debug, error, info, print_table


def routes_command(
    schema: Optional[str] = typer.Argument(
        None, help="Path or URL of the CSDL document."
    ),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", "-d", min=0, help="Maximum number of segments per route."
    ),
    sort: bool = typer.Option(
        False, "--sorted", help="Sort routes by path instead of traversal order."
    ),
    refs: bool = typer.Option(
        True, "--refs/--no-refs", help="Include $ref relationship routes."
    ),
) -> None:
    """List every route of the schema's resource tree.

    Example::

        routetree routes graph.json --max-depth 3
        routetree --json routes graph.json --sorted
    """
    from routetree.config import resolve_max_depth

    model = load_model(schema)
    try:
        depth = resolve_max_depth(max_depth)
        debug(f"Building route tree with max depth {depth}")
        rows = [_route_row(node, model) for node in build_route_tree(model, depth)]
    except RouteTreeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not refs:
        rows = [row for row in rows if row[3] != "reference"]
    if sort:
        rows.sort(key=lambda row: row[0])

    if not rows:
        info("The entity container exposes no routes.")
        return

    headers = ["Path", "Depth", "Target", "Edge"]
    print_table(headers, rows, title=f"Routes ({len(rows)})")


def _route_row(node: RouteNode, model: SchemaModel) -> list[str]:
    route = node.to_route(model)
    prop = node.schema_property
    if node.parent is None:
        edge = "entity-set" if prop.is_collection else "singleton"
    elif route.is_reference:
        edge = "reference"
    else:
        edge = "containment"
    return [route.to_path(), str(route.depth), prop.type_name, edge]
