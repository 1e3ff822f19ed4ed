"""Inspect commands -- examine the types of a CSDL schema.

Provides the ``routetree inspect`` sub-command group with read-only
commands for viewing the contents of a schema model: its types and the
route segments each type contributes once polymorphic fan-out has been
applied. All sub-commands resolve the schema source, load it, and present
the data in table or structured output format.
"""

from __future__ import annotations

from typing import Optional

import typer

from routetree.exceptions import RouteTreeError
from routetree.models import SchemaModel, SchemaType
from routetree.output import debug, error, print_table, suggest


inspect_app = typer.Typer(no_args_is_help=True)


def load_model(schema: Optional[str] = None) -> SchemaModel:
    """Load the :class:`~routetree.models.SchemaModel` for *schema*.

    Resolves the source via :func:`~routetree.config.resolve_schema_source`,
    then loads, validates, and extracts the CSDL document.

    Raises:
        typer.Exit: With the error's exit code when any step fails.
    """
    from routetree.config import resolve_schema_source
    from routetree.parser import extract_schema, load_schema, validate_csdl_version

    try:
        source = resolve_schema_source(schema)
        debug(f"Loading schema from {source}")
        raw = load_schema(source)
        version = validate_csdl_version(raw)
        return extract_schema(raw, version)
    except RouteTreeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def find_type(model: SchemaModel, name: str) -> Optional[SchemaType]:
    """Look up a type by qualified name, or by short name when unambiguous."""
    if name in model.types:
        return model.types[name]
    matches = [t for t in model.types.values() if t.short_name == name]
    if len(matches) == 1:
        return matches[0]
    return None


@inspect_app.command("types")
def inspect_types(
    schema: Optional[str] = typer.Argument(
        None, help="Path or URL of the CSDL document."
    ),
) -> None:
    """List all types declared in the schema.

    Shows each type's kind, base type, number of declared properties, and
    number of direct and transitive subtypes.

    Example::

        routetree inspect types graph.json
    """
    model = load_model(schema)

    headers = ["Type", "Kind", "Base", "Properties", "Derived"]
    rows: list[list[str]] = []
    for schema_type in model.types.values():
        rows.append([
            schema_type.name,
            schema_type.kind.value,
            schema_type.base_type or "-",
            str(len(schema_type.properties)),
            str(len(model.derived_types(schema_type))),
        ])

    print_table(headers, rows, title=f"Types ({len(rows)})")


@inspect_app.command("segments")
def inspect_segments(
    type_name: str = typer.Argument(
        help="Qualified or unambiguous short type name."
    ),
    schema: Optional[str] = typer.Argument(
        None, help="Path or URL of the CSDL document."
    ),
) -> None:
    """List the route segments a type contributes.

    Includes properties inherited from base types and declared on subtypes,
    deduplicated by canonical name.

    Example::

        routetree inspect segments directoryObject graph.json
    """
    from routetree.generator.segments import resolve_route_segments

    model = load_model(schema)
    schema_type = find_type(model, type_name)
    if schema_type is None:
        error(f"Unknown or ambiguous type: {type_name}")
        suggest("List the available types with: routetree inspect types")
        raise typer.Exit(code=2)

    try:
        segments = resolve_route_segments(schema_type, model)
    except RouteTreeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    headers = ["Segment", "Declared On", "Target", "Multiplicity", "Edge"]
    rows: list[list[str]] = []
    for prop in segments:
        rows.append([
            prop.name,
            prop.declaring_type,
            prop.type_name,
            "collection" if prop.is_collection else "single",
            "reference" if model.is_reference(prop) else "containment",
        ])

    print_table(
        headers, rows, title=f"{schema_type.name} -- Segments ({len(rows)})"
    )
