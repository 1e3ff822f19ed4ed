"""Canonical Pydantic models shared across all routetree modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`TraversalConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.

**Schema models** -- produced by the CSDL parser and consumed by the route-tree
generator:
    :class:`TypeKind`, :class:`SchemaProperty`, :class:`SchemaType`, and
    :class:`SchemaModel`.

Schema models are frozen. A :class:`SchemaModel` is built once by
:func:`~routetree.parser.extractor.extract_schema` and must not change while a
traversal over it is in flight.
"""

from __future__ import annotations

import enum
from collections import deque
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from routetree.exceptions import SchemaError

DEFAULT_MAX_DEPTH = 5
"""Default cap on the number of segments in a generated route."""


# --- Config ---


class TraversalConfig(BaseModel):
    """Settings injected into :func:`~routetree.generator.build_route_tree`."""

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=0,
        description="Maximum number of segments in a route",
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format used when no --json/--plain flag is given"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/routetree/config.json``.

    Loaded and saved by :func:`~routetree.config.load_global_config` and
    :func:`~routetree.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~routetree.config.resolve_max_depth`.
    """

    default_schema: Optional[str] = Field(
        default=None, description="Path or URL of the CSDL document to use"
    )
    traversal: TraversalConfig = Field(default_factory=TraversalConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Schema Models ---


class TypeKind(str, enum.Enum):
    """Kinds of CSDL types the route-tree generator distinguishes."""

    ENTITY = "entity"
    COMPLEX = "complex"
    ENUM = "enum"
    PRIMITIVE = "primitive"
    CONTAINER = "container"


class SchemaProperty(BaseModel):
    """A single property (edge) of a :class:`SchemaType`.

    Structural properties point at primitive, enum, or complex types.
    Navigation properties point at entity types and are either
    *containment* edges (``contains_target``) or *reference* edges, which
    only model relationship management (``.../$ref``).

    Two properties are the same edge for cycle and dedup purposes when their
    :attr:`canonical_name` matches, regardless of which subtype expansion
    produced them.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    declaring_type: str = Field(description="Qualified name of the declaring type")
    type_name: str = Field(description="Qualified name of the target type")
    is_collection: bool = False
    is_navigation: bool = False
    contains_target: bool = False

    @property
    def canonical_name(self) -> str:
        """Canonical identity: ``<declaring type>/<property name>``."""
        return f"{self.declaring_type}/{self.name}"


class SchemaType(BaseModel):
    """An entity, complex, enum, primitive, or container type."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Qualified type name, e.g. 'microsoft.graph.user'")
    kind: TypeKind
    base_type: Optional[str] = None
    abstract: bool = False
    key: list[str] = Field(default_factory=list)
    properties: list[SchemaProperty] = Field(
        default_factory=list, description="Declared properties in declaration order"
    )

    @property
    def short_name(self) -> str:
        """The unqualified type name (``user`` for ``microsoft.graph.user``)."""
        return self.name.rsplit(".", 1)[-1]


class SchemaModel(BaseModel):
    """Immutable in-memory graph of a service's types and properties.

    ``types`` maps qualified names to :class:`SchemaType` instances in
    declaration order. ``entity_container`` names the distinguished type
    whose properties are the top-level entity sets and singletons.
    """

    model_config = ConfigDict(frozen=True)

    version: str = "4.0"
    namespace: str
    types: dict[str, SchemaType] = Field(default_factory=dict)
    entity_container: str

    _derived_index: Optional[dict[str, list[str]]] = PrivateAttr(default=None)

    def get_type(self, name: str) -> SchemaType:
        """Look up a type by qualified name.

        ``Edm.*`` primitive names resolve to a synthetic primitive type.

        Raises:
            SchemaError: If *name* is not declared in the model.
        """
        schema_type = self.types.get(name)
        if schema_type is not None:
            return schema_type
        if name.startswith("Edm."):
            return SchemaType(name=name, kind=TypeKind.PRIMITIVE)
        raise SchemaError(f"Unknown type '{name}' in schema '{self.namespace}'")

    @property
    def root_container(self) -> SchemaType:
        """The entity container type.

        Raises:
            SchemaError: If the container is not declared.
        """
        container = self.types.get(self.entity_container)
        if container is None or container.kind != TypeKind.CONTAINER:
            raise SchemaError(
                f"Entity container '{self.entity_container}' not found in schema"
            )
        return container

    def is_root_container(self, schema_type: SchemaType) -> bool:
        return schema_type.name == self.entity_container

    def target_type(self, prop: SchemaProperty) -> SchemaType:
        """Return the type *prop* points at."""
        return self.get_type(prop.type_name)

    def base_types(self, schema_type: SchemaType) -> list[SchemaType]:
        """Return the base-type chain of *schema_type*, nearest first."""
        chain: list[SchemaType] = []
        seen = {schema_type.name}
        current = schema_type
        while current.base_type is not None and current.base_type not in seen:
            current = self.get_type(current.base_type)
            seen.add(current.name)
            chain.append(current)
        return chain

    def derived_types(self, schema_type: SchemaType) -> list[SchemaType]:
        """Return all direct and transitive subtypes of *schema_type*.

        Subtypes are listed breadth-first in declaration order, each once.
        """
        index = self._get_derived_index()
        result: list[SchemaType] = []
        seen = {schema_type.name}
        pending = deque(index.get(schema_type.name, []))
        while pending:
            name = pending.popleft()
            if name in seen:
                continue
            seen.add(name)
            result.append(self.get_type(name))
            pending.extend(index.get(name, []))
        return result

    def is_reference(self, prop: SchemaProperty) -> bool:
        """Return True when *prop* is a relationship-management (``$ref``) edge.

        Entity sets and singletons on the container are never references.
        """
        if prop.declaring_type == self.entity_container:
            return False
        return prop.is_navigation and not prop.contains_target

    def _get_derived_index(self) -> dict[str, list[str]]:
        """Map each base type name to the names of its direct subtypes."""
        if self._derived_index is None:
            index: dict[str, list[str]] = {}
            for schema_type in self.types.values():
                if schema_type.base_type is not None:
                    index.setdefault(schema_type.base_type, []).append(schema_type.name)
            self._derived_index = index
        return self._derived_index
