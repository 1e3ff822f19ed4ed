"""Tests for routetree.generator.route."""

from __future__ import annotations

from routetree.generator import Route, build_route_tree
from routetree.models import SchemaModel, SchemaProperty, SchemaType, TypeKind


def _routes_by_path(model: SchemaModel, max_depth: int = 5) -> dict[str, Route]:
    routes = {}
    for node in build_route_tree(model, max_depth):
        route = node.to_route(model)
        routes[route.to_path(include_keys=False)] = route
    return routes


class TestToPath:
    """URL templates built from a node's route."""

    def test_entity_set(self, graph_model: SchemaModel) -> None:
        routes = _routes_by_path(graph_model)
        assert routes["/users"].to_path() == "/users"

    def test_singleton_is_not_keyed(self, graph_model: SchemaModel) -> None:
        routes = _routes_by_path(graph_model)
        assert routes["/me/calendar"].to_path() == "/me/calendar"

    def test_collection_followed_by_segment_is_keyed(self, graph_model: SchemaModel) -> None:
        routes = _routes_by_path(graph_model)
        assert routes["/users/calendar/events"].to_path() == "/users/{userId}/calendar/events"

    def test_nested_keys(self, graph_model: SchemaModel) -> None:
        routes = _routes_by_path(graph_model)
        route = routes["/users/calendar/events/calendar"]
        assert route.to_path() == "/users/{userId}/calendar/events/{eventId}/calendar"

    def test_reference_route_ends_with_ref(self, graph_model: SchemaModel) -> None:
        routes = _routes_by_path(graph_model)
        assert "/groups/members/$ref" in routes
        assert routes["/groups/members/$ref"].to_path() == "/groups/{groupId}/members/$ref"
        assert routes["/me/manager/$ref"].is_reference

    def test_containment_route_is_not_reference(self, graph_model: SchemaModel) -> None:
        routes = _routes_by_path(graph_model)
        assert not routes["/users/calendar"].is_reference
        assert not routes["/users"].is_reference

    def test_str_is_path(self, graph_model: SchemaModel) -> None:
        routes = _routes_by_path(graph_model)
        assert str(routes["/users/calendar"]) == "/users/{userId}/calendar"


class TestKeyParameters:
    """Key placeholder naming."""

    def test_parameters_follow_target_types(self, graph_model: SchemaModel) -> None:
        route = _routes_by_path(graph_model)["/users/calendar/events/calendar"]
        params = route.key_parameters
        assert [p.name for p in params] == ["userId", "eventId"]
        assert [p.position for p in params] == [0, 2]
        assert params[0].type_name == "microsoft.graph.user"

    def test_repeated_type_gets_numeric_suffix(self, graph_model: SchemaModel) -> None:
        users = graph_model.root_container.properties[0]
        member_of = graph_model.get_type("microsoft.graph.directoryObject").properties[-1]
        assert member_of.name == "memberOf"
        nested = Route([users, member_of, member_of], graph_model)

        assert [p.name for p in nested.key_parameters] == [
            "userId", "directoryObjectId",
        ]
        route = Route([users, users, member_of], graph_model)
        assert [p.name for p in route.key_parameters] == ["userId", "userId2"]

    def test_last_segment_never_keyed(self, graph_model: SchemaModel) -> None:
        route = _routes_by_path(graph_model)["/users"]
        assert route.key_parameters == []


class TestCommandParts:
    """Kebab-case command words."""

    def test_camel_case_split(self, graph_model: SchemaModel) -> None:
        route = _routes_by_path(graph_model)["/users/memberOf/$ref"]
        assert route.command_parts() == ["users", "member-of"]

    def test_depth_matches_segments(self, graph_model: SchemaModel) -> None:
        route = _routes_by_path(graph_model)["/users/calendar/events"]
        assert route.depth == 3
        assert route.command_parts() == ["users", "calendar", "events"]


class TestFromNode:

    def test_from_node_matches_to_route(self, graph_model: SchemaModel) -> None:
        node = next(iter(build_route_tree(graph_model, 0)))
        route = Route.from_node(node, graph_model)
        assert route.segments == tuple(node.route)
        assert route.to_path() == node.to_route(graph_model).to_path() == "/me"


def _config_model() -> SchemaModel:
    """Container ``configs`` typed as ``Config``; ``WinConfig`` adds ``controls``."""
    controls = SchemaProperty(
        name="controls", declaring_type="t.WinConfig", type_name="t.Control",
        is_collection=True, is_navigation=True, contains_target=True,
    )
    owner = SchemaProperty(
        name="owner", declaring_type="t.Config", type_name="t.Control",
        is_navigation=True, contains_target=True,
    )
    configs = SchemaProperty(
        name="configs", declaring_type="t.Service", type_name="t.Config",
        is_collection=True, is_navigation=True, contains_target=True,
    )
    types = [
        SchemaType(name="t.Config", kind=TypeKind.ENTITY, properties=[owner]),
        SchemaType(
            name="t.WinConfig", kind=TypeKind.ENTITY, base_type="t.Config",
            properties=[controls],
        ),
        SchemaType(name="t.Control", kind=TypeKind.ENTITY),
        SchemaType(name="t.Service", kind=TypeKind.CONTAINER, properties=[configs]),
    ]
    return SchemaModel(
        namespace="t", types={t.name: t for t in types}, entity_container="t.Service",
    )


class TestTypeCast:
    """Segments reached through subtype fan-out are preceded by a type cast."""

    def test_subtype_segment_gets_cast(self) -> None:
        model = _config_model()
        paths = [n.to_route(model).to_path() for n in build_route_tree(model, 3)]
        assert "/configs/{configId}/t.WinConfig/controls" in paths

    def test_segment_on_target_type_has_no_cast(self) -> None:
        model = _config_model()
        paths = [n.to_route(model).to_path() for n in build_route_tree(model, 3)]
        assert "/configs/{configId}/owner" in paths

    def test_inherited_segment_has_no_cast(self, graph_model: SchemaModel) -> None:
        routes = _routes_by_path(graph_model)
        assert routes["/users/memberOf/$ref"].to_path() == "/users/{userId}/memberOf/$ref"
        assert routes["/users/memberOf/$ref"].type_cast(1) is None

    def test_cast_reported_by_position(self) -> None:
        model = _config_model()
        configs = model.root_container.properties[0]
        controls = model.get_type("t.WinConfig").properties[0]
        route = Route([configs, controls], model)
        assert route.type_cast(0) is None
        assert route.type_cast(1) == "t.WinConfig"
        assert route.to_path(include_keys=False) == "/configs/t.WinConfig/controls"
