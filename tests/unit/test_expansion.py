"""Unit tests for interactive expansion."""

import pytest

from archviz.config import ExpansionConfig, Projection, ViewMode
from archviz.graph import EdgeType, Point, build_graph
from archviz.layout import ExpansionManager, ExpansionState, project_children

STRUCTURAL_NAMES = ["BaseActivity", "Clickable", "MainViewModel", "UserRepository"]
SURFACE_NAMES = ["DetailFragment", "DetailActivity", "activity_main"]


@pytest.fixture
def graph():
    """MainActivity with structural and surface relations."""
    g = build_graph({
        "nodes": [
            {
                "id": "MainActivity",
                "type": "activity",
                "role": "view",
                "extends": "BaseActivity",
                "implements": ["Clickable"],
                "dependencies": ["MainViewModel", "DetailFragment", "UserRepository"],
                "navigationTargets": ["DetailActivity"],
                "resources": ["activity_main"],
            },
            {"id": "BaseActivity"},
            {"id": "Clickable", "type": "interface"},
            {"id": "MainViewModel", "type": "view_model", "role": "view_model",
             "dependencies": ["UserRepository"]},
            {"id": "DetailFragment", "type": "fragment"},
            {"id": "DetailActivity", "type": "activity"},
            {"id": "UserRepository", "type": "repository", "role": "repository"},
        ]
    })
    g.get_node("MainActivity").position = Point(1000, 1000)
    return g


@pytest.fixture
def manager(graph):
    return ExpansionManager(graph)


def snapshot(graph):
    return (
        [(n.id, list(n.children), n.expanded, n.hidden) for n in graph.all_nodes()],
        [e.id for e in graph.edges],
    )


def child_names(graph, child_ids):
    return [graph.get_node(child_id).name for child_id in child_ids]


class TestProjectChildren:
    """Test candidate selection for each projection."""

    def test_structural(self, graph):
        candidates = project_children(graph, graph.get_node("MainActivity"), Projection.STRUCTURAL)
        assert [c.name for c in candidates] == STRUCTURAL_NAMES
        assert [c.edge_type for c in candidates] == [
            EdgeType.INHERITANCE, EdgeType.IMPLEMENTATION, EdgeType.DEPENDENCY, EdgeType.DEPENDENCY
        ]

    def test_surface(self, graph):
        candidates = project_children(graph, graph.get_node("MainActivity"), Projection.SURFACE)
        assert [c.name for c in candidates] == SURFACE_NAMES
        assert [c.edge_type for c in candidates] == [
            EdgeType.DEPENDENCY, EdgeType.NAVIGATION, EdgeType.COMPOSITION
        ]
        assert candidates[2].referenced is None

    def test_limit(self, graph):
        node = graph.get_node("BaseActivity")
        node.relations.dependencies = [f"Helper{i}" for i in range(20)]
        candidates = project_children(graph, node, Projection.STRUCTURAL)
        assert len(candidates) == 12
        assert candidates[-1].name == "Helper11"

    def test_dedupe_by_display_name(self):
        g = build_graph({
            "nodes": [
                {"id": "Screen", "dependencies": ["a.Foo", "b.Foo"]},
                {"id": "a.Foo", "name": "Foo"},
                {"id": "b.Foo", "name": "Foo"},
            ]
        })
        candidates = project_children(g, g.get_node("Screen"), Projection.STRUCTURAL)
        assert [c.ref_id for c in candidates] == ["a.Foo"]

    @pytest.mark.parametrize("view_mode,projection,expected", [
        (ViewMode.UI, Projection.STRUCTURAL, ["BaseActivity", "MainViewModel"]),
        (ViewMode.DATA_MODEL, Projection.STRUCTURAL, ["UserRepository"]),
        (ViewMode.BUSINESS_LOGIC, Projection.STRUCTURAL, []),
        (ViewMode.NAVIGATION, Projection.SURFACE, ["DetailFragment", "DetailActivity"]),
        (ViewMode.UI, Projection.SURFACE, SURFACE_NAMES),
    ])
    def test_view_mode_filter(self, graph, view_mode, projection, expected):
        candidates = project_children(graph, graph.get_node("MainActivity"), projection, view_mode)
        assert [c.name for c in candidates] == expected


class TestExpansionController:
    """Test the collapsed/expanded state machine."""

    def test_expand_structural(self, graph, manager):
        added = manager.expand("MainActivity")
        assert child_names(graph, added) == STRUCTURAL_NAMES
        assert added[0] == "MainActivity::supertype::BaseActivity"
        assert manager.controller("MainActivity").state == ExpansionState.EXPANDED

        child = graph.get_node(added[2])
        assert child.parent_id == "MainActivity"
        assert child.metadata["synthesized"] is True
        assert child.metadata["ref_id"] == "MainViewModel"
        assert child.relations.dependencies == ["UserRepository"]
        assert graph.get_edge("MainActivity_to_MainActivity::interface::Clickable_implementation")

    def test_children_ringed_around_parent(self, graph, manager):
        center = graph.get_node("MainActivity").position
        for child_id in manager.expand("MainActivity"):
            assert graph.get_node(child_id).position.distance_to(center) == pytest.approx(150)

    def test_expand_is_idempotent(self, graph, manager):
        manager.expand("MainActivity")
        before = snapshot(graph)
        assert manager.expand("MainActivity") == []
        assert snapshot(graph) == before

    def test_collapse_restores_graph(self, graph, manager):
        before = snapshot(graph)
        manager.expand("MainActivity")
        assert manager.collapse("MainActivity") is True
        assert snapshot(graph) == before
        assert manager.collapse("MainActivity") is False

    def test_toggle(self, graph, manager):
        controller = manager.controller("MainActivity")
        controller.toggle()
        assert controller.is_expanded
        controller.toggle()
        assert not controller.is_expanded
        assert len(graph) == 7

    def test_set_projection_refreshes(self, graph, manager):
        controller = manager.controller("MainActivity")
        controller.expand()
        controller.set_projection(Projection.SURFACE)
        assert child_names(graph, controller.added_node_ids) == SURFACE_NAMES
        assert "MainActivity::supertype::BaseActivity" not in graph

    def test_set_projection_while_collapsed(self, graph, manager):
        controller = manager.controller("MainActivity")
        controller.set_projection(Projection.SURFACE)
        assert not controller.is_expanded
        assert child_names(graph, controller.expand()) == SURFACE_NAMES

    def test_nested_collapse_is_recursive(self, graph, manager):
        before = snapshot(graph)
        manager.expand("MainActivity")
        view_model_child = "MainActivity::dependency::MainViewModel"
        grandchildren = manager.expand(view_model_child)
        assert child_names(graph, grandchildren) == ["UserRepository"]

        manager.collapse("MainActivity")
        assert snapshot(graph) == before
        assert view_model_child not in manager.controllers

    def test_unknown_node(self, manager):
        with pytest.raises(KeyError):
            manager.controller("Nope")


class TestExpansionManager:
    """Test manager-wide view mode and container handling."""

    def test_view_mode_refreshes_expanded(self, graph, manager):
        manager.expand("MainActivity")
        manager.set_view_mode(ViewMode.DATA_MODEL)
        controller = manager.controller("MainActivity")
        assert child_names(graph, controller.added_node_ids) == ["UserRepository"]

        manager.set_view_mode(ViewMode.ALL)
        assert child_names(graph, controller.added_node_ids) == STRUCTURAL_NAMES

    def test_default_projection_from_config(self, graph):
        manager = ExpansionManager(graph, ExpansionConfig(projection="surface", max_children=2))
        added = manager.expand("MainActivity")
        assert child_names(graph, added) == ["DetailFragment", "DetailActivity"]

    def test_expandable_container_reversal(self):
        g = build_graph({
            "abstractionLevel": "package",
            "nodes": [
                {"id": "pkg", "type": "package", "dependencies": ["Inner"]},
                {"id": "Inner", "name": "InnerService", "parentId": "pkg"},
            ]
        })
        before = snapshot(g)
        manager = ExpansionManager(g)

        added = manager.expand("pkg")
        assert g.get_node("pkg").expanded is True
        assert g.is_visible("Inner")
        assert g.is_visible(added[0])

        manager.collapse("pkg")
        assert snapshot(g) == before
        assert not g.is_visible("Inner")
