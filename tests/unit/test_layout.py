"""Unit tests for layout strategies and the layout engine."""

import logging

import pytest

from archviz.config import ArchvizConfig, ForceConfig, LayoutConfig
from archviz.errors import UnknownLayoutError
from archviz.graph.model import GraphModel
from archviz.graph.models import EdgeType, Node, NodeRole, NodeType, Point, create_edge
from archviz.layout import (
    END_NODE_ID,
    START_NODE_ID,
    CircularLayout,
    ForceDirectedLayout,
    GridLayout,
    HierarchicalLayout,
    LayoutEngine,
    classify_layer,
)
from archviz.layout.collision import CanvasSize


def no_sentinels() -> ArchvizConfig:
    return ArchvizConfig(layout=LayoutConfig(flow_sentinels=False))


def chain_graph() -> GraphModel:
    """UI -> business -> data chain."""
    graph = GraphModel()
    graph.add_node(Node(id="A", name="LoginScreen", role=NodeRole.VIEW))
    graph.add_node(Node(id="B", name="AuthService", role=NodeRole.BUSINESS_LOGIC))
    graph.add_node(Node(id="C", name="UserStore", role=NodeRole.REPOSITORY))
    graph.add_edge(create_edge("A", "B", EdgeType.DEPENDENCY))
    graph.add_edge(create_edge("B", "C", EdgeType.DEPENDENCY))
    return graph


def plain_graph(count: int) -> GraphModel:
    graph = GraphModel()
    for i in range(count):
        graph.add_node(Node(id=f"n{i}"))
    return graph


def pairwise_distances(positions: dict[str, Point]) -> list[float]:
    points = list(positions.values())
    return [points[i].distance_to(points[j])
            for i in range(len(points)) for j in range(i + 1, len(points))]


class TestClassifyLayer:
    """Test layer classification."""

    @pytest.mark.parametrize("node,expected", [
        (Node(id="x", name="LoginViewModel"), "presentation"),
        (Node(id="x", name="UserModel"), "data"),
        (Node(id="x", name="CheckoutUseCase"), "business"),
        (Node(id="x", name="Helper"), "other"),
        (Node(id="x", name="Helper", layer="domain"), "business"),
        (Node(id="x", name="Helper", layer="ui_layer"), "presentation"),
        (Node(id="x", name="Helper", type=NodeType.SERVICE), "business"),
        (Node(id="x", name="LoginActivity", role=NodeRole.REPOSITORY), "data"),
    ])
    def test_classification(self, node, expected):
        assert classify_layer(node) == expected


class TestHierarchicalLayout:
    """Test the layered column layout."""

    def test_layers_left_to_right(self):
        result = LayoutEngine().compute(chain_graph(), "hierarchical")
        positions = result.positions
        assert positions["A"].x < positions["B"].x < positions["C"].x
        assert positions["A"].x == pytest.approx(700)
        assert positions["B"].x == pytest.approx(1100)
        assert positions["C"].x == pytest.approx(1500)
        assert positions["A"].y == pytest.approx(290)

    def test_sentinel_columns(self):
        result = LayoutEngine().compute(chain_graph(), "hierarchical")
        assert result.canvas == CanvasSize(2200, 580)
        assert result.sentinel_positions[START_NODE_ID].x == pytest.approx(300)
        assert result.sentinel_positions[END_NODE_ID].x == pytest.approx(1900)
        assert result.sentinel_edges == [(START_NODE_ID, "A"), ("C", END_NODE_ID)]

    def test_without_sentinels(self):
        result = LayoutEngine(no_sentinels()).compute(chain_graph(), "hierarchical")
        assert result.canvas.width == pytest.approx(1400)
        assert result.sentinel_positions == {}
        assert result.positions["A"].x == pytest.approx(300)

    def test_nodes_in_layer_ordered_by_package(self):
        graph = GraphModel()
        graph.add_node(Node(id="late", name="BView", role=NodeRole.VIEW, package_path="com.b"))
        graph.add_node(Node(id="early", name="AView", role=NodeRole.VIEW, package_path="com.a"))
        result = LayoutEngine(no_sentinels()).compute(graph, "hierarchical")
        assert result.positions["early"].y < result.positions["late"].y
        assert result.positions["early"].x == result.positions["late"].x

    def test_layered_alias(self):
        engine = LayoutEngine()
        layered = engine.compute(chain_graph(), "layered")
        hierarchical = engine.compute(chain_graph(), "hierarchical")
        assert layered.strategy == "layered"
        assert layered.positions == hierarchical.positions

    def test_group_layers_skips_empty(self):
        layers = HierarchicalLayout().group_layers(chain_graph().visible_nodes())
        assert [[n.id for n in layer] for layer in layers] == [["A"], ["B"], ["C"]]


class TestForceDirectedLayout:
    """Test the spring embedder."""

    def test_min_separation(self):
        result = LayoutEngine().compute(plain_graph(5), "force_directed")
        assert len(result.positions) == 5
        assert min(pairwise_distances(result.positions)) >= 120 - 1e-6

    def test_deterministic_for_seed(self):
        first = LayoutEngine().compute(chain_graph(), "force_directed")
        second = LayoutEngine().compute(chain_graph(), "force_directed")
        assert first.positions == second.positions

    def test_seed_changes_result(self):
        config = ArchvizConfig(layout=LayoutConfig(seed=7))
        first = LayoutEngine().compute(chain_graph(), "force_directed")
        second = LayoutEngine(config).compute(chain_graph(), "force_directed")
        assert first.positions != second.positions

    def test_canvas_size(self):
        layout = ForceDirectedLayout()
        assert layout.compute_canvas(plain_graph(5).all_nodes()) == CanvasSize(1200, 800)
        assert layout.compute_canvas(plain_graph(100).all_nodes()) == CanvasSize(4000, 3000)

    def test_sentinels_pinned(self):
        result = ForceDirectedLayout().layout(chain_graph())
        assert result.sentinel_positions[START_NODE_ID] == Point(130, 400)
        assert result.sentinel_positions[END_NODE_ID] == Point(1070, 400)

    def test_epsilon_stops_early(self):
        config = ArchvizConfig(force=ForceConfig(epsilon=1e9))
        result = LayoutEngine(config).compute(chain_graph(), "force_directed")
        assert set(result.positions) == {"A", "B", "C"}

    def test_deadline_stops_run(self, caplog):
        config = ArchvizConfig(force=ForceConfig(deadline_seconds=0.0, iterations=10_000))
        with caplog.at_level(logging.WARNING):
            result = LayoutEngine(config).compute(plain_graph(4), "force_directed")
        assert "deadline" in caplog.text
        assert min(pairwise_distances(result.positions)) >= 120 - 1e-6

    def test_direct_layout_stays_on_canvas(self):
        config = ArchvizConfig(
            layout=LayoutConfig(flow_sentinels=False),
            force=ForceConfig(iterations=0, min_distance=900),
        )
        result = ForceDirectedLayout(config).layout(plain_graph(4))
        assert result.canvas != CanvasSize(1200, 800)
        for position in result.positions.values():
            assert 80 + 50 - 1e-6 <= position.x <= result.canvas.width - 80 - 50 + 1e-6
            assert 40 + 50 - 1e-6 <= position.y <= result.canvas.height - 40 - 50 + 1e-6

    def test_single_node(self):
        result = LayoutEngine().compute(plain_graph(1), "force_directed")
        assert list(result.positions) == ["n0"]


class TestCircularLayout:
    """Test the circular layout."""

    def test_cycle_on_circle(self):
        graph = plain_graph(4)
        for i in range(4):
            graph.add_edge(create_edge(f"n{i}", f"n{(i + 1) % 4}", EdgeType.DEPENDENCY))

        result = LayoutEngine().compute(graph, "circular")
        assert result.sentinel_positions == {}
        assert result.canvas == CanvasSize(1000, 1000)
        center = Point(500, 500)
        for position in result.positions.values():
            assert position.distance_to(center) == pytest.approx(300)
        assert result.positions["n0"].x == pytest.approx(500)
        assert result.positions["n0"].y == pytest.approx(200)

    def test_radius_grows_with_nodes(self):
        layout = CircularLayout()
        assert layout.radius(4) == 300
        assert layout.radius(20) == 500

    def test_sentinels_outside_circle(self):
        result = CircularLayout().layout(plain_graph(2))
        assert result.sentinel_positions[START_NODE_ID] == Point(40, 500)
        assert result.sentinel_positions[END_NODE_ID] == Point(960, 500)


class TestGridLayout:
    """Test the grid layout."""

    def test_positions_and_canvas(self):
        result = LayoutEngine(no_sentinels()).compute(plain_graph(5), "grid")
        assert result.canvas == CanvasSize(1520, 760)
        assert result.positions["n0"] == Point(320, 240)
        assert result.positions["n1"] == Point(760, 240)
        assert result.positions["n3"] == Point(320, 520)

    def test_dimensions(self):
        assert GridLayout.dimensions(5) == (3, 2)
        assert GridLayout.dimensions(9) == (3, 3)
        assert GridLayout.dimensions(0) == (0, 0)

    def test_sentinels_shift_grid(self):
        result = GridLayout().layout(plain_graph(4))
        assert result.positions["n0"].x == pytest.approx(760)
        assert result.sentinel_positions[START_NODE_ID].x == pytest.approx(320)
        assert result.sentinel_positions[END_NODE_ID].x == pytest.approx(1640)


class TestLayoutEngine:
    """Test strategy selection and position application."""

    @pytest.mark.parametrize("strategy", ["hierarchical", "layered", "force_directed", "circular", "grid"])
    def test_empty_graph(self, strategy):
        engine = LayoutEngine()
        for graph in (None, GraphModel()):
            result = engine.compute(graph, strategy)
            assert result.is_empty
            assert result.canvas == CanvasSize(2000, 2000)

    def test_unknown_strategy(self):
        with pytest.raises(UnknownLayoutError, match="Unknown layout strategy 'spiral'"):
            LayoutEngine().get_strategy("spiral")
        with pytest.raises(ValueError):
            LayoutEngine().compute(chain_graph(), "spiral")

    def test_default_strategy_from_config(self):
        engine = LayoutEngine(ArchvizConfig(layout=LayoutConfig(strategy="grid")))
        assert engine.get_strategy().name == "grid"

    def test_run_writes_positions_only(self):
        graph = chain_graph()
        edges_before = [e.id for e in graph.edges]
        result = LayoutEngine().run(graph, "grid")

        for node_id, position in result.positions.items():
            assert graph.get_node(node_id).position == position
        assert [e.id for e in graph.edges] == edges_before
        assert START_NODE_ID not in graph
        assert END_NODE_ID not in graph

    def test_compute_does_not_touch_graph(self):
        graph = chain_graph()
        LayoutEngine().compute(graph, "grid")
        assert all(n.position == Point() for n in graph.all_nodes())

    def test_hidden_nodes_not_laid_out(self):
        graph = chain_graph()
        graph.add_node(Node(id="pkg", type=NodeType.PACKAGE, expandable=True))
        graph.add_node(Node(id="inner"), parent_id="pkg")
        result = LayoutEngine().compute(graph, "grid")
        assert "inner" not in result.positions
        assert "pkg" in result.positions

    def test_place_incremental(self):
        graph = chain_graph()
        engine = LayoutEngine(no_sentinels())
        result = engine.run(graph, "grid")
        graph.add_node(Node(id="D"))

        canvas = engine.place_incremental(graph, "D", result.canvas)
        new = graph.get_node("D").position
        for node_id in ("A", "B", "C"):
            assert new.distance_to(graph.get_node(node_id).position) > 180
        assert canvas.width >= result.canvas.width

    def test_place_incremental_unknown_node(self):
        engine = LayoutEngine()
        canvas = CanvasSize(2000, 2000)
        assert engine.place_incremental(chain_graph(), "missing", canvas) == canvas

    def test_place_ring(self):
        graph = plain_graph(3)
        center = Point(1000, 1000)
        LayoutEngine().place_ring(graph, ["n0", "n1", "n2"], center, 150)
        for node in graph.all_nodes():
            assert node.position.distance_to(center) == pytest.approx(150)
        assert graph.get_node("n0").position.y == pytest.approx(850)
