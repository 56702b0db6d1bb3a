"""Unit tests for collision avoidance and canvas growth."""

import pytest

from archviz.config import CanvasConfig, SpiralConfig
from archviz.graph.models import Point
from archviz.layout.collision import CanvasSize, CollisionResolver


@pytest.fixture
def resolver():
    return CollisionResolver()


class TestFreePosition:
    """Test spiral placement of a single new node."""

    def test_first_candidate_on_empty_canvas(self, resolver):
        position = resolver.find_free_position([], CanvasSize(2000, 2000))
        assert position.x == pytest.approx(1200.0)
        assert position.y == pytest.approx(1000.0)

    def test_result_keeps_min_distance(self, resolver):
        occupied = [Point(1000, 1000), Point(1200, 1000), Point(1000, 1200), Point(800, 1000)]
        position = resolver.find_free_position(occupied, CanvasSize(2000, 2000))
        for point in occupied:
            assert position.distance_to(point) > 180.0

    def test_spiral_fans_out_with_node_count(self, resolver):
        canvas = CanvasSize(2000, 2000)
        first = resolver.find_free_position([], canvas)
        second = resolver.find_free_position([first], canvas)
        assert second.distance_to(first) > 180.0

    def test_relaxation_fallback(self):
        """When every spiral candidate is taken, relaxation pushes the seed clear."""
        resolver = CollisionResolver(spiral=SpiralConfig(max_attempts=1, base_radius=0))
        canvas = CanvasSize(2000, 2000)
        position = resolver.find_free_position([canvas.center], canvas)
        assert position.distance_to(canvas.center) == pytest.approx(180.5)
        assert resolver.is_free(position, [canvas.center])

    def test_is_free_is_strict(self, resolver):
        assert resolver.is_free(Point(180, 0), [Point(0, 0)]) is False
        assert resolver.is_free(Point(181, 0), [Point(0, 0)]) is True
        assert resolver.is_free(Point(10, 0), [Point(0, 0)], min_distance=5) is True


class TestResolveOverlaps:
    """Test pairwise overlap resolution."""

    def test_coincident_points_separated(self, resolver):
        positions = {"a": Point(500, 500), "b": Point(500, 500)}
        resolved = resolver.resolve_overlaps(positions, 100)
        assert resolved["a"].distance_to(resolved["b"]) >= 100
        # Input is left untouched.
        assert positions["a"] == Point(500, 500)

    def test_fixed_point_never_moves(self, resolver):
        positions = {"a": Point(0, 0), "b": Point(10, 0)}
        resolved = resolver.resolve_overlaps(positions, 100, fixed={"a"})
        assert resolved["a"] == Point(0, 0)
        assert resolved["b"].x == pytest.approx(100.5)
        assert resolved["b"].y == pytest.approx(0.0)

    def test_separated_points_unchanged(self, resolver):
        positions = {"a": Point(0, 0), "b": Point(300, 0)}
        assert resolver.resolve_overlaps(positions, 100) == positions

    def test_cluster_resolved(self, resolver):
        positions = {str(i): Point(1000 + i, 1000 - i) for i in range(4)}
        resolved = resolver.resolve_overlaps(positions, 120)
        ids = list(resolved)
        for i in range(len(ids)):
            for j in range(i + 1, len(ids)):
                assert resolved[ids[i]].distance_to(resolved[ids[j]]) >= 120 - 1e-6


class TestFitCanvas:
    """Test canvas growth and shifting."""

    def test_left_violation_shifts_and_grows(self, resolver):
        fitted, canvas = resolver.fit_canvas({"a": Point(10, 500)}, CanvasSize(1000, 1000))
        assert fitted["a"] == Point(130, 500)
        assert canvas == CanvasSize(2000, 1000)

    def test_right_violation_grows_without_shift(self, resolver):
        fitted, canvas = resolver.fit_canvas({"a": Point(990, 500)}, CanvasSize(1000, 1000))
        assert fitted["a"] == Point(990, 500)
        assert canvas == CanvasSize(2000, 1000)

    def test_growth_is_geometric_above_floor(self, resolver):
        _, canvas = resolver.fit_canvas({"a": Point(2500, 500)}, CanvasSize(2400, 1000))
        assert canvas.width == pytest.approx(3600)

    def test_fitting_positions_untouched(self, resolver):
        positions = {"a": Point(500, 500), "b": Point(700, 600)}
        fitted, canvas = resolver.fit_canvas(positions, CanvasSize(1000, 1000))
        assert fitted == positions
        assert canvas == CanvasSize(1000, 1000)

    def test_every_box_keeps_padding(self):
        resolver = CollisionResolver(canvas=CanvasConfig(padding=20))
        positions = {"a": Point(-400, -300), "b": Point(3000, 100)}
        fitted, canvas = resolver.fit_canvas(positions, CanvasSize(1000, 1000))
        for p in fitted.values():
            assert p.x - 80 >= 20
            assert p.y - 40 >= 20
            assert p.x + 80 <= canvas.width - 20
            assert p.y + 40 <= canvas.height - 20

    def test_empty_positions(self, resolver):
        fitted, canvas = resolver.fit_canvas({}, CanvasSize(100, 100))
        assert fitted == {}
        assert canvas == CanvasSize(100, 100)
