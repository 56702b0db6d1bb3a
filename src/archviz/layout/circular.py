"""Circular layout."""

from ..graph.model import GraphModel
from ..graph.models import Node, Point
from .base import END_NODE_ID, START_NODE_ID, LayoutResult, LayoutStrategy, ring_positions
from .collision import CanvasSize

MIN_RADIUS = 300.0
RADIUS_PER_NODE = 25.0


class CircularLayout(LayoutStrategy):
    """Nodes evenly spaced on one circle; sentinels just outside it on the x axis."""

    @property
    def name(self) -> str:
        return "circular"

    def radius(self, node_count: int) -> float:
        return max(MIN_RADIUS, node_count * RADIUS_PER_NODE)

    def compute_canvas(self, nodes: list[Node], with_sentinels: bool = False) -> CanvasSize:
        side = 2 * self.radius(len(nodes)) + 2 * self.config.layout.margin
        return CanvasSize(side, side)

    def place(self, graph: GraphModel, nodes: list[Node], canvas: CanvasSize,
              sentinel_edges: list[tuple[str, str]]) -> LayoutResult:
        radius = self.radius(len(nodes))
        center = canvas.center
        points = ring_positions(center, len(nodes), radius)
        positions = {node.id: point for node, point in zip(nodes, points)}

        sentinel_positions = {}
        if sentinel_edges:
            offset = radius + self.config.layout.node_width
            sentinel_positions[START_NODE_ID] = Point(center.x - offset, center.y)
            sentinel_positions[END_NODE_ID] = Point(center.x + offset, center.y)

        return LayoutResult(
            strategy=self.name,
            canvas=canvas,
            positions=positions,
            sentinel_positions=sentinel_positions,
            sentinel_edges=list(sentinel_edges),
        )
