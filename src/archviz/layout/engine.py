"""Layout engine: strategy registry and the single writer of node positions."""

import logging

from ..config import ArchvizConfig
from ..errors import UnknownLayoutError
from ..graph.model import GraphModel
from ..graph.models import Point, Size
from .base import LayoutResult, LayoutStrategy, ring_positions
from .circular import CircularLayout
from .collision import CanvasSize, CollisionResolver
from .force_directed import ForceDirectedLayout
from .grid import GridLayout
from .hierarchical import HierarchicalLayout, LayeredLayout

logger = logging.getLogger(__name__)


class LayoutEngine:
    """Runs registered layout strategies against a GraphModel."""

    def __init__(self, config: ArchvizConfig | None = None):
        self.config = config or ArchvizConfig()
        self.resolver = CollisionResolver(
            self.config.spiral,
            self.config.canvas,
            Size(self.config.layout.node_width, self.config.layout.node_height),
        )
        self.strategies: dict[str, LayoutStrategy] = {}
        for strategy_cls in (HierarchicalLayout, LayeredLayout, ForceDirectedLayout,
                             CircularLayout, GridLayout):
            self.register(strategy_cls(self.config, self.resolver))

    def register(self, strategy: LayoutStrategy) -> None:
        """Add or replace a strategy under its name."""
        self.strategies[strategy.name] = strategy

    def get_strategy(self, name: str | None = None) -> LayoutStrategy:
        """Look up a strategy; defaults to the configured one.

        Raises:
            UnknownLayoutError: If no strategy is registered under ``name``
        """
        if name is None:
            name = self.config.layout.strategy
        name = str(getattr(name, "value", name))
        if name not in self.strategies:
            available = list(self.strategies.keys())
            raise UnknownLayoutError(f"Unknown layout strategy '{name}'. Available: {available}")
        return self.strategies[name]

    def compute(self, graph: GraphModel | None, strategy: str | None = None) -> LayoutResult:
        """Compute a layout without touching the graph.

        The canvas is grown (and positions shifted) so every node, sentinels
        included, keeps the configured padding from the canvas edges.
        """
        layout_strategy = self.get_strategy(strategy)
        result = layout_strategy.layout(graph)
        if result.is_empty:
            return result

        combined = {**result.positions, **result.sentinel_positions}
        fitted, canvas = self.resolver.fit_canvas(combined, result.canvas)
        return LayoutResult(
            strategy=result.strategy,
            canvas=canvas,
            positions={node_id: fitted[node_id] for node_id in result.positions},
            sentinel_positions={node_id: fitted[node_id] for node_id in result.sentinel_positions},
            sentinel_edges=result.sentinel_edges,
        )

    def run(self, graph: GraphModel | None, strategy: str | None = None) -> LayoutResult:
        """Compute a layout and write the positions onto the graph's nodes."""
        result = self.compute(graph, strategy)
        if graph is not None:
            self.apply(graph, result)
        logger.info(f"Applied {result.strategy} layout to {len(result.positions)} nodes "
                    f"({result.canvas.width:.0f}x{result.canvas.height:.0f})")
        return result

    @staticmethod
    def apply(graph: GraphModel, result: LayoutResult) -> None:
        for node_id, position in result.positions.items():
            node = graph.get_node(node_id)
            if node is not None:
                node.position = position

    def place_incremental(self, graph: GraphModel, node_id: str, canvas: CanvasSize) -> CanvasSize:
        """Place one newly added node among the already positioned visible nodes.

        Positions of the other nodes only change if the canvas has to grow
        to the left or top. Returns the (possibly grown) canvas.
        """
        node = graph.get_node(node_id)
        if node is None:
            return canvas

        others = {n.id: n.position for n in graph.visible_nodes() if n.id != node_id}
        position = self.resolver.find_free_position(list(others.values()), canvas)
        fitted, grown = self.resolver.fit_canvas({**others, node_id: position}, canvas)
        for other_id, point in fitted.items():
            graph.get_node(other_id).position = point
        logger.debug(f"Placed '{node_id}' at ({fitted[node_id].x:.0f}, {fitted[node_id].y:.0f})")
        return grown

    def place_ring(self, graph: GraphModel, node_ids: list[str], center: Point, radius: float) -> None:
        """Arrange the given nodes on a ring around ``center``."""
        for node_id, point in zip(node_ids, ring_positions(center, len(node_ids), radius)):
            node = graph.get_node(node_id)
            if node is not None:
                node.position = point
