"""Layered layout: presentation, business, data and other columns."""

from ..graph.model import GraphModel
from ..graph.models import Node, Point
from .base import END_NODE_ID, LAYER_ORDER, START_NODE_ID, LayoutResult, LayoutStrategy, classify_layer
from .collision import CanvasSize

# Fixed extra height below the tallest column.
COLUMN_HEADROOM = 300.0


class HierarchicalLayout(LayoutStrategy):
    """Columns of architectural layers laid out left to right.

    Each non-empty layer becomes a column ``layer_spacing`` wide; nodes of a
    layer are spaced evenly down the column in package-path order. When flow
    sentinels are present, Start and End take an extra column at each end.
    """

    @property
    def name(self) -> str:
        return "hierarchical"

    def group_layers(self, nodes: list[Node]) -> list[list[Node]]:
        """Non-empty layers in presentation → business → data → other order."""
        groups = {layer: [] for layer in LAYER_ORDER}
        for node in nodes:
            groups[classify_layer(node)].append(node)
        return [
            sorted(groups[layer], key=lambda n: n.package_path or "")
            for layer in LAYER_ORDER
            if groups[layer]
        ]

    def compute_canvas(self, nodes: list[Node], with_sentinels: bool = False) -> CanvasSize:
        cfg = self.config.layout
        layers = self.group_layers(nodes)
        columns = len(layers) + (2 if with_sentinels else 0)
        largest = max((len(layer) for layer in layers), default=0)
        width = columns * cfg.layer_spacing + cfg.margin
        height = largest * (cfg.node_height + cfg.vertical_spacing) + COLUMN_HEADROOM
        return CanvasSize(width, height)

    def place(self, graph: GraphModel, nodes: list[Node], canvas: CanvasSize,
              sentinel_edges: list[tuple[str, str]]) -> LayoutResult:
        cfg = self.config.layout
        layers = self.group_layers(nodes)
        first_column = 1 if sentinel_edges else 0
        row_height = cfg.node_height + cfg.vertical_spacing

        def column_x(column: int) -> float:
            return cfg.margin / 2 + column * cfg.layer_spacing + cfg.layer_spacing / 2

        positions = {}
        for index, layer in enumerate(layers):
            x = column_x(first_column + index)
            top = (canvas.height - len(layer) * row_height) / 2
            for row, node in enumerate(layer):
                positions[node.id] = Point(x, top + row * row_height + row_height / 2)

        sentinel_positions = {}
        if sentinel_edges:
            middle = canvas.height / 2
            sentinel_positions[START_NODE_ID] = Point(column_x(0), middle)
            sentinel_positions[END_NODE_ID] = Point(column_x(len(layers) + 1), middle)

        return LayoutResult(
            strategy=self.name,
            canvas=canvas,
            positions=positions,
            sentinel_positions=sentinel_positions,
            sentinel_edges=list(sentinel_edges),
        )


class LayeredLayout(HierarchicalLayout):
    """Alias of the hierarchical layout registered under its own name."""

    @property
    def name(self) -> str:
        return "layered"
