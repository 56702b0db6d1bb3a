"""Grid layout."""

import math

from ..graph.model import GraphModel
from ..graph.models import Node, Point
from .base import END_NODE_ID, START_NODE_ID, LayoutResult, LayoutStrategy
from .collision import CanvasSize


class GridLayout(LayoutStrategy):
    """Row-major grid with ceil(sqrt(n)) columns.

    With flow sentinels the grid is shifted one cell to the right and Start
    and End sit in the extra cells on either side, vertically centred.
    """

    @property
    def name(self) -> str:
        return "grid"

    @staticmethod
    def dimensions(node_count: int) -> tuple[int, int]:
        if node_count <= 0:
            return 0, 0
        columns = math.ceil(math.sqrt(node_count))
        rows = math.ceil(node_count / columns)
        return columns, rows

    def _cell(self) -> tuple[float, float]:
        cfg = self.config.layout
        return cfg.node_width + cfg.horizontal_spacing, cfg.node_height + cfg.vertical_spacing

    def compute_canvas(self, nodes: list[Node], with_sentinels: bool = False) -> CanvasSize:
        columns, rows = self.dimensions(len(nodes))
        cell_w, cell_h = self._cell()
        margin = self.config.layout.margin
        extra = 2 if with_sentinels else 0
        return CanvasSize((columns + extra) * cell_w + margin, rows * cell_h + margin)

    def place(self, graph: GraphModel, nodes: list[Node], canvas: CanvasSize,
              sentinel_edges: list[tuple[str, str]]) -> LayoutResult:
        columns, _ = self.dimensions(len(nodes))
        cell_w, cell_h = self._cell()
        origin = self.config.layout.margin / 2
        first_column = 1 if sentinel_edges else 0

        positions = {}
        for index, node in enumerate(nodes):
            row, column = divmod(index, columns)
            positions[node.id] = Point(origin + (first_column + column) * cell_w + cell_w / 2,
                                       origin + row * cell_h + cell_h / 2)

        sentinel_positions = {}
        if sentinel_edges:
            middle = canvas.height / 2
            sentinel_positions[START_NODE_ID] = Point(origin + cell_w / 2, middle)
            sentinel_positions[END_NODE_ID] = Point(origin + (columns + 1) * cell_w + cell_w / 2, middle)

        return LayoutResult(
            strategy=self.name,
            canvas=canvas,
            positions=positions,
            sentinel_positions=sentinel_positions,
            sentinel_edges=list(sentinel_edges),
        )
