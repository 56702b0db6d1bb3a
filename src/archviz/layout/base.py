"""Layout strategy contract and helpers shared by the strategies."""

import logging
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..config import ArchvizConfig
from ..graph.model import GraphModel
from ..graph.models import Node, NodeRole, NodeType, Point, Size
from .collision import CanvasSize, CollisionResolver

logger = logging.getLogger(__name__)

START_NODE_ID = "_START_NODE_"
END_NODE_ID = "_END_NODE_"
SENTINEL_IDS = frozenset({START_NODE_ID, END_NODE_ID})

PRESENTATION = "presentation"
BUSINESS = "business"
DATA = "data"
OTHER = "other"
LAYER_ORDER = (PRESENTATION, BUSINESS, DATA, OTHER)

ROLE_LAYERS = {
    NodeRole.VIEW: PRESENTATION,
    NodeRole.VIEW_MODEL: PRESENTATION,
    NodeRole.NAVIGATION: PRESENTATION,
    NodeRole.BUSINESS_LOGIC: BUSINESS,
    NodeRole.REPOSITORY: DATA,
    NodeRole.DATA_SOURCE: DATA,
    NodeRole.DATABASE: DATA,
    NodeRole.NETWORK: DATA,
}

LAYER_KEYWORDS = {
    PRESENTATION: ("ui", "presentation", "view", "views", "screen", "screens"),
    BUSINESS: ("business", "domain", "service", "services", "logic", "usecase", "usecases"),
    DATA: ("data", "repository", "repositories", "model", "models", "persistence", "storage"),
}

TYPE_LAYERS = {
    NodeType.ACTIVITY: PRESENTATION,
    NodeType.FRAGMENT: PRESENTATION,
    NodeType.VIEW_MODEL: PRESENTATION,
    NodeType.SERVICE: BUSINESS,
    NodeType.REPOSITORY: DATA,
    NodeType.DATA_SOURCE: DATA,
}

# Checked in order: "ViewModel" must win over the data suffix "Model".
NAME_SUFFIX_LAYERS = (
    (PRESENTATION, ("ViewModel", "Activity", "Fragment", "View", "Screen", "Dialog", "Adapter")),
    (BUSINESS, ("Service", "UseCase", "Interactor", "Manager", "Controller")),
    (DATA, ("Repository", "DataSource", "Dao", "Dto", "Entity", "Model", "Api", "Database")),
)


def classify_layer(node: Node) -> str:
    """Assign a node to presentation, business, data or other.

    Role wins, then the layer name reported by the analysis, then the node
    type, then the class-name suffix.
    """
    if node.role is not None and node.role in ROLE_LAYERS:
        return ROLE_LAYERS[node.role]

    if node.layer:
        tokens = set(re.split(r"[^a-z0-9]+", node.layer.lower()))
        for layer, keywords in LAYER_KEYWORDS.items():
            if tokens.intersection(keywords):
                return layer

    if node.type in TYPE_LAYERS:
        return TYPE_LAYERS[node.type]

    for layer, suffixes in NAME_SUFFIX_LAYERS:
        if node.display_name.endswith(suffixes):
            return layer
    return OTHER


def flow_sentinel_edges(nodes: list[Node], edges: list[tuple[str, str]]) -> list[tuple[str, str]]:
    """Edges wiring Start to every source-less node and every sink-less node to End.

    Returns an empty list when every node has both incoming and outgoing edges.
    """
    with_incoming = {target for _, target in edges}
    with_outgoing = {source for source, _ in edges}
    wired = []
    for node in nodes:
        if node.id not in with_incoming:
            wired.append((START_NODE_ID, node.id))
    for node in nodes:
        if node.id not in with_outgoing:
            wired.append((node.id, END_NODE_ID))
    return wired


def ring_positions(center: Point, count: int, radius: float) -> list[Point]:
    """Evenly spaced points on a circle, starting at the top and going clockwise."""
    if count <= 0:
        return []
    return [
        Point(center.x + radius * math.cos(2 * math.pi * i / count - math.pi / 2),
              center.y + radius * math.sin(2 * math.pi * i / count - math.pi / 2))
        for i in range(count)
    ]


@dataclass
class LayoutResult:
    """Positions computed by one strategy run. Sentinels are not part of the graph."""
    strategy: str
    canvas: CanvasSize
    positions: dict[str, Point] = field(default_factory=dict)
    sentinel_positions: dict[str, Point] = field(default_factory=dict)
    sentinel_edges: list[tuple[str, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.positions


class LayoutStrategy(ABC):
    """Base class for placement strategies.

    Strategies are pure: they read the visible part of a graph and return a
    LayoutResult. Writing positions back is left to the LayoutEngine.
    """

    def __init__(self, config: ArchvizConfig | None = None, resolver: CollisionResolver | None = None):
        self.config = config or ArchvizConfig()
        self.resolver = resolver or CollisionResolver(
            self.config.spiral,
            self.config.canvas,
            Size(self.config.layout.node_width, self.config.layout.node_height),
        )

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the strategy."""
        pass

    @abstractmethod
    def compute_canvas(self, nodes: list[Node], with_sentinels: bool = False) -> CanvasSize:
        """Canvas size for the given visible nodes."""
        pass

    @abstractmethod
    def place(self, graph: GraphModel, nodes: list[Node], canvas: CanvasSize,
              sentinel_edges: list[tuple[str, str]]) -> LayoutResult:
        """Compute positions for ``nodes`` (all visible) on ``canvas``."""
        pass

    def layout(self, graph: GraphModel | None) -> LayoutResult:
        """Lay out the visible nodes of ``graph``."""
        if graph is None or not graph.visible_nodes():
            return LayoutResult(strategy=self.name, canvas=self.resolver.min_canvas())

        nodes = graph.visible_nodes()
        sentinel_edges = []
        if self.config.layout.flow_sentinels:
            sentinel_edges = flow_sentinel_edges(nodes, self.visible_edge_pairs(graph))

        canvas = self.compute_canvas(nodes, with_sentinels=bool(sentinel_edges))
        result = self.place(graph, nodes, canvas, sentinel_edges)
        logger.debug(f"{self.name} layout placed {len(result.positions)} nodes "
                     f"on {canvas.width:.0f}x{canvas.height:.0f}")
        return result

    @staticmethod
    def visible_edge_pairs(graph: GraphModel) -> list[tuple[str, str]]:
        return [(e.source_id, e.target_id) for e in graph.visible_edges()]
