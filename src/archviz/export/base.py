"""Exporter contract and the visible-structure snapshot shared by the formats."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..config import ExportConfig
from ..graph.aggregation import lift_hidden_edges
from ..graph.model import GraphModel
from ..graph.models import UNKNOWN, Edge, Node
from .identifiers import IdentifierRegistry

logger = logging.getLogger(__name__)

EMPTY_STATE_TEXT = "No components to display"


def is_open_container(node: Node) -> bool:
    """Containers whose children are drawn inside them."""
    return node.is_container and (node.expanded or not node.expandable)


def is_collapsed_container(node: Node) -> bool:
    return node.is_container and node.expandable and not node.expanded


@dataclass
class ExportContext:
    """What one export call draws: visible nodes, their nesting and visible edges."""
    graph: GraphModel
    nodes: list[Node]
    edges: list[Edge]
    ids: IdentifierRegistry
    clustering: bool = True
    children: dict[str, list[Node]] = field(default_factory=dict)
    roots: list[Node] = field(default_factory=list)

    def identifier(self, node_id: str) -> str:
        return self.ids.identifier(node_id)

    def nests(self, node: Node) -> bool:
        """True if ``node`` is rendered as a block around its visible children."""
        return self.clustering and is_open_container(node)


class DiagramExporter(ABC):
    """Abstract base class for diagram text exporters."""

    def __init__(self, config: ExportConfig | None = None):
        self.config = config or ExportConfig()

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Name of the output format."""
        pass

    @abstractmethod
    def get_file_extension(self) -> str:
        """File extension for this format."""
        pass

    @abstractmethod
    def render(self, graph: GraphModel | None) -> str:
        """Render the visible part of ``graph`` as text."""
        pass

    def prepare(self, graph: GraphModel) -> ExportContext | None:
        """Snapshot the visible structure, or None when there is nothing to draw."""
        nodes = graph.visible_nodes()
        if not nodes:
            return None

        edges = graph.visible_edges()
        if self.config.aggregate_edges:
            edges = edges + lift_hidden_edges(graph)

        ids = IdentifierRegistry()
        for node in nodes:
            ids.identifier(node.id)

        context = ExportContext(graph=graph, nodes=nodes, edges=edges, ids=ids,
                                clustering=graph.layout_hints.enable_clustering)
        by_id = {node.id: node for node in nodes}
        for node in nodes:
            parent = by_id.get(node.parent_id) if node.parent_id else None
            if parent is not None and context.nests(parent):
                context.children.setdefault(parent.id, []).append(node)
            else:
                context.roots.append(node)

        logger.debug(f"{self.format_name}: exporting {len(nodes)} nodes and {len(edges)} edges")
        return context

    @staticmethod
    def title(graph: GraphModel | None) -> str:
        if graph is None:
            return UNKNOWN
        return graph.title or UNKNOWN
