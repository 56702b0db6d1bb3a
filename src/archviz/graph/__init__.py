"""Component graph model for archviz.

Holds the node/edge registry and its hierarchy, the snapshot ingestion that
populates it, and edge aggregation helpers used by the exporters.
"""

from .aggregation import aggregate_parallel_edges, lift_hidden_edges
from .ingest import AnalysisSnapshot, build_graph, load_snapshot
from .model import GraphModel
from .models import (
    AbstractionLevel,
    Edge,
    EdgeStyle,
    EdgeType,
    LayoutHints,
    Node,
    NodeRole,
    NodeType,
    Point,
    Relations,
    Size,
    create_edge,
)

__all__ = [
    "GraphModel",
    "Node",
    "Edge",
    "NodeType",
    "NodeRole",
    "EdgeType",
    "EdgeStyle",
    "AbstractionLevel",
    "LayoutHints",
    "Point",
    "Size",
    "Relations",
    "create_edge",
    "AnalysisSnapshot",
    "build_graph",
    "load_snapshot",
    "aggregate_parallel_edges",
    "lift_hidden_edges",
]
