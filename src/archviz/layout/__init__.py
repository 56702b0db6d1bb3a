"""Layout strategies, collision avoidance and interactive expansion."""

from .base import END_NODE_ID, START_NODE_ID, LayoutResult, LayoutStrategy, classify_layer
from .circular import CircularLayout
from .collision import CanvasSize, CollisionResolver
from .engine import LayoutEngine
from .expansion import ExpansionController, ExpansionManager, ExpansionState, project_children
from .force_directed import ForceDirectedLayout
from .grid import GridLayout
from .hierarchical import HierarchicalLayout, LayeredLayout

__all__ = [
    "LayoutEngine",
    "LayoutStrategy",
    "LayoutResult",
    "HierarchicalLayout",
    "LayeredLayout",
    "ForceDirectedLayout",
    "CircularLayout",
    "GridLayout",
    "CollisionResolver",
    "CanvasSize",
    "ExpansionController",
    "ExpansionManager",
    "ExpansionState",
    "project_children",
    "classify_layer",
    "START_NODE_ID",
    "END_NODE_ID",
]
