"""Graph data models for component diagrams."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

UNKNOWN = "Unknown"


class NodeType(str, Enum):
    """Kinds of component a node can stand for."""
    PACKAGE = "package"
    FEATURE = "feature"
    LAYER = "layer"
    CLASS = "class"
    ACTIVITY = "activity"
    FRAGMENT = "fragment"
    VIEW_MODEL = "view_model"
    REPOSITORY = "repository"
    DATA_SOURCE = "data_source"
    SERVICE = "service"
    CLUSTER = "cluster"
    CONTAINER = "container"
    INTERFACE = "interface"
    ENUM = "enum"


# Types that group other nodes and render as blocks rather than leaves.
CONTAINER_TYPES = frozenset({
    NodeType.PACKAGE,
    NodeType.FEATURE,
    NodeType.LAYER,
    NodeType.CLUSTER,
    NodeType.CONTAINER,
})


class NodeRole(str, Enum):
    """Semantic role of a component in the architecture."""
    VIEW = "view"
    VIEW_MODEL = "view_model"
    REPOSITORY = "repository"
    DATA_SOURCE = "data_source"
    NETWORK = "network"
    DATABASE = "database"
    BUSINESS_LOGIC = "business_logic"
    NAVIGATION = "navigation"
    UTILITY = "utility"


class EdgeType(str, Enum):
    """Relationship kinds."""
    DEPENDENCY = "dependency"
    INHERITANCE = "inheritance"
    IMPLEMENTATION = "implementation"
    COMPOSITION = "composition"
    AGGREGATION = "aggregation"
    NAVIGATION = "navigation"
    INJECTION = "injection"
    DATA_FLOW = "data_flow"
    CONTROL_FLOW = "control_flow"
    PACKAGE_DEPENDENCY = "package_dependency"
    MODULE_DEPENDENCY = "module_dependency"
    LAYER_DEPENDENCY = "layer_dependency"
    FEATURE_DEPENDENCY = "feature_dependency"
    CLUSTER_DEPENDENCY = "cluster_dependency"


class EdgeStyle(str, Enum):
    """Visual edge styles."""
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"
    BOLD = "bold"
    ARROW = "arrow"
    DOUBLE_ARROW = "double_arrow"


class AbstractionLevel(str, Enum):
    """View granularity, coarse to fine."""
    PACKAGE = "package"
    FEATURE = "feature"
    LAYER = "layer"
    CLASS = "class"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)


_LEVEL_ORDER = [
    AbstractionLevel.PACKAGE,
    AbstractionLevel.FEATURE,
    AbstractionLevel.LAYER,
    AbstractionLevel.CLASS,
]

# Abstraction level at which a container type stops being opened.
CONTAINER_LEVELS = {
    NodeType.PACKAGE: AbstractionLevel.PACKAGE,
    NodeType.FEATURE: AbstractionLevel.FEATURE,
    NodeType.LAYER: AbstractionLevel.LAYER,
    NodeType.CLUSTER: AbstractionLevel.CLASS,
    NodeType.CONTAINER: AbstractionLevel.CLASS,
}


@dataclass(frozen=True)
class Point:
    """A 2D coordinate; nodes are positioned by their centre."""
    x: float = 0.0
    y: float = 0.0

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def shifted(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Size:
    """Width/height geometry hint carried by a node."""
    width: float = 160.0
    height: float = 80.0


@dataclass
class Relations:
    """Relations a component declares, used to synthesize children on demand."""
    supertype: str | None = None
    interfaces: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    navigation_targets: list[str] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.supertype or self.interfaces or self.dependencies
                    or self.navigation_targets or self.resources)


@dataclass
class Node:
    """A component in the graph.

    Hierarchy is stored as ids (``parent_id`` / ``children``) so that the
    model stays an arena addressed by id. ``hidden`` is derived from the
    ``expanded`` state of ancestors and maintained by the GraphModel.
    """
    id: str
    name: str = UNKNOWN
    type: NodeType = NodeType.CLASS
    role: NodeRole | None = None
    parent_id: str | None = None
    children: list[str] = field(default_factory=list)
    expandable: bool = False
    expanded: bool = False
    hidden: bool = False
    position: Point = field(default_factory=Point)
    size: Size = field(default_factory=Size)
    component_count: int = 0
    layer: str | None = None
    feature: str | None = None
    package_path: str | None = None
    relations: Relations = field(default_factory=Relations)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.id = str(self.id)
        if not self.name:
            self.name = UNKNOWN

    @property
    def display_name(self) -> str:
        return self.name or self.id or UNKNOWN

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES


def create_package_node(package_path: str) -> Node:
    """Create an expandable package node named after the last path segment."""
    name = package_path.rsplit(".", 1)[-1]
    return Node(id=package_path, name=name, type=NodeType.PACKAGE,
                package_path=package_path, expandable=True)


def create_feature_node(feature_name: str) -> Node:
    return Node(id=f"feature_{feature_name}", name=feature_name, type=NodeType.FEATURE,
                feature=feature_name, expandable=True)


def create_layer_node(layer_name: str) -> Node:
    return Node(id=f"layer_{layer_name}", name=layer_name, type=NodeType.LAYER,
                layer=layer_name, expandable=True)


def create_cluster_node(cluster_id: str, cluster_name: str, base_type: NodeType) -> Node:
    node = Node(id=cluster_id, name=cluster_name, type=NodeType.CLUSTER, expandable=True)
    node.metadata["base_type"] = base_type.value
    return node


@dataclass
class Edge:
    """A directed relationship between two nodes."""
    source_id: str
    target_id: str
    type: EdgeType = EdgeType.DEPENDENCY
    style: EdgeStyle = EdgeStyle.SOLID
    label: str | None = None
    weight: int = 1
    aggregated_relationships: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.weight < 1:
            self.weight = 1

    @property
    def id(self) -> str:
        return edge_id(self.source_id, self.target_id, self.type)

    def add_aggregated_relationship(self, relationship: str) -> None:
        self.aggregated_relationships.append(relationship)
        self.weight = max(1, len(self.aggregated_relationships))


def edge_id(source_id: str, target_id: str, edge_type: EdgeType) -> str:
    """Identity of an edge: one edge per (source, target, type)."""
    return f"{source_id}_to_{target_id}_{EdgeType(edge_type).value}"


# Default visual style for each relationship kind.
DEFAULT_EDGE_STYLES = {
    EdgeType.DEPENDENCY: EdgeStyle.ARROW,
    EdgeType.INHERITANCE: EdgeStyle.SOLID,
    EdgeType.IMPLEMENTATION: EdgeStyle.DASHED,
    EdgeType.NAVIGATION: EdgeStyle.BOLD,
    EdgeType.INJECTION: EdgeStyle.DASHED,
    EdgeType.LAYER_DEPENDENCY: EdgeStyle.DOUBLE_ARROW,
    EdgeType.CLUSTER_DEPENDENCY: EdgeStyle.DOTTED,
}


def create_edge(source_id: str, target_id: str, edge_type: EdgeType,
                label: str | None = None) -> Edge:
    """Create an edge with the default style for its type."""
    style = DEFAULT_EDGE_STYLES.get(edge_type, EdgeStyle.SOLID)
    return Edge(source_id=source_id, target_id=target_id, type=edge_type,
                style=style, label=label)


def create_aggregated_edge(source_id: str, target_id: str,
                           relationships: list[str]) -> Edge:
    """Create one edge summarizing several underlying relationships."""
    return Edge(
        source_id=source_id,
        target_id=target_id,
        type=EdgeType.AGGREGATION,
        style=EdgeStyle.BOLD,
        label=f"{len(relationships)} connections",
        weight=max(1, len(relationships)),
        aggregated_relationships=list(relationships),
    )


@dataclass
class LayoutHints:
    """Layout hints carried by a graph and honoured by the exporters."""
    direction: str = "TB"
    rank_separation: str = "1.0"
    node_separation: str = "1.0"
    enable_clustering: bool = True
    enable_edge_aggregation: bool = False
    theme: str | None = None
