"""Style tables for diagram export.

Node styles are keyed by ``(NodeType, NodeRole)`` and edge styles by
``(EdgeType, EdgeStyle)``. ``None`` in a key position acts as a wildcard, so
each table holds exact entries, role-only (style-only) entries and type-only
entries. Lookups fall through exact → role → type for nodes and
exact → type → style for edges, ending in an explicit unknown bucket.
"""

from dataclasses import dataclass

from ..graph.models import EdgeStyle, EdgeType, NodeRole, NodeType


@dataclass(frozen=True)
class NodeStyle:
    fill: str
    stereotype: str = ""
    shape: str = "box"  # Graphviz shape
    keyword: str = "class"  # PlantUML element keyword


@dataclass(frozen=True)
class EdgeStyleSpec:
    arrow: str  # PlantUML arrow glyph
    dash: str = "solid"  # solid, dashed, dotted or bold
    color: str = "#6b7280"


UNKNOWN_NODE_STYLE = NodeStyle(fill="#9ca3af", stereotype="", shape="box", keyword="class")
UNKNOWN_EDGE_STYLE = EdgeStyleSpec(arrow="-->", dash="solid", color="#6b7280")

NODE_STYLES: dict[tuple[NodeType | None, NodeRole | None], NodeStyle] = {
    # Exact
    (NodeType.INTERFACE, NodeRole.REPOSITORY): NodeStyle("#10b981", "<<REPOSITORY>>", "diamond", "interface"),
    (NodeType.INTERFACE, NodeRole.DATA_SOURCE): NodeStyle("#06b6d4", "<<DATASOURCE>>", "diamond", "interface"),
    (NodeType.SERVICE, NodeRole.NETWORK): NodeStyle("#f59e0b", "<<NETWORK>>", "ellipse"),
    (NodeType.REPOSITORY, NodeRole.REPOSITORY): NodeStyle("#10b981", "<<REPOSITORY>>", "ellipse"),
    # Role
    (None, NodeRole.VIEW): NodeStyle("#3b82f6", "<<VIEW>>"),
    (None, NodeRole.VIEW_MODEL): NodeStyle("#8b5cf6", "<<VIEWMODEL>>"),
    (None, NodeRole.REPOSITORY): NodeStyle("#10b981", "<<REPOSITORY>>"),
    (None, NodeRole.DATA_SOURCE): NodeStyle("#06b6d4", "<<DATASOURCE>>"),
    (None, NodeRole.NETWORK): NodeStyle("#f59e0b", "<<NETWORK>>"),
    (None, NodeRole.DATABASE): NodeStyle("#ef4444", "<<DATABASE>>"),
    (None, NodeRole.BUSINESS_LOGIC): NodeStyle("#6b7280", "<<BUSINESS>>"),
    (None, NodeRole.NAVIGATION): NodeStyle("#14b8a6", "<<NAVIGATION>>"),
    (None, NodeRole.UTILITY): NodeStyle("#9ca3af", "<<UTILITY>>"),
    # Type
    (NodeType.ACTIVITY, None): NodeStyle("#3b82f6", "<<ACTIVITY>>", "rect"),
    (NodeType.FRAGMENT, None): NodeStyle("#8b5cf6", "<<FRAGMENT>>", "rect"),
    (NodeType.VIEW_MODEL, None): NodeStyle("#8b5cf6", "<<VIEWMODEL>>"),
    (NodeType.SERVICE, None): NodeStyle("#10b981", "<<SERVICE>>", "ellipse"),
    (NodeType.REPOSITORY, None): NodeStyle("#06b6d4", "<<REPOSITORY>>", "ellipse"),
    (NodeType.DATA_SOURCE, None): NodeStyle("#06b6d4", "<<DATASOURCE>>", "cylinder"),
    (NodeType.CLASS, None): NodeStyle("#9ca3af"),
    (NodeType.INTERFACE, None): NodeStyle("#e5e7eb", "", "diamond", "interface"),
    (NodeType.ENUM, None): NodeStyle("#fde68a", "", "box", "enum"),
    (NodeType.PACKAGE, None): NodeStyle("#e0f2fe", "<<PACKAGE>>", "folder", "package"),
    (NodeType.FEATURE, None): NodeStyle("#f3e5f5", "<<FEATURE>>", "folder", "rectangle"),
    (NodeType.LAYER, None): NodeStyle("#e8f5e8", "<<LAYER>>", "folder", "frame"),
    (NodeType.CLUSTER, None): NodeStyle("#fff3e0", "<<CLUSTER>>", "folder", "package"),
    (NodeType.CONTAINER, None): NodeStyle("#f5f5f5", "<<CONTAINER>>", "folder", "rectangle"),
}

EDGE_STYLES: dict[tuple[EdgeType | None, EdgeStyle | None], EdgeStyleSpec] = {
    # Exact
    (EdgeType.INHERITANCE, EdgeStyle.BOLD): EdgeStyleSpec("==|>", "bold", "#3b82f6"),
    (EdgeType.DEPENDENCY, EdgeStyle.BOLD): EdgeStyleSpec("==>", "bold", "#6b7280"),
    (EdgeType.DEPENDENCY, EdgeStyle.DASHED): EdgeStyleSpec("..>", "dashed", "#6b7280"),
    (EdgeType.AGGREGATION, EdgeStyle.BOLD): EdgeStyleSpec("==>", "bold", "#6b7280"),
    # Type
    (EdgeType.DEPENDENCY, None): EdgeStyleSpec("-->", "solid", "#6b7280"),
    (EdgeType.INHERITANCE, None): EdgeStyleSpec("--|>", "solid", "#3b82f6"),
    (EdgeType.IMPLEMENTATION, None): EdgeStyleSpec("..|>", "dashed", "#8b5cf6"),
    (EdgeType.COMPOSITION, None): EdgeStyleSpec("*-->", "solid", "#6b7280"),
    (EdgeType.AGGREGATION, None): EdgeStyleSpec("o-->", "solid", "#6b7280"),
    (EdgeType.NAVIGATION, None): EdgeStyleSpec("==>", "bold", "#10b981"),
    (EdgeType.INJECTION, None): EdgeStyleSpec("..>", "dashed", "#f59e0b"),
    (EdgeType.DATA_FLOW, None): EdgeStyleSpec("-->", "solid", "#0ea5e9"),
    (EdgeType.CONTROL_FLOW, None): EdgeStyleSpec("-->", "solid", "#64748b"),
    (EdgeType.PACKAGE_DEPENDENCY, None): EdgeStyleSpec("..>", "dashed", "#06b6d4"),
    (EdgeType.MODULE_DEPENDENCY, None): EdgeStyleSpec("-->", "solid", "#06b6d4"),
    (EdgeType.LAYER_DEPENDENCY, None): EdgeStyleSpec("==>", "bold", "#ef4444"),
    (EdgeType.FEATURE_DEPENDENCY, None): EdgeStyleSpec("..>", "dashed", "#ec4899"),
    (EdgeType.CLUSTER_DEPENDENCY, None): EdgeStyleSpec("..>", "dotted", "#9ca3af"),
    # Style
    (None, EdgeStyle.SOLID): EdgeStyleSpec("-->", "solid"),
    (None, EdgeStyle.ARROW): EdgeStyleSpec("-->", "solid"),
    (None, EdgeStyle.DASHED): EdgeStyleSpec("..>", "dashed"),
    (None, EdgeStyle.DOTTED): EdgeStyleSpec("..>", "dotted"),
    (None, EdgeStyle.BOLD): EdgeStyleSpec("==>", "bold"),
    (None, EdgeStyle.DOUBLE_ARROW): EdgeStyleSpec("<-->", "solid"),
}


def node_style(node_type: NodeType | None, role: NodeRole | None) -> NodeStyle:
    for key in ((node_type, role), (None, role), (node_type, None)):
        if key in NODE_STYLES:
            return NODE_STYLES[key]
    return UNKNOWN_NODE_STYLE


def edge_style(edge_type: EdgeType | None, style: EdgeStyle | None) -> EdgeStyleSpec:
    for key in ((edge_type, style), (edge_type, None), (None, style)):
        if key in EDGE_STYLES:
            return EDGE_STYLES[key]
    return UNKNOWN_EDGE_STYLE
