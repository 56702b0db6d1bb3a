"""Graph model: an id-addressed registry of nodes, edges and hierarchy."""

import logging
from collections.abc import Iterator

from ..errors import DuplicateNodeError, HierarchyError
from .models import (
    CONTAINER_LEVELS,
    UNKNOWN,
    AbstractionLevel,
    Edge,
    LayoutHints,
    Node,
    NodeType,
)

logger = logging.getLogger(__name__)


class GraphModel:
    """Component graph with a parent/child forest and directed edges.

    Nodes are kept in insertion order and addressed by id; hierarchy links
    are ids as well. Edges are kept in insertion order and are identified by
    ``(source, target, type)``.

    Visibility is derived: a node is hidden iff one of its expandable
    ancestors is collapsed. Hidden nodes stay in the model.
    """

    def __init__(self, title: str = UNKNOWN, layout_hints: LayoutHints | None = None,
                 abstraction_level: AbstractionLevel = AbstractionLevel.CLASS,
                 strict_ids: bool = False):
        self.title = title or UNKNOWN
        self.layout_hints = layout_hints or LayoutHints()
        self.abstraction_level = AbstractionLevel(abstraction_level)
        self.strict_ids = strict_ids
        self._nodes: dict[str, Node] = {}
        self._edges: list[Edge] = []
        self._edge_ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))

    @property
    def edges(self) -> list[Edge]:
        return list(self._edges)

    # Nodes

    def add_node(self, node: Node, parent_id: str | None = None) -> Node:
        """Add a node, optionally under a parent.

        A node whose id is already registered replaces the previous one and
        keeps its children (last write wins). With ``strict_ids`` the model
        raises ``DuplicateNodeError`` instead.
        """
        previous = self._nodes.get(node.id)
        if previous is not None:
            if self.strict_ids:
                raise DuplicateNodeError(node.id)
            logger.warning(f"Node id '{node.id}' already exists, replacing it")
            self._unlink_from_parent(previous)
            inherited = [c for c in previous.children if c not in node.children]
            node.children = inherited + list(node.children)

        requested_parent = parent_id if parent_id is not None else node.parent_id
        node.parent_id = None
        self._nodes[node.id] = node

        declared_children = list(node.children)
        node.children = []
        for child_id in declared_children:
            if child_id in self._nodes and child_id != node.id:
                self.attach_child(node.id, child_id)
            else:
                logger.debug(f"Ignoring unknown child '{child_id}' of '{node.id}'")

        if requested_parent is not None:
            if requested_parent in self._nodes:
                self.attach_child(requested_parent, node.id)
            else:
                logger.debug(f"Parent '{requested_parent}' of '{node.id}' not found, adding as root")

        self._refresh_hidden(node.id)
        return node

    def get_node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def all_nodes(self) -> list[Node]:
        return list(self._nodes.values())

    def nodes_by_type(self, node_type: NodeType) -> list[Node]:
        node_type = NodeType(node_type)
        return [n for n in self._nodes.values() if n.type == node_type]

    def root_nodes(self) -> list[Node]:
        return [n for n in self._nodes.values() if n.parent_id is None]

    def remove_node(self, node_id: str) -> bool:
        """Remove a node and every edge incident to it.

        The node is detached from its parent and its children become roots.
        Returns False if the node was not present.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return False

        incident = [e for e in self._edges if e.source_id == node_id or e.target_id == node_id]
        for edge in incident:
            self.remove_edge(edge.id)

        self._unlink_from_parent(node)
        del self._nodes[node_id]

        for child_id in node.children:
            child = self._nodes.get(child_id)
            if child is not None and child.parent_id == node_id:
                child.parent_id = None
                self._refresh_hidden(child_id)
        node.children = []

        logger.debug(f"Removed node '{node_id}' and {len(incident)} incident edges")
        return True

    # Hierarchy

    def attach_child(self, parent_id: str, child_id: str) -> None:
        """Make ``child_id`` a child of ``parent_id``, detaching it from any previous parent."""
        parent = self._nodes.get(parent_id)
        child = self._nodes.get(child_id)
        if parent is None or child is None:
            raise HierarchyError(f"Cannot attach '{child_id}' to '{parent_id}': unknown node")
        if parent_id == child_id or parent_id in self._descendant_ids(child_id):
            raise HierarchyError(f"Attaching '{child_id}' to '{parent_id}' would create a cycle")

        if child.parent_id == parent_id and child_id in parent.children:
            return
        self._unlink_from_parent(child)
        child.parent_id = parent_id
        parent.children.append(child_id)
        self._refresh_hidden(child_id)

    def detach(self, node_id: str) -> None:
        """Turn a node into a root."""
        node = self._nodes.get(node_id)
        if node is None:
            return
        self._unlink_from_parent(node)
        node.parent_id = None
        self._refresh_hidden(node_id)

    def ancestors(self, node_id: str) -> list[Node]:
        """Ancestors of a node, nearest first."""
        result = []
        node = self._nodes.get(node_id)
        while node is not None and node.parent_id is not None:
            node = self._nodes.get(node.parent_id)
            if node is not None:
                result.append(node)
        return result

    def descendants(self, node_id: str) -> list[Node]:
        """Descendants of a node in depth-first pre-order."""
        return [self._nodes[i] for i in self._descendant_ids(node_id)]

    def _descendant_ids(self, node_id: str) -> list[str]:
        result = []
        node = self._nodes.get(node_id)
        if node is None:
            return result
        stack = list(reversed(node.children))
        while stack:
            current_id = stack.pop()
            current = self._nodes.get(current_id)
            if current is None:
                continue
            result.append(current_id)
            stack.extend(reversed(current.children))
        return result

    def _unlink_from_parent(self, node: Node) -> None:
        if node.parent_id is None:
            return
        parent = self._nodes.get(node.parent_id)
        if parent is not None and node.id in parent.children:
            parent.children.remove(node.id)

    # Edges

    def add_edge(self, edge: Edge) -> Edge | None:
        """Add an edge between two existing nodes.

        Returns None without changing the model when an endpoint is missing.
        Adding an edge whose id is already present returns the existing edge.
        """
        if edge.source_id not in self._nodes or edge.target_id not in self._nodes:
            logger.debug(f"Rejecting edge {edge.source_id} -> {edge.target_id}: missing endpoint")
            return None
        if edge.id in self._edge_ids:
            return self.get_edge(edge.id)
        self._edges.append(edge)
        self._edge_ids.add(edge.id)
        return edge

    def get_edge(self, edge_id: str) -> Edge | None:
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    def remove_edge(self, edge_id: str) -> bool:
        if edge_id not in self._edge_ids:
            return False
        self._edges = [e for e in self._edges if e.id != edge_id]
        self._edge_ids.discard(edge_id)
        return True

    def edges_from(self, node_id: str) -> list[Edge]:
        return [e for e in self._edges if e.source_id == node_id]

    def edges_to(self, node_id: str) -> list[Edge]:
        return [e for e in self._edges if e.target_id == node_id]

    # Visibility

    def expand(self, node_id: str) -> bool:
        """Expand a node; returns True if its state changed."""
        return self._set_expanded(node_id, True)

    def collapse(self, node_id: str) -> bool:
        """Collapse a node; returns True if its state changed."""
        return self._set_expanded(node_id, False)

    def _set_expanded(self, node_id: str, expanded: bool) -> bool:
        node = self._nodes.get(node_id)
        if node is None or not node.expandable:
            logger.debug(f"Ignoring expand/collapse of non-expandable node '{node_id}'")
            return False
        if node.expanded == expanded:
            return False
        node.expanded = expanded
        for descendant_id in self._descendant_ids(node_id):
            self._nodes[descendant_id].hidden = self._compute_hidden(descendant_id)
        return True

    def _compute_hidden(self, node_id: str) -> bool:
        return any(a.expandable and not a.expanded for a in self.ancestors(node_id))

    def _refresh_hidden(self, node_id: str) -> None:
        if node_id not in self._nodes:
            return
        for current_id in [node_id] + self._descendant_ids(node_id):
            self._nodes[current_id].hidden = self._compute_hidden(current_id)

    def is_visible(self, node_id: str) -> bool:
        node = self._nodes.get(node_id)
        return node is not None and not node.hidden

    def visible_nodes(self) -> list[Node]:
        return [n for n in self._nodes.values() if not n.hidden]

    def visible_edges(self) -> list[Edge]:
        """Edges whose endpoints are both visible."""
        return [e for e in self._edges
                if self.is_visible(e.source_id) and self.is_visible(e.target_id)]

    def apply_abstraction_level(self, level: AbstractionLevel) -> None:
        """Open containers coarser than ``level`` and close the rest.

        At the class level every container is expanded.
        """
        level = AbstractionLevel(level)
        self.abstraction_level = level
        for node in self._nodes.values():
            container_level = CONTAINER_LEVELS.get(node.type)
            if container_level is None or not node.expandable:
                continue
            if level == AbstractionLevel.CLASS or container_level.rank < level.rank:
                self.expand(node.id)
            else:
                self.collapse(node.id)
        logger.debug(f"Applied abstraction level {level.value}: "
                     f"{len(self.visible_nodes())}/{len(self._nodes)} nodes visible")

    def stats(self) -> dict[str, int]:
        return {
            "nodes": len(self._nodes),
            "edges": len(self._edges),
            "visible_nodes": len(self.visible_nodes()),
            "visible_edges": len(self.visible_edges()),
            "roots": len(self.root_nodes()),
        }
