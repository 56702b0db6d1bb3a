"""Interactive expansion: synthesizing a node's children on demand.

Each node gets an ExpansionController that toggles between collapsed and
expanded. Expanding projects the node's declared relations into child nodes
(structural or surface projection), filters them by the manager's view mode,
and rings them around the parent. Collapsing removes exactly what the
expansion added.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from ..config import ExpansionConfig, Projection, ViewMode
from ..graph.model import GraphModel
from ..graph.models import EdgeType, Node, NodeRole, NodeType, Relations, create_edge
from .base import BUSINESS, DATA, PRESENTATION, classify_layer
from .engine import LayoutEngine

logger = logging.getLogger(__name__)

UI_SUFFIXES = ("Activity", "Fragment", "View", "Screen", "Dialog", "Adapter", "Layout")
UI_TYPES = frozenset({NodeType.ACTIVITY, NodeType.FRAGMENT})

SUPERTYPE = "supertype"
INTERFACE = "interface"
DEPENDENCY = "dependency"
NAVIGATION = "navigation"
RESOURCE = "resource"

RELATION_EDGE_TYPES = {
    SUPERTYPE: EdgeType.INHERITANCE,
    INTERFACE: EdgeType.IMPLEMENTATION,
    DEPENDENCY: EdgeType.DEPENDENCY,
    NAVIGATION: EdgeType.NAVIGATION,
    RESOURCE: EdgeType.COMPOSITION,
}


class ExpansionState(str, Enum):
    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


@dataclass
class ChildCandidate:
    """A related component that may be shown as a synthesized child."""
    ref_id: str
    name: str
    relation: str
    referenced: Node | None = None

    @property
    def edge_type(self) -> EdgeType:
        return RELATION_EDGE_TYPES[self.relation]

    def as_node(self) -> Node:
        """The referenced node, or a stand-in carrying only the name."""
        if self.referenced is not None:
            return self.referenced
        return Node(id=self.ref_id, name=self.name)


def is_ui_facing(graph: GraphModel, ref_id: str) -> bool:
    """True if the referenced component is a screen or other UI element."""
    node = graph.get_node(ref_id)
    if node is not None:
        if node.role == NodeRole.VIEW or node.type in UI_TYPES:
            return True
        return node.display_name.endswith(UI_SUFFIXES)
    return ref_id.endswith(UI_SUFFIXES)


def project_children(graph: GraphModel, node: Node, projection: Projection,
                     view_mode: ViewMode = ViewMode.ALL, limit: int = 12) -> list[ChildCandidate]:
    """Candidate children of ``node`` under one projection.

    Structural: supertype, interfaces, non-UI dependencies.
    Surface: UI dependencies, navigation targets, resources.
    Candidates are deduplicated by display name, filtered by view mode and
    capped at ``limit``.
    """
    relations = node.relations
    refs: list[tuple[str, str]] = []
    if Projection(projection) == Projection.STRUCTURAL:
        if relations.supertype:
            refs.append((relations.supertype, SUPERTYPE))
        refs.extend((ref, INTERFACE) for ref in relations.interfaces)
        refs.extend((ref, DEPENDENCY) for ref in relations.dependencies if not is_ui_facing(graph, ref))
    else:
        refs.extend((ref, DEPENDENCY) for ref in relations.dependencies if is_ui_facing(graph, ref))
        refs.extend((ref, NAVIGATION) for ref in relations.navigation_targets)
        refs.extend((ref, RESOURCE) for ref in relations.resources)

    candidates = []
    seen_names = set()
    for ref_id, relation in refs:
        if ref_id == node.id:
            continue
        referenced = graph.get_node(ref_id)
        name = referenced.display_name if referenced is not None else ref_id
        if name in seen_names:
            continue
        candidate = ChildCandidate(ref_id=ref_id, name=name, relation=relation, referenced=referenced)
        if not _matches_view_mode(candidate, view_mode):
            continue
        seen_names.add(name)
        candidates.append(candidate)
        if len(candidates) >= limit:
            break
    return candidates


def _matches_view_mode(candidate: ChildCandidate, view_mode: ViewMode) -> bool:
    view_mode = ViewMode(view_mode)
    if view_mode == ViewMode.ALL:
        return True
    node = candidate.as_node()
    if view_mode == ViewMode.NAVIGATION:
        return (candidate.relation == NAVIGATION or node.role == NodeRole.NAVIGATION
                or node.type in UI_TYPES)
    layer = classify_layer(node)
    if view_mode == ViewMode.UI:
        return layer == PRESENTATION or candidate.relation in (NAVIGATION, RESOURCE)
    if view_mode == ViewMode.BUSINESS_LOGIC:
        return layer == BUSINESS
    return layer == DATA


class ExpansionController:
    """Collapsed/expanded state machine for one node."""

    def __init__(self, manager: "ExpansionManager", node_id: str,
                 projection: Projection, view_mode: ViewMode):
        self.manager = manager
        self.node_id = node_id
        self.projection = Projection(projection)
        self.view_mode = ViewMode(view_mode)
        self.state = ExpansionState.COLLAPSED
        self.added_node_ids: list[str] = []
        self.added_edge_ids: list[str] = []
        self._opened_node = False

    @property
    def graph(self) -> GraphModel:
        return self.manager.graph

    @property
    def is_expanded(self) -> bool:
        return self.state == ExpansionState.EXPANDED

    def expand(self) -> list[str]:
        """Synthesize children; returns the ids added. No-op when already expanded."""
        if self.is_expanded:
            return []
        node = self.graph.get_node(self.node_id)
        if node is None:
            return []

        config = self.manager.config
        candidates = project_children(self.graph, node, self.projection, self.view_mode,
                                      config.max_children)
        for candidate in candidates:
            child = self._synthesize(node, candidate)
            if child.id in self.graph:
                continue
            self.graph.add_node(child, parent_id=node.id)
            self.added_node_ids.append(child.id)
            edge = create_edge(node.id, child.id, candidate.edge_type)
            if self.graph.add_edge(edge) is edge:
                self.added_edge_ids.append(edge.id)
            self.manager.register(child.id, self.projection, self.view_mode)

        self._opened_node = self.graph.expand(node.id)
        self.manager.engine.place_ring(self.graph, self.added_node_ids, node.position,
                                       config.ring_radius)
        self.state = ExpansionState.EXPANDED
        logger.debug(f"Expanded '{self.node_id}' ({self.projection.value}) "
                     f"with {len(self.added_node_ids)} children")
        return list(self.added_node_ids)

    def collapse(self) -> bool:
        """Remove the synthesized children and their edges. No-op when collapsed."""
        if not self.is_expanded:
            return False

        for child_id in reversed(self.added_node_ids):
            child_controller = self.manager.controllers.get(child_id)
            if child_controller is not None:
                child_controller.collapse()
                self.manager.forget(child_id)
        for edge_id in self.added_edge_ids:
            self.graph.remove_edge(edge_id)
        for child_id in self.added_node_ids:
            self.graph.remove_node(child_id)
        if self._opened_node:
            self.graph.collapse(self.node_id)

        logger.debug(f"Collapsed '{self.node_id}', removed {len(self.added_node_ids)} children")
        self.added_node_ids = []
        self.added_edge_ids = []
        self._opened_node = False
        self.state = ExpansionState.COLLAPSED
        return True

    def toggle(self) -> None:
        if self.is_expanded:
            self.collapse()
        else:
            self.expand()

    def refresh(self) -> None:
        if self.is_expanded:
            self.collapse()
            self.expand()

    def set_projection(self, projection: Projection) -> None:
        projection = Projection(projection)
        if projection == self.projection:
            return
        self.projection = projection
        self.refresh()

    def set_view_mode(self, view_mode: ViewMode) -> None:
        view_mode = ViewMode(view_mode)
        if view_mode == self.view_mode:
            return
        self.view_mode = view_mode
        self.refresh()

    def _synthesize(self, parent: Node, candidate: ChildCandidate) -> Node:
        referenced = candidate.referenced
        relations = Relations()
        if referenced is not None:
            relations = Relations(
                supertype=referenced.relations.supertype,
                interfaces=list(referenced.relations.interfaces),
                dependencies=list(referenced.relations.dependencies),
                navigation_targets=list(referenced.relations.navigation_targets),
                resources=list(referenced.relations.resources),
            )
        return Node(
            id=f"{parent.id}::{candidate.relation}::{candidate.ref_id}",
            name=candidate.name,
            type=referenced.type if referenced is not None else NodeType.CLASS,
            role=referenced.role if referenced is not None else None,
            layer=referenced.layer if referenced is not None else None,
            relations=relations,
            metadata={
                "synthesized": True,
                "relation": candidate.relation,
                "ref_id": candidate.ref_id,
                "projection": self.projection.value,
            },
        )


class ExpansionManager:
    """Owns the expansion controllers of one graph and the ambient view mode."""

    def __init__(self, graph: GraphModel, config: ExpansionConfig | None = None,
                 engine: LayoutEngine | None = None):
        self.graph = graph
        self.config = config or ExpansionConfig()
        self.engine = engine or LayoutEngine()
        self.view_mode = ViewMode(self.config.view_mode)
        self.controllers: dict[str, ExpansionController] = {}

    def controller(self, node_id: str) -> ExpansionController:
        """Controller for ``node_id``, created with the default projection on first use."""
        if node_id not in self.graph:
            raise KeyError(f"Unknown node '{node_id}'")
        if node_id not in self.controllers:
            self.register(node_id, self.config.projection, self.view_mode)
        return self.controllers[node_id]

    def register(self, node_id: str, projection: Projection, view_mode: ViewMode) -> ExpansionController:
        controller = ExpansionController(self, node_id, projection, view_mode)
        self.controllers[node_id] = controller
        return controller

    def forget(self, node_id: str) -> None:
        self.controllers.pop(node_id, None)

    def expand(self, node_id: str) -> list[str]:
        return self.controller(node_id).expand()

    def collapse(self, node_id: str) -> bool:
        return self.controller(node_id).collapse()

    def set_view_mode(self, view_mode: ViewMode) -> None:
        """Change the view mode and refresh every expanded controller."""
        view_mode = ViewMode(view_mode)
        if view_mode == self.view_mode:
            return
        self.view_mode = view_mode
        for node_id in list(self.controllers):
            # A parent's refresh may already have dropped this controller.
            controller = self.controllers.get(node_id)
            if controller is not None:
                controller.set_view_mode(view_mode)
