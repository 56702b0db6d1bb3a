"""Build a GraphModel from an analysis snapshot.

The snapshot is the hand-off format of the source analysis: a flat list of
node descriptors (with parent ids and declared relations) and a list of
relationship descriptors. It can be passed as plain data or read from a JSON
file.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import HierarchyError, SnapshotError
from .aggregation import aggregate_parallel_edges
from .model import GraphModel
from .models import (
    CONTAINER_TYPES,
    UNKNOWN,
    AbstractionLevel,
    EdgeType,
    LayoutHints,
    Node,
    NodeRole,
    NodeType,
    Relations,
    create_edge,
)

logger = logging.getLogger(__name__)


class NodeDescriptor(BaseModel):
    """One component reported by the source analysis."""

    id: str = Field(description="Unique component identifier")
    name: str | None = Field(default=None, description="Display name")
    type: str = Field(default="class", description="Component kind")
    role: str | None = Field(default=None, description="Architectural role")
    layer: str | None = Field(default=None, description="Layer name reported by the analysis")
    feature: str | None = Field(default=None, description="Feature the component belongs to")
    package_path: str | None = Field(alias="packagePath", default=None)
    parent_id: str | None = Field(alias="parentId", default=None)
    expandable: bool | None = Field(default=None, description="Defaults to True for containers")
    component_count: int | None = Field(alias="componentCount", default=None)
    extends: str | None = Field(default=None, description="Supertype id")
    implements: list[str] = Field(default_factory=list, description="Implemented interface ids")
    dependencies: list[str] = Field(default_factory=list, description="Referenced component ids")
    navigation_targets: list[str] = Field(alias="navigationTargets", default_factory=list)
    resources: list[str] = Field(default_factory=list, description="Referenced layout/resource identifiers")
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)


class RelationshipDescriptor(BaseModel):
    """A directed relationship between two components."""

    source_id: str = Field(alias="sourceId")
    target_id: str = Field(alias="targetId")
    kind: str = Field(default="dependency", description="Relationship kind")
    label: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class LayoutHintsDescriptor(BaseModel):
    """Rendering hints carried by the snapshot."""

    direction: str = "TB"
    rank_separation: str = Field(alias="rankSeparation", default="1.0")
    node_separation: str = Field(alias="nodeSeparation", default="1.0")
    enable_clustering: bool = Field(alias="enableClustering", default=True)
    enable_edge_aggregation: bool = Field(alias="enableEdgeAggregation", default=False)
    theme: str | None = None

    model_config = ConfigDict(populate_by_name=True)

    def to_layout_hints(self) -> LayoutHints:
        direction = self.direction.upper() if self.direction.upper() in ("TB", "LR") else "TB"
        return LayoutHints(
            direction=direction,
            rank_separation=self.rank_separation,
            node_separation=self.node_separation,
            enable_clustering=self.enable_clustering,
            enable_edge_aggregation=self.enable_edge_aggregation,
            theme=self.theme,
        )


class AnalysisSnapshot(BaseModel):
    """Complete hand-off from the source analysis."""

    title: str = UNKNOWN
    abstraction_level: str = Field(alias="abstractionLevel", default="class")
    layout_hints: LayoutHintsDescriptor = Field(alias="layoutHints", default_factory=LayoutHintsDescriptor)
    nodes: list[NodeDescriptor] = Field(default_factory=list)
    relationships: list[RelationshipDescriptor] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


def load_snapshot(snapshot_path: str | Path) -> AnalysisSnapshot:
    """Read and validate a JSON snapshot file.

    Raises:
        SnapshotError: If the file is missing, is not JSON or does not validate
    """
    snapshot_path = Path(snapshot_path)
    if not snapshot_path.exists():
        raise SnapshotError(f"Snapshot file not found: {snapshot_path}")

    try:
        with open(snapshot_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid JSON in snapshot {snapshot_path}: {e}") from e

    try:
        return AnalysisSnapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot {snapshot_path}: {e}") from e


def build_graph(snapshot: AnalysisSnapshot | dict[str, Any], strict_ids: bool = False) -> GraphModel:
    """Populate a GraphModel from a snapshot.

    Args:
        snapshot: Snapshot model or its plain-data form
        strict_ids: Raise on duplicate node ids instead of replacing

    Returns:
        GraphModel with hierarchy, edges and abstraction level applied
    """
    if isinstance(snapshot, dict):
        snapshot = AnalysisSnapshot.model_validate(snapshot)

    level = _parse_enum(AbstractionLevel, snapshot.abstraction_level, AbstractionLevel.CLASS)
    graph = GraphModel(
        title=snapshot.title,
        layout_hints=snapshot.layout_hints.to_layout_hints(),
        abstraction_level=level,
        strict_ids=strict_ids,
    )

    for descriptor in snapshot.nodes:
        graph.add_node(_node_from_descriptor(descriptor))

    # Parents are resolved once every node exists so descriptor order does not matter.
    for descriptor in snapshot.nodes:
        if not descriptor.parent_id:
            continue
        if descriptor.parent_id not in graph:
            logger.debug(f"Unknown parent '{descriptor.parent_id}' for '{descriptor.id}', keeping as root")
            continue
        try:
            graph.attach_child(descriptor.parent_id, descriptor.id)
        except HierarchyError as e:
            logger.warning(f"{e}; keeping '{descriptor.id}' as root")

    counted = {d.id for d in snapshot.nodes if d.component_count is not None}
    for node in graph.all_nodes():
        if node.is_container and node.id not in counted:
            node.component_count = sum(1 for d in graph.descendants(node.id) if not d.children)

    for descriptor in snapshot.nodes:
        _add_declared_edges(graph, descriptor)

    for relationship in snapshot.relationships:
        edge_type = _parse_enum(EdgeType, relationship.kind, EdgeType.DEPENDENCY)
        graph.add_edge(create_edge(relationship.source_id, relationship.target_id,
                                   edge_type, label=relationship.label))

    graph.apply_abstraction_level(level)
    if graph.layout_hints.enable_edge_aggregation:
        aggregate_parallel_edges(graph)

    logger.info(f"Built graph '{graph.title}' with {len(graph)} nodes and {len(graph.edges)} edges")
    return graph


def _node_from_descriptor(descriptor: NodeDescriptor) -> Node:
    node_type = _parse_enum(NodeType, descriptor.type, NodeType.CLASS)
    role = _parse_enum(NodeRole, descriptor.role, None) if descriptor.role else None
    expandable = descriptor.expandable
    if expandable is None:
        expandable = node_type in CONTAINER_TYPES

    return Node(
        id=descriptor.id,
        name=descriptor.name or descriptor.id or UNKNOWN,
        type=node_type,
        role=role,
        expandable=expandable,
        component_count=descriptor.component_count or 0,
        layer=descriptor.layer,
        feature=descriptor.feature,
        package_path=descriptor.package_path,
        relations=Relations(
            supertype=descriptor.extends,
            interfaces=list(descriptor.implements),
            dependencies=list(descriptor.dependencies),
            navigation_targets=list(descriptor.navigation_targets),
            resources=list(descriptor.resources),
        ),
        metadata=dict(descriptor.metadata),
    )


def _add_declared_edges(graph: GraphModel, descriptor: NodeDescriptor) -> None:
    if descriptor.extends:
        graph.add_edge(create_edge(descriptor.id, descriptor.extends, EdgeType.INHERITANCE))
    for interface_id in descriptor.implements:
        graph.add_edge(create_edge(descriptor.id, interface_id, EdgeType.IMPLEMENTATION))
    for dependency_id in descriptor.dependencies:
        graph.add_edge(create_edge(descriptor.id, dependency_id, EdgeType.DEPENDENCY))
    for target_id in descriptor.navigation_targets:
        graph.add_edge(create_edge(descriptor.id, target_id, EdgeType.NAVIGATION))


# Analysis spellings that differ from the enum values after normalization.
_ENUM_ALIASES = {
    "activity_like": "activity",
    "fragment_like": "fragment",
    "viewmodel": "view_model",
    "datasource": "data_source",
}


def _parse_enum(enum_cls, value, default):
    if value is None:
        return default
    key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return enum_cls(_ENUM_ALIASES.get(key, key))
    except ValueError:
        logger.debug(f"Unknown {enum_cls.__name__} value '{value}', using {default}")
        return default
