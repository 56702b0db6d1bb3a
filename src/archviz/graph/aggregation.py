"""Edge aggregation for dense or partly collapsed graphs."""

import logging

from .model import GraphModel
from .models import Edge, EdgeStyle, EdgeType, create_aggregated_edge

logger = logging.getLogger(__name__)


def aggregate_parallel_edges(graph: GraphModel) -> int:
    """Merge edges sharing a (source, target) pair into one aggregation edge.

    Returns the number of aggregation edges created.
    """
    groups: dict[tuple[str, str], list[Edge]] = {}
    for edge in graph.edges:
        groups.setdefault((edge.source_id, edge.target_id), []).append(edge)

    created = 0
    for (source_id, target_id), group in groups.items():
        if len(group) < 2:
            continue
        relationship_ids = []
        for edge in group:
            # An existing aggregation edge contributes what it already summarizes.
            relationship_ids.extend(edge.aggregated_relationships or [edge.id])
            graph.remove_edge(edge.id)
        graph.add_edge(create_aggregated_edge(source_id, target_id, relationship_ids))
        created += 1

    if created:
        logger.debug(f"Aggregated parallel edges into {created} edges")
    return created


def lift_hidden_edges(graph: GraphModel) -> list[Edge]:
    """Edges between visible stand-ins for endpoints hidden inside collapsed containers.

    Each endpoint is replaced by its nearest visible ancestor. Self-loops are
    dropped and parallel lifted edges are merged, with ``weight`` counting the
    underlying relationships. The graph is not modified.
    """
    lifted: dict[tuple[str, str], Edge] = {}
    for edge in graph.edges:
        source = _visible_stand_in(graph, edge.source_id)
        target = _visible_stand_in(graph, edge.target_id)
        if source is None or target is None:
            continue
        if source == edge.source_id and target == edge.target_id:
            continue
        if source == target:
            continue

        key = (source, target)
        if key not in lifted:
            lifted[key] = Edge(source_id=source, target_id=target,
                               type=EdgeType.CLUSTER_DEPENDENCY, style=EdgeStyle.DOTTED)
        lifted[key].add_aggregated_relationship(edge.id)

    for edge in lifted.values():
        if edge.weight > 1:
            edge.label = f"{edge.weight} connections"
    return list(lifted.values())


def _visible_stand_in(graph: GraphModel, node_id: str) -> str | None:
    if graph.is_visible(node_id):
        return node_id
    for ancestor in graph.ancestors(node_id):
        if not ancestor.hidden:
            return ancestor.id
    return None
