"""Spring-embedder layout."""

import logging
import math
import random
import time

from ..graph.model import GraphModel
from ..graph.models import Node, Point
from .base import END_NODE_ID, START_NODE_ID, LayoutResult, LayoutStrategy
from .collision import CanvasSize

logger = logging.getLogger(__name__)

MIN_WIDTH = 1200.0
MIN_HEIGHT = 800.0
WIDTH_PER_NODE = 40.0
HEIGHT_PER_NODE = 30.0


class ForceDirectedLayout(LayoutStrategy):
    """Force-directed placement with inverse-square repulsion and logarithmic springs.

    With ideal length k = sqrt(area / n), every pair of nodes repels with
    k² / d² and every edge pulls its endpoints with k · log(d / k), so edges
    settle near length k. Forces are clamped, velocities damped and positions
    kept inside the canvas. Flow sentinels are pinned at the horizontal
    extremities: they attract the nodes wired to them but never move.

    The run stops after ``iterations``, when the largest displacement drops
    below ``epsilon`` or when ``deadline_seconds`` elapse. A final overlap
    pass keeps every pair at least ``min_distance`` apart.
    """

    @property
    def name(self) -> str:
        return "force_directed"

    def compute_canvas(self, nodes: list[Node], with_sentinels: bool = False) -> CanvasSize:
        n = len(nodes)
        return CanvasSize(max(MIN_WIDTH, WIDTH_PER_NODE * n), max(MIN_HEIGHT, HEIGHT_PER_NODE * n))

    def place(self, graph: GraphModel, nodes: list[Node], canvas: CanvasSize,
              sentinel_edges: list[tuple[str, str]]) -> LayoutResult:
        force = self.config.force
        rng = random.Random(self.config.layout.seed)
        half_w = self.config.layout.node_width / 2
        half_h = self.config.layout.node_height / 2
        padding = self.config.canvas.padding
        min_x, max_x = half_w + padding, canvas.width - half_w - padding
        min_y, max_y = half_h + padding, canvas.height - half_h - padding

        positions = {
            node.id: Point(rng.uniform(min_x, max_x), rng.uniform(min_y, max_y))
            for node in nodes
        }
        fixed = {}
        if sentinel_edges:
            fixed[START_NODE_ID] = Point(min_x, canvas.height / 2)
            fixed[END_NODE_ID] = Point(max_x, canvas.height / 2)

        velocities = {node_id: (0.0, 0.0) for node_id in positions}
        edges = self.visible_edge_pairs(graph) + list(sentinel_edges)
        k = math.sqrt(canvas.area / len(nodes))
        deadline = None
        if force.deadline_seconds is not None:
            deadline = time.monotonic() + force.deadline_seconds

        for iteration in range(force.iterations):
            everything = {**positions, **fixed}
            forces = {node_id: [0.0, 0.0] for node_id in positions}
            ids = list(everything)

            for i in range(len(ids)):
                for j in range(i + 1, len(ids)):
                    a_id, b_id = ids[i], ids[j]
                    ux, uy, d = self._separation(everything[a_id], everything[b_id], i, j)
                    repulsion = k * k / (d * d)
                    self._push(forces, a_id, ux * repulsion, uy * repulsion)
                    self._push(forces, b_id, -ux * repulsion, -uy * repulsion)

            for source_id, target_id in edges:
                if source_id == target_id:
                    continue
                source, target = everything.get(source_id), everything.get(target_id)
                if source is None or target is None:
                    continue
                ux, uy, d = self._separation(source, target, 0, 1)
                # Positive pulls the endpoints together, negative pushes them apart.
                attraction = k * math.log(d / k)
                self._push(forces, source_id, -ux * attraction, -uy * attraction)
                self._push(forces, target_id, ux * attraction, uy * attraction)

            largest_step = 0.0
            for node_id, (fx, fy) in forces.items():
                magnitude = math.hypot(fx, fy)
                if magnitude > force.max_force:
                    fx, fy = fx / magnitude * force.max_force, fy / magnitude * force.max_force
                vx, vy = velocities[node_id]
                vx, vy = (vx + fx) * force.damping, (vy + fy) * force.damping
                velocities[node_id] = (vx, vy)
                old = positions[node_id]
                new = Point(min(max(old.x + vx, min_x), max_x), min(max(old.y + vy, min_y), max_y))
                positions[node_id] = new
                largest_step = max(largest_step, old.distance_to(new))

            if force.epsilon is not None and largest_step < force.epsilon:
                logger.debug(f"Force layout converged after {iteration + 1} iterations")
                break
            if deadline is not None and time.monotonic() > deadline:
                logger.warning(f"Force layout stopped at deadline after {iteration + 1} iterations")
                break

        resolved = self.resolver.resolve_overlaps({**positions, **fixed}, force.min_distance,
                                                  fixed=set(fixed))
        # Overlap resolution ignores the clamp bounds.
        resolved, canvas = self.resolver.fit_canvas(resolved, canvas)
        return LayoutResult(
            strategy=self.name,
            canvas=canvas,
            positions={node_id: resolved[node_id] for node_id in positions},
            sentinel_positions={node_id: resolved[node_id] for node_id in fixed},
            sentinel_edges=list(sentinel_edges),
        )

    def _separation(self, a: Point, b: Point, i: int, j: int) -> tuple[float, float, float]:
        """Unit vector from ``b`` to ``a`` and the floored distance between them."""
        dx, dy = a.x - b.x, a.y - b.y
        d = math.hypot(dx, dy)
        if d == 0.0:
            angle = (i * 31 + j * 17) % 360
            ux, uy = math.cos(math.radians(angle)), math.sin(math.radians(angle))
        else:
            ux, uy = dx / d, dy / d
        return ux, uy, max(d, self.config.force.distance_floor)

    @staticmethod
    def _push(forces: dict[str, list[float]], node_id: str, fx: float, fy: float) -> None:
        # Fixed nodes have no force entry.
        accumulated = forces.get(node_id)
        if accumulated is not None:
            accumulated[0] += fx
            accumulated[1] += fy
