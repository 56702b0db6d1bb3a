"""Geometric collision avoidance shared by the layout strategies."""

import logging
import math
from dataclasses import dataclass

from ..config import CanvasConfig, SpiralConfig
from ..graph.models import Point, Size

logger = logging.getLogger(__name__)

# Extra separation added when pushing a pair apart, so resolved pairs end up
# strictly beyond the minimum distance despite float rounding.
SEPARATION_SLACK = 0.5
GOLDEN_ANGLE = math.pi * (3 - math.sqrt(5))


@dataclass(frozen=True)
class CanvasSize:
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.width / 2, self.height / 2)

    @property
    def area(self) -> float:
        return self.width * self.height


class CollisionResolver:
    """Keeps node centres apart and the canvas large enough to hold them."""

    def __init__(self, spiral: SpiralConfig | None = None, canvas: CanvasConfig | None = None,
                 node_size: Size | None = None):
        self.spiral = spiral or SpiralConfig()
        self.canvas = canvas or CanvasConfig()
        self.node_size = node_size or Size()

    @staticmethod
    def distance(a: Point, b: Point) -> float:
        return a.distance_to(b)

    def is_free(self, candidate: Point, occupied: list[Point], min_distance: float | None = None) -> bool:
        """True if ``candidate`` is farther than ``min_distance`` from every occupied point."""
        if min_distance is None:
            min_distance = self.spiral.min_distance
        return all(candidate.distance_to(p) > min_distance for p in occupied)

    def min_canvas(self) -> CanvasSize:
        return CanvasSize(self.canvas.min_width, self.canvas.min_height)

    def find_free_position(self, occupied: list[Point], canvas: CanvasSize) -> Point:
        """Find a spot for one new node among already placed ones.

        Candidates walk an expanding spiral around the canvas centre; the
        spiral's start depends on how many nodes are already placed so that
        successive additions fan out. When no candidate is free after
        ``max_attempts`` tries, a short repulsion-only relaxation seeded at
        the centre picks the spot.
        """
        center = canvas.center
        count = len(occupied)
        cfg = self.spiral

        for attempt in range(cfg.max_attempts):
            angle = count * cfg.angle_per_node + attempt * cfg.angle_per_attempt
            radius = cfg.base_radius + count * cfg.radius_per_node + attempt * cfg.radius_per_attempt
            candidate = Point(center.x + radius * math.cos(angle),
                              center.y + radius * math.sin(angle))
            if self.is_free(candidate, occupied):
                logger.debug(f"Spiral placement succeeded after {attempt + 1} attempts")
                return candidate

        logger.debug(f"Spiral placement exhausted {cfg.max_attempts} attempts, relaxing")
        return self.relax(center, occupied)

    def relax(self, seed: Point, occupied: list[Point]) -> Point:
        """Push ``seed`` away from occupied points for a few iterations."""
        min_distance = self.spiral.min_distance
        position = seed
        for iteration in range(self.spiral.relaxation_iterations):
            dx_total = 0.0
            dy_total = 0.0
            for index, other in enumerate(occupied):
                d = position.distance_to(other)
                if d >= min_distance + SEPARATION_SLACK:
                    continue
                ux, uy = _unit(position, other, index + iteration)
                push = min_distance + SEPARATION_SLACK - d
                dx_total += ux * push
                dy_total += uy * push
            if dx_total == 0.0 and dy_total == 0.0:
                break
            position = position.shifted(dx_total, dy_total)
        return position

    def resolve_overlaps(self, positions: dict[str, Point], min_distance: float,
                         fixed: set[str] | frozenset[str] = frozenset(),
                         max_iterations: int = 50) -> dict[str, Point]:
        """Separate every pair closer than ``min_distance``.

        Each iteration walks all pairs in order; an overlapping pair is pushed
        apart along the line joining them, split evenly unless one side is
        fixed. Stops early once an iteration finds no overlap. Returns a new
        mapping; fixed points are never moved.
        """
        resolved = dict(positions)
        ids = list(resolved)
        for iteration in range(max_iterations):
            moved = False
            for i in range(len(ids)):
                for j in range(i + 1, len(ids)):
                    a_id, b_id = ids[i], ids[j]
                    a_fixed, b_fixed = a_id in fixed, b_id in fixed
                    if a_fixed and b_fixed:
                        continue
                    a, b = resolved[a_id], resolved[b_id]
                    d = a.distance_to(b)
                    if d >= min_distance:
                        continue

                    ux, uy = _unit(a, b, i * len(ids) + j)
                    overlap = min_distance - d + SEPARATION_SLACK
                    if a_fixed:
                        resolved[b_id] = b.shifted(-ux * overlap, -uy * overlap)
                    elif b_fixed:
                        resolved[a_id] = a.shifted(ux * overlap, uy * overlap)
                    else:
                        half = overlap / 2
                        resolved[a_id] = a.shifted(ux * half, uy * half)
                        resolved[b_id] = b.shifted(-ux * half, -uy * half)
                    moved = True
            if not moved:
                logger.debug(f"Overlaps resolved after {iteration} iterations")
                break
        else:
            logger.debug(f"Overlap resolution stopped after {max_iterations} iterations")
        return resolved

    def fit_canvas(self, positions: dict[str, Point],
                   canvas: CanvasSize) -> tuple[dict[str, Point], CanvasSize]:
        """Grow the canvas until every node box keeps ``padding`` from its edges.

        An axis that is violated grows by ``growth_factor`` (never below the
        minimum floor). Violations on the left or top also shift every
        position by the deficit so coordinates stay non-negative.
        """
        if not positions:
            return dict(positions), canvas

        padding = self.canvas.padding
        half_w = self.node_size.width / 2
        half_h = self.node_size.height / 2
        width, height = canvas.width, canvas.height
        fitted = dict(positions)

        # Each round grows at least one axis geometrically, so this terminates.
        for _ in range(64):
            left = min(p.x for p in fitted.values()) - half_w
            top = min(p.y for p in fitted.values()) - half_h
            right = max(p.x for p in fitted.values()) + half_w
            bottom = max(p.y for p in fitted.values()) + half_h

            violates_x = left < padding or right > width - padding
            violates_y = top < padding or bottom > height - padding
            if not (violates_x or violates_y):
                break

            shift_x = padding - left if left < padding else 0.0
            shift_y = padding - top if top < padding else 0.0
            if shift_x or shift_y:
                fitted = {k: p.shifted(shift_x, shift_y) for k, p in fitted.items()}
            if violates_x:
                width = max(width * self.canvas.growth_factor, self.canvas.min_width)
            if violates_y:
                height = max(height * self.canvas.growth_factor, self.canvas.min_height)
            logger.debug(f"Canvas grown to {width:.0f}x{height:.0f}")

        return fitted, CanvasSize(width, height)


def _unit(a: Point, b: Point, salt: int) -> tuple[float, float]:
    """Unit vector pointing from ``b`` to ``a``; coincident points get a deterministic direction."""
    dx = a.x - b.x
    dy = a.y - b.y
    d = math.hypot(dx, dy)
    if d == 0.0:
        angle = salt * GOLDEN_ANGLE
        return math.cos(angle), math.sin(angle)
    return dx / d, dy / d
