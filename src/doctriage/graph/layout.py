"""Force-directed layout for the document relationship graph.

A small spring-electric simulation: every pair of nodes repels with
``repulsion / d**2``, every edge pulls its endpoints together with
``attraction * d * strength``, positions are clamped to an inset of the
viewport after each iteration, and an optional focus node is pulled half
way back to the viewport center.

Forces are applied in place, pair by pair, in the caller's node order.
The run is synchronous and bounded (``iterations`` passes of O(n**2)).
"""

import math
import random
from typing import Sequence

import structlog

from doctriage.config import Settings, get_settings
from .types import GraphEdge, GraphNode, LayoutResult, Position

logger = structlog.get_logger(__name__)


class ForceDirectedLayout:
    """Computes node positions within a viewport."""

    def __init__(
        self,
        iterations: int = 30,
        repulsion: float = 300.0,
        attraction: float = 0.05,
        seed_margin: float = 50.0,
        bounds_margin: float = 30.0,
        rng: random.Random | None = None,
    ):
        self.iterations = iterations
        self.repulsion = repulsion
        self.attraction = attraction
        self.seed_margin = seed_margin
        self.bounds_margin = bounds_margin
        self.rng = rng or random.Random()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> "ForceDirectedLayout":
        settings = settings or get_settings()
        if rng is None and settings.layout_seed is not None:
            rng = random.Random(settings.layout_seed)
        return cls(
            iterations=settings.layout_iterations,
            repulsion=settings.layout_repulsion,
            attraction=settings.layout_attraction,
            seed_margin=settings.layout_seed_margin,
            bounds_margin=settings.layout_bounds_margin,
            rng=rng,
        )

    def compute(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        width: float,
        height: float,
        focus_id: str | None = None,
    ) -> LayoutResult:
        """Lay out ``nodes`` inside a ``width`` x ``height`` viewport.

        Args:
            nodes: Nodes to place. Ids are expected to be unique; a repeated
                id keeps its first occurrence.
            edges: Relationships. Edges whose endpoints are not both in
                ``nodes`` are ignored.
            width: Viewport width in pixels.
            height: Viewport height in pixels.
            focus_id: Node to keep near the center. Defaults to the first
                node flagged ``is_current``; ignored if not in ``nodes``.

        Returns:
            LayoutResult with final positions and the initial random draws.
        """
        result = LayoutResult(width=width, height=height)
        if not nodes:
            return result

        order: list[str] = []
        for node in nodes:
            if node.id not in result.seeds:
                order.append(node.id)
                result.seeds[node.id] = Position(*self._random_point(width, height))

        if focus_id is None:
            focus_id = next((n.id for n in nodes if n.is_current), None)
        if focus_id not in result.seeds:
            focus_id = None
        result.focus_id = focus_id

        # Working coordinates, mutated in place every iteration.
        pos = {node_id: [p.x, p.y] for node_id, p in result.seeds.items()}
        center_x, center_y = width / 2, height / 2
        if focus_id is not None:
            pos[focus_id] = [center_x, center_y]

        springs = [
            (pos[e.source_id], pos[e.target_id], e.strength)
            for e in edges
            if e.source_id in pos and e.target_id in pos
        ]
        points = [pos[node_id] for node_id in order]

        for _ in range(self.iterations):
            self._apply_repulsion(points)
            self._apply_attraction(springs)
            self._clamp(points, width, height)
            if focus_id is not None:
                focus = pos[focus_id]
                focus[0] = (focus[0] + center_x) / 2
                focus[1] = (focus[1] + center_y) / 2

        result.positions = {node_id: Position(*pos[node_id]) for node_id in order}

        logger.debug(
            "layout_computed",
            nodes=len(order),
            edges=len(springs),
            skipped_edges=len(edges) - len(springs),
            focus_id=focus_id,
        )
        return result

    def _random_point(self, width: float, height: float) -> tuple[float, float]:
        inset = 2 * self.seed_margin
        return (
            self.rng.random() * (width - inset) + self.seed_margin,
            self.rng.random() * (height - inset) + self.seed_margin,
        )

    def _apply_repulsion(self, points: list[list[float]]) -> None:
        count = len(points)
        for j in range(count):
            p1 = points[j]
            for k in range(j + 1, count):
                p2 = points[k]
                dx = p2[0] - p1[0]
                dy = p2[1] - p1[1]
                distance_sq = dx * dx + dy * dy
                distance = math.sqrt(distance_sq)
                if distance > 0:
                    force = self.repulsion / distance_sq
                    fx = force * dx / distance
                    fy = force * dy / distance
                    p1[0] -= fx
                    p1[1] -= fy
                    p2[0] += fx
                    p2[1] += fy

    def _apply_attraction(self, springs: list[tuple[list[float], list[float], float]]) -> None:
        for p1, p2, strength in springs:
            dx = p2[0] - p1[0]
            dy = p2[1] - p1[1]
            distance = math.sqrt(dx * dx + dy * dy)
            if distance > 0:
                force = self.attraction * distance * strength
                fx = force * dx / distance
                fy = force * dy / distance
                p1[0] += fx
                p1[1] += fy
                p2[0] -= fx
                p2[1] -= fy

    def _clamp(self, points: list[list[float]], width: float, height: float) -> None:
        margin = self.bounds_margin
        for p in points:
            p[0] = max(margin, min(width - margin, p[0]))
            p[1] = max(margin, min(height - margin, p[1]))


def compute_layout(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    width: float,
    height: float,
    focus_id: str | None = None,
    rng: random.Random | None = None,
) -> LayoutResult:
    """Run a layout pass with the configured constants."""
    return ForceDirectedLayout.from_settings(rng=rng).compute(
        nodes, edges, width, height, focus_id=focus_id
    )
