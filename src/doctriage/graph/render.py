"""Graph painting onto a 2D drawing surface.

Edges are painted first so nodes sit on top of them. Edge color and dash
pattern encode the relationship type, edge width encodes strength. Node
fill encodes review state with a fixed priority:
current > key > relevant > privileged > default.
"""

from dataclasses import dataclass
from typing import Protocol, Sequence

import structlog

from .types import GraphEdge, GraphNode, LayoutResult, RelationshipType

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Color:
    """An RGBA color; channels 0-255, alpha 0-1."""
    r: int
    g: int
    b: int
    a: float = 1.0

    def as_mpl(self) -> tuple[float, float, float, float]:
        """Color as a matplotlib RGBA tuple."""
        return (self.r / 255, self.g / 255, self.b / 255, self.a)

    def css(self) -> str:
        if self.a == 1.0:
            return f"rgb({self.r}, {self.g}, {self.b})"
        return f"rgba({self.r}, {self.g}, {self.b}, {self.a})"


ACCENT = Color(79, 70, 229)
AMBER = Color(245, 158, 11)
SUCCESS = Color(16, 185, 129)
DANGER = Color(239, 68, 68)
NEUTRAL = Color(107, 114, 128)
WHITE = Color(255, 255, 255)

CURRENT_RADIUS = 12.0
NODE_RADIUS = 8.0
BORDER_WIDTH = 2.0
GLYPH_SIZE = 8.0


@dataclass(frozen=True)
class Glow:
    """Soft shadow drawn around a node."""
    color: Color
    blur: float


CURRENT_GLOW = Glow(color=Color(79, 70, 229, 0.7), blur=12.0)


@dataclass(frozen=True)
class EdgeStyle:
    color: Color
    dash: tuple[float, ...] | None = None


@dataclass(frozen=True)
class NodeStyle:
    fill: Color
    radius: float
    glow: Glow | None = None


EDGE_STYLES: dict[str, EdgeStyle] = {
    RelationshipType.REFERENCED.value: EdgeStyle(Color(75, 85, 99, 0.6), dash=(5.0, 3.0)),
    RelationshipType.SIMILAR.value: EdgeStyle(Color(79, 70, 229, 0.6)),
    RelationshipType.SEQUENTIAL.value: EdgeStyle(Color(16, 185, 129, 0.6)),
}
FALLBACK_EDGE_STYLE = EdgeStyle(Color(107, 114, 128, 0.4))


def edge_style(relationship_type: str) -> EdgeStyle:
    """Stroke color and dash pattern for a relationship tag."""
    return EDGE_STYLES.get(relationship_type, FALLBACK_EDGE_STYLE)


def edge_width(strength: float) -> float:
    """Line width in pixels: 1 at strength 0, 3 at strength 1."""
    return 1 + 2 * strength


def node_style(node: GraphNode) -> NodeStyle:
    """Fill, radius and glow for a node; first matching state wins."""
    if node.is_current:
        return NodeStyle(fill=ACCENT, radius=CURRENT_RADIUS, glow=CURRENT_GLOW)
    if node.is_key:
        fill = AMBER
    elif node.is_relevant:
        fill = SUCCESS
    elif node.is_privileged:
        fill = DANGER
    else:
        fill = NEUTRAL
    return NodeStyle(fill=fill, radius=NODE_RADIUS)


class DrawingSurface(Protocol):
    """Minimal immediate-mode 2D canvas the renderer paints on."""

    def clear(self, width: float, height: float) -> None: ...

    def draw_line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        color: Color,
        width: float,
        dash: tuple[float, ...] | None = None,
    ) -> None: ...

    def draw_circle(
        self,
        x: float,
        y: float,
        radius: float,
        *,
        fill: Color,
        border: Color,
        border_width: float,
        glow: Glow | None = None,
    ) -> None: ...

    def draw_text(self, x: float, y: float, text: str, *, color: Color, size: float) -> None: ...


class GraphRenderer:
    """Paints a laid-out graph onto a drawing surface."""

    def render(
        self,
        surface: DrawingSurface,
        layout: LayoutResult,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
    ) -> None:
        """Clear the surface and paint edges, then nodes.

        Edges or nodes without a computed position are skipped.
        """
        surface.clear(layout.width, layout.height)
        positions = layout.positions

        drawn_edges = 0
        for edge in edges:
            source = positions.get(edge.source_id)
            target = positions.get(edge.target_id)
            if source is None or target is None:
                continue
            style = edge_style(edge.relationship_type)
            surface.draw_line(
                source.x, source.y, target.x, target.y,
                color=style.color,
                width=edge_width(edge.strength),
                dash=style.dash,
            )
            drawn_edges += 1

        drawn_nodes = 0
        for node in nodes:
            pos = positions.get(node.id)
            if pos is None:
                continue
            style = node_style(node)
            surface.draw_circle(
                pos.x, pos.y, style.radius,
                fill=style.fill,
                border=WHITE,
                border_width=BORDER_WIDTH,
                glow=style.glow,
            )
            glyph = node.category.glyph
            if glyph:
                surface.draw_text(pos.x, pos.y, glyph, color=WHITE, size=GLYPH_SIZE)
            drawn_nodes += 1

        logger.debug("graph_rendered", nodes=drawn_nodes, edges=drawn_edges)
