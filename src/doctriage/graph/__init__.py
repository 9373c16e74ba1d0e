"""Document Relationship Graph Module.

Lays out documents and their relationships with a small force-directed
simulation, paints them onto a drawing surface, and maps pointer events
back to documents.
"""

from .types import (
    RelationshipType,
    NodeCategory,
    GraphNode,
    GraphEdge,
    Position,
    LayoutResult,
    categorize,
    node_from_document,
    edge_from_relationship,
)
from .layout import ForceDirectedLayout, compute_layout
from .render import (
    Color,
    Glow,
    EdgeStyle,
    NodeStyle,
    DrawingSurface,
    GraphRenderer,
    edge_style,
    edge_width,
    node_style,
)
from .hit_test import CLICK_TOLERANCE, HOVER_TOLERANCE, HitTester, hit_test
from .surfaces import (
    InteractiveSurface,
    MatplotlibSurface,
    PointerEvent,
    RecordingSurface,
    Tooltip,
)
from .view import GraphView

__all__ = [
    # Types
    "RelationshipType",
    "NodeCategory",
    "GraphNode",
    "GraphEdge",
    "Position",
    "LayoutResult",
    "categorize",
    "node_from_document",
    "edge_from_relationship",
    # Layout
    "ForceDirectedLayout",
    "compute_layout",
    # Rendering
    "Color",
    "Glow",
    "EdgeStyle",
    "NodeStyle",
    "DrawingSurface",
    "GraphRenderer",
    "edge_style",
    "edge_width",
    "node_style",
    # Interaction
    "CLICK_TOLERANCE",
    "HOVER_TOLERANCE",
    "HitTester",
    "hit_test",
    "InteractiveSurface",
    "MatplotlibSurface",
    "PointerEvent",
    "RecordingSurface",
    "Tooltip",
    "GraphView",
]
