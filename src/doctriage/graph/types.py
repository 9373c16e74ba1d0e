"""Data types for the document relationship graph.

Defines the node, edge and position types shared by the layout solver,
the renderer and the hit-tester, plus projections from review documents.
"""

import math
from dataclasses import dataclass, field
from enum import Enum

from doctriage.models.document import DocumentRelationship, DocumentWithSummary


class RelationshipType(str, Enum):
    """Known relationship tags between documents."""
    REFERENCED = "referenced"
    SIMILAR = "similar"
    SEQUENTIAL = "sequential"


class NodeCategory(str, Enum):
    """Coarse file category used for the node glyph."""
    PDF = "pdf"
    DOC = "doc"
    XLS = "xls"
    EMAIL = "email"
    OTHER = "other"

    @property
    def glyph(self) -> str | None:
        if self is NodeCategory.OTHER:
            return None
        return self.value[:3].upper()


# Checked in order; the first matching category wins.
_CATEGORY_KEYWORDS: list[tuple[NodeCategory, tuple[str, ...]]] = [
    (NodeCategory.PDF, ("pdf",)),
    (NodeCategory.DOC, ("word", "doc")),
    (NodeCategory.XLS, ("xls", "excel", "spreadsheet")),
    (NodeCategory.EMAIL, ("email", "message")),
]


def categorize(file_type: str) -> NodeCategory:
    """Map a free-text file type onto a node category."""
    lowered = (file_type or "").lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return NodeCategory.OTHER


@dataclass
class GraphNode:
    """A document projected for layout and rendering."""
    id: str
    label: str = ""
    category: NodeCategory = NodeCategory.OTHER
    is_current: bool = False
    is_key: bool = False
    is_relevant: bool = False
    is_privileged: bool = False

    def __post_init__(self):
        if not self.label:
            self.label = self.id


@dataclass
class GraphEdge:
    """A relationship between two nodes; attraction ignores direction."""
    source_id: str
    target_id: str
    relationship_type: str = RelationshipType.REFERENCED.value
    strength: float = 1.0

    def __post_init__(self):
        if isinstance(self.relationship_type, RelationshipType):
            self.relationship_type = self.relationship_type.value
        if not 0.0 <= self.strength <= 1.0:
            raise ValueError(f"Edge strength must be within [0, 1], got {self.strength}")


@dataclass(frozen=True)
class Position:
    """A point in viewport space (pixels, y pointing down)."""
    x: float
    y: float

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(self.x - x, self.y - y)


@dataclass
class LayoutResult:
    """Output of one layout pass."""
    width: float
    height: float
    positions: dict[str, Position] = field(default_factory=dict)
    seeds: dict[str, Position] = field(default_factory=dict)
    focus_id: str | None = None

    @property
    def center(self) -> Position:
        return Position(self.width / 2, self.height / 2)

    def __len__(self) -> int:
        return len(self.positions)

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "focus_id": self.focus_id,
            "positions": {
                node_id: {"x": pos.x, "y": pos.y}
                for node_id, pos in self.positions.items()
            },
        }


def node_from_document(document: DocumentWithSummary, current_id: str | None = None) -> GraphNode:
    """Project a review document onto a graph node."""
    return GraphNode(
        id=document.id,
        label=document.file_name,
        category=categorize(document.file_type),
        is_current=document.id == current_id,
        is_key=document.is_key,
        is_relevant=document.is_relevant,
        is_privileged=document.is_privileged,
    )


def edge_from_relationship(relationship: DocumentRelationship) -> GraphEdge:
    """Project a document relationship onto a graph edge."""
    return GraphEdge(
        source_id=relationship.source_id,
        target_id=relationship.target_id,
        relationship_type=relationship.relationship_type,
        strength=relationship.strength,
    )
