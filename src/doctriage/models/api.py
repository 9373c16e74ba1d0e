"""
API request and response models.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from doctriage.models.document import DocumentStatus


# =============================================================================
# Document Models
# =============================================================================


class DocumentUpdateRequest(BaseModel):
    """Partial update of a document's review state."""

    status: DocumentStatus | None = None
    is_relevant: bool | None = None
    is_privileged: bool | None = None
    is_key: bool | None = None
    tags: list[str] | None = Field(
        default=None, description="Replaces the document's tags when given"
    )


class AnnotationRequest(BaseModel):
    """Request model for adding an annotation."""

    text: str = Field(..., min_length=1)
    page_number: int = Field(default=1, ge=1)
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class RelationshipRequest(BaseModel):
    """Request model for recording a relationship."""

    source_id: str
    target_id: str
    relationship_type: str = "referenced"
    strength: float = Field(default=1.0, ge=0.0, le=1.0)


class DocumentListResponse(BaseModel):
    """Filtered document list."""

    documents: list[dict[str, Any]]
    total: int


# =============================================================================
# Archive Models
# =============================================================================


class ArchiveListResponse(BaseModel):
    """Ingested archives and the one currently selected."""

    archives: list[dict[str, Any]]
    current: str | None = None


# =============================================================================
# Graph Models
# =============================================================================


class LayoutNodeResponse(BaseModel):
    """A positioned node with its resolved style."""

    id: str
    label: str
    x: float
    y: float
    radius: float
    fill: str
    glyph: str | None = None
    is_current: bool = False


class LayoutEdgeResponse(BaseModel):
    """An edge with its resolved style."""

    source_id: str
    target_id: str
    relationship_type: str
    strength: float
    color: str
    width: float
    dash: list[float] | None = None


class GraphLayoutResponse(BaseModel):
    """A laid-out relationship graph."""

    width: float
    height: float
    focus_id: str | None = None
    nodes: list[LayoutNodeResponse]
    edges: list[LayoutEdgeResponse]


class HitRequest(BaseModel):
    """A pointer event in the coordinate space of the last returned layout."""

    x: float
    y: float
    event: Literal["click", "move"] = "click"


class HitResponse(BaseModel):
    """Outcome of a pointer event on the graph."""

    event: str
    document_id: str | None = None
    selected: bool = False
    tooltip: str | None = None
    cursor: str


class GraphStatsResponse(BaseModel):
    """Relationship graph statistics."""

    document_count: int
    relationship_count: int
    cluster_count: int
    isolated_documents: list[str]
    relationships_by_type: dict[str, int]
    density: float
    hubs: list[dict[str, Any]] = Field(default_factory=list)
