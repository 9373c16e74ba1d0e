"""
Pydantic models for DocTriage.
"""

from doctriage.models.document import (
    Annotation,
    AnnotationPosition,
    Document,
    DocumentEntities,
    DocumentRelationship,
    DocumentStatus,
    DocumentWithSummary,
    SearchFilters,
    ZipFileMetadata,
    generate_id,
)

__all__ = [
    "Annotation",
    "AnnotationPosition",
    "Document",
    "DocumentEntities",
    "DocumentRelationship",
    "DocumentStatus",
    "DocumentWithSummary",
    "SearchFilters",
    "ZipFileMetadata",
    "generate_id",
]
