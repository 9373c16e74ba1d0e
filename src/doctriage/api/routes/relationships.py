"""
Document relationship routes.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException

from doctriage.models.api import RelationshipRequest
from doctriage.models.document import DocumentRelationship
from doctriage.services.document_store import DocumentStore, get_document_store

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("")
async def list_relationships(
    document_id: str | None = None,
    store: DocumentStore = Depends(get_document_store),
) -> list[dict[str, Any]]:
    """
    List relationships, optionally only those touching one document.
    """
    if document_id is None:
        relationships = store.relationships
    else:
        relationships = store.relationships_for_document(document_id)
    return [r.to_json_dict() for r in relationships]


@router.post("", status_code=201)
async def add_relationship(
    request: RelationshipRequest,
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """
    Record a relationship between two documents.
    """
    for document_id in (request.source_id, request.target_id):
        if store.document_by_id(document_id) is None:
            raise HTTPException(status_code=404, detail=f"Document not found: {document_id}")

    relationship = DocumentRelationship(**request.model_dump())
    store.add_relationship(relationship)

    logger.info(
        "relationship_added",
        source_id=relationship.source_id,
        target_id=relationship.target_id,
        relationship_type=relationship.relationship_type,
    )
    return relationship.to_json_dict()
