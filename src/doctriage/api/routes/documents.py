"""
Document review routes.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from doctriage.models.api import (
    AnnotationRequest,
    DocumentListResponse,
    DocumentUpdateRequest,
)
from doctriage.models.document import DocumentStatus, SearchFilters
from doctriage.services.document_store import DocumentStore, get_document_store
from doctriage.services.filters import filter_documents

logger = structlog.get_logger(__name__)
router = APIRouter()


def _require(store: DocumentStore, document_id: str):
    document = store.document_by_id(document_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    query: str = Query(default="", description="Free-text search"),
    archive: str | None = Query(default=None, description="Only documents from this archive"),
    document_type: list[str] | None = Query(default=None),
    tag: list[str] | None = Query(default=None),
    status: list[DocumentStatus] | None = Query(default=None),
    is_relevant: bool | None = None,
    is_privileged: bool | None = None,
    is_key: bool | None = None,
    store: DocumentStore = Depends(get_document_store),
) -> DocumentListResponse:
    """
    List documents matching the given filters.
    """
    filters = SearchFilters(
        query=query,
        document_types=document_type,
        tags=tag,
        status=status,
        is_relevant=is_relevant,
        is_privileged=is_privileged,
        is_key=is_key,
    )
    candidates = store.documents_in_zip_file(archive) if archive else store.documents
    documents = filter_documents(candidates, filters)

    return DocumentListResponse(
        documents=[d.to_json_dict() for d in documents],
        total=len(documents),
    )


@router.get("/current")
async def get_current_document(
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """
    Get the document currently open for review.
    """
    if store.current_document is None:
        raise HTTPException(status_code=404, detail="No document is open")
    return store.current_document.to_json_dict()


@router.get("/{document_id}")
async def get_document(
    document_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """
    Get document by ID.
    """
    return _require(store, document_id).to_json_dict()


@router.patch("/{document_id}")
async def update_document(
    document_id: str,
    request: DocumentUpdateRequest,
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """
    Update review status, flags and/or tags of a document.
    """
    _require(store, document_id)

    updates = request.model_dump(exclude_none=True)
    tags = updates.pop("tags", None)

    document = None
    if updates:
        document = store.mark_document_status(document_id, **updates)
    if tags is not None:
        document = store.update_document(document_id, tags=tags)
    if document is None:
        document = store.document_by_id(document_id)

    logger.info("document_updated", document_id=document_id, fields=sorted(request.model_fields_set))
    return document.to_json_dict()


@router.delete("/{document_id}")
async def delete_document(
    document_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """
    Delete a document and its relationships.
    """
    if not store.delete_document(document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return {"document_id": document_id, "deleted": True}


@router.post("/{document_id}/open")
async def open_document(
    document_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """
    Make a document the one currently open for review.
    """
    document = _require(store, document_id)
    store.set_current_document(document)
    return document.to_json_dict()


@router.get("/{document_id}/annotations")
async def list_annotations(
    document_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> list[dict[str, Any]]:
    """
    List annotations on a document.
    """
    document = _require(store, document_id)
    return [a.to_json_dict() for a in document.annotations]


@router.post("/{document_id}/annotations", status_code=201)
async def add_annotation(
    document_id: str,
    request: AnnotationRequest,
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """
    Add an annotation to a document.
    """
    _require(store, document_id)
    annotation = store.add_annotation(
        document_id,
        request.text,
        page_number=request.page_number,
        x=request.x,
        y=request.y,
        width=request.width,
        height=request.height,
    )
    return annotation.to_json_dict()


@router.get("/{document_id}/related")
async def get_related_documents(
    document_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> list[dict[str, Any]]:
    """
    Get documents directly related to a document.
    """
    _require(store, document_id)
    return [d.to_json_dict() for d in store.related_documents(document_id)]
