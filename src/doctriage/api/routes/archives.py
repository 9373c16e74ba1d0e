"""
Archive routes: list, select and remove ingested ZIP files.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException

from doctriage.models.api import ArchiveListResponse, DocumentListResponse
from doctriage.services.document_store import DocumentStore, get_document_store

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("", response_model=ArchiveListResponse)
async def list_archives(
    store: DocumentStore = Depends(get_document_store),
) -> ArchiveListResponse:
    return ArchiveListResponse(
        archives=[z.to_json_dict() for z in store.zip_files],
        current=store.current_zip_file,
    )


@router.get("/{file_name}/documents", response_model=DocumentListResponse)
async def list_archive_documents(
    file_name: str,
    store: DocumentStore = Depends(get_document_store),
) -> DocumentListResponse:
    """
    List the documents ingested from one archive.
    """
    documents = store.documents_in_zip_file(file_name)
    if not documents and not store.has_zip_file(file_name):
        raise HTTPException(status_code=404, detail="Archive not found")

    return DocumentListResponse(
        documents=[d.to_json_dict() for d in documents],
        total=len(documents),
    )


@router.post("/{file_name}/select")
async def select_archive(
    file_name: str,
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """
    Make an archive the current one.
    """
    if not store.has_zip_file(file_name):
        raise HTTPException(status_code=404, detail="Archive not found")

    store.set_current_zip_file(file_name)
    logger.info("archive_selected", archive=file_name)
    return {"current": file_name}


@router.delete("/{file_name}")
async def delete_archive(
    file_name: str,
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """
    Remove an archive and every document ingested from it.
    """
    if not store.remove_zip_file(file_name):
        raise HTTPException(status_code=404, detail="Archive not found")

    return {"deleted": True, "file_name": file_name}
