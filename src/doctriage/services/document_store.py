"""
Review session state.

Tracks the documents under review, the currently open document and
archive, and the relationships between documents, on top of an injected
repository.
"""

from functools import lru_cache
from typing import Any

import structlog

from doctriage.graph.network import build_relationship_graph, related_document_ids
from doctriage.graph.types import GraphEdge, GraphNode, edge_from_relationship, node_from_document
from doctriage.models.document import (
    Annotation,
    DocumentRelationship,
    DocumentStatus,
    DocumentWithSummary,
    ZipFileMetadata,
)
from doctriage.services.repository import (
    DocumentRepository,
    InMemoryDocumentRepository,
    get_document_repository,
)

logger = structlog.get_logger(__name__)

# Fields a reviewer may change through ``mark_document_status``.
STATUS_FIELDS = {"is_relevant", "is_privileged", "is_key", "status"}


class DocumentStore:
    """
    Review state for one session.

    Mutations go straight through to the repository; ``current_document``
    is kept in sync when the open document changes or is deleted.
    """

    def __init__(self, repository: DocumentRepository | None = None):
        self.repository = repository or InMemoryDocumentRepository()
        self.current_document: DocumentWithSummary | None = None
        self.current_zip_file: str | None = None

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def documents(self) -> list[DocumentWithSummary]:
        return self.repository.list_documents()

    @property
    def relationships(self) -> list[DocumentRelationship]:
        return self.repository.list_relationships()

    @property
    def document_count(self) -> int:
        return len(self.documents)

    @property
    def has_documents(self) -> bool:
        return self.document_count > 0

    def document_by_id(self, document_id: str) -> DocumentWithSummary | None:
        return self.repository.get_document(document_id)

    @property
    def zip_files(self) -> list[ZipFileMetadata]:
        return self.repository.list_zip_files()

    def has_zip_file(self, file_name: str) -> bool:
        return any(z.file_name == file_name for z in self.zip_files)

    def documents_in_zip_file(self, file_name: str) -> list[DocumentWithSummary]:
        """Documents ingested from one archive."""
        return self.repository.documents_by_source(file_name)

    def relationships_for_document(self, document_id: str) -> list[DocumentRelationship]:
        return self.repository.relationships_for_document(document_id)

    def related_documents(self, document_id: str) -> list[DocumentWithSummary]:
        """Documents sharing a relationship with ``document_id``."""
        documents = self.documents
        graph = build_relationship_graph(
            (d.id for d in documents),
            self.relationships_for_document(document_id),
        )
        related = set(related_document_ids(graph, document_id))
        return [d for d in documents if d.id in related]

    def graph_inputs(self) -> tuple[list[GraphNode], list[GraphEdge]]:
        """Nodes and edges for the relationship graph view."""
        current_id = self.current_document.id if self.current_document else None
        nodes = [node_from_document(d, current_id) for d in self.documents]
        edges = [edge_from_relationship(r) for r in self.relationships]
        return nodes, edges

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_document(self, document: DocumentWithSummary) -> DocumentWithSummary:
        """Add a document, merging into an existing one with the same id."""
        self.repository.upsert_documents([document])
        stored = self.repository.get_document(document.id)
        self._sync_current(stored)
        return stored

    def update_document(self, document_id: str, **updates: Any) -> DocumentWithSummary | None:
        """Apply field updates; unknown ids are ignored."""
        existing = self.repository.get_document(document_id)
        if existing is None:
            logger.debug("update_unknown_document", document_id=document_id)
            return None

        updated = existing.merged(**updates)
        self.repository.upsert_documents([updated])
        self._sync_current(updated)
        return updated

    def delete_document(self, document_id: str) -> bool:
        deleted = self.repository.delete_document(document_id)
        if self.current_document and self.current_document.id == document_id:
            self.current_document = None
        if deleted:
            logger.info("document_deleted", document_id=document_id)
        return deleted

    def set_current_document(self, document: DocumentWithSummary | str | None) -> None:
        if isinstance(document, str):
            document = self.repository.get_document(document)
        self.current_document = document

    def add_relationship(self, relationship: DocumentRelationship) -> None:
        self.repository.upsert_relationships([relationship])

    def clear_documents(self) -> None:
        self.repository.clear()
        self.current_document = None

    def set_current_zip_file(self, file_name: str | None) -> None:
        self.current_zip_file = file_name

    def remove_zip_file(self, file_name: str) -> bool:
        """
        Drop an archive together with the documents ingested from it.

        Returns False when neither an archive record nor any document
        from it exists.
        """
        if not (self.has_zip_file(file_name) or self.documents_in_zip_file(file_name)):
            return False

        self.repository.clear_zip_file(file_name)
        if self.current_zip_file == file_name:
            self.current_zip_file = None
        if self.current_document and self.repository.get_document(self.current_document.id) is None:
            self.current_document = None

        logger.info("archive_removed", archive=file_name)
        return True

    def mark_document_status(self, document_id: str, **status: Any) -> DocumentWithSummary | None:
        """Update review flags and/or status."""
        unknown = set(status) - STATUS_FIELDS
        if unknown:
            raise ValueError(f"Not a status field: {', '.join(sorted(unknown))}")
        if "status" in status:
            status["status"] = DocumentStatus(status["status"])
        return self.update_document(document_id, **status)

    def add_tag(self, document_id: str, tag: str) -> DocumentWithSummary | None:
        document = self.repository.get_document(document_id)
        if document is None:
            return None
        if tag in document.tags:
            return document
        return self.update_document(document_id, tags=[*document.tags, tag])

    def remove_tag(self, document_id: str, tag: str) -> DocumentWithSummary | None:
        document = self.repository.get_document(document_id)
        if document is None:
            return None
        return self.update_document(document_id, tags=[t for t in document.tags if t != tag])

    def add_annotation(
        self,
        document_id: str,
        text: str,
        page_number: int = 1,
        **position: float,
    ) -> Annotation | None:
        document = self.repository.get_document(document_id)
        if document is None:
            return None
        annotation = Annotation(
            document_id=document_id,
            text=text,
            page_number=page_number,
            position=position or {},
        )
        self.update_document(document_id, annotations=[*document.annotations, annotation])
        return annotation

    def _sync_current(self, document: DocumentWithSummary | None) -> None:
        if document and self.current_document and self.current_document.id == document.id:
            self.current_document = document


@lru_cache()
def get_document_store() -> DocumentStore:
    """Get the cached store over the configured repository."""
    return DocumentStore(get_document_repository())
