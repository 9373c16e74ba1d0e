"""
Document and relationship persistence.

A repository stores documents, relationships and uploaded-archive
metadata. Upserts merge into existing records: documents are keyed by id,
relationships by (source, target, type) and archives by file name.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Protocol

import structlog
from pydantic import ValidationError

from doctriage.config import get_settings
from doctriage.models.document import (
    DocumentRelationship,
    DocumentWithSummary,
    ZipFileMetadata,
)

logger = structlog.get_logger(__name__)


class DocumentRepository(Protocol):
    """Capabilities the review application needs from storage."""

    def list_documents(self) -> list[DocumentWithSummary]: ...

    def get_document(self, document_id: str) -> DocumentWithSummary | None: ...

    def upsert_documents(self, documents: Iterable[DocumentWithSummary]) -> None: ...

    def delete_document(self, document_id: str) -> bool: ...

    def documents_by_source(self, zip_file_name: str) -> list[DocumentWithSummary]: ...

    def list_relationships(self) -> list[DocumentRelationship]: ...

    def upsert_relationships(self, relationships: Iterable[DocumentRelationship]) -> None: ...

    def relationships_for_document(self, document_id: str) -> list[DocumentRelationship]: ...

    def list_zip_files(self) -> list[ZipFileMetadata]: ...

    def upsert_zip_file(self, zip_file: ZipFileMetadata) -> None: ...

    def clear_zip_file(self, zip_file_name: str) -> None: ...

    def clear(self) -> None: ...


def _merge(existing, update):
    """Overlay the explicitly set fields of ``update`` on ``existing``."""
    data = existing.model_dump()
    data.update(update.model_dump(exclude_unset=True))
    return type(existing).model_validate(data)


class InMemoryDocumentRepository:
    """Repository keeping everything in process memory."""

    def __init__(self):
        self._documents: dict[str, DocumentWithSummary] = {}
        self._relationships: list[DocumentRelationship] = []
        self._zip_files: dict[str, ZipFileMetadata] = {}

    # =========================================================================
    # Documents
    # =========================================================================

    def list_documents(self) -> list[DocumentWithSummary]:
        return list(self._documents.values())

    def get_document(self, document_id: str) -> DocumentWithSummary | None:
        return self._documents.get(document_id)

    def upsert_documents(self, documents: Iterable[DocumentWithSummary]) -> None:
        for document in documents:
            existing = self._documents.get(document.id)
            self._documents[document.id] = (
                _merge(existing, document) if existing is not None else document
            )
        self._persist()

    def delete_document(self, document_id: str) -> bool:
        """Delete a document and every relationship touching it."""
        if self._documents.pop(document_id, None) is None:
            return False
        self._relationships = [r for r in self._relationships if not r.involves(document_id)]
        self._persist()
        return True

    def documents_by_source(self, zip_file_name: str) -> list[DocumentWithSummary]:
        return [d for d in self._documents.values() if d.source_zip_file == zip_file_name]

    # =========================================================================
    # Relationships
    # =========================================================================

    def list_relationships(self) -> list[DocumentRelationship]:
        return list(self._relationships)

    def upsert_relationships(self, relationships: Iterable[DocumentRelationship]) -> None:
        index = {rel.key: i for i, rel in enumerate(self._relationships)}
        for rel in relationships:
            position = index.get(rel.key)
            if position is None:
                index[rel.key] = len(self._relationships)
                self._relationships.append(rel)
            else:
                self._relationships[position] = _merge(self._relationships[position], rel)
        self._persist()

    def relationships_for_document(self, document_id: str) -> list[DocumentRelationship]:
        return [r for r in self._relationships if r.involves(document_id)]

    # =========================================================================
    # Archives
    # =========================================================================

    def list_zip_files(self) -> list[ZipFileMetadata]:
        return list(self._zip_files.values())

    def upsert_zip_file(self, zip_file: ZipFileMetadata) -> None:
        existing = self._zip_files.get(zip_file.file_name)
        self._zip_files[zip_file.file_name] = (
            _merge(existing, zip_file) if existing is not None else zip_file
        )
        self._persist()

    def clear_zip_file(self, zip_file_name: str) -> None:
        """Remove an archive, its documents and any now-dangling relationships."""
        self._documents = {
            doc_id: doc
            for doc_id, doc in self._documents.items()
            if doc.source_zip_file != zip_file_name
        }
        remaining = self._documents.keys()
        self._relationships = [
            r for r in self._relationships
            if r.source_id in remaining and r.target_id in remaining
        ]
        self._zip_files.pop(zip_file_name, None)
        self._persist()

    def clear(self) -> None:
        self._documents = {}
        self._relationships = []
        self._zip_files = {}
        self._persist()

    def _persist(self) -> None:
        """Hook for subclasses mirroring state to durable storage."""


class JsonFileDocumentRepository(InMemoryDocumentRepository):
    """
    In-memory repository mirrored to a single JSON file.

    The file is rewritten after every mutation. ``load()`` must be called
    explicitly to read previously saved state.
    """

    def __init__(self, path: Path | str):
        super().__init__()
        self.path = Path(path)

    def load(self) -> "JsonFileDocumentRepository":
        if not self.path.exists():
            logger.debug("store_file_missing", path=str(self.path))
            return self

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            documents = [DocumentWithSummary.model_validate(d) for d in raw.get("documents", [])]
            relationships = [
                DocumentRelationship.model_validate(r) for r in raw.get("relationships", [])
            ]
            zip_files = [ZipFileMetadata.model_validate(z) for z in raw.get("zip_files", [])]
        except (json.JSONDecodeError, ValidationError, AttributeError) as e:
            logger.error("store_load_failed", path=str(self.path), error=str(e))
            raise ValueError(f"Corrupt document store {self.path}: {e}") from e

        self._documents = {d.id: d for d in documents}
        self._relationships = relationships
        self._zip_files = {z.file_name: z for z in zip_files}

        logger.info(
            "store_loaded",
            path=str(self.path),
            documents=len(self._documents),
            relationships=len(self._relationships),
        )
        return self

    def _persist(self) -> None:
        payload = {
            "documents": [d.to_json_dict() for d in self._documents.values()],
            "relationships": [r.to_json_dict() for r in self._relationships],
            "zip_files": [z.to_json_dict() for z in self._zip_files.values()],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


@lru_cache()
def get_document_repository() -> JsonFileDocumentRepository:
    """Get the cached repository backed by the configured store file."""
    settings = get_settings()
    return JsonFileDocumentRepository(settings.store_path).load()
