"""
Archive ingestion service.

Turns an uploaded ZIP archive into review documents: one document per
archive member, analyzed and related by the configured analyzer, then
persisted together with the archive's metadata. Member contents are not
parsed.
"""

import zipfile
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Callable

import structlog

from doctriage.models.document import (
    DocumentRelationship,
    DocumentWithSummary,
    ZipFileMetadata,
)
from doctriage.services.analysis import DocumentAnalyzer, apply_analysis, get_document_analyzer
from doctriage.services.repository import DocumentRepository, get_document_repository

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int], None]


class ArchiveLoadResult:
    """Documents and relationships produced from one archive."""

    def __init__(
        self,
        zip_file: ZipFileMetadata,
        documents: list[DocumentWithSummary],
        relationships: list[DocumentRelationship],
    ):
        self.zip_file = zip_file
        self.documents = documents
        self.relationships = relationships

    def to_dict(self) -> dict:
        return {
            "zip_file": self.zip_file.to_json_dict(),
            "document_count": len(self.documents),
            "relationship_count": len(self.relationships),
        }


def file_type_for(name: str) -> str:
    """File type from a member's extension, e.g. ``"pdf"``."""
    suffix = PurePosixPath(name).suffix.lower()
    return suffix[1:] if suffix else "unknown"


def _is_document_member(info: zipfile.ZipInfo) -> bool:
    if info.is_dir():
        return False
    parts = PurePosixPath(info.filename).parts
    return not any(part.startswith(".") or part == "__MACOSX" for part in parts)


class ArchiveLoader:
    """Loads ZIP archives into a document repository."""

    def __init__(
        self,
        repository: DocumentRepository | None = None,
        analyzer: DocumentAnalyzer | None = None,
    ):
        self.repository = repository or get_document_repository()
        self.analyzer = analyzer or get_document_analyzer()

    def load_zip(
        self,
        file_path: Path | str,
        progress: ProgressCallback | None = None,
    ) -> ArchiveLoadResult:
        """
        Ingest every document in a ZIP archive.

        Raises:
            FileNotFoundError: if the archive does not exist.
            ValueError: if the file is not a ZIP archive.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Archive not found: {file_path}")
        if not zipfile.is_zipfile(file_path):
            raise ValueError(f"Not a ZIP archive: {file_path.name}")

        report = progress or (lambda _: None)
        report(0)

        with zipfile.ZipFile(file_path) as archive:
            members = [info for info in archive.infolist() if _is_document_member(info)]

        documents = [
            DocumentWithSummary(
                file_name=PurePosixPath(info.filename).name,
                file_type=file_type_for(info.filename),
                file_size=info.file_size,
                source_zip_file=file_path.name,
            )
            for info in members
        ]
        report(20)

        analyzed = []
        for i, document in enumerate(documents, start=1):
            analyzed.append(apply_analysis(document, self.analyzer.analyze(document)))
            report(20 + int(60 * i / len(documents)))

        relationships = self.analyzer.relate([d.id for d in analyzed])
        report(90)

        zip_file = ZipFileMetadata(file_name=file_path.name, document_count=len(analyzed))
        self.repository.upsert_documents(analyzed)
        self.repository.upsert_relationships(relationships)
        self.repository.upsert_zip_file(zip_file)
        report(100)

        logger.info(
            "archive_loaded",
            archive=file_path.name,
            documents=len(analyzed),
            relationships=len(relationships),
        )

        return ArchiveLoadResult(zip_file, analyzed, relationships)


@lru_cache()
def get_archive_loader() -> ArchiveLoader:
    """Get cached archive loader instance."""
    return ArchiveLoader()
