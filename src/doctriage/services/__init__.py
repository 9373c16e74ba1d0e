"""
Business logic services for DocTriage.
"""

from doctriage.services.repository import (
    DocumentRepository,
    InMemoryDocumentRepository,
    JsonFileDocumentRepository,
    get_document_repository,
)
from doctriage.services.document_store import DocumentStore, get_document_store
from doctriage.services.filters import filter_documents, matches_search_query
from doctriage.services.analysis import (
    AnalysisResult,
    DocumentAnalyzer,
    MockDocumentAnalyzer,
    apply_analysis,
    get_document_analyzer,
)
from doctriage.services.archive_loader import ArchiveLoader, get_archive_loader
from doctriage.services.graph_session import GraphSession, HoverState, get_graph_session

__all__ = [
    "DocumentRepository",
    "InMemoryDocumentRepository",
    "JsonFileDocumentRepository",
    "get_document_repository",
    "DocumentStore",
    "get_document_store",
    "filter_documents",
    "matches_search_query",
    "AnalysisResult",
    "DocumentAnalyzer",
    "MockDocumentAnalyzer",
    "apply_analysis",
    "get_document_analyzer",
    "ArchiveLoader",
    "get_archive_loader",
    "GraphSession",
    "HoverState",
    "get_graph_session",
]
