"""Shared pytest fixtures for the DocTriage test suite."""

import random

import pytest

from doctriage.graph.types import (
    GraphEdge,
    GraphNode,
    LayoutResult,
    NodeCategory,
    Position,
)
from doctriage.models.document import (
    DocumentEntities,
    DocumentRelationship,
    DocumentStatus,
    DocumentWithSummary,
    ZipFileMetadata,
)
from doctriage.services.document_store import DocumentStore
from doctriage.services.repository import InMemoryDocumentRepository


# ---------------------------------------------------------------------------
# Singleton cache clearing and data isolation (autouse)
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clear_singletons(tmp_path, monkeypatch):
    """Point storage at a temp dir and clear all @lru_cache singletons."""
    from doctriage.config import get_settings
    from doctriage.services.analysis import get_document_analyzer
    from doctriage.services.archive_loader import get_archive_loader
    from doctriage.services.document_store import get_document_store
    from doctriage.services.graph_session import get_graph_session
    from doctriage.services.repository import get_document_repository

    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))

    caches = [
        get_settings,
        get_document_repository,
        get_document_store,
        get_document_analyzer,
        get_archive_loader,
        get_graph_session,
    ]
    for factory in caches:
        factory.cache_clear()
    yield
    for factory in caches:
        factory.cache_clear()


# ---------------------------------------------------------------------------
# Graph fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def seeded_rng():
    return random.Random(42)


@pytest.fixture
def sample_nodes():
    """Five nodes covering every fill rule and glyph category."""
    return [
        GraphNode(id="a", label="Master Agreement.pdf", category=NodeCategory.PDF, is_current=True),
        GraphNode(id="b", label="Side Letter.docx", category=NodeCategory.DOC, is_key=True),
        GraphNode(id="c", label="Pricing.xlsx", category=NodeCategory.XLS, is_relevant=True),
        GraphNode(id="d", label="Counsel Email", category=NodeCategory.EMAIL, is_privileged=True),
        GraphNode(id="e", label="scan.tiff"),
    ]


@pytest.fixture
def sample_edges():
    """Edges of every known type plus one unrecognized tag."""
    return [
        GraphEdge(source_id="a", target_id="b", relationship_type="similar", strength=0.8),
        GraphEdge(source_id="b", target_id="c", relationship_type="referenced", strength=0.5),
        GraphEdge(source_id="a", target_id="d", relationship_type="sequential", strength=1.0),
        GraphEdge(source_id="c", target_id="e", relationship_type="cites", strength=0.2),
    ]


@pytest.fixture
def node_positions():
    """Well separated positions for the sample nodes in an 800x600 viewport."""
    return {
        "a": Position(400.0, 300.0),
        "b": Position(200.0, 150.0),
        "c": Position(600.0, 150.0),
        "d": Position(200.0, 450.0),
        "e": Position(600.0, 450.0),
    }


class FixedLayout:
    """Layout stub placing nodes at predetermined positions."""

    def __init__(self, positions):
        self.positions = positions
        self.calls = 0

    def compute(self, nodes, edges, width, height, focus_id=None):
        self.calls += 1
        placed = {n.id: self.positions[n.id] for n in nodes if n.id in self.positions}
        if focus_id is None:
            focus_id = next((n.id for n in nodes if n.is_current), None)
        return LayoutResult(
            width=width,
            height=height,
            positions=placed,
            seeds=dict(placed),
            focus_id=focus_id,
        )


@pytest.fixture
def fixed_layout(node_positions):
    return FixedLayout(node_positions)


@pytest.fixture
def make_fixed_layout():
    """Factory for layouts with caller-chosen positions."""
    return FixedLayout


# ---------------------------------------------------------------------------
# Review data fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_documents():
    """Four documents from one archive with varied review state."""
    return [
        DocumentWithSummary(
            id="doc-1",
            file_name="Master Services Agreement.pdf",
            file_type="pdf",
            file_size=20480,
            tags=["Agreement", "Contract"],
            is_key=True,
            is_relevant=True,
            summary="Master agreement between ACME Corp and Widget Inc.",
            key_points=["Term is 24 months with automatic renewal"],
            entities=DocumentEntities(
                people=["John Smith"],
                organizations=["ACME Corp", "Widget Inc"],
                locations=["Delaware"],
            ),
            source_zip_file="production.zip",
        ),
        DocumentWithSummary(
            id="doc-2",
            file_name="Amendment No 1.docx",
            file_type="docx",
            file_size=8192,
            tags=["Contract"],
            status=DocumentStatus.READ,
            is_relevant=True,
            summary="Amends the payment schedule.",
            source_zip_file="production.zip",
        ),
        DocumentWithSummary(
            id="doc-3",
            file_name="Pricing Schedule.xlsx",
            file_type="xlsx",
            file_size=4096,
            is_privileged=True,
            status=DocumentStatus.NEEDS_SECOND_LOOK,
            source_zip_file="production.zip",
        ),
        DocumentWithSummary(
            id="doc-4",
            file_name="Re: termination notice",
            file_type="email",
            file_size=1024,
            entities=DocumentEntities(people=["Jane Doe"]),
            source_zip_file="correspondence.zip",
        ),
    ]


@pytest.fixture
def sample_relationships():
    """Three relationships among the first three documents; doc-4 is isolated."""
    return [
        DocumentRelationship(source_id="doc-1", target_id="doc-2", relationship_type="similar", strength=0.8),
        DocumentRelationship(source_id="doc-2", target_id="doc-3", relationship_type="referenced", strength=0.6),
        DocumentRelationship(source_id="doc-1", target_id="doc-3", relationship_type="sequential", strength=0.9),
    ]


@pytest.fixture
def sample_zip_files():
    """Archive records matching the sample documents' sources."""
    return [
        ZipFileMetadata(file_name="production.zip", document_count=3),
        ZipFileMetadata(file_name="correspondence.zip", document_count=1),
    ]


@pytest.fixture
def repository(sample_documents, sample_relationships):
    repo = InMemoryDocumentRepository()
    repo.upsert_documents(sample_documents)
    repo.upsert_relationships(sample_relationships)
    return repo


@pytest.fixture
def store(repository):
    return DocumentStore(repository)
