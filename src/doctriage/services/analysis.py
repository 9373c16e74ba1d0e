"""
Document analysis service.

Analysis is behind the ``DocumentAnalyzer`` protocol so a real
summarization / entity extraction / relationship inference backend can be
substituted without touching callers. ``MockDocumentAnalyzer`` produces
placeholder output with the same shape.
"""

import random
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Protocol, Sequence

import structlog

from doctriage.config import get_settings
from doctriage.graph.types import RelationshipType
from doctriage.models.document import (
    DocumentEntities,
    DocumentRelationship,
    DocumentWithSummary,
)

logger = structlog.get_logger(__name__)


@dataclass
class AnalysisResult:
    """Output of analyzing a single document."""
    document_id: str
    summary: str
    key_points: list[str] = field(default_factory=list)
    entities: DocumentEntities = field(default_factory=DocumentEntities)
    is_relevant: bool | None = None
    is_privileged: bool | None = None
    is_key: bool | None = None
    suggested_tags: list[str] = field(default_factory=list)


class DocumentAnalyzer(Protocol):
    """Pluggable analysis backend."""

    def analyze(self, document: DocumentWithSummary) -> AnalysisResult: ...

    def relate(self, document_ids: Sequence[str]) -> list[DocumentRelationship]: ...

    def health_check(self) -> bool: ...


class MockDocumentAnalyzer:
    """
    Placeholder analyzer returning canned legal-document output.

    Review flags and relationships are randomized; pass a seeded
    ``random.Random`` for reproducible output.
    """

    SUMMARY = "This document appears to be a legal agreement outlining terms between parties."
    KEY_POINTS = [
        "Agreement dated January, 2023",
        "Parties include ACME Corp and Widget Inc",
        "Term is 24 months with automatic renewal",
        "Early termination requires 30 days notice",
    ]
    ENTITIES = {
        "people": ["John Smith", "Jane Doe", "Robert Johnson"],
        "organizations": ["ACME Corp", "Widget Inc", "Legal Dept"],
        "dates": ["January 15, 2023", "December 31, 2024"],
        "locations": ["New York", "Delaware"],
    }
    SUGGESTED_TAGS = ["Agreement", "Contract", "Important"]

    def __init__(
        self,
        rng: random.Random | None = None,
        relationship_probability: float = 0.3,
    ):
        self.rng = rng or random.Random()
        self.relationship_probability = relationship_probability

    def analyze(self, document: DocumentWithSummary) -> AnalysisResult:
        logger.debug("analyzing_document", document_id=document.id, file_type=document.file_type)
        return AnalysisResult(
            document_id=document.id,
            summary=self.SUMMARY,
            key_points=list(self.KEY_POINTS),
            entities=DocumentEntities(**self.ENTITIES),
            is_relevant=self.rng.random() > 0.3,
            is_privileged=self.rng.random() > 0.7,
            is_key=self.rng.random() > 0.8,
            suggested_tags=list(self.SUGGESTED_TAGS),
        )

    def relate(self, document_ids: Sequence[str]) -> list[DocumentRelationship]:
        """Randomly relate each unordered pair of documents."""
        types = list(RelationshipType)
        relationships = []

        for i, source_id in enumerate(document_ids):
            for target_id in document_ids[i + 1:]:
                if self.rng.random() < self.relationship_probability:
                    relationships.append(DocumentRelationship(
                        source_id=source_id,
                        target_id=target_id,
                        relationship_type=self.rng.choice(types).value,
                        strength=self.rng.random() * 0.5 + 0.5,
                    ))

        logger.debug("relationships_inferred", documents=len(document_ids), relationships=len(relationships))
        return relationships

    def health_check(self) -> bool:
        return True


def apply_analysis(document: DocumentWithSummary, analysis: AnalysisResult) -> DocumentWithSummary:
    """Return ``document`` updated with an analysis result."""
    updates = {
        "summary": analysis.summary,
        "key_points": analysis.key_points,
        "entities": analysis.entities,
        "tags": list(dict.fromkeys([*document.tags, *analysis.suggested_tags])),
    }
    for flag in ("is_relevant", "is_privileged", "is_key"):
        value = getattr(analysis, flag)
        if value is not None:
            updates[flag] = value
    return document.merged(**updates)


@lru_cache()
def get_document_analyzer() -> MockDocumentAnalyzer:
    """Get cached analyzer instance."""
    settings = get_settings()
    rng = random.Random(settings.analysis_seed) if settings.analysis_seed is not None else None
    return MockDocumentAnalyzer(
        rng=rng,
        relationship_probability=settings.analysis_relationship_probability,
    )
