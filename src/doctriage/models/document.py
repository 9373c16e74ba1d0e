"""
Document review models.

Documents extracted from an uploaded archive, their annotations, the
analysis attached to them, and the relationships between documents.
Field names are snake_case in Python; the camelCase keys used by the
review front end are accepted as aliases and used for serialization.
"""

import random
import string
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id() -> str:
    """Generate a unique document identifier."""
    return "id_" + "".join(random.choices(_ID_ALPHABET, k=22))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model accepting both snake_case names and camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_json_dict(self) -> dict:
        """Serialize using camelCase keys and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)


class DocumentStatus(str, Enum):
    """Review status of a document."""

    UNREAD = "Unread"
    READ = "Read"
    NEEDS_SECOND_LOOK = "Needs Second Look"
    REVIEWED = "Reviewed"


class AnnotationPosition(CamelModel):
    """Rectangle an annotation is anchored to on its page."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class Annotation(CamelModel):
    """A reviewer note attached to a document page."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    document_id: str
    text: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=_utcnow)
    page_number: int = Field(default=1, ge=1)
    position: AnnotationPosition = Field(default_factory=AnnotationPosition)


class DocumentEntities(CamelModel):
    """Named entities found in a document."""

    people: list[str] = Field(default_factory=list)
    organizations: list[str] = Field(default_factory=list)
    dates: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)


class Document(CamelModel):
    """A single document extracted from an uploaded archive."""

    id: str = Field(default_factory=generate_id)
    file_name: str
    file_type: str = ""
    upload_date: datetime = Field(default_factory=_utcnow)
    file_size: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)
    status: DocumentStatus = DocumentStatus.UNREAD
    is_relevant: bool = False
    is_privileged: bool = False
    is_key: bool = False
    annotations: list[Annotation] = Field(default_factory=list)
    source_zip_file: str | None = None


class DocumentWithSummary(Document):
    """A document together with its analysis output."""

    summary: str | None = None
    key_points: list[str] = Field(default_factory=list)
    entities: DocumentEntities | None = None
    related_documents: list[str] = Field(default_factory=list)

    def merged(self, **updates) -> "DocumentWithSummary":
        """Return a copy with the given fields replaced (validated)."""
        data = self.model_dump()
        data.update(updates)
        return DocumentWithSummary.model_validate(data)


class DocumentRelationship(CamelModel):
    """A typed, weighted relationship between two documents."""

    source_id: str
    target_id: str
    relationship_type: str = "referenced"
    strength: float = Field(default=1.0, ge=0.0, le=1.0)

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used when upserting relationships."""
        return (self.source_id, self.target_id, self.relationship_type)

    def involves(self, document_id: str) -> bool:
        """Whether either endpoint is the given document."""
        return document_id in (self.source_id, self.target_id)


class SearchFilters(CamelModel):
    """Criteria for narrowing the document list."""

    query: str = ""
    document_types: list[str] | None = None
    tags: list[str] | None = None
    status: list[DocumentStatus] | None = None
    is_relevant: bool | None = None
    is_privileged: bool | None = None
    is_key: bool | None = None


class ZipFileMetadata(CamelModel):
    """Bookkeeping for an uploaded archive."""

    id: str = Field(default_factory=generate_id)
    file_name: str
    upload_date: datetime = Field(default_factory=_utcnow)
    document_count: int = Field(default=0, ge=0)
