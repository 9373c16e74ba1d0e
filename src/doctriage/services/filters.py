"""
Document list filtering.
"""

from typing import Iterable

from doctriage.models.document import DocumentWithSummary, SearchFilters


def matches_search_query(document: DocumentWithSummary, query: str) -> bool:
    """
    Case-insensitive substring match of ``query`` against a document.

    Searches file name, summary, key points, people, organizations,
    locations and tags.
    """
    needle = query.lower()

    haystack: list[str] = [document.file_name]
    if document.summary:
        haystack.append(document.summary)
    haystack.extend(document.key_points)
    if document.entities:
        haystack.extend(document.entities.people)
        haystack.extend(document.entities.organizations)
        haystack.extend(document.entities.locations)
    haystack.extend(document.tags)

    return any(needle in text.lower() for text in haystack)


def filter_documents(
    documents: Iterable[DocumentWithSummary],
    filters: SearchFilters,
) -> list[DocumentWithSummary]:
    """Return the documents satisfying every criterion in ``filters``."""
    results = []

    for doc in documents:
        if filters.query and not matches_search_query(doc, filters.query):
            continue

        if filters.document_types and doc.file_type not in filters.document_types:
            continue

        if filters.tags and not any(tag in filters.tags for tag in doc.tags):
            continue

        if filters.status and doc.status not in filters.status:
            continue

        # Tri-state flags: None means "don't care"
        if filters.is_relevant is not None and doc.is_relevant != filters.is_relevant:
            continue
        if filters.is_privileged is not None and doc.is_privileged != filters.is_privileged:
            continue
        if filters.is_key is not None and doc.is_key != filters.is_key:
            continue

        results.append(doc)

    return results
