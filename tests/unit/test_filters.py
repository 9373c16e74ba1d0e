"""Tests for document search and filtering."""

from doctriage.models.document import DocumentStatus, SearchFilters
from doctriage.services.filters import filter_documents, matches_search_query


def _ids(documents):
    return [d.id for d in documents]


class TestMatchesSearchQuery:

    def test_file_name_case_insensitive(self, sample_documents):
        assert matches_search_query(sample_documents[0], "master SERVICES")

    def test_summary_and_key_points(self, sample_documents):
        assert matches_search_query(sample_documents[1], "payment schedule")
        assert matches_search_query(sample_documents[0], "automatic renewal")

    def test_entities_and_tags(self, sample_documents):
        assert matches_search_query(sample_documents[0], "widget")
        assert matches_search_query(sample_documents[0], "delaware")
        assert matches_search_query(sample_documents[3], "jane")
        assert matches_search_query(sample_documents[1], "contract")

    def test_no_match(self, sample_documents):
        assert not matches_search_query(sample_documents[2], "indemnity")


class TestFilterDocuments:

    def test_empty_filters_keep_everything(self, sample_documents):
        assert _ids(filter_documents(sample_documents, SearchFilters())) == ["doc-1", "doc-2", "doc-3", "doc-4"]

    def test_query(self, sample_documents):
        assert _ids(filter_documents(sample_documents, SearchFilters(query="acme"))) == ["doc-1"]

    def test_document_types(self, sample_documents):
        filters = SearchFilters(document_types=["docx", "xlsx"])
        assert _ids(filter_documents(sample_documents, filters)) == ["doc-2", "doc-3"]

    def test_tags_any_match(self, sample_documents):
        filters = SearchFilters(tags=["Agreement", "Missing"])
        assert _ids(filter_documents(sample_documents, filters)) == ["doc-1"]

    def test_status(self, sample_documents):
        filters = SearchFilters(status=[DocumentStatus.UNREAD, DocumentStatus.READ])
        assert _ids(filter_documents(sample_documents, filters)) == ["doc-1", "doc-2", "doc-4"]

    def test_tri_state_flags(self, sample_documents):
        assert _ids(filter_documents(sample_documents, SearchFilters(is_relevant=True))) == ["doc-1", "doc-2"]
        assert _ids(filter_documents(sample_documents, SearchFilters(is_relevant=False))) == ["doc-3", "doc-4"]
        assert _ids(filter_documents(sample_documents, SearchFilters(is_privileged=True))) == ["doc-3"]
        assert _ids(filter_documents(sample_documents, SearchFilters(is_key=False))) == ["doc-2", "doc-3", "doc-4"]

    def test_criteria_combine(self, sample_documents):
        filters = SearchFilters(query="contract", is_key=True)
        assert _ids(filter_documents(sample_documents, filters)) == ["doc-1"]

    def test_camel_case_aliases(self, sample_documents):
        filters = SearchFilters.model_validate({"documentTypes": ["pdf"], "isKey": True})
        assert _ids(filter_documents(sample_documents, filters)) == ["doc-1"]
