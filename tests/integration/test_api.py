"""Integration tests for FastAPI API endpoints via TestClient."""

import pytest
from fastapi.testclient import TestClient

from doctriage.api.main import create_app
from doctriage.graph.types import Position
from doctriage.services.document_store import get_document_store
from doctriage.services.graph_session import GraphSession, get_graph_session


@pytest.fixture
def doc_positions():
    return {
        "doc-1": Position(400.0, 300.0),
        "doc-2": Position(200.0, 150.0),
        "doc-3": Position(600.0, 150.0),
        "doc-4": Position(200.0, 450.0),
    }


@pytest.fixture
def session(store, make_fixed_layout, doc_positions):
    return GraphSession(store, layout=make_fixed_layout(doc_positions))


@pytest.fixture
def app(store, session):
    app = create_app()
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_graph_session] = lambda: session
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestHealthEndpoints:

    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["name"] == "DocTriage API"
        assert data["version"] == "0.1.0"

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["services"]["analyzer"] is True

    def test_unhandled_error_returns_500(self, app):
        @app.get("/boom")
        async def boom():
            raise RuntimeError("store offline")

        resp = TestClient(app, raise_server_exceptions=False).get("/boom")
        assert resp.status_code == 500
        assert resp.json()["error"] == "Document review request failed"


class TestDocumentEndpoints:

    def test_list(self, client):
        resp = client.get("/api/v1/documents")
        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 4
        assert data["documents"][0]["fileName"] == "Master Services Agreement.pdf"

    def test_list_filters(self, client):
        resp = client.get("/api/v1/documents", params={"is_relevant": "true", "document_type": ["docx"]})
        data = resp.json()
        assert data["total"] == 1
        assert data["documents"][0]["id"] == "doc-2"

    def test_list_query_and_status(self, client):
        resp = client.get("/api/v1/documents", params={"query": "acme"})
        assert [d["id"] for d in resp.json()["documents"]] == ["doc-1"]

        resp = client.get("/api/v1/documents", params={"status": ["Needs Second Look"]})
        assert [d["id"] for d in resp.json()["documents"]] == ["doc-3"]

    def test_list_archive(self, client):
        resp = client.get("/api/v1/documents", params={"archive": "correspondence.zip"})
        assert [d["id"] for d in resp.json()["documents"]] == ["doc-4"]

        resp = client.get("/api/v1/documents", params={"archive": "production.zip", "is_privileged": "true"})
        assert [d["id"] for d in resp.json()["documents"]] == ["doc-3"]

        resp = client.get("/api/v1/documents", params={"archive": "other.zip"})
        assert resp.json()["total"] == 0

    def test_list_invalid_status(self, client):
        resp = client.get("/api/v1/documents", params={"status": ["Done"]})
        assert resp.status_code == 422

    def test_get(self, client):
        resp = client.get("/api/v1/documents/doc-3")
        assert resp.status_code == 200
        assert resp.json()["status"] == "Needs Second Look"

    def test_get_not_found(self, client):
        resp = client.get("/api/v1/documents/nonexistent-999")
        assert resp.status_code == 404

    def test_patch_status_flags_and_tags(self, client, store):
        resp = client.patch(
            "/api/v1/documents/doc-4",
            json={"status": "Reviewed", "is_key": True, "tags": ["Hot"]},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "Reviewed"
        assert data["isKey"] is True
        assert data["tags"] == ["Hot"]
        assert store.document_by_id("doc-4").is_key

    def test_patch_empty_body_returns_document(self, client):
        resp = client.patch("/api/v1/documents/doc-2", json={})
        assert resp.status_code == 200
        assert resp.json()["id"] == "doc-2"

    def test_patch_not_found(self, client):
        resp = client.patch("/api/v1/documents/nope", json={"is_key": True})
        assert resp.status_code == 404

    def test_delete(self, client, store):
        resp = client.delete("/api/v1/documents/doc-2")
        assert resp.status_code == 200
        assert resp.json()["deleted"] is True
        assert store.document_by_id("doc-2") is None
        assert all(not r.involves("doc-2") for r in store.relationships)

        resp = client.delete("/api/v1/documents/doc-2")
        assert resp.status_code == 404

    def test_open_and_current(self, client, store):
        assert client.get("/api/v1/documents/current").status_code == 404
        resp = client.post("/api/v1/documents/doc-3/open")
        assert resp.status_code == 200
        assert store.current_document.id == "doc-3"
        assert client.get("/api/v1/documents/current").json()["id"] == "doc-3"

    def test_annotations(self, client):
        resp = client.post(
            "/api/v1/documents/doc-1/annotations",
            json={"text": "Cap looks low", "page_number": 2, "x": 10, "y": 20},
        )
        assert resp.status_code == 201
        assert resp.json()["pageNumber"] == 2

        resp = client.get("/api/v1/documents/doc-1/annotations")
        assert [a["text"] for a in resp.json()] == ["Cap looks low"]

    def test_annotation_validation(self, client):
        resp = client.post("/api/v1/documents/doc-1/annotations", json={"text": ""})
        assert resp.status_code == 422

    def test_related(self, client):
        resp = client.get("/api/v1/documents/doc-2/related")
        assert {d["id"] for d in resp.json()} == {"doc-1", "doc-3"}


class TestArchiveEndpoints:

    @pytest.fixture(autouse=True)
    def register_archives(self, store, sample_zip_files):
        for zip_file in sample_zip_files:
            store.repository.upsert_zip_file(zip_file)

    def test_list(self, client, store):
        resp = client.get("/api/v1/archives")
        assert resp.status_code == 200
        data = resp.json()
        assert [a["fileName"] for a in data["archives"]] == ["production.zip", "correspondence.zip"]
        assert data["archives"][0]["documentCount"] == 3
        assert data["current"] is None

    def test_select(self, client, store):
        resp = client.post("/api/v1/archives/correspondence.zip/select")
        assert resp.status_code == 200
        assert store.current_zip_file == "correspondence.zip"
        assert client.get("/api/v1/archives").json()["current"] == "correspondence.zip"

    def test_select_unknown(self, client, store):
        resp = client.post("/api/v1/archives/other.zip/select")
        assert resp.status_code == 404
        assert store.current_zip_file is None

    def test_archive_documents(self, client):
        resp = client.get("/api/v1/archives/production.zip/documents")
        assert resp.status_code == 200
        assert [d["id"] for d in resp.json()["documents"]] == ["doc-1", "doc-2", "doc-3"]

        assert client.get("/api/v1/archives/other.zip/documents").status_code == 404

    def test_delete(self, client, store):
        client.post("/api/v1/archives/production.zip/select")
        resp = client.delete("/api/v1/archives/production.zip")
        assert resp.status_code == 200
        assert resp.json()["deleted"] is True
        assert [d.id for d in store.documents] == ["doc-4"]
        assert store.relationships == []
        assert store.current_zip_file is None

        assert client.delete("/api/v1/archives/production.zip").status_code == 404


class TestRelationshipEndpoints:

    def test_list(self, client):
        resp = client.get("/api/v1/relationships")
        assert len(resp.json()) == 3
        assert resp.json()[0]["relationshipType"] == "similar"

    def test_list_for_document(self, client):
        resp = client.get("/api/v1/relationships", params={"document_id": "doc-3"})
        assert len(resp.json()) == 2

    def test_add(self, client, store):
        resp = client.post(
            "/api/v1/relationships",
            json={"source_id": "doc-3", "target_id": "doc-4", "relationship_type": "sequential", "strength": 0.4},
        )
        assert resp.status_code == 201
        assert len(store.relationships_for_document("doc-4")) == 1

    def test_add_unknown_document(self, client):
        resp = client.post("/api/v1/relationships", json={"source_id": "doc-1", "target_id": "ghost"})
        assert resp.status_code == 404

    def test_add_invalid_strength(self, client):
        resp = client.post(
            "/api/v1/relationships",
            json={"source_id": "doc-1", "target_id": "doc-4", "strength": 2},
        )
        assert resp.status_code == 422


class TestGraphEndpoints:

    def test_layout(self, client):
        resp = client.get("/api/v1/graph/layout", params={"width": 800, "height": 600})
        assert resp.status_code == 200
        data = resp.json()
        assert (data["width"], data["height"]) == (800, 600)

        nodes = {n["id"]: n for n in data["nodes"]}
        assert nodes["doc-1"]["fill"] == "rgb(245, 158, 11)"
        assert nodes["doc-1"]["glyph"] == "PDF"
        assert nodes["doc-1"]["radius"] == 8
        assert nodes["doc-4"]["glyph"] == "EMA"

        edges = {(e["source_id"], e["target_id"]): e for e in data["edges"]}
        similar = edges["doc-1", "doc-2"]
        assert similar["width"] == pytest.approx(2.6)
        assert similar["color"] == "rgba(79, 70, 229, 0.6)"
        assert similar["dash"] is None
        assert edges["doc-2", "doc-3"]["dash"] == [5.0, 3.0]

    def test_layout_default_viewport(self, client):
        data = client.get("/api/v1/graph/layout").json()
        assert (data["width"], data["height"]) == (800, 600)

    def test_layout_marks_current(self, client):
        client.post("/api/v1/documents/doc-2/open")
        data = client.get("/api/v1/graph/layout").json()
        nodes = {n["id"]: n for n in data["nodes"]}
        assert data["focus_id"] == "doc-2"
        assert nodes["doc-2"]["is_current"] is True
        assert nodes["doc-2"]["radius"] == 12
        assert nodes["doc-2"]["fill"] == "rgb(79, 70, 229)"

    def test_hit_before_layout(self, client):
        resp = client.post("/api/v1/graph/hit", json={"x": 1, "y": 1})
        assert resp.status_code == 409

    def test_click_opens_document(self, client, store):
        client.get("/api/v1/graph/layout")
        resp = client.post("/api/v1/graph/hit", json={"x": 598, "y": 155, "event": "click"})
        data = resp.json()
        assert data["selected"] is True
        assert data["document_id"] == "doc-3"
        assert store.current_document.id == "doc-3"

    def test_click_miss(self, client):
        client.get("/api/v1/graph/layout")
        data = client.post("/api/v1/graph/hit", json={"x": 5, "y": 5}).json()
        assert data["selected"] is False
        assert data["document_id"] is None

    def test_hover(self, client):
        client.get("/api/v1/graph/layout")
        data = client.post("/api/v1/graph/hit", json={"x": 200, "y": 455, "event": "move"}).json()
        assert data["document_id"] == "doc-4"
        assert data["tooltip"] == "Re: termination notice"
        assert data["cursor"] == "pointer"

        data = client.post("/api/v1/graph/hit", json={"x": 5, "y": 5, "event": "move"}).json()
        assert data["tooltip"] is None
        assert data["cursor"] == "default"

    def test_hover_outside_tolerance(self, client):
        client.get("/api/v1/graph/layout")
        # 11px away: clickable but not hoverable
        data = client.post("/api/v1/graph/hit", json={"x": 411, "y": 300, "event": "move"}).json()
        assert data["document_id"] is None
        data = client.post("/api/v1/graph/hit", json={"x": 411, "y": 300, "event": "click"}).json()
        assert data["document_id"] == "doc-1"

    def test_image(self, client):
        assert client.get("/api/v1/graph/image.png").status_code == 409
        client.get("/api/v1/graph/layout", params={"width": 400, "height": 300})
        resp = client.get("/api/v1/graph/image.png")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert resp.content.startswith(b"\x89PNG")

    def test_stats(self, client):
        resp = client.get("/api/v1/graph/stats")
        assert resp.status_code == 200
        data = resp.json()
        assert data["document_count"] == 4
        assert data["relationship_count"] == 3
        assert data["cluster_count"] == 2
        assert data["isolated_documents"] == ["doc-4"]
        assert len(data["hubs"]) == 4
