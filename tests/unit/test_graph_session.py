"""Tests for the server-side graph session."""

import pytest

from doctriage.graph.surfaces import DEFAULT_CURSOR, POINTER_CURSOR
from doctriage.graph.types import Position
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


class TestGraphSession:

    def test_refresh_lays_out_store(self, session):
        result = session.refresh(800, 600)
        assert set(result.positions) == {"doc-1", "doc-2", "doc-3", "doc-4"}
        assert session.result is result
        assert session.surface.listener_count == 2

    def test_refresh_focuses_open_document(self, session, store):
        store.set_current_document("doc-2")
        result = session.refresh(800, 600)
        assert result.focus_id == "doc-2"
        assert [n.id for n in session.view.nodes if n.is_current] == ["doc-2"]

    def test_click_opens_document(self, session, store):
        session.refresh(800, 600)
        assert session.click(205.0, 152.0) == "doc-2"
        assert store.current_document.id == "doc-2"

    def test_click_miss(self, session, store):
        session.refresh(800, 600)
        assert session.click(20.0, 20.0) is None
        assert store.current_document is None

    def test_hover(self, session):
        session.refresh(800, 600)
        state = session.hover(600.0, 155.0)
        assert state.node_id == "doc-3"
        assert state.tooltip_text == "Pricing Schedule.xlsx"
        assert state.tooltip_visible
        assert state.cursor == POINTER_CURSOR

        state = session.hover(20.0, 20.0)
        assert state.node_id is None
        assert state.tooltip_text is None
        assert state.cursor == DEFAULT_CURSOR

    def test_events_before_refresh_are_ignored(self, session):
        assert session.click(400.0, 300.0) is None
        assert session.hover(400.0, 300.0).node_id is None

    def test_render_image_requires_layout(self, session):
        with pytest.raises(ValueError):
            session.render_image()

    def test_render_image_png(self, session):
        session.refresh(400, 300)
        assert session.render_image("png").startswith(b"\x89PNG")

    def test_close(self, session):
        session.refresh(800, 600)
        session.close()
        assert session.surface.listener_count == 0

    def test_factory_cached(self):
        assert get_graph_session() is get_graph_session()
