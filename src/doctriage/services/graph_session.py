"""
Server-side relationship graph session.

Keeps one ``GraphView`` over a headless recording surface so pointer
coordinates sent by a client can be hit-tested against the layout the
client was given. Clicking a node opens that document in the store.
"""

from dataclasses import dataclass
from functools import lru_cache

import structlog

from doctriage.config import get_settings
from doctriage.graph.layout import ForceDirectedLayout
from doctriage.graph.render import GraphRenderer
from doctriage.graph.surfaces import CLICK_EVENT, MOVE_EVENT, MatplotlibSurface, RecordingSurface
from doctriage.graph.types import LayoutResult
from doctriage.graph.view import GraphView
from doctriage.services.document_store import DocumentStore, get_document_store

logger = structlog.get_logger(__name__)


@dataclass
class HoverState:
    node_id: str | None
    tooltip_text: str | None
    tooltip_visible: bool
    cursor: str


class GraphSession:
    """Relationship graph bound to a document store."""

    def __init__(self, store: DocumentStore, layout: ForceDirectedLayout | None = None):
        settings = get_settings()
        self.store = store
        self.surface = RecordingSurface()
        self.view = GraphView(
            self.surface,
            on_select=self._select,
            layout=layout or ForceDirectedLayout.from_settings(settings),
            stable_layout=settings.layout_stable,
            click_tolerance=settings.click_tolerance,
            hover_tolerance=settings.hover_tolerance,
        )
        self._selected: str | None = None

    @property
    def result(self) -> LayoutResult | None:
        return self.view.result

    def refresh(self, width: float, height: float) -> LayoutResult:
        """Lay out the store's current documents for a viewport."""
        nodes, edges = self.store.graph_inputs()
        return self.view.update(nodes, edges, width, height)

    def click(self, x: float, y: float) -> str | None:
        """Hit-test a click; returns the id of the document it opened."""
        self._selected = None
        self.surface.dispatch(CLICK_EVENT, x, y)
        return self._selected

    def hover(self, x: float, y: float) -> HoverState:
        self.surface.dispatch(MOVE_EVENT, x, y)
        tooltips = self.surface.active_tooltips
        tooltip = tooltips[-1] if tooltips else None
        visible = tooltip is not None and tooltip.visible
        return HoverState(
            node_id=self.view.hovered_id,
            tooltip_text=tooltip.text if visible else None,
            tooltip_visible=visible,
            cursor=self.surface.cursor,
        )

    def render_image(self, fmt: str = "png") -> bytes:
        """Paint the last layout with matplotlib and return the encoded image."""
        result = self.view.result
        if result is None:
            raise ValueError("Graph has not been laid out yet")
        surface = MatplotlibSurface(result.width, result.height, dpi=get_settings().render_dpi)
        GraphRenderer().render(surface, result, self.view.nodes, self.view.edges)
        return surface.to_bytes(fmt)

    def close(self) -> None:
        self.view.dispose()

    def _select(self, document_id: str) -> None:
        self._selected = document_id
        self.store.set_current_document(document_id)
        logger.info("graph_document_selected", document_id=document_id)


@lru_cache()
def get_graph_session() -> GraphSession:
    """Get the cached graph session over the shared document store."""
    return GraphSession(get_document_store())
