"""Interactive relationship graph view.

Wires the layout solver, renderer and hit-tester to a surface's pointer
events. Positions are only recomputed when the structural inputs (node
ids, edges, viewport, focus) change; clicks and hovers hit-test against
the last computed layout. Every listener and tooltip created in
``update`` is torn down before the next update and on ``dispose``.

The node the layout centred is the only one drawn and hit-tested as
current, so an explicit focus overrides the nodes' own ``is_current``
flags.
"""

from dataclasses import replace
from typing import Any, Callable, Sequence

import structlog

from .hit_test import CLICK_TOLERANCE, HOVER_TOLERANCE, HitTester
from .layout import ForceDirectedLayout
from .render import GraphRenderer
from .surfaces import (
    CLICK_EVENT,
    DEFAULT_CURSOR,
    MOVE_EVENT,
    POINTER_CURSOR,
    InteractiveSurface,
    PointerEvent,
    Tooltip,
)
from .types import GraphEdge, GraphNode, LayoutResult

logger = structlog.get_logger(__name__)

TOOLTIP_OFFSET_Y = 30.0


class GraphView:
    """Owns one surface's graph, its listeners and its tooltip."""

    def __init__(
        self,
        surface: InteractiveSurface,
        on_select: Callable[[str], None],
        layout: ForceDirectedLayout | None = None,
        renderer: GraphRenderer | None = None,
        stable_layout: bool = True,
        click_tolerance: float = CLICK_TOLERANCE,
        hover_tolerance: float = HOVER_TOLERANCE,
    ):
        self.surface = surface
        self.on_select = on_select
        self.layout = layout or ForceDirectedLayout.from_settings()
        self.renderer = renderer or GraphRenderer()
        self.stable_layout = stable_layout
        self.click_tolerance = click_tolerance
        self.hover_tolerance = hover_tolerance

        self._result: LayoutResult | None = None
        self._layout_key: tuple | None = None
        self._nodes: list[GraphNode] = []
        self._edges: list[GraphEdge] = []
        self._hit_tester: HitTester | None = None
        self._handles: list[Any] = []
        self._tooltip: Tooltip | None = None
        self.hovered_id: str | None = None

    @property
    def result(self) -> LayoutResult | None:
        """The last computed layout."""
        return self._result

    @property
    def nodes(self) -> list[GraphNode]:
        """Nodes as last drawn, with ``is_current`` set only on the focus."""
        return self._nodes

    @property
    def edges(self) -> list[GraphEdge]:
        return self._edges

    @property
    def is_mounted(self) -> bool:
        return bool(self._handles)

    def update(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        width: float,
        height: float,
        focus_id: str | None = None,
    ) -> LayoutResult:
        """Lay out (if needed), paint and (re)attach listeners."""
        self.dispose()

        key = _layout_key(nodes, edges, width, height, focus_id)
        if self.stable_layout and self._result is not None and key == self._layout_key:
            result = self._result
            logger.debug("layout_reused", nodes=len(nodes))
        else:
            result = self.layout.compute(nodes, edges, width, height, focus_id=focus_id)
        self._result = result
        self._layout_key = key

        nodes = _mark_focus(nodes, result.focus_id)
        self._nodes = nodes
        self._edges = list(edges)
        self.renderer.render(self.surface, result, nodes, edges)
        if not nodes:
            return result

        self._hit_tester = HitTester(
            nodes,
            result.positions,
            click_tolerance=self.click_tolerance,
            hover_tolerance=self.hover_tolerance,
        )
        self._handles = [
            self.surface.add_listener(CLICK_EVENT, self._handle_click),
            self.surface.add_listener(MOVE_EVENT, self._handle_move),
        ]
        self._tooltip = self.surface.create_tooltip()
        return result

    def dispose(self) -> None:
        """Remove listeners and the tooltip. Safe to call repeatedly."""
        for handle in self._handles:
            self.surface.remove_listener(handle)
        self._handles = []
        if self._tooltip is not None:
            self._tooltip.remove()
            self._tooltip = None
        self._hit_tester = None
        self.hovered_id = None

    def _handle_click(self, event: PointerEvent) -> None:
        if self._hit_tester is None:
            return
        node = self._hit_tester.at_click(event.x, event.y)
        if node is not None:
            logger.debug("graph_node_selected", node_id=node.id)
            self.on_select(node.id)

    def _handle_move(self, event: PointerEvent) -> None:
        if self._hit_tester is None or self._tooltip is None:
            return
        node = self._hit_tester.at_hover(event.x, event.y)
        self.hovered_id = node.id if node is not None else None
        if node is not None:
            self._tooltip.show(node.label, event.x, event.y - TOOLTIP_OFFSET_Y)
            self.surface.set_cursor(POINTER_CURSOR)
        else:
            self._tooltip.hide()
            self.surface.set_cursor(DEFAULT_CURSOR)


def _mark_focus(nodes: Sequence[GraphNode], focus_id: str | None) -> list[GraphNode]:
    return [
        node if node.is_current == (node.id == focus_id) else replace(node, is_current=node.id == focus_id)
        for node in nodes
    ]


def _layout_key(nodes, edges, width, height, focus_id) -> tuple:
    if focus_id is None:
        focus_id = next((n.id for n in nodes if n.is_current), None)
    return (
        tuple(n.id for n in nodes),
        tuple((e.source_id, e.target_id, e.relationship_type, e.strength) for e in edges),
        width,
        height,
        focus_id,
    )
