"""Drawing surfaces for the relationship graph.

``RecordingSurface`` keeps an in-memory display list and dispatches
synthetic pointer events; it backs headless rendering and the API.
``MatplotlibSurface`` paints onto a matplotlib figure whose axes map one
data unit to one pixel with the y axis pointing down, so layout
coordinates can be used unchanged.
"""

import io
import itertools
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Protocol

import structlog

from .render import Color, DrawingSurface, Glow

logger = structlog.get_logger(__name__)

CLICK_EVENT = "click"
MOVE_EVENT = "move"
POINTER_CURSOR = "pointer"
DEFAULT_CURSOR = "default"


@dataclass(frozen=True)
class PointerEvent:
    """A pointer event in surface coordinates."""
    x: float
    y: float


PointerHandler = Callable[[PointerEvent], None]


class Tooltip(Protocol):
    def show(self, text: str, x: float, y: float) -> None: ...

    def hide(self) -> None: ...

    def remove(self) -> None: ...


class InteractiveSurface(DrawingSurface, Protocol):
    """A drawing surface that also delivers pointer events."""

    def add_listener(self, event: str, handler: PointerHandler) -> Any: ...

    def remove_listener(self, handle: Any) -> None: ...

    def set_cursor(self, cursor: str) -> None: ...

    def create_tooltip(self) -> Tooltip: ...


# =============================================================================
# Recording surface
# =============================================================================


@dataclass
class DrawOp:
    """One recorded drawing call."""
    kind: str  # "line", "circle" or "text"
    params: dict = field(default_factory=dict)


@dataclass
class RecordingTooltip:
    text: str = ""
    x: float = 0.0
    y: float = 0.0
    visible: bool = False
    removed: bool = False

    def show(self, text: str, x: float, y: float) -> None:
        self.text = text
        self.x = x
        self.y = y
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def remove(self) -> None:
        self.visible = False
        self.removed = True


class RecordingSurface:
    """Headless surface recording every drawing call."""

    def __init__(self, width: float = 0, height: float = 0):
        self.width = width
        self.height = height
        self.operations: list[DrawOp] = []
        self.clear_count = 0
        self.cursor = DEFAULT_CURSOR
        self.tooltips: list[RecordingTooltip] = []
        self._listeners: dict[int, tuple[str, PointerHandler]] = {}
        self._handles = itertools.count(1)

    # -- drawing --------------------------------------------------------------

    def clear(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.operations = []
        self.clear_count += 1

    def draw_line(self, x1, y1, x2, y2, *, color, width, dash=None) -> None:
        self.operations.append(DrawOp("line", {
            "start": (x1, y1), "end": (x2, y2),
            "color": color, "width": width, "dash": dash,
        }))

    def draw_circle(self, x, y, radius, *, fill, border, border_width, glow=None) -> None:
        self.operations.append(DrawOp("circle", {
            "center": (x, y), "radius": radius, "fill": fill,
            "border": border, "border_width": border_width, "glow": glow,
        }))

    def draw_text(self, x, y, text, *, color, size) -> None:
        self.operations.append(DrawOp("text", {
            "position": (x, y), "text": text, "color": color, "size": size,
        }))

    def ops(self, kind: str) -> list[DrawOp]:
        return [op for op in self.operations if op.kind == kind]

    # -- interaction ----------------------------------------------------------

    def add_listener(self, event: str, handler: PointerHandler) -> int:
        handle = next(self._handles)
        self._listeners[handle] = (event, handler)
        return handle

    def remove_listener(self, handle: int) -> None:
        self._listeners.pop(handle, None)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def dispatch(self, event: str, x: float, y: float) -> None:
        """Deliver a synthetic pointer event to registered listeners."""
        pointer = PointerEvent(x, y)
        for registered, handler in list(self._listeners.values()):
            if registered == event:
                handler(pointer)

    def set_cursor(self, cursor: str) -> None:
        self.cursor = cursor

    def create_tooltip(self) -> RecordingTooltip:
        tooltip = RecordingTooltip()
        self.tooltips.append(tooltip)
        return tooltip

    @property
    def active_tooltips(self) -> list[RecordingTooltip]:
        return [t for t in self.tooltips if not t.removed]


# =============================================================================
# Matplotlib surface
# =============================================================================

_MPL_EVENTS = {
    CLICK_EVENT: "button_press_event",
    MOVE_EVENT: "motion_notify_event",
}

TOOLTIP_BACKGROUND = Color(31, 41, 55)


class MatplotlibTooltip:
    """Tooltip drawn as a matplotlib annotation."""

    def __init__(self, surface: "MatplotlibSurface"):
        self.surface = surface
        self.annotation = surface.axes.annotate(
            "",
            xy=(0, 0),
            ha="center",
            va="center",
            color="white",
            fontsize=surface.px_to_pt(12),
            bbox={"boxstyle": "round,pad=0.3", "fc": TOOLTIP_BACKGROUND.as_mpl(), "ec": "none"},
            zorder=10,
        )
        self.annotation.set_visible(False)

    def show(self, text: str, x: float, y: float) -> None:
        self.annotation.set_text(text)
        self.annotation.xy = (x, y)
        self.annotation.set_visible(True)
        self.surface.redraw()

    def hide(self) -> None:
        if self.annotation.get_visible():
            self.annotation.set_visible(False)
            self.surface.redraw()

    def remove(self) -> None:
        if self.annotation.axes is not None:
            self.annotation.remove()
            self.surface.redraw()


class MatplotlibSurface:
    """Surface backed by a matplotlib Figure."""

    def __init__(self, width: float, height: float, dpi: int = 100, figure=None):
        from matplotlib.figure import Figure

        self.dpi = dpi
        self.figure = figure if figure is not None else Figure(dpi=dpi)
        self.figure.set_dpi(dpi)
        self.axes = self.figure.add_axes((0, 0, 1, 1))
        self._connections: set[int] = set()
        self.clear(width, height)

    def px_to_pt(self, pixels: float) -> float:
        return pixels * 72.0 / self.dpi

    def clear(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.figure.set_size_inches(width / self.dpi, height / self.dpi)
        self.axes.clear()
        self.axes.set_xlim(0, width)
        self.axes.set_ylim(height, 0)
        self.axes.set_axis_off()

    def draw_line(self, x1, y1, x2, y2, *, color, width, dash=None) -> None:
        linewidth = self.px_to_pt(width)
        kwargs = {}
        if dash:
            # matplotlib scales dash patterns by the line width
            kwargs["linestyle"] = (0, tuple(self.px_to_pt(d) / linewidth for d in dash))
        self.axes.plot(
            [x1, x2], [y1, y2],
            color=color.as_mpl(),
            linewidth=linewidth,
            solid_capstyle="butt",
            zorder=1,
            **kwargs,
        )

    def draw_circle(self, x, y, radius, *, fill, border, border_width, glow=None) -> None:
        from matplotlib.patches import Circle

        if glow is not None:
            halo = Color(glow.color.r, glow.color.g, glow.color.b, glow.color.a / 2)
            self.axes.add_patch(Circle(
                (x, y), radius + glow.blur / 2,
                facecolor=halo.as_mpl(), edgecolor="none", zorder=2,
            ))
        self.axes.add_patch(Circle(
            (x, y), radius,
            facecolor=fill.as_mpl(),
            edgecolor=border.as_mpl(),
            linewidth=self.px_to_pt(border_width),
            zorder=3,
        ))

    def draw_text(self, x, y, text, *, color, size) -> None:
        self.axes.text(
            x, y, text,
            ha="center", va="center",
            color=color.as_mpl(),
            fontsize=self.px_to_pt(size),
            zorder=4,
        )

    def add_listener(self, event: str, handler: PointerHandler) -> int:
        def _on_event(mpl_event) -> None:
            if mpl_event.inaxes is not self.axes or mpl_event.xdata is None:
                return
            handler(PointerEvent(mpl_event.xdata, mpl_event.ydata))

        cid = self.figure.canvas.mpl_connect(_MPL_EVENTS[event], _on_event)
        self._connections.add(cid)
        return cid

    def remove_listener(self, handle: int) -> None:
        if handle in self._connections:
            self._connections.discard(handle)
            self.figure.canvas.mpl_disconnect(handle)

    def set_cursor(self, cursor: str) -> None:
        from matplotlib.backend_tools import Cursors

        self.figure.canvas.set_cursor(Cursors.HAND if cursor == POINTER_CURSOR else Cursors.POINTER)

    def create_tooltip(self) -> MatplotlibTooltip:
        return MatplotlibTooltip(self)

    def redraw(self) -> None:
        self.figure.canvas.draw_idle()

    def to_bytes(self, fmt: str = "png") -> bytes:
        buffer = io.BytesIO()
        self.figure.savefig(buffer, format=fmt, dpi=self.dpi)
        return buffer.getvalue()

    def save(self, path: Path | str) -> Path:
        """Write the current frame to an image file (format from suffix)."""
        path = Path(path)
        self.figure.savefig(path, dpi=self.dpi)
        logger.info("graph_image_saved", path=str(path), width=self.width, height=self.height)
        return path
