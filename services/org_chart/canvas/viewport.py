"""
Canvas Viewport
===============

Pan/zoom state of a chart canvas and the screen <-> flow coordinate
conversions built on it.

Version: 0.1.0
"""

from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import BaseModel

from services.org_chart.graph.schema import ChartNode, Position


class ScreenPoint(BaseModel):
    """Point in client (screen) pixels."""

    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle in flow coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


def node_bounds(nodes: Sequence[ChartNode], node_width: float, node_height: float) -> Bounds | None:
    """Bounding box of nodes centred on their positions; None for no nodes."""
    if not nodes:
        return None
    left = min(n.position.x for n in nodes) - node_width / 2
    top = min(n.position.y for n in nodes) - node_height / 2
    right = max(n.position.x for n in nodes) + node_width / 2
    bottom = max(n.position.y for n in nodes) + node_height / 2
    return Bounds(x=left, y=top, width=right - left, height=bottom - top)


@dataclass
class Viewport:
    """
    Visible window onto the chart.

    ``x``/``y`` is the screen offset of the flow origin, ``zoom`` the scale
    factor. ``left``/``top`` is where the canvas element sits on screen.
    """

    width: int
    height: int
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0
    left: float = 0.0
    top: float = 0.0
    min_zoom: float = 0.1
    max_zoom: float = 2.0

    def project(self, point: ScreenPoint) -> Position:
        """Convert client coordinates into flow coordinates."""
        return Position(
            x=(point.x - self.left - self.x) / self.zoom,
            y=(point.y - self.top - self.y) / self.zoom,
        )

    def to_canvas(self, x: float, y: float) -> tuple[float, float]:
        """Convert flow coordinates into canvas pixels."""
        return x * self.zoom + self.x, y * self.zoom + self.y

    def clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def fit_bounds(self, bounds: Bounds, padding: float = 0.1) -> None:
        """Zoom and pan so ``bounds`` is centred with ``padding`` around it."""
        zoom_x = self.width / (bounds.width * (1 + padding))
        zoom_y = self.height / (bounds.height * (1 + padding))
        self.zoom = self.clamp_zoom(min(zoom_x, zoom_y))

        center_x, center_y = bounds.center
        self.x = self.width / 2 - center_x * self.zoom
        self.y = self.height / 2 - center_y * self.zoom
