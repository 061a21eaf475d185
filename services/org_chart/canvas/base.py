"""
Chart Canvas Interface
======================

The rendering surface the chart engine talks to: it projects drop
coordinates into the chart, re-fits its viewport, and captures what it
shows as an image.

Version: 0.1.0
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from services.org_chart.canvas.viewport import ScreenPoint
from services.org_chart.graph.schema import ChartEdge, ChartNode, Position


@runtime_checkable
class ChartCanvas(Protocol):
    """Rendering surface of a chart."""

    def project(self, point: ScreenPoint) -> Position:
        """Convert a client-space point into chart coordinates."""
        ...

    def fit_view(self, nodes: Sequence[ChartNode], padding: float | None = None) -> None:
        """Re-fit the viewport around ``nodes``."""
        ...

    async def capture(
        self,
        nodes: Sequence[ChartNode],
        edges: Sequence[ChartEdge],
        scale: float,
    ) -> bytes:
        """Render the chart and return encoded PNG bytes."""
        ...
