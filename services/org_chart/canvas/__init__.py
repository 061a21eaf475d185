"""
Chart Canvas
============

Rendering surface abstraction and the Pillow raster implementation.
"""

from services.org_chart.canvas.base import ChartCanvas
from services.org_chart.canvas.raster import RasterCanvas
from services.org_chart.canvas.viewport import Bounds, ScreenPoint, Viewport, node_bounds

__all__ = [
    "Bounds",
    "ChartCanvas",
    "RasterCanvas",
    "ScreenPoint",
    "Viewport",
    "node_bounds",
]
