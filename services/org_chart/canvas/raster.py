"""
Raster Canvas
=============

Pillow-backed chart canvas. Draws organization nodes as rounded boxes
coloured by hierarchy level and reporting lines as orthogonal step edges,
and encodes the result as PNG.

Version: 0.1.0
"""

import asyncio
import io
from collections.abc import Sequence

from PIL import Image, ImageDraw, ImageFont

from shared.config.settings import CanvasSettings, get_settings
from shared.logging import get_logger
from shared.models.organization import format_security_contact

from services.org_chart.canvas.viewport import ScreenPoint, Viewport, node_bounds
from services.org_chart.graph.schema import ChartEdge, ChartNode, Position
from services.org_chart.graph.styles import node_style


logger = get_logger(__name__)

BASE_FONT_SIZE = 14


class RasterCanvas:
    """
    In-process chart canvas rendering with Pillow.

    Example:
        >>> canvas = RasterCanvas()
        >>> canvas.fit_view(session.nodes)
        >>> png = await canvas.capture(session.nodes, session.edges, scale=2)
    """

    def __init__(
        self,
        config: CanvasSettings | None = None,
        viewport: Viewport | None = None,
    ) -> None:
        self.config = config or get_settings().canvas
        self.viewport = viewport or Viewport(
            width=self.config.width,
            height=self.config.height,
            min_zoom=self.config.min_zoom,
            max_zoom=self.config.max_zoom,
        )

    def project(self, point: ScreenPoint) -> Position:
        """Convert client coordinates into chart coordinates."""
        return self.viewport.project(point)

    def fit_view(self, nodes: Sequence[ChartNode], padding: float | None = None) -> None:
        """Fit the viewport around the nodes; no-op for an empty chart."""
        bounds = node_bounds(nodes, self.config.node_width, self.config.node_height)
        if bounds is None:
            return
        self.viewport.fit_bounds(
            bounds,
            self.config.fit_padding if padding is None else padding,
        )
        logger.debug(
            "viewport_fitted",
            zoom=round(self.viewport.zoom, 3),
            x=round(self.viewport.x, 1),
            y=round(self.viewport.y, 1),
        )

    async def capture(
        self,
        nodes: Sequence[ChartNode],
        edges: Sequence[ChartEdge],
        scale: float,
    ) -> bytes:
        """
        Render the current view at ``scale`` and encode it as PNG.

        Drawing and encoding run in a worker thread so the event loop keeps
        serving requests while a large chart renders.
        """
        return await asyncio.to_thread(self._encode_png, list(nodes), list(edges), scale)

    def _encode_png(
        self,
        nodes: Sequence[ChartNode],
        edges: Sequence[ChartEdge],
        scale: float,
    ) -> bytes:
        image = self.render(nodes, edges, scale)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(
        self,
        nodes: Sequence[ChartNode],
        edges: Sequence[ChartEdge],
        scale: float = 1.0,
    ) -> Image.Image:
        """Draw the chart as seen through the viewport."""
        size = (round(self.viewport.width * scale), round(self.viewport.height * scale))
        image = Image.new("RGB", size, self.config.background)
        draw = ImageDraw.Draw(image)
        factor = self.viewport.zoom * scale

        by_id = {node.id: node for node in nodes}
        for edge in edges:
            source = by_id.get(edge.source)
            target = by_id.get(edge.target)
            if source is None or target is None:
                continue
            points = [self._to_pixels(x, y, scale) for x, y in self._step_path(source, target)]
            draw.line(
                points,
                fill=edge.style.stroke,
                width=max(1, round(edge.style.stroke_width * factor)),
                joint="curve",
            )

        font = ImageFont.load_default(size=max(6, round(BASE_FONT_SIZE * factor)))
        for node in nodes:
            self._draw_node(draw, node, font, scale)

        return image

    def _to_pixels(self, x: float, y: float, scale: float) -> tuple[float, float]:
        canvas_x, canvas_y = self.viewport.to_canvas(x, y)
        return canvas_x * scale, canvas_y * scale

    def _step_path(self, source: ChartNode, target: ChartNode) -> list[tuple[float, float]]:
        """Orthogonal path from the source's bottom handle to the target's top handle."""
        half_height = self.config.node_height / 2
        start = (source.position.x, source.position.y + half_height)
        end = (target.position.x, target.position.y - half_height)
        middle_y = (start[1] + end[1]) / 2
        return [start, (start[0], middle_y), (end[0], middle_y), end]

    def _draw_node(
        self,
        draw: ImageDraw.ImageDraw,
        node: ChartNode,
        font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
        scale: float,
    ) -> None:
        style = node_style(node.data.hierarchy_level)
        half_width = self.config.node_width / 2
        half_height = self.config.node_height / 2
        left, top = self._to_pixels(node.position.x - half_width, node.position.y - half_height, scale)
        right, bottom = self._to_pixels(node.position.x + half_width, node.position.y + half_height, scale)

        draw.rounded_rectangle(
            (left, top, right, bottom),
            radius=max(1, round(style.border_radius * self.viewport.zoom * scale)),
            fill=style.fill,
        )

        lines = [node.data.label, node.data.type]
        if node.data.security_contact:
            lines.append(format_security_contact(node.data.security_contact))

        line_boxes = [draw.textbbox((0, 0), line, font=font) for line in lines]
        line_height = max(box[3] - box[1] for box in line_boxes) * 1.3
        y = (top + bottom) / 2 - line_height * len(lines) / 2
        for line, box in zip(lines, line_boxes):
            width = box[2] - box[0]
            draw.text(((left + right) / 2 - width / 2, y), line, fill=style.text_color, font=font)
            y += line_height
