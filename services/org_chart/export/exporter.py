"""
Chart Exporter
==============

Serializes an org chart to ``organizational-chart.json`` or captures it as
``organizational-chart.png``.

JSON export dumps ``{nodes, edges}`` verbatim; positions are embedded in the
nodes, so parsing an export and loading it back reproduces the same chart.

Raster export is the only asynchronous operation on a chart. It reads a
snapshot and never mutates the graph; a second export while one is in
flight is rejected rather than racing the capture.

Version: 0.1.0
"""

import asyncio
from pathlib import Path

from pydantic import ValidationError

from shared.config.settings import ExportSettings, get_settings
from shared.logging import get_logger

from services.org_chart.canvas.base import ChartCanvas
from services.org_chart.graph.errors import DataError, ExportError, GraphValidationError
from services.org_chart.graph.model import GraphSession, validate_document
from services.org_chart.graph.schema import ChartDocument


logger = get_logger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class ChartExporter:
    """
    Export artifacts for org charts.

    Example:
        >>> exporter = ChartExporter()
        >>> text = exporter.to_json(session)
        >>> png = await exporter.export_png(session, canvas)
    """

    def __init__(self, config: ExportSettings | None = None) -> None:
        self.config = config or get_settings().export
        self._capture_lock = asyncio.Lock()

    @property
    def export_in_progress(self) -> bool:
        """Check if a raster export is currently running."""
        return self._capture_lock.locked()

    @staticmethod
    def _document(source: GraphSession | ChartDocument) -> ChartDocument:
        if isinstance(source, GraphSession):
            return source.snapshot()
        return source.model_copy(deep=True)

    # -------------------------------------------------------------------------
    # JSON
    # -------------------------------------------------------------------------

    def to_json(self, source: GraphSession | ChartDocument) -> str:
        """Serialize ``{nodes, edges}`` as chart document JSON."""
        document = self._document(source)
        return document.model_dump_json(
            by_alias=True,
            exclude_none=True,
            indent=self.config.json_indent,
        )

    @staticmethod
    def from_json(text: str | bytes) -> ChartDocument:
        """
        Parse chart document JSON.

        Raises:
            DataError: If the text is not a valid chart document or the
                document breaks a graph invariant.
        """
        try:
            document = ChartDocument.model_validate_json(text)
        except ValidationError as e:
            logger.warning("chart_document_invalid", errors=e.error_count())
            raise DataError(f"Invalid chart document: {e.error_count()} error(s)") from e

        try:
            validate_document(document)
        except GraphValidationError as e:
            logger.warning("chart_document_inconsistent", error=str(e))
            raise DataError(f"Invalid chart document: {e}") from e
        return document

    def write_json(self, source: GraphSession | ChartDocument, directory: Path) -> Path:
        """
        Write ``organizational-chart.json`` into ``directory``.

        Raises:
            ExportError: If the file cannot be written.
        """
        path = Path(directory) / self.config.json_filename
        text = self.to_json(source)
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.error("json_export_failed", path=str(path), error=str(e))
            raise ExportError(f"Failed to export chart as JSON: {e}") from e

        logger.info("json_exported", path=str(path), size=len(text))
        return path

    # -------------------------------------------------------------------------
    # Raster
    # -------------------------------------------------------------------------

    async def export_png(
        self,
        source: GraphSession | ChartDocument,
        canvas: ChartCanvas,
        scale: float | None = None,
    ) -> bytes:
        """
        Capture the chart through ``canvas`` as PNG.

        Args:
            source: Session or document to capture
            canvas: Rendering surface performing the capture
            scale: Device scale, defaults to the configured raster scale (2x)

        Returns:
            PNG bytes

        Raises:
            ExportError: If another export is running or no image data was produced.
        """
        if self._capture_lock.locked():
            raise ExportError("An export is already in progress")

        async with self._capture_lock:
            document = self._document(source)
            scale = scale or self.config.raster_scale
            try:
                data = await canvas.capture(document.nodes, document.edges, scale)
            except Exception as e:
                logger.error(
                    "png_capture_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise ExportError(f"Failed to export chart as PNG: {e}") from e

            if not data or not data.startswith(PNG_SIGNATURE):
                logger.error("png_capture_empty", size=len(data or b""))
                raise ExportError("Failed to create PNG image data")

        logger.info("png_exported", size=len(data), scale=scale, nodes=len(document.nodes))
        return data

    async def write_png(
        self,
        source: GraphSession | ChartDocument,
        canvas: ChartCanvas,
        directory: Path,
    ) -> Path:
        """
        Capture the chart and write ``organizational-chart.png`` into ``directory``.

        Raises:
            ExportError: If capture or writing fails.
        """
        data = await self.export_png(source, canvas)
        path = Path(directory) / self.config.png_filename
        try:
            path.write_bytes(data)
        except OSError as e:
            logger.error("png_write_failed", path=str(path), error=str(e))
            raise ExportError(f"Failed to write PNG export: {e}") from e
        return path
