"""
Chart Builder
=============

Interactive construction and editing of an org chart.

Interaction model:
1. Palette drag -> drop: a palette item carries a serialized organization;
   the drop position is projected into chart coordinates by the canvas and a
   new node ``{organization id}-{timestamp}`` is placed there.
2. Connection drawing: an output handle is dragged onto an input handle;
   duplicates (either direction) are rejected.
3. Reposition: only the drag-end position of a node is committed.
4. Arrange hierarchy: re-layout of the current nodes, then a viewport re-fit.

Every validation or parsing failure is non-fatal: it posts a rejection notice
and leaves the chart as it was.

Version: 0.1.0
"""

import time
from collections.abc import Callable, Sequence

from pydantic import BaseModel, Field, ValidationError

from shared.logging import get_logger
from shared.models.organization import Organization

from services.org_chart.builder.notices import Notice, NoticeBoard
from services.org_chart.canvas.base import ChartCanvas
from services.org_chart.canvas.viewport import ScreenPoint
from services.org_chart.export.exporter import ChartExporter
from services.org_chart.graph.errors import DataError, ExportError, GraphValidationError
from services.org_chart.graph.model import GraphSession, transform
from services.org_chart.graph.schema import (
    ChartDocument,
    ChartEdge,
    ChartMode,
    ChartNode,
    Connection,
    Position,
)
from services.org_chart.layout.engine import LayoutConfig, RelayoutResult, relayout


logger = get_logger(__name__)


class DropEvent(BaseModel):
    """A palette item released over the canvas."""

    client_x: float = Field(..., alias="clientX")
    client_y: float = Field(..., alias="clientY")
    payload: str = Field(default="", description="Serialized organization")

    model_config = {"populate_by_name": True}


class NodeChange(BaseModel):
    """Position change reported by the canvas while a node is dragged."""

    id: str
    position: Position | None = None
    dragging: bool | None = None


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class ChartBuilder:
    """
    Editing session over one ``GraphSession``.

    Example:
        >>> builder = ChartBuilder(canvas=RasterCanvas())
        >>> payload = ChartBuilder.palette_payload(organization)
        >>> builder.drop(DropEvent(client_x=320, client_y=180, payload=payload))
        >>> builder.arrange_hierarchy()
    """

    def __init__(
        self,
        canvas: ChartCanvas,
        session: GraphSession | None = None,
        layout: LayoutConfig | None = None,
        exporter: ChartExporter | None = None,
        clock: Callable[[], int] | None = None,
        on_notice: Callable[[Notice], None] | None = None,
    ) -> None:
        """
        Initialize the builder.

        Args:
            canvas: Rendering surface used for projection, fitting and capture
            session: Chart to edit, defaults to an empty builder chart
            layout: Spacing for re-layout, defaults to the configured spacing
            exporter: Exporter used for JSON/PNG export
            clock: Millisecond clock used in synthesized ids
            on_notice: Listener called with every notice
        """
        self.canvas = canvas
        self.session = session or GraphSession(mode=ChartMode.BUILDER)
        self.layout = layout or LayoutConfig.from_settings()
        self.exporter = exporter or ChartExporter()
        self.board = NoticeBoard(on_notice)
        self._clock = clock or _epoch_millis
        self._last_timestamp = 0

    @property
    def notices(self) -> list[Notice]:
        return self.board.notices

    def _timestamp(self) -> int:
        """Clock reading, strictly increasing across calls."""
        timestamp = max(self._clock(), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        return timestamp

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_organizations(self, organizations: Sequence[Organization]) -> ChartDocument:
        """Reset the chart to the laid-out view of ``organizations``."""
        errors: list[DataError] = []
        document = transform(organizations, self.layout, errors)
        self.session.replace(document)
        self.session.mode = ChartMode.VIEW

        if errors:
            self.board.post(
                "Chart Warning",
                f"{len(errors)} organization(s) could not be placed on the chart.",
            )
        self.canvas.fit_view(self.session.nodes)
        return self.session.snapshot()

    # -------------------------------------------------------------------------
    # Palette drag and drop
    # -------------------------------------------------------------------------

    @staticmethod
    def palette_payload(organization: Organization) -> str:
        """Serialize an organization for the drag channel."""
        return organization.model_dump_json(by_alias=True, exclude_none=True)

    @staticmethod
    def parse_payload(payload: str) -> Organization:
        """
        Deserialize a drag payload.

        Raises:
            DataError: If the payload is not a valid organization.
        """
        try:
            return Organization.model_validate_json(payload)
        except ValidationError as e:
            raise DataError(f"Invalid organization payload: {e.error_count()} error(s)") from e

    def drop(self, event: DropEvent) -> ChartNode | None:
        """
        Place a new node for the dropped organization.

        Returns:
            The new node, or None when the drop was ignored
        """
        if not event.payload:
            return None

        try:
            organization = self.parse_payload(event.payload)
        except DataError as e:
            logger.warning("drop_payload_rejected", error=str(e))
            self.board.reject("Drop Error", "The dropped item is not a valid organization.")
            return None

        position = self.canvas.project(ScreenPoint(x=event.client_x, y=event.client_y))
        node = ChartNode.from_organization(
            organization,
            position,
            node_id=f"{organization.id}-{self._timestamp()}",
        )
        self.session.add_node(node)
        # Node ids no longer match organization ids
        self.session.mode = ChartMode.BUILDER

        logger.info(
            "node_dropped",
            node_id=node.id,
            organization_id=organization.id,
            x=position.x,
            y=position.y,
        )
        return node

    # -------------------------------------------------------------------------
    # Connections
    # -------------------------------------------------------------------------

    def connect(self, connection: Connection) -> ChartEdge | None:
        """
        Add an edge for a drawn connection.

        Returns:
            The new edge, or None if the connection was rejected
        """
        if self.session.find_duplicate_edge(connection) is not None:
            logger.info(
                "connection_rejected",
                source=connection.source,
                target=connection.target,
                reason="duplicate",
            )
            self.board.reject("Connection Error", "An edge already exists between these points.")
            return None

        edge = ChartEdge.from_connection(
            connection,
            edge_id=f"edge-{connection.source}-{connection.target}-{self._timestamp()}",
        )
        try:
            self.session.add_edge(edge)
        except GraphValidationError as e:
            logger.info(
                "connection_rejected",
                source=connection.source,
                target=connection.target,
                reason=str(e),
            )
            self.board.reject("Connection Error", str(e))
            return None

        self.board.post("Connection Added", f"Connected {connection.source} to {connection.target}.")
        return edge

    # -------------------------------------------------------------------------
    # Repositioning
    # -------------------------------------------------------------------------

    def commit_drag_end(self, node_id: str, position: Position) -> bool:
        """Commit the final position of a dragged node."""
        committed = self.session.update_position(node_id, position)
        if committed:
            logger.debug("drag_end_committed", node_id=node_id, x=position.x, y=position.y)
        return committed

    def apply_node_change(self, change: NodeChange) -> bool:
        """Apply a canvas position change; in-flight drag frames are ignored."""
        if change.position is None or change.dragging is not False:
            return False
        return self.commit_drag_end(change.id, change.position)

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def arrange_hierarchy(self) -> RelayoutResult | None:
        """
        Re-layout the current nodes by hierarchy level and re-fit the viewport.

        Returns:
            The re-layout result, or None if nothing was arranged
        """
        if not self.session.nodes:
            return None

        result = relayout(self.session.nodes, self.layout)
        if not result.positions:
            self.board.post(
                "Layout Warning",
                "No organization data found in current nodes for hierarchical layout.",
            )
            return None

        moved = self.session.set_positions(result.positions)
        self.canvas.fit_view(self.session.nodes, padding=0.1)
        self.board.post("Layout Applied", "Nodes arranged in hierarchical layout")

        logger.info("hierarchy_arranged", moved=len(moved), unmatched=len(result.unmatched))
        return result

    # -------------------------------------------------------------------------
    # Export / import
    # -------------------------------------------------------------------------

    def export_json(self) -> str | None:
        """Export the chart as JSON, or None after posting an error notice."""
        try:
            text = self.exporter.to_json(self.session)
        except (ExportError, ValueError) as e:
            logger.error("json_export_failed", error=str(e))
            self.board.reject("Error", "Failed to export chart as JSON")
            return None
        self.board.post("Success", "Chart exported successfully as JSON")
        return text

    async def export_png(self) -> bytes | None:
        """Capture the chart as PNG, or None after posting an error notice."""
        self.board.post("Exporting...", "Generating PNG export...")
        try:
            data = await self.exporter.export_png(self.session, self.canvas)
        except ExportError as e:
            logger.warning("png_export_failed", error=str(e))
            self.board.reject("Error", "Failed to export chart as PNG")
            return None
        self.board.post("Success", "Chart exported successfully")
        return data

    def import_json(self, text: str | bytes) -> bool:
        """Replace the chart with an exported chart document."""
        try:
            document = self.exporter.from_json(text)
        except DataError as e:
            logger.warning("chart_import_rejected", error=str(e))
            self.board.reject("Import Error", "The file is not a valid organizational chart.")
            return False

        self.session.replace(document)
        self.canvas.fit_view(self.session.nodes)
        self.board.post(
            "Chart Imported",
            f"Loaded {len(document.nodes)} nodes and {len(document.edges)} edges.",
        )
        return True
