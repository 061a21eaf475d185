"""
Chart Routes
============

Stateless endpoints: lay out, transform and export a chart for a posted
list of organizations.

Version: 0.1.0
"""

from fastapi import APIRouter, HTTPException, Response, status
from pydantic import BaseModel, Field

from shared.config import settings
from shared.logging import get_logger
from shared.models.organization import Organization

from services.org_chart.canvas.raster import RasterCanvas
from services.org_chart.export.exporter import ChartExporter
from services.org_chart.graph.errors import DataError, ExportError
from services.org_chart.graph.model import GraphSession, transform
from services.org_chart.graph.schema import ChartDocument, Position
from services.org_chart.layout.engine import LayoutConfig, calculate_positions


logger = get_logger(__name__)

router = APIRouter()

exporter = ChartExporter(settings.export)


# =============================================================================
# Request/Response Models
# =============================================================================


class OrganizationsRequest(BaseModel):
    """Ordered organization records to chart."""

    organizations: list[Organization] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "organizations": [
                        {"id": "org-parent-1", "name": "Global Tech Solutions", "type": "Parent", "hierarchyLevel": 1},
                        {
                            "id": "org-sub-1",
                            "name": "Innovate Software Ltd.",
                            "type": "Subsidiary",
                            "parentId": "org-parent-1",
                            "hierarchyLevel": 2,
                        },
                    ]
                }
            ]
        }
    }


class LayoutResponse(BaseModel):
    """Computed positions by organization id."""

    positions: dict[str, Position]
    skipped: list[str] = Field(default_factory=list)


class TransformResponse(BaseModel):
    """Positioned chart for the posted organizations."""

    chart: ChartDocument
    skipped: list[str] = Field(default_factory=list)


def _skipped_ids(errors: list[DataError]) -> list[str]:
    return [e.record_id for e in errors if e.record_id]


# =============================================================================
# Routes
# =============================================================================


@router.post("/layout", response_model=LayoutResponse)
async def layout_organizations(request: OrganizationsRequest) -> LayoutResponse:
    """
    Compute hierarchy positions.

    Same-level organizations form a centred row; rows stack by level.
    """
    errors: list[DataError] = []
    positions = calculate_positions(
        request.organizations,
        LayoutConfig.from_settings(settings.layout),
        errors,
    )
    return LayoutResponse(positions=positions, skipped=_skipped_ids(errors))


@router.post("/transform", response_model=TransformResponse, response_model_exclude_none=True)
async def transform_organizations(request: OrganizationsRequest) -> TransformResponse:
    """Transform organizations into a positioned node/edge chart."""
    errors: list[DataError] = []
    document = transform(
        request.organizations,
        LayoutConfig.from_settings(settings.layout),
        errors,
    )
    return TransformResponse(chart=document, skipped=_skipped_ids(errors))


@router.post("/export/json")
async def export_chart_json(request: OrganizationsRequest) -> Response:
    """Download the chart for the posted organizations as JSON."""
    session = GraphSession.from_organizations(
        request.organizations,
        LayoutConfig.from_settings(settings.layout),
    )
    return Response(
        content=exporter.to_json(session),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{settings.export.json_filename}"'},
    )


@router.post("/export/png")
async def export_chart_png(request: OrganizationsRequest) -> Response:
    """Download the chart for the posted organizations as PNG."""
    session = GraphSession.from_organizations(
        request.organizations,
        LayoutConfig.from_settings(settings.layout),
    )
    canvas = RasterCanvas(settings.canvas)
    canvas.fit_view(session.nodes)

    # Each request captures its own canvas, so it gets its own capture lock
    try:
        data = await ChartExporter(settings.export).export_png(session, canvas)
    except ExportError as e:
        logger.error("chart_png_export_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )

    return Response(
        content=data,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{settings.export.png_filename}"'},
    )
