#!/usr/bin/env python3
"""
Org Chart Renderer
==================

Lay out an organization list and write the chart exports.

The input file holds either a JSON list of organizations or an object with
an ``organizations`` list.

Usage:
    python scripts/render_org_chart.py organizations.json
    python scripts/render_org_chart.py organizations.json --output exports/
    python scripts/render_org_chart.py organizations.json --no-png

Version: 0.1.0
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import TypeAdapter, ValidationError

from shared.logging import get_logger, setup_logging
from shared.models.organization import Organization

setup_logging(log_level="INFO", json_logs=False, service_name="render-org-chart")
logger = get_logger(__name__)

_organizations = TypeAdapter(list[Organization])


def load_organizations(path: Path) -> list[Organization]:
    """Read organization records from a JSON file."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("organizations", [])
    return _organizations.validate_python(raw)


async def main(args: argparse.Namespace) -> int:
    """Render the chart exports."""
    from services.org_chart.canvas.raster import RasterCanvas
    from services.org_chart.export.exporter import ChartExporter
    from services.org_chart.graph.errors import DataError, ExportError
    from services.org_chart.graph.model import GraphSession
    from services.org_chart.layout.engine import LayoutConfig

    try:
        organizations = load_organizations(args.input)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error("organizations_unreadable", path=str(args.input), error=str(e))
        return 1

    errors: list[DataError] = []
    session = GraphSession.from_organizations(organizations, LayoutConfig.from_settings(), errors)
    for error in errors:
        logger.warning("organization_not_charted", organization_id=error.record_id, reason=str(error))

    args.output.mkdir(parents=True, exist_ok=True)
    exporter = ChartExporter()

    try:
        json_path = exporter.write_json(session, args.output)
        logger.info("chart_written", path=str(json_path), nodes=len(session.nodes), edges=len(session.edges))

        if not args.no_png:
            canvas = RasterCanvas()
            canvas.fit_view(session.nodes)
            png_path = await exporter.write_png(session, canvas, args.output)
            logger.info("chart_written", path=str(png_path))
    except ExportError as e:
        logger.error("chart_export_failed", error=str(e))
        return 1

    return 0


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Render an organizational chart from organization records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "input",
        type=Path,
        help="JSON file with organization records",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("."),
        help="Directory for organizational-chart.json/.png (default: current directory)",
    )
    parser.add_argument(
        "--no-png",
        action="store_true",
        help="Only write the JSON export",
    )

    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    exit_code = asyncio.run(main(args))
    sys.exit(exit_code)
