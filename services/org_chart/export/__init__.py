"""
Chart Export
============

JSON and PNG export of org charts.
"""

from services.org_chart.export.exporter import PNG_SIGNATURE, ChartExporter

__all__ = ["PNG_SIGNATURE", "ChartExporter"]
