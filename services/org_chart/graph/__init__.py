"""
Chart Graph
===========

Node/edge schema, level styling and errors for org charts.

The mutable graph itself lives in ``services.org_chart.graph.model``
(``GraphSession``), which depends on the layout engine.

Node Types:
- organization: one organization (or organization template instance)

Edge Types:
- step: directed parent -> child reporting line

Version: 0.1.0
"""

from services.org_chart.graph.errors import (
    DataError,
    ExportError,
    GraphValidationError,
    OrgChartError,
)
from services.org_chart.graph.styles import (
    NODE_STYLES,
    HierarchyBucket,
    NodeStyle,
    node_style,
)
from services.org_chart.graph.schema import (
    ChartDocument,
    ChartEdge,
    ChartMode,
    ChartNode,
    Connection,
    EdgeStyle,
    NodeData,
    Position,
)

__all__ = [
    # Errors
    "DataError",
    "ExportError",
    "GraphValidationError",
    "OrgChartError",
    # Styling
    "NODE_STYLES",
    "HierarchyBucket",
    "NodeStyle",
    "node_style",
    # Schema
    "ChartDocument",
    "ChartEdge",
    "ChartMode",
    "ChartNode",
    "Connection",
    "EdgeStyle",
    "NodeData",
    "Position",
]
