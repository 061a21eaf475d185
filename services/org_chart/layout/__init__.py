"""
Hierarchy Layout
================

Level-based grid layout for org charts.
"""

from services.org_chart.layout.engine import (
    GRID_SIZE,
    HORIZONTAL_SPACING,
    VERTICAL_SPACING,
    LayoutConfig,
    LayoutItem,
    RelayoutResult,
    calculate_positions,
    group_by_level,
    relayout,
    snap_to_grid,
)

__all__ = [
    "GRID_SIZE",
    "HORIZONTAL_SPACING",
    "VERTICAL_SPACING",
    "LayoutConfig",
    "LayoutItem",
    "RelayoutResult",
    "calculate_positions",
    "group_by_level",
    "relayout",
    "snap_to_grid",
]
