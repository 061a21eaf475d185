"""
Hierarchy Layout Engine
=======================

Deterministic level-based grid layout for org charts.

Organizations on the same hierarchy level form one horizontal row centred on
x = 0; rows stack downwards by level. Every coordinate is snapped to the grid.
Identical ordered input always yields identical output.

Version: 0.1.0
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from shared.config.settings import LayoutSettings, get_settings
from shared.logging import get_logger

from services.org_chart.graph.errors import DataError
from services.org_chart.graph.schema import ChartNode, Position


logger = get_logger(__name__)

VERTICAL_SPACING = 300
HORIZONTAL_SPACING = 400
GRID_SIZE = 20


class Layoutable(Protocol):
    """Anything the engine can place: an id and a hierarchy level."""

    id: str
    hierarchy_level: int | None


@dataclass(frozen=True)
class LayoutItem:
    """Minimal layoutable record, rebuilt from chart nodes on re-layout."""

    id: str
    hierarchy_level: int | None


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing constants shared by initial layout and re-layout."""

    vertical_spacing: int = VERTICAL_SPACING
    horizontal_spacing: int = HORIZONTAL_SPACING
    grid_size: int = GRID_SIZE

    @classmethod
    def from_settings(cls, layout: LayoutSettings | None = None) -> "LayoutConfig":
        """Build a config from the ``LAYOUT_*`` settings."""
        layout = layout or get_settings().layout
        return cls(
            vertical_spacing=layout.vertical_spacing,
            horizontal_spacing=layout.horizontal_spacing,
            grid_size=layout.grid_size,
        )


@dataclass
class RelayoutResult:
    """Outcome of re-laying out an existing node set."""

    positions: dict[str, Position] = field(default_factory=dict)
    unmatched: list[str] = field(default_factory=list)
    errors: list[DataError] = field(default_factory=list)


def snap_to_grid(value: float, grid_size: int = GRID_SIZE) -> int:
    """Round to the nearest multiple of ``grid_size``; halves round up."""
    return math.floor(value / grid_size + 0.5) * grid_size


def _is_level(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def group_by_level(
    items: Iterable[Layoutable],
    errors: list[DataError] | None = None,
) -> dict[int, list[Layoutable]]:
    """
    Group items by hierarchy level.

    Input order is preserved within a level and levels come back in
    ascending order. Items without a usable level, and repeated ids, are
    left out of every group.
    """
    levels: dict[int, list[Layoutable]] = {}
    seen: set[str] = set()

    for item in items:
        if not _is_level(item.hierarchy_level):
            error = DataError(
                f"No hierarchy level for {item.id!r}: {item.hierarchy_level!r}",
                record_id=item.id,
            )
        elif item.id in seen:
            error = DataError(f"Duplicate layout id {item.id!r}", record_id=item.id)
        else:
            seen.add(item.id)
            levels.setdefault(item.hierarchy_level, []).append(item)
            continue

        logger.warning("layout_item_skipped", item_id=item.id, reason=str(error))
        if errors is not None:
            errors.append(error)

    return dict(sorted(levels.items()))


def calculate_positions(
    items: Sequence[Layoutable],
    config: LayoutConfig | None = None,
    errors: list[DataError] | None = None,
) -> dict[str, Position]:
    """
    Compute grid-aligned positions for items grouped by hierarchy level.

    Args:
        items: Ordered organizations (or anything with ``id`` and ``hierarchy_level``)
        config: Spacing constants, defaults to the standard spacing
        errors: Optional list collecting a DataError per skipped item

    Returns:
        Mapping of item id to position, in level then row order
    """
    config = config or LayoutConfig()
    grid = config.grid_size
    spacing = config.horizontal_spacing
    positions: dict[str, Position] = {}

    for level, row in group_by_level(items, errors).items():
        y = snap_to_grid((level - 1) * config.vertical_spacing, grid)
        row_width = len(row) * spacing
        start_x = snap_to_grid(-(row_width - spacing) / 2, grid)

        for index, item in enumerate(row):
            positions[item.id] = Position(
                x=snap_to_grid(start_x + index * spacing, grid),
                y=y,
            )

    return positions


def relayout(
    nodes: Sequence[ChartNode],
    config: LayoutConfig | None = None,
) -> RelayoutResult:
    """
    Recompute positions for an existing node set.

    Each node is laid out under its own id from the hierarchy level its data
    still carries, so several instances of one organization get distinct
    slots. Nodes that cannot be placed keep their position and are reported
    as unmatched.
    """
    result = RelayoutResult()
    items = [LayoutItem(id=node.id, hierarchy_level=node.data.hierarchy_level) for node in nodes]
    result.positions = calculate_positions(items, config, result.errors)

    for node in nodes:
        if node.id not in result.positions:
            result.unmatched.append(node.id)
            logger.warning(
                "relayout_position_missing",
                node_id=node.id,
                label=node.data.label,
            )

    logger.debug(
        "relayout_computed",
        positioned=len(result.positions),
        unmatched=len(result.unmatched),
    )
    return result
