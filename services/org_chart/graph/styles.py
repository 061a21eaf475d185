"""
Node and Edge Styling
=====================

Level-based node styling as a lookup table keyed by hierarchy bucket,
plus the default directed edge style.

Version: 0.1.0
"""

from dataclasses import dataclass
from enum import Enum


class HierarchyBucket(str, Enum):
    """Styling bucket for a hierarchy level."""

    ROOT = "root"  # Level 1: parent company
    SUBSIDIARY = "subsidiary"  # Level 2
    DIVISION = "division"  # Everything below

    @classmethod
    def for_level(cls, level: int | None) -> "HierarchyBucket":
        """Map a hierarchy level onto its styling bucket."""
        if level == 1:
            return cls.ROOT
        if level == 2:
            return cls.SUBSIDIARY
        return cls.DIVISION


@dataclass(frozen=True)
class NodeStyle:
    """Visual style of an organization node."""

    fill: str
    text_color: str = "#ffffff"
    border_radius: int = 5


NODE_STYLES: dict[HierarchyBucket, NodeStyle] = {
    HierarchyBucket.ROOT: NodeStyle(fill="#FF6B6B"),
    HierarchyBucket.SUBSIDIARY: NodeStyle(fill="#4ECDC4"),
    HierarchyBucket.DIVISION: NodeStyle(fill="#45B7D1"),
}

NODE_TYPE = "organization"
EDGE_TYPE = "step"
EDGE_STROKE = "#000000"
EDGE_STROKE_WIDTH = 2


def node_style(level: int | None) -> NodeStyle:
    """Get the node style for a hierarchy level."""
    return NODE_STYLES[HierarchyBucket.for_level(level)]
