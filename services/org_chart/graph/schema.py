"""
Chart Graph Schema
==================

Pydantic models for the positioned node/edge graph of an org chart.

Field names follow the chart document format (camelCase) on the wire and
snake_case in Python; both are accepted on input.

Version: 0.1.0
"""

from enum import Enum

from pydantic import BaseModel, Field

from shared.models.organization import Organization, SecurityContact

from services.org_chart.graph.styles import (
    EDGE_STROKE,
    EDGE_STROKE_WIDTH,
    EDGE_TYPE,
    NODE_TYPE,
)


class ChartMode(str, Enum):
    """How node ids relate to organization ids."""

    VIEW = "view"  # node id == organization id
    BUILDER = "builder"  # node id == "{organization id}-{timestamp}"


class Position(BaseModel):
    """Point in chart (flow) coordinates."""

    x: float
    y: float


class NodeData(BaseModel):
    """Organization details carried by a chart node."""

    id: str = Field(..., description="Source organization ID")
    name: str
    label: str
    type: str
    hierarchy_level: int | None = Field(default=None, alias="hierarchyLevel")
    security_contact: str | SecurityContact | None = Field(default=None, alias="securityContact")
    is_connectable: bool = Field(default=True, alias="isConnectable")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_organization(cls, organization: Organization) -> "NodeData":
        """Copy the chart-relevant fields of an organization."""
        return cls(
            id=organization.id,
            name=organization.name,
            label=organization.name,
            type=organization.type,
            hierarchy_level=organization.hierarchy_level,
            security_contact=organization.security_contact,
        )

    @property
    def source_handle(self) -> str:
        """Output handle (bottom of the node)."""
        return f"{self.id}-source"

    @property
    def target_handle(self) -> str:
        """Input handle (top of the node)."""
        return f"{self.id}-target"


class ChartNode(BaseModel):
    """Positioned organization node."""

    id: str
    type: str = NODE_TYPE
    position: Position
    data: NodeData

    model_config = {"populate_by_name": True}

    @classmethod
    def from_organization(
        cls,
        organization: Organization,
        position: Position,
        node_id: str | None = None,
    ) -> "ChartNode":
        """Build a node for an organization; the node id defaults to the organization id."""
        return cls(
            id=node_id or organization.id,
            position=position,
            data=NodeData.from_organization(organization),
        )


class EdgeStyle(BaseModel):
    """Rendering style of an edge."""

    stroke: str = EDGE_STROKE
    stroke_width: float = Field(default=EDGE_STROKE_WIDTH, alias="strokeWidth")

    model_config = {"populate_by_name": True}


class Connection(BaseModel):
    """Connection candidate drawn from an output handle to an input handle."""

    source: str
    target: str
    source_handle: str | None = Field(default=None, alias="sourceHandle")
    target_handle: str | None = Field(default=None, alias="targetHandle")

    model_config = {"populate_by_name": True}


class ChartEdge(BaseModel):
    """Directed parent -> child edge. Carries rendering style only."""

    id: str
    source: str
    target: str
    source_handle: str | None = Field(default=None, alias="sourceHandle")
    target_handle: str | None = Field(default=None, alias="targetHandle")
    type: str = EDGE_TYPE
    animated: bool = False
    style: EdgeStyle = Field(default_factory=EdgeStyle)

    model_config = {"populate_by_name": True}

    @classmethod
    def parent_link(cls, parent_id: str, child_id: str) -> "ChartEdge":
        """Edge from a parent organization to one of its children."""
        return cls(id=f"{parent_id}-{child_id}", source=parent_id, target=child_id)

    @classmethod
    def from_connection(cls, connection: Connection, edge_id: str) -> "ChartEdge":
        """Edge for an accepted connection, with default directed styling."""
        return cls(
            id=edge_id,
            source=connection.source,
            target=connection.target,
            source_handle=connection.source_handle,
            target_handle=connection.target_handle,
        )

    def as_connection(self) -> Connection:
        """The endpoints of this edge as a connection."""
        return Connection(
            source=self.source,
            target=self.target,
            source_handle=self.source_handle,
            target_handle=self.target_handle,
        )

    def duplicates(self, connection: Connection) -> bool:
        """
        Check whether a connection would duplicate this edge.

        A connection duplicates the edge when it joins the same endpoints
        through the same handles, or the reversed endpoints with the handles
        swapped.
        """
        same_direction = (
            self.source == connection.source
            and self.target == connection.target
            and self.source_handle == connection.source_handle
            and self.target_handle == connection.target_handle
        )
        reversed_direction = (
            self.source == connection.target
            and self.target == connection.source
            and self.source_handle == connection.target_handle
            and self.target_handle == connection.source_handle
        )
        return same_direction or reversed_direction


class ChartDocument(BaseModel):
    """The ``{nodes, edges}`` pair, as exported and imported."""

    nodes: list[ChartNode] = Field(default_factory=list)
    edges: list[ChartEdge] = Field(default_factory=list)
