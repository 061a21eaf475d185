"""
Graph Session
=============

Canonical in-memory node/edge collection of one org chart, with the
transform from organization records and the mutation primitives used by the
chart builder.

Version: 0.1.0
"""

from collections.abc import Iterable, Mapping, Sequence

from shared.logging import get_logger
from shared.models.organization import Organization

from services.org_chart.graph.errors import DataError, GraphValidationError
from services.org_chart.graph.schema import (
    ChartDocument,
    ChartEdge,
    ChartMode,
    ChartNode,
    Connection,
    Position,
)
from services.org_chart.layout.engine import LayoutConfig, calculate_positions


logger = get_logger(__name__)


def transform(
    organizations: Sequence[Organization],
    config: LayoutConfig | None = None,
    errors: list[DataError] | None = None,
) -> ChartDocument:
    """
    Transform organization records into a positioned chart.

    Produces one node per positioned organization (node id = organization
    id) and one parent -> child edge per organization with a parent.
    Organizations that cannot be positioned are skipped with a warning and
    no edge references them.

    Args:
        organizations: Ordered organization records
        config: Layout spacing
        errors: Optional list collecting a DataError per skipped record

    Returns:
        ChartDocument with nodes and edges
    """
    issues: list[DataError] = [] if errors is None else errors
    positions = calculate_positions(organizations, config, issues)

    nodes: list[ChartNode] = []
    node_ids: set[str] = set()
    for organization in organizations:
        if organization.id in node_ids:
            # Already reported by the layout grouping
            continue
        position = positions.get(organization.id)
        if position is None:
            logger.warning(
                "organization_skipped",
                organization_id=organization.id,
                name=organization.name,
                hierarchy_level=organization.hierarchy_level,
            )
            if not any(e.record_id == organization.id for e in issues):
                issues.append(
                    DataError(
                        f"Position not calculated for {organization.id!r}",
                        record_id=organization.id,
                    )
                )
            continue
        nodes.append(ChartNode.from_organization(organization, position))
        node_ids.add(organization.id)

    edges: list[ChartEdge] = []
    edge_ids: set[str] = set()
    for organization in organizations:
        if not organization.parent_id or organization.id not in node_ids:
            continue
        edge = ChartEdge.parent_link(organization.parent_id, organization.id)
        if organization.parent_id not in node_ids:
            logger.warning(
                "parent_edge_skipped",
                organization_id=organization.id,
                parent_id=organization.parent_id,
            )
            issues.append(
                DataError(
                    f"Parent {organization.parent_id!r} of {organization.id!r} is not on the chart",
                    record_id=organization.id,
                )
            )
            continue
        if any(existing.duplicates(edge.as_connection()) for existing in edges):
            logger.warning(
                "parent_edge_skipped",
                organization_id=organization.id,
                parent_id=organization.parent_id,
                reason="cycle",
            )
            issues.append(
                DataError(
                    f"{organization.id!r} and {organization.parent_id!r} are each other's parent",
                    record_id=organization.id,
                )
            )
            continue
        if edge.id in edge_ids:
            # "{parent}-{child}" is ambiguous when ids contain dashes
            base_id = edge.id
            suffix = 2
            while f"{base_id}-{suffix}" in edge_ids:
                suffix += 1
            edge.id = f"{base_id}-{suffix}"
            logger.warning(
                "parent_edge_id_collision",
                organization_id=organization.id,
                parent_id=organization.parent_id,
                edge_id=edge.id,
            )
        edges.append(edge)
        edge_ids.add(edge.id)

    logger.info(
        "chart_transformed",
        organizations=len(organizations),
        nodes=len(nodes),
        edges=len(edges),
        skipped=len(issues),
    )
    return ChartDocument(nodes=nodes, edges=edges)


class GraphSession:
    """
    Owner of one chart's nodes and edges.

    All mutation goes through this object; readers that need a stable view
    (exporters) take a ``snapshot()``.
    """

    def __init__(
        self,
        nodes: Iterable[ChartNode] | None = None,
        edges: Iterable[ChartEdge] | None = None,
        mode: ChartMode = ChartMode.VIEW,
    ) -> None:
        self.nodes: list[ChartNode] = list(nodes or [])
        self.edges: list[ChartEdge] = list(edges or [])
        self.mode = mode

    @classmethod
    def from_organizations(
        cls,
        organizations: Sequence[Organization],
        config: LayoutConfig | None = None,
        errors: list[DataError] | None = None,
    ) -> "GraphSession":
        """Create a view-mode session from organization records."""
        document = transform(organizations, config, errors)
        return cls(document.nodes, document.edges, mode=ChartMode.VIEW)

    @classmethod
    def from_document(
        cls,
        document: ChartDocument,
        mode: ChartMode = ChartMode.VIEW,
    ) -> "GraphSession":
        """Create a session holding a copy of a chart document."""
        session = cls(mode=mode)
        session.replace(document)
        return session

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_node(self, node_id: str) -> ChartNode | None:
        """Find a node by id."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def has_node(self, node_id: str) -> bool:
        """Check if a node id is on the chart."""
        return self.get_node(node_id) is not None

    def find_duplicate_edge(self, connection: Connection) -> ChartEdge | None:
        """Find an existing edge the connection would duplicate, in either direction."""
        for edge in self.edges:
            if edge.duplicates(connection):
                return edge
        return None

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add_node(self, node: ChartNode) -> ChartNode:
        """Append a node. The caller is responsible for id uniqueness."""
        self.nodes.append(node)
        logger.debug("node_added", node_id=node.id, x=node.position.x, y=node.position.y)
        return node

    def validate_node(self, node: ChartNode) -> None:
        """
        Check that a node id is not taken.

        Raises:
            GraphValidationError: If a node with the same id is on the chart.
        """
        if self.has_node(node.id):
            raise GraphValidationError(f"Node {node.id!r} already exists")

    def validate_edge(self, edge: ChartEdge) -> None:
        """
        Check an edge against the graph invariants.

        Raises:
            GraphValidationError: If an endpoint is missing, the id is taken,
                or the edge duplicates an existing connection.
        """
        for endpoint in (edge.source, edge.target):
            if not self.has_node(endpoint):
                raise GraphValidationError(f"Node {endpoint!r} is not on the chart")

        if any(existing.id == edge.id for existing in self.edges):
            raise GraphValidationError(f"Edge {edge.id!r} already exists")

        duplicate = self.find_duplicate_edge(edge.as_connection())
        if duplicate is not None:
            raise GraphValidationError(
                f"An edge already exists between {edge.source!r} and {edge.target!r} ({duplicate.id})"
            )

    def add_edge(self, edge: ChartEdge) -> ChartEdge:
        """
        Validate and append an edge. Never overwrites an existing edge.

        Raises:
            GraphValidationError: If the edge breaks a graph invariant.
        """
        self.validate_edge(edge)
        self.edges.append(edge)
        logger.debug("edge_added", edge_id=edge.id, source=edge.source, target=edge.target)
        return edge

    def update_position(self, node_id: str, position: Position) -> bool:
        """
        Replace the position of one node.

        Returns:
            True if a node matched, False (and no change) otherwise
        """
        node = self.get_node(node_id)
        if node is None:
            logger.debug("position_update_ignored", node_id=node_id)
            return False
        node.position = position.model_copy()
        return True

    def set_positions(self, positions: Mapping[str, Position]) -> list[str]:
        """
        Overwrite the position of every node listed in ``positions``.

        Returns:
            Ids of the nodes that were moved
        """
        moved = []
        for node in self.nodes:
            position = positions.get(node.id)
            if position is not None:
                node.position = position.model_copy()
                moved.append(node.id)
        return moved

    def replace(self, document: ChartDocument) -> None:
        """Reset the chart to a copy of ``document``."""
        snapshot = document.model_copy(deep=True)
        self.nodes = snapshot.nodes
        self.edges = snapshot.edges
        logger.info("chart_replaced", nodes=len(self.nodes), edges=len(self.edges))

    def snapshot(self) -> ChartDocument:
        """Deep copy of the current ``{nodes, edges}``."""
        return ChartDocument(nodes=self.nodes, edges=self.edges).model_copy(deep=True)


def validate_document(document: ChartDocument) -> None:
    """
    Check a whole chart document against the graph invariants.

    The document is rebuilt node by node and edge by edge in a scratch
    session, so it is accepted exactly when every piece could have been
    added through the session.

    Raises:
        GraphValidationError: On a repeated node id, a dangling or repeated
            edge, or a duplicate connection.
    """
    scratch = GraphSession()
    for node in document.nodes:
        scratch.validate_node(node)
        scratch.add_node(node)
    for edge in document.edges:
        scratch.add_edge(edge)
