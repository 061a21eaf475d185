"""
Tests for the Graph Session
===========================

Transform from organization records, edge invariants and snapshotting.

Version: 0.1.0
"""

import pytest

from shared.models.organization import Organization, SecurityContact

from services.org_chart.graph.errors import DataError, GraphValidationError
from services.org_chart.graph.model import GraphSession, transform, validate_document
from services.org_chart.graph.schema import (
    ChartDocument,
    ChartEdge,
    ChartMode,
    ChartNode,
    Connection,
    NodeData,
    Position,
)
from services.org_chart.graph.styles import (
    EDGE_STROKE,
    EDGE_TYPE,
    NODE_TYPE,
    HierarchyBucket,
    node_style,
)


def _node(node_id: str, level: int = 1, x: float = 0, y: float = 0) -> ChartNode:
    return ChartNode(
        id=node_id,
        position=Position(x=x, y=y),
        data=NodeData(id=node_id, name=node_id, label=node_id, type="Parent", hierarchy_level=level),
    )


def _edge(source: str, target: str, edge_id: str | None = None) -> ChartEdge:
    return ChartEdge(
        id=edge_id or f"edge-{source}-{target}",
        source=source,
        target=target,
        source_handle=f"{source}-source",
        target_handle=f"{target}-target",
    )


@pytest.fixture
def session() -> GraphSession:
    """Builder session with three loose nodes."""
    return GraphSession(
        nodes=[_node("a"), _node("b", level=2), _node("c", level=2)],
        mode=ChartMode.BUILDER,
    )


# =============================================================================
# Transform
# =============================================================================


class TestTransform:
    """Tests for transform."""

    def test_one_node_per_organization(self, sample_organizations: list[Organization]) -> None:
        """Every positioned organization becomes a node keyed by its id."""
        document = transform(sample_organizations)

        assert [n.id for n in document.nodes] == [o.id for o in sample_organizations]
        assert all(n.type == NODE_TYPE for n in document.nodes)

    def test_parent_edges(self, sample_organizations: list[Organization]) -> None:
        """Each child gets one parent -> child step edge."""
        document = transform(sample_organizations)

        assert [e.id for e in document.edges] == [
            "org-parent-1-org-sub-1",
            "org-parent-1-org-sub-2",
            "org-sub-1-org-div-1",
        ]
        edge = document.edges[0]
        assert edge.source == "org-parent-1"
        assert edge.target == "org-sub-1"
        assert edge.type == EDGE_TYPE
        assert edge.animated is False
        assert edge.style.stroke == EDGE_STROKE
        assert edge.style.stroke_width == 2

    def test_node_data_copied(self, sample_organizations: list[Organization]) -> None:
        """Node data carries label, type, level and security contact."""
        document = transform(sample_organizations)
        root = document.nodes[0]

        assert root.data.id == "org-parent-1"
        assert root.data.label == "Global Tech Solutions"
        assert root.data.type == "Parent"
        assert root.data.hierarchy_level == 1
        assert isinstance(root.data.security_contact, SecurityContact)
        assert root.data.source_handle == "org-parent-1-source"
        assert root.data.target_handle == "org-parent-1-target"

    def test_positions_match_layout(self, sample_organizations: list[Organization]) -> None:
        """Nodes sit at the laid-out positions."""
        document = transform(sample_organizations)
        by_id = {n.id: n.position for n in document.nodes}

        assert by_id["org-parent-1"] == Position(x=0, y=0)
        assert by_id["org-sub-1"] == Position(x=-200, y=300)
        assert by_id["org-sub-2"] == Position(x=200, y=300)
        assert by_id["org-div-1"] == Position(x=0, y=600)

    def test_missing_parent_skips_edge(self) -> None:
        """An edge to an organization that is not on the chart is skipped."""
        organizations = [
            Organization(id="root", name="Root", hierarchy_level=1),
            Organization(id="orphan", name="Orphan", parent_id="ghost", hierarchy_level=2),
        ]
        errors: list[DataError] = []

        document = transform(organizations, errors=errors)

        assert [n.id for n in document.nodes] == ["root", "orphan"]
        assert document.edges == []
        assert errors[0].record_id == "orphan"

    def test_colliding_edge_ids_keep_both_edges(self) -> None:
        """Parent links whose "{parent}-{child}" ids collide are both kept."""
        organizations = [
            Organization(id="a", name="A", hierarchy_level=1),
            Organization(id="a-b", name="A-B", parent_id="a", hierarchy_level=2),
            Organization(id="c", name="C", parent_id="a-b", hierarchy_level=3),
            Organization(id="b-c", name="B-C", parent_id="a", hierarchy_level=2),
        ]
        errors: list[DataError] = []

        document = transform(organizations, errors=errors)

        assert [(e.id, e.source, e.target) for e in document.edges] == [
            ("a-a-b", "a", "a-b"),
            ("a-b-c", "a-b", "c"),
            ("a-b-c-2", "a", "b-c"),
        ]
        assert errors == []
        validate_document(document)

    def test_mutual_parents_keep_one_edge(self) -> None:
        """A two-way parent cycle keeps the first link and reports the second."""
        organizations = [
            Organization(id="x", name="X", parent_id="y", hierarchy_level=1),
            Organization(id="y", name="Y", parent_id="x", hierarchy_level=2),
        ]
        errors: list[DataError] = []

        document = transform(organizations, errors=errors)

        assert [e.id for e in document.edges] == ["y-x"]
        assert [e.record_id for e in errors] == ["y"]
        validate_document(document)

    def test_duplicate_organization_charted_once(self) -> None:
        """A repeated organization id yields one node."""
        organizations = [
            Organization(id="root", name="Root"),
            Organization(id="root", name="Root again", hierarchy_level=2),
        ]
        errors: list[DataError] = []

        document = transform(organizations, errors=errors)

        assert len(document.nodes) == 1
        assert document.nodes[0].data.name == "Root"
        assert [e.record_id for e in errors] == ["root"]

    def test_empty(self) -> None:
        """No organizations, empty chart."""
        assert transform([]) == ChartDocument()


class TestNodeStyles:
    """Tests for level-based styling."""

    @pytest.mark.parametrize(
        ("level", "bucket", "fill"),
        [
            (1, HierarchyBucket.ROOT, "#FF6B6B"),
            (2, HierarchyBucket.SUBSIDIARY, "#4ECDC4"),
            (3, HierarchyBucket.DIVISION, "#45B7D1"),
            (7, HierarchyBucket.DIVISION, "#45B7D1"),
            (None, HierarchyBucket.DIVISION, "#45B7D1"),
        ],
    )
    def test_style_by_level(self, level: int | None, bucket: HierarchyBucket, fill: str) -> None:
        """Levels map onto the three style buckets."""
        assert HierarchyBucket.for_level(level) == bucket
        assert node_style(level).fill == fill
        assert node_style(level).text_color == "#ffffff"


# =============================================================================
# Session
# =============================================================================


class TestGraphSession:
    """Tests for GraphSession."""

    def test_from_organizations(self, sample_organizations: list[Organization]) -> None:
        """A session loaded from organizations is in view mode."""
        session = GraphSession.from_organizations(sample_organizations)

        assert session.mode == ChartMode.VIEW
        assert len(session.nodes) == 4
        assert len(session.edges) == 3

    def test_add_node_appends(self, session: GraphSession) -> None:
        """Nodes are appended in order."""
        session.add_node(_node("d", level=3))

        assert [n.id for n in session.nodes] == ["a", "b", "c", "d"]

    def test_add_edge(self, session: GraphSession) -> None:
        """A valid edge is appended."""
        edge = session.add_edge(_edge("a", "b"))

        assert session.edges == [edge]

    def test_duplicate_edge_rejected(self, session: GraphSession) -> None:
        """The same connection twice leaves one edge."""
        session.add_edge(_edge("a", "b"))

        with pytest.raises(GraphValidationError):
            session.add_edge(_edge("a", "b", edge_id="edge-a-b-again"))

        assert len(session.edges) == 1

    def test_reversed_duplicate_rejected(self, session: GraphSession) -> None:
        """The reversed connection with swapped handles is also a duplicate."""
        session.add_edge(_edge("a", "b"))
        reverse = Connection(
            source="b",
            target="a",
            source_handle="b-target",
            target_handle="a-source",
        )

        assert session.find_duplicate_edge(reverse) is not None
        with pytest.raises(GraphValidationError):
            session.add_edge(ChartEdge.from_connection(reverse, "edge-b-a"))

    def test_reversed_with_other_handles_allowed(self, session: GraphSession) -> None:
        """Reversed endpoints through different handles are a new edge."""
        session.add_edge(_edge("a", "b"))

        session.add_edge(_edge("b", "a"))

        assert len(session.edges) == 2

    def test_dangling_edge_rejected(self, session: GraphSession) -> None:
        """Both endpoints must be on the chart."""
        with pytest.raises(GraphValidationError, match="ghost"):
            session.add_edge(_edge("a", "ghost"))

        assert session.edges == []

    def test_edge_id_never_overwritten(self, session: GraphSession) -> None:
        """An existing edge id cannot be reused."""
        session.add_edge(_edge("a", "b", edge_id="e1"))

        with pytest.raises(GraphValidationError, match="e1"):
            session.add_edge(_edge("a", "c", edge_id="e1"))

        assert session.edges[0].target == "b"

    def test_update_position(self, session: GraphSession) -> None:
        """Updating a known node moves it."""
        assert session.update_position("b", Position(x=40, y=60)) is True
        assert session.get_node("b").position == Position(x=40, y=60)

    def test_update_unknown_position_is_noop(self, session: GraphSession) -> None:
        """Updating an unknown node changes nothing."""
        before = session.snapshot()

        assert session.update_position("ghost", Position(x=1, y=1)) is False
        assert session.snapshot() == before

    def test_set_positions(self, session: GraphSession) -> None:
        """Only listed nodes move."""
        moved = session.set_positions({"a": Position(x=20, y=0), "ghost": Position(x=0, y=0)})

        assert moved == ["a"]
        assert session.get_node("a").position == Position(x=20, y=0)
        assert session.get_node("b").position == Position(x=0, y=0)

    def test_snapshot_is_independent(self, session: GraphSession) -> None:
        """Mutating the session does not change an earlier snapshot."""
        snapshot = session.snapshot()

        session.update_position("a", Position(x=100, y=100))
        session.add_edge(_edge("a", "b"))

        assert snapshot.nodes[0].position == Position(x=0, y=0)
        assert snapshot.edges == []

    def test_replace_copies_document(self, session: GraphSession) -> None:
        """Replacing takes a copy, so the source document stays untouched."""
        document = ChartDocument(nodes=[_node("x")], edges=[])

        session.replace(document)
        session.update_position("x", Position(x=500, y=500))

        assert [n.id for n in session.nodes] == ["x"]
        assert document.nodes[0].position == Position(x=0, y=0)

    def test_from_document(self) -> None:
        """A session can be opened on a document."""
        document = ChartDocument(nodes=[_node("a"), _node("b", 2)], edges=[_edge("a", "b")])

        session = GraphSession.from_document(document, mode=ChartMode.BUILDER)

        assert session.mode == ChartMode.BUILDER
        assert session.snapshot() == document
